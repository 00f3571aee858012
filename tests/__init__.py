"""Test suite. Keeps bcrypt cheap before any app module reads settings."""

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("APP_ENV", "dev")
