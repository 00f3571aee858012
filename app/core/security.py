"""Password hashing and signed session tokens (JWT) for cookie authentication."""

import logging
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt
from pydantic import ValidationError

from app.core.config import settings
from app.schemas.auth import UserIdentity

logger = logging.getLogger(__name__)

# Min/max lengths for username and password validation (input validation on new credentials).
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# bcrypt only reads the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72

# Plaintext behind the dummy hash compared against when a username does not exist.
_DUMMY_PASSWORD = "helpdesk-dummy-password"


def _password_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    cost = rounds if rounds is not None else settings.BCRYPT_ROUNDS
    return bcrypt.hashpw(
        _password_bytes(plain_password), bcrypt.gensalt(rounds=cost)
    ).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash (constant-time compare inside bcrypt)."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache
def _dummy_password_hash() -> str:
    return hash_password(_DUMMY_PASSWORD)


def verify_dummy_password(plain_password: str) -> None:
    """
    Spend one bcrypt verification at the configured cost and discard the result.

    Called on the unknown-username path so it costs about as much as a real check.
    Database round-trip time still differs, so this only narrows the timing gap.
    """
    verify_password(plain_password, _dummy_password_hash())


class SessionTokenService:
    """
    Issue and verify stateless session tokens.

    Tokens are HS256 JWTs whose claims are a UserIdentity snapshot plus iat/exp.
    The signing secret is passed in once; nothing is persisted server-side, so a
    token stays valid until it expires even if the account changes meanwhile.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=1),
    ) -> None:
        if not secret or not secret.strip():
            raise ValueError("Session token secret must be non-empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, identity: UserIdentity, now: datetime | None = None) -> str:
        """Sign a token for identity, expiring ttl after now (defaults to the current UTC time)."""
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = identity.model_dump()
        payload["iat"] = issued_at
        payload["exp"] = issued_at + self.ttl
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> UserIdentity | None:
        """
        Return the identity carried by token, or None.

        Malformed, tampered, wrongly-signed and expired tokens all yield None;
        the reason is logged at debug level only.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            logger.debug("Session token rejected: %s", type(e).__name__)
            return None
        try:
            return UserIdentity.model_validate(payload)
        except ValidationError:
            logger.debug("Session token rejected: claims do not describe a user identity")
            return None


@lru_cache
def get_token_service() -> SessionTokenService:
    """Return the process-wide token service built from settings (also a FastAPI dependency)."""
    return SessionTokenService(
        secret=settings.AUTH_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        ttl=timedelta(minutes=settings.SESSION_TTL_MINUTES),
    )
