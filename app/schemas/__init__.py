"""Pydantic request/response schemas.

Account administration schemas live in app.schemas.user and are imported from there
directly (they depend on the password policy in app.core.security).
"""

from app.schemas.auth import (
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    Role,
    UserIdentity,
)
from app.schemas.health import HealthResponse

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "Role",
    "UserIdentity",
]
