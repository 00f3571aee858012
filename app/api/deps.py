"""Shared route dependencies: session identity, current account, and admin check."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.security import SessionTokenService, get_token_service
from app.models import ROLE_ADMIN, User
from app.schemas.auth import UserIdentity


def get_session_identity(
    request: Request,
    tokens: Annotated[SessionTokenService, Depends(get_token_service)],
) -> UserIdentity | None:
    """Dependency: identity from the session cookie, or None if absent or invalid. No DB access."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    return tokens.verify(token)


def get_current_user(
    identity: Annotated[UserIdentity | None, Depends(get_session_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """
    Dependency: require a valid session and return the live account row.

    The token is only a snapshot, so the account is reloaded here; accounts that
    were disabled or blocked after the token was issued are refused with 401.
    """
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No autenticado",
        )
    user = db.query(User).filter(User.id == identity.id).first()
    if user is None or user.is_disabled or user.is_blocked:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sesión no válida",
        )
    return user


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Dependency: require an authenticated ADMIN account. Raises 403 otherwise."""
    if current_user.role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No autorizado",
        )
    return current_user
