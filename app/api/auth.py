"""Cookie-session login, logout, and the current-user lookup."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.deps import get_session_identity
from app.core.config import settings
from app.core.database import get_db
from app.core.security import SessionTokenService, get_token_service
from app.schemas.auth import (
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    UserIdentity,
)
from app.services.credentials import LoginFailure, validate_credentials

router = APIRouter()

# Incomplete input is a client error; every other refusal is an authentication failure.
_FAILURE_STATUS: dict[LoginFailure, int] = {
    LoginFailure.INCOMPLETE_CREDENTIALS: status.HTTP_400_BAD_REQUEST,
    LoginFailure.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    LoginFailure.ACCOUNT_DISABLED: status.HTTP_401_UNAUTHORIZED,
    LoginFailure.ACCOUNT_BLOCKED: status.HTTP_401_UNAUTHORIZED,
}


@router.post(
    "/login",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[SessionTokenService, Depends(get_token_service)],
) -> JSONResponse:
    """
    Authenticate with username and password and set the session cookie.

    The cookie is HTTP-only, SameSite=strict, scoped to / and lives as long as the
    token (one day by default); it is marked Secure in production.
    """
    result = validate_credentials(
        db,
        body.username,
        body.password,
        max_failed_attempts=settings.LOGIN_MAX_FAILED_ATTEMPTS,
    )
    if isinstance(result, LoginFailure):
        return JSONResponse(
            status_code=_FAILURE_STATUS[result],
            content=ErrorResponse(error=result.message).model_dump(),
        )

    token = tokens.issue(result)
    response = JSONResponse(
        content=MessageResponse(message="Inicio de sesión exitoso").model_dump()
    )
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=int(tokens.ttl.total_seconds()),
        path="/",
        secure=settings.APP_ENV == "prod",
        httponly=True,
        samesite="strict",
    )
    return response


@router.post("/logout", response_model=MessageResponse)
def logout() -> JSONResponse:
    """Delete the session cookie. The token itself stays valid until it expires."""
    response = JSONResponse(
        content=MessageResponse(message="Sesión cerrada exitosamente").model_dump()
    )
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        secure=settings.APP_ENV == "prod",
        httponly=True,
        samesite="strict",
    )
    return response


@router.get("/me", response_model=UserIdentity | None)
def me(
    identity: Annotated[UserIdentity | None, Depends(get_session_identity)],
) -> JSONResponse:
    """Return the identity in the session cookie, or 401 with a null body."""
    if identity is None:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content=None)
    return JSONResponse(content=identity.model_dump())
