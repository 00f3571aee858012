"""Page routes outside the API: the login entry point and the protected dashboard."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from app.api.deps import get_session_identity
from app.models import ROLE_ADMIN
from app.schemas.auth import UserIdentity

router = APIRouter()


@router.get("/")
def root() -> dict[str, str]:
    """Login entry point; unauthenticated page requests are redirected here."""
    return {"message": "Helpdesk de soporte TI", "login": "/api/auth/login"}


@router.get("/v1")
def dashboard(
    identity: Annotated[UserIdentity | None, Depends(get_session_identity)],
) -> dict[str, Any]:
    """
    Dashboard landing for a signed-in user.

    The gate already checked the cookie; it is verified again here to read the
    identity and decide whether administration links are shown.
    """
    if identity is None:
        return {"user": None, "is_admin": False}
    return {
        "user": identity.model_dump(),
        "is_admin": identity.role == ROLE_ADMIN,
    }
