"""Account administration (admin only) and self-service account routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_admin
from app.core.database import get_db
from app.models import User
from app.schemas.user import (
    PasswordChangeRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    SuccessResponse,
    TechnicianItem,
    UserCreate,
    UserCreated,
    UserListItem,
    UserUpdate,
)
from app.services import users as user_service
from app.services.users import (
    IncorrectPasswordError,
    UsernameTakenError,
    UserNotFoundError,
)

router = APIRouter()

UserIdParam = Annotated[int, Query(alias="id", description="Target user id")]


def _not_found(e: UserNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get("", response_model=list[UserListItem])
def list_users(
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserListItem]:
    """List all accounts, including blocked and disabled ones."""
    return [UserListItem.model_validate(u) for u in user_service.list_users(db)]


@router.post("", response_model=UserCreated, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserCreated:
    try:
        user = user_service.create_user(db, body)
    except UsernameTakenError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return UserCreated.model_validate(user)


@router.put("", response_model=UserListItem)
def update_user(
    user_id: UserIdParam,
    body: UserUpdate,
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserListItem:
    """Update profile, role, or password of any account."""
    try:
        user = user_service.update_user(db, user_id, body)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    except UsernameTakenError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return UserListItem.model_validate(user)


@router.delete("", response_model=SuccessResponse)
def disable_user(
    user_id: UserIdParam,
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    """Soft delete: mark the account disabled."""
    try:
        user_service.disable_user(db, user_id)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    return SuccessResponse()


@router.patch("", response_model=SuccessResponse)
def unblock_user(
    user_id: UserIdParam,
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    """Clear a login lockout (unblock and reset the failed-attempt counter)."""
    try:
        user_service.unblock_user(db, user_id)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    return SuccessResponse()


@router.patch("/enable", response_model=SuccessResponse)
def enable_user(
    user_id: UserIdParam,
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    try:
        user_service.enable_user(db, user_id)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    return SuccessResponse()


@router.get("/technicians", response_model=list[TechnicianItem])
def list_technicians(
    _user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[TechnicianItem]:
    return [TechnicianItem.model_validate(u) for u in user_service.list_technicians(db)]


@router.put("/account/change-password", response_model=SuccessResponse)
def change_password(
    body: PasswordChangeRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    """Change the caller's password; the current password must be supplied."""
    try:
        user_service.change_password(db, current_user, body)
    except IncorrectPasswordError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return SuccessResponse()


@router.put("/account/update", response_model=ProfileResponse)
def update_profile(
    body: ProfileUpdateRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ProfileResponse:
    """Update the caller's name, email, and phone."""
    user = user_service.update_profile(db, current_user, body)
    return ProfileResponse.model_validate(user)
