"""Request/response schemas for account administration and self-service account routes."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, USERNAME_MAX_LEN
from app.schemas.auth import Role


class UserCreate(BaseModel):
    """New account created by an administrator."""

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    role: Role = "COLABORADOR"
    phone: str | None = Field(default=None, max_length=64)


class UserUpdate(BaseModel):
    """Partial update of an account by an administrator; omitted fields are left as-is."""

    username: str | None = Field(default=None, min_length=1, max_length=USERNAME_MAX_LEN)
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, min_length=1, max_length=255)
    role: Role | None = None
    phone: str | None = Field(default=None, max_length=64)


class UserCreated(BaseModel):
    """Response for POST /users."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str
    role: Role


class UserListItem(BaseModel):
    """User entry for the admin list and update responses (no password or lockout counter)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str
    role: Role
    is_blocked: bool
    is_disabled: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TechnicianItem(BaseModel):
    """Collaborator account offered as a technician choice on report forms."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class PasswordChangeRequest(BaseModel):
    """Body for changing the caller's own password."""

    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class ProfileUpdateRequest(BaseModel):
    """Body for updating the caller's own profile fields."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=64)


class ProfileResponse(BaseModel):
    """Profile fields returned after a self-service update."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str
    email: str
    phone: str | None = None


class SuccessResponse(BaseModel):
    """Acknowledgement for state-changing admin operations."""

    success: bool = True
