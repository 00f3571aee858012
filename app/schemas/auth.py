"""Request/response schemas for login, logout, and the session identity."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# Closed set of account roles; ADMIN unlocks the account administration routes.
Role = Literal["ADMIN", "COLABORADOR"]


class LoginRequest(BaseModel):
    """
    Credentials for login.

    Missing fields default to empty strings so that the credential check, not
    request validation, reports incomplete credentials.
    """

    username: str = Field(default="", max_length=255, description="Username")
    password: str = Field(default="", max_length=128, description="Password")


class UserIdentity(BaseModel):
    """
    Snapshot of an authenticated account: the login result and the session token claims.

    Unknown keys (e.g. JWT exp/iat) are ignored when validating token claims.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, from_attributes=True)

    id: int
    username: str
    role: Role
    name: str
    email: str
    phone: str | None = None


class MessageResponse(BaseModel):
    """Plain acknowledgement body (login, logout)."""

    message: str


class ErrorResponse(BaseModel):
    """Error body returned for every HTTP error raised by the API."""

    error: str
