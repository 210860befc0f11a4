"""Request/response schemas for auth endpoints and the authenticated principal."""

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import UserRole


class Principal(BaseModel):
    """
    Authenticated identity attached to one request (Basic or Bearer).

    Built fresh per request; never cached or persisted.
    """

    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str
    role: UserRole


class LoginRequest(BaseModel):
    """Credentials for login."""

    model_config = ConfigDict(populate_by_name=True)

    # Unbounded: blank or oversized values fail as an ordinary 401.
    username: str = Field(..., alias="userName", description="User name")
    password: str = Field(..., description="Password")


class LoginUser(BaseModel):
    """Identity summary returned alongside the access token."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str = Field(..., alias="userName")
    role: UserRole


class LoginResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="Bearer", description="Token type")
    expires_in_minutes: int = Field(..., ge=0, description="Token lifetime in minutes")
    user: LoginUser
