"""Pydantic request/response schemas."""

from app.schemas.auth import LoginRequest, LoginResponse, LoginUser, Principal
from app.schemas.health import HealthResponse
from app.schemas.users import (
    CreateUserRequest,
    PagedUsers,
    UpdateUserRequest,
    UserFilter,
    UserRead,
)

__all__ = [
    "CreateUserRequest",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "LoginUser",
    "PagedUsers",
    "Principal",
    "UpdateUserRequest",
    "UserFilter",
    "UserRead",
]
