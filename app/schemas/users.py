"""Request/response schemas for user management endpoints (camelCase on the wire)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CreateUserRequest(_CamelModel):
    """Body for POST /users. Unknown roles fall back to ReadOnly."""

    user_name: str = Field(default="", max_length=100)
    password: str = Field(default="", max_length=128)
    full_name: str = Field(..., max_length=200)
    role: str = Field(default="ReadOnly", max_length=32, description="Admin or ReadOnly")
    email_id: str = Field(..., max_length=255)
    mobile_num: str = Field(..., max_length=20)


class UpdateUserRequest(_CamelModel):
    """Body for PUT /users/id/{id}. Blank or missing fields are left unchanged."""

    full_name: str | None = Field(default=None, max_length=200)
    role: str | None = Field(default=None, max_length=32)
    email_id: str | None = Field(default=None, max_length=255)
    mobile_num: str | None = Field(default=None, max_length=20)


class UserFilter(_CamelModel):
    """Filter for listing users. Text fields match substrings; role matches exactly."""

    user_name: str | None = None
    role: str | None = None
    email_id: str | None = None
    mobile_num: str | None = None
    skip: int | None = Field(default=None, ge=0)
    take: int | None = Field(default=None, ge=0)


class UserRead(_CamelModel):
    """User as returned by the API (never includes the password hash)."""

    id: int
    user_name: str
    full_name: str
    role: str
    email_id: str
    mobile_num: str
    profile_pic_url: str | None = None
    created_at: datetime | None = None


class PagedUsers(_CamelModel):
    """One page of users plus the total count for the same query."""

    items: list[UserRead]
    total_count: int = Field(..., ge=0)
    skip: int = Field(..., ge=0)
    take: int = Field(..., ge=0)
    has_more: bool
