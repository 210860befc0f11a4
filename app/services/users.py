"""User management: create, read, list (paged/filtered), update, delete."""

import logging

from app.core.security import hash_password
from app.models import User, UserRole, parse_role
from app.schemas.users import (
    CreateUserRequest,
    PagedUsers,
    UpdateUserRequest,
    UserFilter,
    UserRead,
)
from app.services.user_store import SqlUserStore

logger = logging.getLogger(__name__)

PROFILE_PIC_FIELD = "profile_pic_url"


class UserValidationError(Exception):
    """Raised when a create request is missing required values."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserNameTakenError(Exception):
    """Raised when the requested user name already exists."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _to_read(user: User) -> UserRead:
    return UserRead.model_validate(user)


def _paged(items: list[User], total_count: int, skip: int, take: int) -> PagedUsers:
    return PagedUsers(
        items=[_to_read(u) for u in items],
        total_count=total_count,
        skip=skip,
        take=take,
        has_more=skip + take < total_count,
    )


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class UserService:
    """Application service over a SqlUserStore."""

    def __init__(self, store: SqlUserStore) -> None:
        self.store = store

    def get(self, user_id: int) -> UserRead | None:
        user = self.store.find_by_id(user_id)
        return None if user is None else _to_read(user)

    def list_all(self) -> list[UserRead]:
        return [_to_read(u) for u in self.store.list_all()]

    def list_page(self, skip: int, take: int) -> PagedUsers:
        users = self.store.list_page(skip, take)
        return _paged(users, self.store.count_all(), skip, take)

    def list_filtered(self, user_filter: UserFilter, paged: bool) -> list[UserRead]:
        users = self.store.list_filtered(
            user_name=user_filter.user_name,
            role=user_filter.role,
            email_id=user_filter.email_id,
            mobile_num=user_filter.mobile_num,
            skip=user_filter.skip if paged else None,
            take=user_filter.take if paged else None,
        )
        return [_to_read(u) for u in users]

    def list_filtered_page(self, user_filter: UserFilter) -> PagedUsers:
        users = self.store.list_filtered(
            user_name=user_filter.user_name,
            role=user_filter.role,
            email_id=user_filter.email_id,
            mobile_num=user_filter.mobile_num,
            skip=user_filter.skip,
            take=user_filter.take,
        )
        total_count = self.store.count_filtered(
            user_name=user_filter.user_name,
            role=user_filter.role,
            email_id=user_filter.email_id,
            mobile_num=user_filter.mobile_num,
        )
        skip = user_filter.skip if user_filter.skip is not None else 0
        take = user_filter.take if user_filter.take is not None else len(users)
        return _paged(users, total_count, skip, take)

    def create(self, request: CreateUserRequest) -> UserRead:
        """
        Create a user. Unrecognized roles silently become ReadOnly.

        Raises UserValidationError for a blank user name or password and
        UserNameTakenError when the name exists.
        """
        if _is_blank(request.user_name):
            raise UserValidationError("UserName is required.")
        if _is_blank(request.password):
            raise UserValidationError("Password is required.")
        if self.store.username_exists(request.user_name):
            raise UserNameTakenError(f"UserName '{request.user_name}' is already taken.")

        role = parse_role(request.role) or UserRole.READ_ONLY
        user = User(
            user_name=request.user_name,
            password_hash=hash_password(request.password),
            full_name=request.full_name,
            role=role.value,
            email_id=request.email_id,
            mobile_num=request.mobile_num,
        )
        created = self.store.add(user)
        logger.info("User created", extra={"user_id": created.id, "role": role.value})
        return _to_read(created)

    def update(self, user_id: int, request: UpdateUserRequest) -> UserRead | None:
        """Apply non-blank fields; an unparsable role leaves the current role as is."""
        user = self.store.find_by_id(user_id)
        if user is None:
            return None

        if not _is_blank(request.full_name):
            user.full_name = request.full_name
        if not _is_blank(request.role):
            new_role = parse_role(request.role)
            if new_role is not None:
                user.role = new_role.value
        if not _is_blank(request.email_id):
            user.email_id = request.email_id
        if not _is_blank(request.mobile_num):
            user.mobile_num = request.mobile_num

        return _to_read(self.store.save(user))

    def delete(self, user_id: int) -> bool:
        user = self.store.find_by_id(user_id)
        if user is None:
            return False
        self.store.delete(user)
        logger.info("User deleted", extra={"user_id": user_id})
        return True

    def update_profile_field(
        self, user_id: int, field_name: str, value: str
    ) -> UserRead | None:
        """Set a profile field by name. Only profile_pic_url is supported; others are ignored."""
        user = self.store.find_by_id(user_id)
        if user is None:
            return None
        if field_name.strip().lower() == PROFILE_PIC_FIELD:
            user.profile_pic_url = value
        return _to_read(self.store.save(user))
