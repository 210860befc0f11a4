"""Credential verification and login (token issuance) against the user store."""

import logging
from datetime import datetime

from app.core.config import AuthConfig
from app.core.security import (
    InvalidCredentials,
    create_access_token,
    verify_password,
)
from app.models.user import UserRole, parse_role
from app.schemas.auth import LoginResponse, LoginUser, Principal
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password."


def authenticate_user(store: UserStore, username: str, password: str) -> Principal:
    """
    Look up username and compare password digests.

    Unknown user and wrong password raise the same InvalidCredentials. Store
    errors (and cancellation) propagate unchanged so outages are not reported
    as bad logins.
    """
    user = store.find_by_username(username)
    if user is None:
        raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)
    if not verify_password(password, user.password_hash):
        raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)
    role = parse_role(user.role) or UserRole.READ_ONLY
    return Principal(user_id=user.id, username=user.user_name, role=role)


def login(
    store: UserStore,
    username: str,
    password: str,
    config: AuthConfig,
    now: datetime | None = None,
) -> LoginResponse:
    """Verify credentials, then mint a bearer token for the principal."""
    principal = authenticate_user(store, username, password)
    token = create_access_token(
        user_id=principal.user_id,
        username=principal.username,
        role=principal.role,
        config=config,
        now=now,
    )
    logger.info(
        "Login succeeded",
        extra={"user_id": principal.user_id, "role": principal.role.value},
    )
    return LoginResponse(
        access_token=token,
        token_type="Bearer",
        expires_in_minutes=config.expires_in_minutes,
        user=LoginUser(id=principal.user_id, username=principal.username, role=principal.role),
    )
