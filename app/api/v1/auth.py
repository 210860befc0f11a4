"""Login endpoint: exchange user name and password for a JWT bearer token."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.v1.deps import get_user_store
from app.core.config import AuthConfig, get_auth_config
from app.core.security import InvalidCredentials
from app.schemas.auth import LoginRequest, LoginResponse
from app.services.auth import INVALID_CREDENTIALS_MESSAGE, login
from app.services.user_store import SqlUserStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def post_login(
    body: LoginRequest,
    store: Annotated[SqlUserStore, Depends(get_user_store)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
) -> LoginResponse:
    """
    Authenticate with user name and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    try:
        return login(store, body.username, body.password, config)
    except InvalidCredentials as e:
        logger.info("Login failed", extra={"auth_failure": type(e).__name__})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS_MESSAGE,
        ) from e
