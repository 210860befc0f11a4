"""Request dependencies: user store, principal resolution (Basic or Bearer), role gate."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from app.core.config import AuthConfig, get_auth_config
from app.core.database import get_db
from app.core.security import (
    AuthError,
    Forbidden,
    NoCredentials,
    Unauthenticated,
    decode_access_token,
    parse_basic_authorization,
)
from app.schemas.auth import Principal
from app.services.auth import authenticate_user
from app.services.authorization import Operation, authorize
from app.services.user_store import SqlUserStore

logger = logging.getLogger(__name__)

UNAUTHORIZED_DETAIL = "Unauthorized"

# Declared so the OpenAPI document advertises bearer auth; failures are handled below.
bearer_scheme = HTTPBearer(auto_error=False, description="JWT from POST /auth/login")


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> SqlUserStore:
    return SqlUserStore(db)


def _challenge(config: AuthConfig) -> dict[str, str]:
    return {"WWW-Authenticate": f'Basic realm="{config.basic_realm}", Bearer'}


def _unauthorized(config: AuthConfig) -> HTTPException:
    # Same detail for malformed, wrong and expired credentials.
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=UNAUTHORIZED_DETAIL,
        headers=_challenge(config),
    )


def _basic_principal(header: str, store: SqlUserStore) -> Principal:
    credentials = parse_basic_authorization(header)
    return authenticate_user(store, credentials.username, credentials.password)


def _bearer_principal(
    credentials: HTTPAuthorizationCredentials | None, config: AuthConfig
) -> Principal:
    # HTTPBearer yields None for "Bearer" with no token.
    if credentials is None or not credentials.credentials.strip():
        raise Unauthenticated("Empty bearer token")
    return decode_access_token(credentials.credentials.strip(), config)


def get_optional_principal(
    request: Request,
    store: Annotated[SqlUserStore, Depends(get_user_store)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
    bearer: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Principal | None:
    """
    Resolve the request's principal from the Authorization header.

    Dispatches on the scheme token: Basic goes through the credential verifier,
    Bearer through the token validator. No header (or an unknown scheme) is
    anonymous and yields None. Any other failure is a 401.
    """
    header = request.headers.get("Authorization")
    scheme, _ = get_authorization_scheme_param(header)
    scheme = scheme.lower()
    try:
        if scheme == "basic":
            return _basic_principal(header, store)
        if scheme == "bearer":
            return _bearer_principal(bearer, config)
        return None
    except NoCredentials:
        return None
    except AuthError as e:
        logger.info(
            "Authentication failed",
            extra={"auth_scheme": scheme, "auth_failure": type(e).__name__},
        )
        raise _unauthorized(config) from e


def require(operation: Operation) -> Callable[..., Principal]:
    """Dependency factory: principal allowed to perform operation, else 401/403."""

    def dependency(
        principal: Annotated[Principal | None, Depends(get_optional_principal)],
        config: Annotated[AuthConfig, Depends(get_auth_config)],
    ) -> Principal:
        try:
            return authorize(principal, operation)
        except Forbidden as e:
            logger.info(
                "Authorization denied",
                extra={"user_id": principal.user_id, "operation": operation.value},
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden",
            ) from e
        except AuthError as e:
            raise _unauthorized(config) from e

    return dependency
