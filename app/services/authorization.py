"""Role gate: which role each user-management operation requires."""

from enum import Enum

from app.core.security import Forbidden, Unauthenticated
from app.models.user import UserRole
from app.schemas.auth import Principal


class Operation(str, Enum):
    CREATE_USER = "create_user"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"
    UPLOAD_PROFILE_ASSET = "upload_profile_asset"
    GET_USER = "get_user"
    LIST_USERS = "list_users"
    LIST_ALL_USERS = "list_all_users"
    FILTER_USERS = "filter_users"
    FILTER_ALL_USERS = "filter_all_users"


# None means any authenticated principal.
REQUIRED_ROLES: dict[Operation, UserRole | None] = {
    Operation.CREATE_USER: UserRole.ADMIN,
    Operation.UPDATE_USER: UserRole.ADMIN,
    Operation.DELETE_USER: UserRole.ADMIN,
    Operation.UPLOAD_PROFILE_ASSET: UserRole.ADMIN,
    Operation.GET_USER: None,
    Operation.LIST_USERS: None,
    Operation.LIST_ALL_USERS: None,
    Operation.FILTER_USERS: None,
    Operation.FILTER_ALL_USERS: None,
}


def authorize(principal: Principal | None, operation: Operation) -> Principal:
    """
    Return the principal if it may perform operation.

    Raises Unauthenticated (401) when there is no principal, Forbidden (403) when
    its role is insufficient.
    """
    if principal is None:
        raise Unauthenticated("Authentication required")
    required = REQUIRED_ROLES[operation]
    if required is not None and principal.role != required:
        raise Forbidden(f"{required.value} role required for {operation.value}")
    return principal
