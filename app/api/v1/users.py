"""User management endpoints, each gated by the role its operation requires."""

from typing import Annotated

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    Response,
    UploadFile,
    status,
)

from app.api.v1.deps import get_user_store, require
from app.core.config import Settings, get_settings
from app.schemas.auth import Principal
from app.schemas.users import (
    CreateUserRequest,
    PagedUsers,
    UpdateUserRequest,
    UserFilter,
    UserRead,
)
from app.services.authorization import Operation
from app.services.uploads import UploadError, save_profile_asset
from app.services.user_store import SqlUserStore
from app.services.users import UserNameTakenError, UserService, UserValidationError

router = APIRouter()


def get_user_service(
    store: Annotated[SqlUserStore, Depends(get_user_store)],
) -> UserService:
    return UserService(store)


Service = Annotated[UserService, Depends(get_user_service)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def _not_found(user_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"User with id {user_id} not found.",
    )


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    body: CreateUserRequest,
    response: Response,
    service: Service,
    settings: AppSettings,
    _admin: Annotated[Principal, Depends(require(Operation.CREATE_USER))],
) -> UserRead:
    """Create a user (Admin only). Unknown roles fall back to ReadOnly."""
    try:
        created = service.create(body)
    except UserValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except UserNameTakenError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    response.headers["Location"] = f"{settings.API_V1_PREFIX}/users/id/{created.id}"
    return created


@router.get("/id/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    service: Service,
    _user: Annotated[Principal, Depends(require(Operation.GET_USER))],
) -> UserRead:
    user = service.get(user_id)
    if user is None:
        raise _not_found(user_id)
    return user


@router.get("", response_model=PagedUsers)
def list_users(
    service: Service,
    settings: AppSettings,
    _user: Annotated[Principal, Depends(require(Operation.LIST_USERS))],
    skip: Annotated[int, Query(ge=0)] = 0,
    take: Annotated[int | None, Query(ge=0)] = None,
) -> PagedUsers:
    """One page of users ordered by id; take defaults to DEFAULT_PAGE_SIZE."""
    if take is None:
        take = settings.DEFAULT_PAGE_SIZE
    return service.list_page(skip, take)


@router.get("/all", response_model=list[UserRead])
def list_all_users(
    service: Service,
    _user: Annotated[Principal, Depends(require(Operation.LIST_ALL_USERS))],
) -> list[UserRead]:
    return service.list_all()


@router.get("/filter", response_model=PagedUsers)
def filter_users(
    service: Service,
    _user: Annotated[Principal, Depends(require(Operation.FILTER_USERS))],
    user_name: Annotated[str | None, Query(alias="userName")] = None,
    role: str | None = None,
    email_id: Annotated[str | None, Query(alias="emailId")] = None,
    mobile_num: Annotated[str | None, Query(alias="mobileNum")] = None,
    skip: Annotated[int | None, Query(ge=0)] = None,
    take: Annotated[int | None, Query(ge=0)] = None,
) -> PagedUsers:
    """Filtered page with total count. Text filters match substrings, role matches exactly."""
    user_filter = UserFilter(
        user_name=user_name,
        role=role,
        email_id=email_id,
        mobile_num=mobile_num,
        skip=skip,
        take=take,
    )
    return service.list_filtered_page(user_filter)


@router.get("/filter/all", response_model=list[UserRead])
def filter_all_users(
    service: Service,
    _user: Annotated[Principal, Depends(require(Operation.FILTER_ALL_USERS))],
    user_name: Annotated[str | None, Query(alias="userName")] = None,
    role: str | None = None,
    email_id: Annotated[str | None, Query(alias="emailId")] = None,
    mobile_num: Annotated[str | None, Query(alias="mobileNum")] = None,
) -> list[UserRead]:
    user_filter = UserFilter(
        user_name=user_name,
        role=role,
        email_id=email_id,
        mobile_num=mobile_num,
    )
    return service.list_filtered(user_filter, paged=False)


@router.put("/id/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    body: UpdateUserRequest,
    service: Service,
    _admin: Annotated[Principal, Depends(require(Operation.UPDATE_USER))],
) -> UserRead:
    """Update a user (Admin only). Blank fields and unrecognized roles are ignored."""
    updated = service.update(user_id, body)
    if updated is None:
        raise _not_found(user_id)
    return updated


@router.post("/id/{user_id}/upload", response_model=UserRead)
async def upload_profile_asset(
    user_id: int,
    service: Service,
    settings: AppSettings,
    _admin: Annotated[Principal, Depends(require(Operation.UPLOAD_PROFILE_ASSET))],
    file: Annotated[UploadFile, File()],
    folder: Annotated[str, Form()],
    fieldname: Annotated[str, Form()],
) -> UserRead:
    """
    Upload a profile asset (Admin only) and store its URL on the user.

    Send multipart/form-data with `file`, `folder` (a single directory name)
    and `fieldname` (currently only `profile_pic_url` is applied).
    """
    if service.get(user_id) is None:
        raise _not_found(user_id)
    content = await file.read()
    try:
        url = save_profile_asset(
            settings.UPLOADS_DIR,
            folder,
            file.filename,
            content,
            max_bytes=settings.MAX_UPLOAD_FILE_BYTES,
        )
    except UploadError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    updated = service.update_profile_field(user_id, fieldname, url)
    if updated is None:
        raise _not_found(user_id)
    return updated


@router.delete("/id/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    service: Service,
    _admin: Annotated[Principal, Depends(require(Operation.DELETE_USER))],
) -> Response:
    if not service.delete(user_id):
        raise _not_found(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
