from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Path
from fastapi import Request
from fastapi import status
from loguru import logger

from userdir_api.db.repository_user import UserRepository
from userdir_api.dependencies import get_user_repository
from userdir_api.models.user import MAX_USER_ID
from userdir_api.models.user import User
from userdir_api.schemas.schemas import GetUsersQueryParams
from userdir_api.schemas.schemas import GetUsersResponse
from userdir_api.schemas.schemas import PhotoUrlResponse
from userdir_api.schemas.schemas import SearchUsersQueryParams
from userdir_api.schemas.schemas import UserCreateRequest
from userdir_api.schemas.schemas import UserProfileUpdateRequest

ROUTER_USERS = APIRouter(tags=["Users"])


@ROUTER_USERS.post(
    "/users",
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_409_CONFLICT: {"description": "User violates a table constraint"},
    },
)
async def register_user(
    request: Request,
    body: UserCreateRequest,
    repository: UserRepository = Depends(get_user_repository),
) -> User:
    """Register a new user and return it with its generated user_id."""
    logger.info(
        "Registering user",
        name_id=body.name_id,
        identity_provider=body.identity_provider,
        method=request.method,
        path=request.url.path,
    )
    return await repository.create(body.to_user())


##########################


@ROUTER_USERS.get("/users/search")
async def search_users(
    query_params: SearchUsersQueryParams = Depends(),
    repository: UserRepository = Depends(get_user_repository),
) -> GetUsersResponse:
    """
    Prefix search on first name, last name, or either.

    The prefix is matched with LIKE and is not escaped: ``%`` and ``_`` act as wildcards.
    """
    if query_params.first_name is not None:
        users = await repository.get_by_first_name(query_params.first_name)
    elif query_params.last_name is not None:
        users = await repository.get_by_last_name(query_params.last_name)
    else:
        users = await repository.get_by_first_or_last_name(query_params.name)

    logger.info("User search completed", count=len(users), criteria=query_params.model_dump(exclude_none=True))
    return GetUsersResponse(Message=f"Fetched {len(users)} users!", Users=users)


##########################


@ROUTER_USERS.get("/users")
async def list_users_by_name_id(
    query_params: GetUsersQueryParams = Depends(),
    repository: UserRepository = Depends(get_user_repository),
) -> GetUsersResponse:
    """Look up users by name identifier, optionally narrowed to one identity provider."""
    if query_params.identity_provider is None:
        users = await repository.get_by_name_id(query_params.name_id)
    else:
        users = await repository.get_by_name_id_and_provider(query_params.name_id, query_params.identity_provider)

    return GetUsersResponse(Message=f"Fetched {len(users)} users!", Users=users)


##########################


@ROUTER_USERS.get(
    "/users/{user_id}",
    responses={
        status.HTTP_404_NOT_FOUND: {
            "description": "User not found",
            "content": {"application/json": {"example": {"detail": "User not found: 42"}}},
        },
    },
)
async def get_user(
    request: Request,
    user_id: int = Path(..., ge=1, le=MAX_USER_ID, description="Internal user id"),
    repository: UserRepository = Depends(get_user_repository),
) -> User:
    """Get a specific user by internal id."""
    user = await repository.get_by_id(user_id)

    if user is None:
        logger.warning(
            "User not found",
            user_id=user_id,
            http_status=404,
            http_method=request.method,
            url_path=str(request.url.path),
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User not found: {user_id}",
        )

    return user


##########################


@ROUTER_USERS.get(
    "/users/{user_id}/photo-url",
    responses={
        status.HTTP_404_NOT_FOUND: {"description": "User not found"},
    },
)
async def get_user_photo_url(
    user_id: int = Path(..., ge=1, le=MAX_USER_ID, description="Internal user id"),
    repository: UserRepository = Depends(get_user_repository),
) -> PhotoUrlResponse:
    """Get the profile photo URL of a user."""
    photo_url = await repository.get_photo_url(user_id)

    if photo_url is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User not found: {user_id}",
        )

    return PhotoUrlResponse(user_id=user_id, photo_url=photo_url)


##########################


@ROUTER_USERS.put(
    "/users/by-name-id/{name_id}",
    responses={
        status.HTTP_404_NOT_FOUND: {"description": "No user with this name identifier"},
    },
)
async def update_user_profile(
    request: Request,
    name_id: str,
    body: UserProfileUpdateRequest,
    repository: UserRepository = Depends(get_user_repository),
) -> UserProfileUpdateRequest:
    """
    Update the profile fields of the user(s) with this name identifier.

    Identity and audit columns are not changed. The response echoes the
    submitted profile; the row is not re-read.
    """
    logger.info("Updating user profile", name_id=name_id, method=request.method, path=request.url.path)

    # identity_provider is not written by the update statement
    await repository.update(User(name_id=name_id, identity_provider="", **body.model_dump()))
    return body
