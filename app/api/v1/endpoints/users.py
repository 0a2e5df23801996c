"""
User Routes

Endpoints for user profile management.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_identity, get_storage
from app.core.database import get_db
from app.core.exceptions import ValidationError
from app.core.validators import validate_username
from app.schemas.common import APIResponse
from app.schemas.token import Identity
from app.schemas.user import (
    AvatarUploadResponse,
    UsernameCheckResponse,
    UserResponse,
    UserUpdate,
)
from app.services import avatar_service, user_service
from app.services.storage_service import ObjectStorage


router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "/me",
    response_model=APIResponse[UserResponse],
    response_model_exclude_none=True,
    summary="Get current user profile",
)
async def get_me(
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[ObjectStorage, Depends(get_storage)],
) -> APIResponse[UserResponse]:
    """
    Get the currently logged-in user's profile.

    This endpoint requires authentication via Bearer token.

    Raises:
        NotFound: 404 if the account behind the token no longer exists.
    """
    user = await user_service.get_by_id(db, identity.account_id)
    return APIResponse(data=UserResponse.from_user(user, storage))


@router.patch(
    "/me",
    response_model=APIResponse[UserResponse],
    response_model_exclude_none=True,
    summary="Update current user profile",
)
async def update_me(
    user_update: UserUpdate,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[ObjectStorage, Depends(get_storage)],
) -> APIResponse[UserResponse]:
    """
    Update the currently logged-in user's profile.

    Only provided fields will be updated.

    Raises:
        UsernameConflict: 409 if the username is taken by another account.
    """
    user = await user_service.update_profile(
        db,
        identity.account_id,
        user_update.model_dump(exclude_unset=True),
    )
    return APIResponse(data=UserResponse.from_user(user, storage))


@router.post(
    "/me/avatar",
    response_model=APIResponse[AvatarUploadResponse],
    response_model_exclude_none=True,
    summary="Upload a new avatar image",
)
async def upload_avatar(
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[ObjectStorage, Depends(get_storage)],
    avatar: Annotated[UploadFile, File(description="JPEG, PNG, WebP or GIF, max 5 MB")],
) -> APIResponse[AvatarUploadResponse]:
    """
    Upload an avatar for the current user.

    The image type is detected from the file contents; the filename and
    declared content type are ignored.
    """
    # One byte past the limit is enough to tell that the file is too large.
    data = await avatar.read(avatar_service.MAX_AVATAR_BYTES + 1)
    avatar_url = await avatar_service.replace_avatar(db, storage, identity.account_id, data)
    return APIResponse(data=AvatarUploadResponse(avatar_url=avatar_url))


@router.get(
    "/username-check",
    response_model=APIResponse[UsernameCheckResponse],
    response_model_exclude_none=True,
    summary="Check whether a username is available",
)
async def check_username(
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
    username: Annotated[str, Query(description="Username to check")] = "",
) -> APIResponse[UsernameCheckResponse]:
    """
    Report whether ``username`` is free.

    Advisory only; the final word is the uniqueness check when the profile
    is saved.
    """
    if not username:
        raise ValidationError("username query parameter is required")
    try:
        validate_username(username)
    except ValueError as e:
        raise ValidationError(str(e))

    taken = await user_service.username_exists(db, username)
    return APIResponse(data=UsernameCheckResponse(available=not taken))
