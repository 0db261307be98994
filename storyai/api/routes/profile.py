"""Profile and brand settings endpoints."""

import logging
import time

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from .. import config
from ..dependencies import AuthenticatedUser, Brand, CurrentUser, Profiles, Supabase
from ..models.requests import UpdateBrandRequest, UpdateProfileRequest
from ..models.responses import BrandResponse, ProfileResponse
from ..services.images import resize_image, to_data_url
from ..services.supabase import SupabaseClient, SupabaseError

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_image_upload(file: UploadFile) -> bytes:
    """Read an uploaded image and shrink it to the avatar/logo box."""
    data = await file.read()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty file")
    if len(data) > config.UPLOAD_MAX_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large (max {config.UPLOAD_MAX_BYTES // (1024 * 1024)} MB)",
        )
    try:
        return resize_image(data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


async def _sync_auth_metadata(supabase: SupabaseClient, user: AuthenticatedUser, profile: ProfileResponse) -> None:
    """Mirror profile fields onto the auth user when the service key is available."""
    if not supabase.has_service_role or user.id == config.ADMIN_USER_ID:
        return
    try:
        await supabase.update_user_metadata(
            user.id,
            {
                "full_name": profile.full_name,
                "phone": profile.phone_number,
                "avatar_url": profile.avatar_url,
            },
        )
    except SupabaseError as e:
        logger.warning(f"Failed to sync auth metadata for {user.id}: {e.message}")


@router.get("/profile", response_model=ProfileResponse, summary="Get my profile")
async def get_profile(user: CurrentUser, profiles: Profiles):
    profile = await profiles.get(user.id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@router.put("/profile", response_model=ProfileResponse, summary="Update my profile")
async def update_profile(
    request: UpdateProfileRequest,
    user: CurrentUser,
    profiles: Profiles,
    supabase: Supabase,
):
    """Update name, phone number or avatar URL. Omitted fields are kept."""
    await profiles.ensure_profile(user.id, email=user.email, full_name=user.name, role=user.role)
    profile = await profiles.update(
        user.id,
        full_name=request.full_name,
        phone_number=request.phone_number,
        avatar_url=request.avatar_url,
    )
    await _sync_auth_metadata(supabase, user, profile)
    return profile


@router.post("/profile/avatar", response_model=ProfileResponse, summary="Upload an avatar")
async def upload_avatar(
    user: CurrentUser,
    profiles: Profiles,
    supabase: Supabase,
    file: UploadFile = File(...),
):
    """Resize the image to fit 400x400 and store it as the profile avatar.

    If object storage is unavailable the image is kept inline as a data URL.
    """
    image = await _read_image_upload(file)

    path = f"{user.id}-{int(time.time() * 1000)}.jpg"
    try:
        avatar_url = await supabase.upload(config.AVATAR_BUCKET, path, image, "image/jpeg")
    except SupabaseError as e:
        logger.warning(f"Avatar upload failed, storing inline: {e.message}")
        avatar_url = to_data_url(image)

    await profiles.ensure_profile(user.id, email=user.email, full_name=user.name, role=user.role)
    profile = await profiles.update(user.id, avatar_url=avatar_url)
    await _sync_auth_metadata(supabase, user, profile)
    return profile


@router.get("/brand", response_model=BrandResponse, summary="Get brand settings")
async def get_brand(user: CurrentUser, brand: Brand):
    return await brand.get()


@router.put("/brand", response_model=BrandResponse, summary="Update brand settings")
async def update_brand(request: UpdateBrandRequest, user: CurrentUser, brand: Brand):
    return await brand.upsert(
        name=request.name,
        tagline=request.tagline,
        logo_url=request.logo_url,
    )


@router.post("/brand/logo", response_model=BrandResponse, summary="Upload a brand logo")
async def upload_logo(user: CurrentUser, brand: Brand, file: UploadFile = File(...)):
    """Resize the logo and store it inline on the brand settings row."""
    image = await _read_image_upload(file)
    current = await brand.get()
    return await brand.upsert(
        name=current.name,
        tagline=current.tagline,
        logo_url=to_data_url(image),
    )
