"""Admin routes for user management."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from ..dependencies import AdminUser, Profiles, Supabase
from ..models.requests import CreateUserRequest, UpdateUserRequest
from ..models.responses import UserResponse
from ..services.supabase import SupabaseError

logger = logging.getLogger(__name__)

router = APIRouter()


def _user_not_found(user_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")


@router.get("/users", response_model=list[UserResponse], summary="List users")
async def list_users(
    admin: AdminUser,
    profiles: Profiles,
    search: Optional[str] = Query(default=None, description="Match on name or email"),
):
    """List user profiles ordered by name."""
    return await profiles.list(search=search.strip() if search else None)


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
    description="Create a confirmed auth user and its profile. Requires the service-role key.",
)
async def create_user(request: CreateUserRequest, admin: AdminUser, profiles: Profiles, supabase: Supabase):
    try:
        auth_user = await supabase.create_user(
            email=request.email,
            password=request.password,
            user_metadata={"full_name": request.name, "role": request.role.value},
        )
    except SupabaseError as e:
        code = e.status_code if e.status_code == status.HTTP_503_SERVICE_UNAVAILABLE else status.HTTP_502_BAD_GATEWAY
        raise HTTPException(status_code=code, detail=e.message) from e

    user_id = auth_user.get("id") if isinstance(auth_user, dict) else None
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Backend did not return the new user id",
        )

    logger.info(f"Admin {admin.id} created user {user_id}")
    return await profiles.create(
        user_id,
        email=request.email,
        full_name=request.name,
        role=request.role.value,
    )


@router.patch("/users/{user_id}", response_model=UserResponse, summary="Update a user")
async def update_user(user_id: str, request: UpdateUserRequest, admin: AdminUser, profiles: Profiles):
    profile = await profiles.update(
        user_id,
        full_name=request.name,
        role=request.role.value if request.role else None,
    )
    if profile is None:
        raise _user_not_found(user_id)
    return profile


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a user")
async def delete_user(user_id: str, admin: AdminUser, profiles: Profiles):
    """Delete the profile row. The auth user itself is left in place."""
    if not await profiles.delete(user_id):
        raise _user_not_found(user_id)
