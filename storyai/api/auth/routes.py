"""Authentication routes: password login and the current user."""

import logging
import secrets

from fastapi import APIRouter, HTTPException, status

from .. import config
from ..dependencies import AuthenticatedUser, CurrentUser, OptionalProfiles, Supabase
from ..models.requests import LoginRequest
from ..models.responses import LoginResponse, ProfileResponse
from ..services.supabase import SupabaseError
from .tokens import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid username or password",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _admin_profile() -> ProfileResponse:
    return ProfileResponse(
        id=config.ADMIN_USER_ID,
        full_name="Administrator",
        email=config.ADMIN_EMAIL,
        role="admin",
        credits=9999,
    )


def _token_for(profile: ProfileResponse) -> LoginResponse:
    access_token = create_access_token(
        subject=profile.id,
        email=profile.email,
        role=profile.role,
        name=profile.full_name,
    )
    return LoginResponse(access_token=access_token, user=profile)


def _is_builtin_admin(request: LoginRequest) -> bool:
    return secrets.compare_digest(
        request.username.encode(), config.ADMIN_USERNAME.encode()
    ) and secrets.compare_digest(request.password.encode(), config.ADMIN_PASSWORD.encode())


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, supabase: Supabase, profiles: OptionalProfiles) -> LoginResponse:
    """Sign in and receive an access token.

    The built-in administrator is checked first; any other username is
    treated as an email and verified against the hosted auth service. The
    token is valid for 30 days and should be included in the Authorization
    header for all subsequent requests.
    """
    if _is_builtin_admin(request):
        return _token_for(_admin_profile())

    if profiles is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not configured",
        )

    try:
        session = await supabase.sign_in_with_password(request.username, request.password)
    except SupabaseError as e:
        if e.status_code in (400, 401, 403, 422):
            raise _invalid_credentials() from e
        code = e.status_code if e.status_code == status.HTTP_503_SERVICE_UNAVAILABLE else status.HTTP_502_BAD_GATEWAY
        raise HTTPException(status_code=code, detail=e.message) from e

    auth_user = session.get("user") or {}
    user_id = auth_user.get("id")
    if not user_id:
        raise _invalid_credentials()

    metadata = auth_user.get("user_metadata") or {}
    profile = await profiles.ensure_profile(
        user_id,
        email=auth_user.get("email") or request.username,
        full_name=metadata.get("full_name"),
    )
    logger.info(f"User {user_id} signed in", extra={"stage": "login"})
    return _token_for(profile)


@router.get("/me", response_model=AuthenticatedUser)
async def me(user: CurrentUser) -> AuthenticatedUser:
    """The user the bearer token was issued to."""
    return user
