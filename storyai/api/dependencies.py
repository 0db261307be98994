"""FastAPI dependency injection for services and repositories."""

from typing import Annotated, AsyncGenerator, Optional

import asyncpg
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from . import config
from .auth.tokens import verify_token
from .database.db import get_pool
from .database.profile_repository import BrandRepository, ProfileRepository
from .database.repository import BookRepository
from .services.book_service import BookService
from .services.supabase import SupabaseClient

# Security scheme for bearer token authentication
security = HTTPBearer()

# Shared backend client (closed at shutdown)
_supabase: Optional[SupabaseClient] = None


def get_supabase() -> SupabaseClient:
    """Get the process-wide backend client."""
    global _supabase
    if _supabase is None:
        _supabase = SupabaseClient(
            url=config.SUPABASE_URL,
            anon_key=config.SUPABASE_ANON_KEY,
            service_role_key=config.SUPABASE_SERVICE_ROLE_KEY,
            timeout=config.SUPABASE_TIMEOUT,
        )
    return _supabase


async def close_supabase() -> None:
    global _supabase
    if _supabase is not None:
        await _supabase.aclose()
        _supabase = None


# Database connection dependency
async def get_connection() -> AsyncGenerator[asyncpg.Connection, None]:
    """Get a pooled connection for the duration of the request."""
    try:
        pool = get_pool()
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    async with pool.acquire() as conn:
        yield conn


Connection = Annotated[asyncpg.Connection, Depends(get_connection)]


async def get_optional_connection() -> AsyncGenerator[Optional[asyncpg.Connection], None]:
    """Like get_connection, but yields None when the database is not configured."""
    try:
        pool = get_pool()
    except RuntimeError:
        yield None
        return
    async with pool.acquire() as conn:
        yield conn


# Repositories - require a connection
def get_repository(conn: Connection) -> BookRepository:
    """Get a BookRepository instance with injected connection."""
    return BookRepository(conn)


def get_profile_repository(conn: Connection) -> ProfileRepository:
    return ProfileRepository(conn)


def get_brand_repository(conn: Connection) -> BrandRepository:
    return BrandRepository(conn)


def get_optional_profile_repository(
    conn: Annotated[Optional[asyncpg.Connection], Depends(get_optional_connection)]
) -> Optional[ProfileRepository]:
    return ProfileRepository(conn) if conn is not None else None


# Service - depends on repository and backend client
def get_book_service(
    repo: Annotated[BookRepository, Depends(get_repository)],
    supabase: Annotated[SupabaseClient, Depends(get_supabase)],
) -> BookService:
    """Get a BookService instance with injected repository."""
    return BookService(repo, supabase)


# Type aliases for cleaner route signatures
Repository = Annotated[BookRepository, Depends(get_repository)]
Profiles = Annotated[ProfileRepository, Depends(get_profile_repository)]
OptionalProfiles = Annotated[Optional[ProfileRepository], Depends(get_optional_profile_repository)]
Brand = Annotated[BrandRepository, Depends(get_brand_repository)]
Supabase = Annotated[SupabaseClient, Depends(get_supabase)]
Service = Annotated[BookService, Depends(get_book_service)]


class AuthenticatedUser(BaseModel):
    """The user a bearer token was issued to."""

    id: str
    email: Optional[str] = None
    role: str = "user"
    name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


# Authentication dependency
async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)]
) -> AuthenticatedUser:
    """Verify the bearer token and return the user it was issued to.

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    payload = verify_token(credentials.credentials)
    if payload is None or not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AuthenticatedUser(
        id=payload["sub"],
        email=payload.get("email"),
        role=payload.get("role") or "user",
        name=payload.get("name"),
    )


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]


async def require_admin(user: CurrentUser) -> AuthenticatedUser:
    """Raises 403 unless the caller has the admin role."""
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


AdminUser = Annotated[AuthenticatedUser, Depends(require_admin)]
