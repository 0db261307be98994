"""Pydantic models for API requests and responses."""

from .enums import AgeGroup, Language, UserRole
from .requests import (
    CreateBookRequest,
    CreateUserRequest,
    LoginRequest,
    NarrationRequest,
    UpdateBrandRequest,
    UpdateProfileRequest,
    UpdateUserRequest,
)
from .responses import (
    BatchIllustrationResponse,
    BookListResponse,
    BookResponse,
    BrandResponse,
    DatabaseCheckResponse,
    LoginResponse,
    NarrationResponse,
    PageResponse,
    ProfileResponse,
    UserResponse,
)

__all__ = [
    # Enums
    "AgeGroup",
    "Language",
    "UserRole",
    # Requests
    "CreateBookRequest",
    "CreateUserRequest",
    "LoginRequest",
    "NarrationRequest",
    "UpdateBrandRequest",
    "UpdateProfileRequest",
    "UpdateUserRequest",
    # Responses
    "BatchIllustrationResponse",
    "BookListResponse",
    "BookResponse",
    "BrandResponse",
    "DatabaseCheckResponse",
    "LoginResponse",
    "NarrationResponse",
    "PageResponse",
    "ProfileResponse",
    "UserResponse",
]
