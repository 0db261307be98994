"""Pydantic models for API requests."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from storyai.config import STORY_CONSTANTS

from .enums import AgeGroup, Language, UserRole


class CreateBookRequest(BaseModel):
    """Request body for creating a new book (all three wizard steps)."""

    # Step 1
    theme: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="What the story is about",
        examples=["A brave little cat exploring the moon"],
    )
    character_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Name of the main character",
        examples=["Kiko"],
    )

    # Step 2
    age: AgeGroup = Field(default=AgeGroup.TODDLER, description="Target reader age group")
    moral: str = Field(
        default="",
        max_length=500,
        description="Moral value the story should teach",
        examples=["Honesty is important"],
    )

    # Step 3
    language: Language = Field(default=Language.INDONESIA)
    pages: int = Field(
        default=STORY_CONSTANTS["default_pages"],
        ge=STORY_CONSTANTS["min_pages"],
        le=STORY_CONSTANTS["max_pages"],
        description="Number of story pages (excluding the cover)",
    )

    @field_validator("theme", "character_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class NarrationRequest(BaseModel):
    """Options for narrating a page."""

    voice: str = Field(default="Kore", max_length=50, description="Prebuilt TTS voice name")
    regenerate: bool = Field(default=False, description="Ignore a cached narration")


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, description="Email address, or the built-in admin username")
    password: str = Field(..., min_length=1)


class UpdateProfileRequest(BaseModel):
    """Profile fields the user may change. Omitted fields are left as they are."""

    full_name: Optional[str] = Field(default=None, max_length=200)
    phone_number: Optional[str] = Field(default=None, max_length=40)
    avatar_url: Optional[str] = None


class UpdateBrandRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    tagline: str = Field(default="", max_length=200)
    logo_url: Optional[str] = None


class CreateUserRequest(BaseModel):
    """Admin request to create a new auth user and profile."""

    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=200)
    name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.ADMIN


class UpdateUserRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    role: Optional[UserRole] = None
