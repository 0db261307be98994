"""Pydantic models for API responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from .enums import UserRole


class PageResponse(BaseModel):
    """A single page of a book: text plus optional illustration and narration."""

    id: str
    book_id: str
    page_number: int
    content: str
    illustration_prompt: Optional[str] = None
    illustration_url: Optional[str] = None
    narration_url: Optional[str] = None


class BookResponse(BaseModel):
    """Full book with pages ordered by page number."""

    id: str
    user_id: str
    title: str
    theme: str
    target_age: str
    moral: Optional[str] = None
    language: Optional[str] = None
    cover_prompt: Optional[str] = None
    character_description: Optional[str] = None
    cover_url: Optional[str] = None
    created_at: Optional[datetime] = None

    # Omitted in list views
    pages: Optional[list[PageResponse]] = None

    @computed_field
    @property
    def page_count(self) -> Optional[int]:
        return len(self.pages) if self.pages is not None else None

    @computed_field
    @property
    def missing_illustrations(self) -> Optional[int]:
        """Pages that still have no illustration."""
        if self.pages is None:
            return None
        return sum(1 for p in self.pages if not p.illustration_url)


class BookListResponse(BaseModel):
    """Paginated list of books."""

    books: list[BookResponse]
    total: int
    limit: int
    offset: int


class BatchIllustrationResponse(BaseModel):
    """Result of illustrating every page that had no image yet."""

    requested: int
    generated: int
    failed_pages: list[int] = Field(default_factory=list)
    book: BookResponse


class NarrationResponse(BaseModel):
    page_id: str
    narration_url: str
    cached: bool = False


class ProfileResponse(BaseModel):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: str = UserRole.USER.value
    phone_number: Optional[str] = None
    avatar_url: Optional[str] = None
    credits: int = 10
    created_at: Optional[datetime] = None


# Admin user list shows profile rows
UserResponse = ProfileResponse


class BrandResponse(BaseModel):
    name: str
    tagline: str = ""
    logo_url: Optional[str] = None
    updated_at: Optional[datetime] = None


class LoginResponse(BaseModel):
    """Bearer token plus the signed-in user."""

    access_token: str
    token_type: str = "bearer"
    user: ProfileResponse


class DatabaseCheckResponse(BaseModel):
    status: str
    books: int
