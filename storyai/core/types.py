"""
Centralized domain types for the storybook generator.

All dataclasses that are used across multiple modules are defined here
to make data flow explicit and avoid circular imports.
"""

from dataclasses import dataclass, field
from typing import Optional

from storyai.config import STORY_CONSTANTS


# =============================================================================
# Wizard Input
# =============================================================================


@dataclass
class StoryParams:
    """Parameters collected by the story wizard."""

    theme: str
    character_name: str
    age: str = STORY_CONSTANTS["default_age"]
    moral: str = ""
    language: str = STORY_CONSTANTS["default_language"]
    pages: int = STORY_CONSTANTS["default_pages"]

    def validate(self) -> None:
        """Raise ValueError if any wizard field is out of bounds."""
        if not self.theme or not self.theme.strip():
            raise ValueError("theme is required")
        if not self.character_name or not self.character_name.strip():
            raise ValueError("character_name is required")
        if self.age not in STORY_CONSTANTS["age_groups"]:
            raise ValueError(
                f"age must be one of {', '.join(STORY_CONSTANTS['age_groups'])}"
            )
        if self.language not in STORY_CONSTANTS["languages"]:
            raise ValueError(
                f"language must be one of {', '.join(STORY_CONSTANTS['languages'])}"
            )
        if not STORY_CONSTANTS["min_pages"] <= self.pages <= STORY_CONSTANTS["max_pages"]:
            raise ValueError(
                f"pages must be between {STORY_CONSTANTS['min_pages']} "
                f"and {STORY_CONSTANTS['max_pages']}"
            )


# =============================================================================
# Generated Story
# =============================================================================


@dataclass
class PageDraft:
    """A single page as written by the text model."""

    page_number: int
    content: str
    illustration_prompt: str


@dataclass
class StoryDraft:
    """Complete story returned by the text model, before persistence."""

    title: str
    character_description: str
    cover_prompt: str
    pages: list[PageDraft] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def word_count(self) -> int:
        return sum(len(p.content.split()) for p in self.pages)


# =============================================================================
# Export Types
# =============================================================================


@dataclass
class DocumentPage:
    """A page ready to be drawn into the PDF."""

    page_number: int
    content: str
    illustration: Optional[bytes] = None  # PNG/JPEG bytes


@dataclass
class BookDocument:
    """A book with its images loaded, ready for PDF rendering."""

    title: str
    target_age: str
    cover_image: Optional[bytes] = None
    pages: list[DocumentPage] = field(default_factory=list)

    @property
    def pdf_page_count(self) -> int:
        """Cover plus one page per story page."""
        return 1 + len(self.pages)
