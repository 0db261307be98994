# Storybook Generator - Core Domain

# Re-export types for convenient access
from .types import (
    StoryParams,
    PageDraft,
    StoryDraft,
    DocumentPage,
    BookDocument,
)

__all__ = [
    "StoryParams",
    "PageDraft",
    "StoryDraft",
    "DocumentPage",
    "BookDocument",
]
