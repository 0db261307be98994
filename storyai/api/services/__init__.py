"""Services for book generation, media and the hosted backend."""

from .book_service import (
    BookNotFoundError,
    BookService,
    MediaGenerationError,
    PageNotFoundError,
    pdf_filename,
)
from .supabase import SupabaseClient, SupabaseError

__all__ = [
    "BookService",
    "BookNotFoundError",
    "PageNotFoundError",
    "MediaGenerationError",
    "pdf_filename",
    "SupabaseClient",
    "SupabaseError",
]
