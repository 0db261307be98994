"""Database module for book, profile and brand persistence."""

from .db import Base, close_db, get_db, get_pool, init_db
from .models import Book, BrandSettings, Page, Profile
from .profile_repository import BrandRepository, ProfileRepository
from .repository import BookRepository

__all__ = [
    # Connection management
    "init_db",
    "close_db",
    "get_db",
    "get_pool",
    "Base",
    # Models
    "Profile",
    "Book",
    "Page",
    "BrandSettings",
    # Repositories
    "BookRepository",
    "ProfileRepository",
    "BrandRepository",
]
