"""SQLAlchemy ORM models for PostgreSQL.

Mirrors the hosted backend's public schema: profiles, books, pages and the
single-row brand settings table.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


class Profile(Base):
    """Profile model - one row per auth user."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    full_name: Mapped[Optional[str]] = mapped_column(Text)
    email: Mapped[Optional[str]] = mapped_column(Text)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")
    phone_number: Mapped[Optional[str]] = mapped_column(String(40))
    avatar_url: Mapped[Optional[str]] = mapped_column(Text)
    credits: Mapped[int] = mapped_column(Integer, nullable=False, default=10, server_default="10")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("idx_profiles_full_name", "full_name"),
    )


class Book(Base):
    """Book model - a generated storybook."""

    __tablename__ = "books"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    theme: Mapped[str] = mapped_column(Text, nullable=False)
    target_age: Mapped[str] = mapped_column(String(10), nullable=False)
    moral: Mapped[Optional[str]] = mapped_column(Text)
    language: Mapped[Optional[str]] = mapped_column(String(40))
    cover_prompt: Mapped[Optional[str]] = mapped_column(Text)
    character_description: Mapped[Optional[str]] = mapped_column(Text)
    cover_url: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    pages: Mapped[list["Page"]] = relationship(
        back_populates="book", cascade="all, delete-orphan", order_by="Page.page_number"
    )

    __table_args__ = (
        Index("idx_books_user_id", "user_id"),
        Index("idx_books_created_at", "created_at"),
    )


class Page(Base):
    """Page model - one page of a book."""

    __tablename__ = "pages"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    book_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("books.id", ondelete="CASCADE"), nullable=False
    )
    page_number: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    illustration_prompt: Mapped[Optional[str]] = mapped_column(Text)
    illustration_url: Mapped[Optional[str]] = mapped_column(Text)
    narration_url: Mapped[Optional[str]] = mapped_column(Text)

    # Relationship
    book: Mapped["Book"] = relationship(back_populates="pages")

    __table_args__ = (
        Index("idx_pages_book_id", "book_id"),
        Index("uq_book_page", "book_id", "page_number", unique=True),
    )


class BrandSettings(Base):
    """Brand identity shown in the app and on exports (single row)."""

    __tablename__ = "brand_settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    tagline: Mapped[Optional[str]] = mapped_column(Text)
    logo_url: Mapped[Optional[str]] = mapped_column(Text)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
