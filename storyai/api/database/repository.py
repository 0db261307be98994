"""Repository for book CRUD operations using raw asyncpg SQL."""

import uuid
from typing import Optional

import asyncpg

from ..models.responses import BookResponse, PageResponse


class BookRepository:
    """Repository for book and page persistence operations."""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def create_book(
        self,
        user_id: str,
        title: str,
        theme: str,
        target_age: str,
        moral: Optional[str] = None,
        language: Optional[str] = None,
        cover_prompt: Optional[str] = None,
        character_description: Optional[str] = None,
    ) -> str:
        """Insert a book row without pages. Returns the new book id."""
        book_id = str(uuid.uuid4())
        await self.conn.execute(
            """
            INSERT INTO books
                (id, user_id, title, theme, target_age, moral, language,
                 cover_prompt, character_description)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
            """,
            book_id,
            user_id,
            title,
            theme,
            target_age,
            moral,
            language,
            cover_prompt,
            character_description,
        )
        return book_id

    async def set_cover_url(self, book_id: str, cover_url: str) -> None:
        await self.conn.execute(
            "UPDATE books SET cover_url = $2 WHERE id = $1",
            book_id,
            cover_url,
        )

    async def insert_pages(self, book_id: str, pages: list[dict]) -> None:
        """Insert all pages of a book in one transaction."""
        page_data = [
            (
                str(uuid.uuid4()),
                book_id,
                p["page_number"],
                p["content"],
                p.get("illustration_prompt"),
                p.get("illustration_url"),
            )
            for p in pages
        ]
        async with self.conn.transaction():
            await self.conn.executemany(
                """
                INSERT INTO pages
                    (id, book_id, page_number, content, illustration_prompt, illustration_url)
                VALUES ($1, $2, $3, $4, $5, $6)
                """,
                page_data,
            )

    async def get_book(self, book_id: str, user_id: str) -> Optional[BookResponse]:
        """Get a book owned by ``user_id`` with its pages."""
        book = await self.conn.fetchrow(
            "SELECT * FROM books WHERE id = $1 AND user_id = $2",
            book_id,
            user_id,
        )
        if not book:
            return None

        pages = await self.conn.fetch(
            """
            SELECT * FROM pages
            WHERE book_id = $1
            ORDER BY page_number
            """,
            book_id,
        )
        return self._record_to_response(book, pages)

    async def list_books(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[BookResponse], int]:
        """List a user's books, newest first."""
        total = await self.conn.fetchval(
            "SELECT COUNT(*) FROM books WHERE user_id = $1",
            user_id,
        )
        books = await self.conn.fetch(
            """
            SELECT * FROM books
            WHERE user_id = $1
            ORDER BY created_at DESC
            LIMIT $2 OFFSET $3
            """,
            user_id,
            limit,
            offset,
        )
        return [self._record_to_response(b) for b in books], total or 0


    async def update_page(
        self,
        page_id: str,
        illustration_url: Optional[str] = None,
        narration_url: Optional[str] = None,
    ) -> Optional[PageResponse]:
        """Set media URLs on a page. None leaves a field unchanged."""
        row = await self.conn.fetchrow(
            """
            UPDATE pages
            SET illustration_url = COALESCE($2, illustration_url),
                narration_url = COALESCE($3, narration_url)
            WHERE id = $1
            RETURNING *
            """,
            page_id,
            illustration_url,
            narration_url,
        )
        return self._page_to_response(row) if row else None

    async def delete_book(self, book_id: str, user_id: str) -> bool:
        """Delete a book and its pages (cascades via FK)."""
        result = await self.conn.execute(
            "DELETE FROM books WHERE id = $1 AND user_id = $2",
            book_id,
            user_id,
        )
        # Result is like "DELETE 1" or "DELETE 0"
        return result.split()[-1] != "0"

    async def count_books(self) -> int:
        return await self.conn.fetchval("SELECT COUNT(*) FROM books") or 0

    @staticmethod
    def _page_to_response(page: asyncpg.Record) -> PageResponse:
        return PageResponse(
            id=page["id"],
            book_id=page["book_id"],
            page_number=page["page_number"],
            content=page["content"],
            illustration_prompt=page["illustration_prompt"],
            illustration_url=page["illustration_url"],
            narration_url=page["narration_url"],
        )

    def _record_to_response(
        self,
        book: asyncpg.Record,
        pages: Optional[list[asyncpg.Record]] = None,
    ) -> BookResponse:
        """Convert asyncpg Records to the response model."""
        return BookResponse(
            id=book["id"],
            user_id=book["user_id"],
            title=book["title"],
            theme=book["theme"],
            target_age=book["target_age"],
            moral=book["moral"],
            language=book["language"],
            cover_prompt=book["cover_prompt"],
            character_description=book["character_description"],
            cover_url=book["cover_url"],
            created_at=book["created_at"],
            pages=[self._page_to_response(p) for p in pages] if pages is not None else None,
        )
