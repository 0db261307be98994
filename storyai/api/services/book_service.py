"""Book service: story generation, media generation and export.

Blocking model calls (dspy, google-genai) and PDF rendering run in a worker
thread via ``asyncio.to_thread`` so the event loop stays responsive.
"""

import asyncio
import re
import time
import uuid
from typing import Optional

import httpx

from storyai.config import STORY_CONSTANTS
from storyai.core import BookDocument, DocumentPage, StoryParams

from .. import config
from ..database.repository import BookRepository
from ..logging import book_logger
from ..models.responses import (
    BatchIllustrationResponse,
    BookListResponse,
    BookResponse,
    NarrationResponse,
    PageResponse,
)
from .images import fetch_image
from .supabase import SupabaseClient


class BookNotFoundError(LookupError):
    """The book does not exist or belongs to another user."""


class PageNotFoundError(LookupError):
    """The page does not exist in the book."""


class MediaGenerationError(Exception):
    """The model answered without the requested image or audio."""


def pdf_filename(title: str) -> str:
    """Safe download filename for a book title."""
    name = re.sub(r"[^\w\- ]+", "", title or "").strip()
    name = re.sub(r"\s+", " ", name)
    return f"{name or 'storybook'}.pdf"


def _media_key(book_id: str, kind: str, page_number: Optional[int] = None, ext: str = "png") -> str:
    suffix = uuid.uuid4().hex[:8]
    if page_number is None:
        return f"books/{book_id}/{kind}-{suffix}.{ext}"
    return f"books/{book_id}/{kind}/{page_number:02d}-{suffix}.{ext}"


class BookService:
    """
    Create, illustrate, narrate and export storybooks.

    Args:
        repo: Book repository bound to a connection
        supabase: Backend client used for media uploads
        writer: Story text generator (StoryWriter); built on first use
        illustrator: Image generator (Illustrator); built on first use
        narrator: TTS generator (Narrator); built on first use
        batch_delay: Seconds to wait after each illustration in a batch
    """

    def __init__(
        self,
        repo: BookRepository,
        supabase: SupabaseClient,
        writer=None,
        illustrator=None,
        narrator=None,
        batch_delay: float = STORY_CONSTANTS["batch_delay_seconds"],
    ):
        self.repo = repo
        self.supabase = supabase
        self._writer = writer
        self._illustrator = illustrator
        self._narrator = narrator
        self.batch_delay = batch_delay

    # Model clients need GEMINI_API_KEY, so they are only built when used

    @property
    def writer(self):
        if self._writer is None:
            from storyai.config import get_inference_lm
            from storyai.core.modules import StoryWriter

            self._writer = StoryWriter(lm=get_inference_lm())
        return self._writer

    @property
    def illustrator(self):
        if self._illustrator is None:
            from storyai.core.modules import Illustrator

            self._illustrator = Illustrator()
        return self._illustrator

    @property
    def narrator(self):
        if self._narrator is None:
            from storyai.core.modules import Narrator

            self._narrator = Narrator()
        return self._narrator

    # === Books ===

    async def create_book(self, user_id: str, params: StoryParams) -> BookResponse:
        """
        Generate a story and persist it as a book.

        The cover is optional: if it fails the book is saved without one.

        Raises:
            StoryGenerationError: the text model returned nothing usable
            asyncpg.PostgresError: the book or its pages could not be stored
        """
        start_time = time.time()

        try:
            draft = await asyncio.to_thread(self.writer, params)
        except Exception as e:
            book_logger.generation_failed(None, e, stage="story")
            raise
        book_logger.stage_completed(None, "story", time.time() - start_time)

        book_id = await self.repo.create_book(
            user_id=user_id,
            title=draft.title,
            theme=params.theme,
            target_age=params.age,
            moral=params.moral,
            language=params.language,
            cover_prompt=draft.cover_prompt,
            character_description=draft.character_description,
        )
        book_logger.generation_started(book_id, user_id)

        if draft.cover_prompt:
            try:
                cover = await asyncio.to_thread(self.illustrator.illustrate, draft.cover_prompt)
                if cover:
                    cover_url = await self.supabase.upload(
                        config.MEDIA_BUCKET,
                        _media_key(book_id, "cover"),
                        cover,
                        "image/png",
                    )
                    await self.repo.set_cover_url(book_id, cover_url)
                    book_logger.stage_completed(book_id, "cover")
            except Exception as e:
                book_logger.step_failed(book_id, "cover", e)

        await self.repo.insert_pages(
            book_id,
            [
                {
                    "page_number": p.page_number,
                    "content": p.content,
                    "illustration_prompt": p.illustration_prompt,
                }
                for p in draft.pages
            ],
        )

        book_logger.generation_completed(book_id, time.time() - start_time)
        return await self.repo.get_book(book_id, user_id)

    async def list_books(self, user_id: str, limit: int = 20, offset: int = 0) -> BookListResponse:
        books, total = await self.repo.list_books(user_id, limit=limit, offset=offset)
        return BookListResponse(books=books, total=total, limit=limit, offset=offset)

    async def get_book(self, user_id: str, book_id: str) -> BookResponse:
        book = await self.repo.get_book(book_id, user_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return book

    async def delete_book(self, user_id: str, book_id: str) -> None:
        if not await self.repo.delete_book(book_id, user_id):
            raise BookNotFoundError(book_id)

    async def _get_page(self, user_id: str, book_id: str, page_id: str) -> PageResponse:
        book = await self.get_book(user_id, book_id)
        for page in book.pages or []:
            if page.id == page_id:
                return page
        raise PageNotFoundError(page_id)

    # === Illustrations ===

    async def _illustrate(self, book_id: str, page: PageResponse) -> PageResponse:
        prompt = page.illustration_prompt or page.content
        image = await asyncio.to_thread(self.illustrator.illustrate, prompt)
        if not image:
            raise MediaGenerationError(f"No image generated for page {page.page_number}")

        url = await self.supabase.upload(
            config.MEDIA_BUCKET,
            _media_key(book_id, "pages", page.page_number),
            image,
            "image/png",
        )
        return await self.repo.update_page(page.id, illustration_url=url)

    async def generate_page_illustration(self, user_id: str, book_id: str, page_id: str) -> PageResponse:
        """(Re)generate the illustration of one page."""
        page = await self._get_page(user_id, book_id, page_id)
        return await self._illustrate(book_id, page)

    async def generate_all_illustrations(self, user_id: str, book_id: str) -> BatchIllustrationResponse:
        """
        Illustrate every page that has no image yet, one page at a time.

        A failing page is logged and skipped; the others still get images.
        """
        book = await self.get_book(user_id, book_id)
        missing = [p for p in book.pages or [] if not p.illustration_url]
        if not missing:
            return BatchIllustrationResponse(requested=0, generated=0, book=book)

        generated = 0
        failed_pages = []
        for completed, page in enumerate(missing, start=1):
            try:
                await self._illustrate(book_id, page)
                generated += 1
                # Space out calls to stay under the image model's rate limit
                await asyncio.sleep(self.batch_delay)
            except Exception as e:
                book_logger.step_failed(book_id, "illustration", e, page_number=page.page_number)
                failed_pages.append(page.page_number)
            book_logger.batch_progress(book_id, completed, len(missing))

        return BatchIllustrationResponse(
            requested=len(missing),
            generated=generated,
            failed_pages=failed_pages,
            book=await self.get_book(user_id, book_id),
        )

    # === Narration ===

    async def narrate_page(
        self,
        user_id: str,
        book_id: str,
        page_id: str,
        voice: Optional[str] = None,
        regenerate: bool = False,
    ) -> NarrationResponse:
        """
        Narration URL for a page, generating it unless one is stored already.

        Raises:
            ValueError: page text is empty or too long for TTS
            MediaGenerationError: the model returned no audio
        """
        page = await self._get_page(user_id, book_id, page_id)
        if page.narration_url and not regenerate:
            return NarrationResponse(page_id=page.id, narration_url=page.narration_url, cached=True)

        audio = await asyncio.to_thread(self.narrator.narrate, page.content, voice)
        if not audio:
            raise MediaGenerationError(f"No audio generated for page {page.page_number}")

        url = await self.supabase.upload(
            config.MEDIA_BUCKET,
            _media_key(book_id, "narration", page.page_number, ext="wav"),
            audio,
            "audio/wav",
        )
        await self.repo.update_page(page.id, narration_url=url)
        book_logger.stage_completed(book_id, "narration")
        return NarrationResponse(page_id=page.id, narration_url=url)

    # === Export ===

    async def load_document(self, user_id: str, book_id: str) -> BookDocument:
        """Fetch every image of a book for rendering. Missing images become None."""
        book = await self.get_book(user_id, book_id)
        pages = book.pages or []

        async with httpx.AsyncClient(
            timeout=config.EXPORT_FETCH_TIMEOUT, follow_redirects=True
        ) as client:
            images = await asyncio.gather(
                fetch_image(book.cover_url, client),
                *(fetch_image(p.illustration_url, client) for p in pages),
            )

        return BookDocument(
            title=book.title,
            target_age=book.target_age,
            cover_image=images[0],
            pages=[
                DocumentPage(page_number=p.page_number, content=p.content, illustration=img)
                for p, img in zip(pages, images[1:])
            ],
        )

    async def export_pdf(self, user_id: str, book_id: str) -> tuple[bytes, str]:
        """Render the book as a PDF. Returns (pdf bytes, download filename)."""
        from storyai.core.pdf_renderer import render_book_pdf

        start_time = time.time()
        document = await self.load_document(user_id, book_id)
        pdf = await asyncio.to_thread(render_book_pdf, document)
        book_logger.stage_completed(book_id, "export", time.time() - start_time)
        return pdf, pdf_filename(document.title)
