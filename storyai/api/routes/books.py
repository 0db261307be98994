"""Book endpoints: create, browse, illustrate, narrate, export."""

import logging

import asyncpg
from fastapi import APIRouter, HTTPException, Query, Response, status

from storyai.config import MissingAPIKeyError
from storyai.core import StoryParams
from storyai.core.modules.story_writer import StoryGenerationError

from ..dependencies import CurrentUser, Service
from ..models.requests import CreateBookRequest, NarrationRequest
from ..models.responses import (
    BatchIllustrationResponse,
    BookListResponse,
    BookResponse,
    NarrationResponse,
    PageResponse,
)
from ..services.book_service import BookNotFoundError, MediaGenerationError, PageNotFoundError
from ..services.supabase import SupabaseError

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_http_error(e: Exception) -> HTTPException:
    """Map a service error to the HTTP error the client sees."""
    if isinstance(e, BookNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Book {e} not found")
    if isinstance(e, PageNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Page {e} not found")
    if isinstance(e, MissingAPIKeyError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    if isinstance(e, SupabaseError):
        # 503 is missing server config; any other storage status is an upstream failure
        code = e.status_code if e.status_code == status.HTTP_503_SERVICE_UNAVAILABLE else status.HTTP_502_BAD_GATEWAY
        return HTTPException(status_code=code, detail=e.message)
    if isinstance(e, asyncpg.PostgresError):
        logger.error(f"Database error: {e}")
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Database error: {e}")
    if isinstance(e, (StoryGenerationError, MediaGenerationError)):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    if isinstance(e, ValueError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    logger.error(f"Unexpected generation error: {e}", exc_info=e)
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Generation failed: {type(e).__name__}",
    )


@router.post(
    "/",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    description="Generate the story text and cover for the wizard parameters and save the book.",
)
async def create_book(request: CreateBookRequest, service: Service, user: CurrentUser):
    """Generate and store a new book."""
    params = StoryParams(
        theme=request.theme,
        character_name=request.character_name,
        age=request.age.value,
        moral=request.moral,
        language=request.language.value,
        pages=request.pages,
    )
    try:
        return await service.create_book(user.id, params)
    except Exception as e:
        raise _to_http_error(e) from e


@router.get(
    "/",
    response_model=BookListResponse,
    summary="List my books",
    description="Get a paginated list of the caller's books, newest first.",
)
async def list_books(
    service: Service,
    user: CurrentUser,
    limit: int = Query(default=20, ge=1, le=100, description="Maximum number of books to return"),
    offset: int = Query(default=0, ge=0, description="Number of books to skip"),
):
    return await service.list_books(user.id, limit=limit, offset=offset)


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book",
)
async def get_book(book_id: str, service: Service, user: CurrentUser):
    """Get a book with its pages."""
    try:
        return await service.get_book(user.id, book_id)
    except BookNotFoundError as e:
        raise _to_http_error(e) from e


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a book",
    description="Delete a book and all of its pages.",
)
async def delete_book(book_id: str, service: Service, user: CurrentUser):
    try:
        await service.delete_book(user.id, book_id)
    except BookNotFoundError as e:
        raise _to_http_error(e) from e


@router.post(
    "/{book_id}/illustrations",
    response_model=BatchIllustrationResponse,
    summary="Illustrate missing pages",
    description="Generate illustrations for every page that does not have one yet.",
)
async def generate_all_illustrations(book_id: str, service: Service, user: CurrentUser):
    try:
        return await service.generate_all_illustrations(user.id, book_id)
    except Exception as e:
        raise _to_http_error(e) from e


@router.post(
    "/{book_id}/pages/{page_id}/illustration",
    response_model=PageResponse,
    summary="Illustrate one page",
    description="Generate (or regenerate) the illustration of a single page.",
)
async def generate_page_illustration(book_id: str, page_id: str, service: Service, user: CurrentUser):
    try:
        return await service.generate_page_illustration(user.id, book_id, page_id)
    except Exception as e:
        raise _to_http_error(e) from e


@router.post(
    "/{book_id}/pages/{page_id}/narration",
    response_model=NarrationResponse,
    summary="Narrate one page",
    description="Return the page narration, generating it with TTS if it does not exist yet.",
)
async def narrate_page(
    book_id: str,
    page_id: str,
    service: Service,
    user: CurrentUser,
    request: NarrationRequest = NarrationRequest(),
):
    try:
        return await service.narrate_page(
            user.id,
            book_id,
            page_id,
            voice=request.voice,
            regenerate=request.regenerate,
        )
    except Exception as e:
        raise _to_http_error(e) from e


@router.get(
    "/{book_id}/pdf",
    summary="Export as PDF",
    description="Render the cover and every page into a downloadable A4 PDF.",
    responses={200: {"content": {"application/pdf": {}}}},
)
async def export_pdf(book_id: str, service: Service, user: CurrentUser):
    try:
        pdf, filename = await service.export_pdf(user.id, book_id)
    except BookNotFoundError as e:
        raise _to_http_error(e) from e

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
