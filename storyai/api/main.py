"""FastAPI application for the children's storybook generator."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .auth.routes import router as auth_router
from .database.db import close_db
from .dependencies import CurrentUser, Repository, close_supabase
from .models.responses import DatabaseCheckResponse
from .routes import admin, books, profile

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    config.configure_logging(json_format=config.LOG_JSON, level=config.LOG_LEVEL)

    # Startup: Initialize database (only if DATABASE_URL is configured)
    if config.DATABASE_URL:
        from .database.db import init_db

        await init_db()
        logger.info("Database initialized")
    else:
        logger.warning("DATABASE_URL not set - database not initialized")

    if not config.SUPABASE_URL:
        logger.warning("SUPABASE_URL not set - login, uploads and user management are disabled")

    yield

    # Shutdown: release pooled connections
    await close_db()
    await close_supabase()


app = FastAPI(
    title="StoryAI Storybook Generator API",
    description="""
Generate illustrated, narrated children's storybooks from a few wizard answers.

## Features
- **Story Writing**: Title, character description and 5-15 pages for ages 3-12
- **Illustrations**: A cover plus one square illustration per page
- **Narration**: Read-aloud audio for each page
- **Export**: Download the finished book as a PDF

## Workflow
1. POST `/auth/login` to get a bearer token
2. POST `/books` with theme, character, age, moral, language and page count
3. POST `/books/{id}/illustrations` to illustrate every page
4. GET `/books/{id}/pdf` to download the book
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)  # No prefix - already has /auth
app.include_router(books.router, prefix="/books", tags=["Books"])
app.include_router(profile.router, tags=["Profile"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/health/database", response_model=DatabaseCheckResponse, tags=["Health"])
async def database_check(user: CurrentUser, repo: Repository):
    """Verify the database answers by counting books."""
    try:
        count = await repo.count_books()
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Database check failed: {e}",
        ) from e
    return DatabaseCheckResponse(status="ok", books=count)
