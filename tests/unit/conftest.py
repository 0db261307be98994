"""Pytest fixtures for unit and API tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from storyai.api import config
from storyai.api.auth.tokens import create_access_token
from storyai.api.database.profile_repository import BrandRepository, ProfileRepository
from storyai.api.database.repository import BookRepository
from storyai.api.dependencies import (
    get_book_service,
    get_brand_repository,
    get_optional_profile_repository,
    get_profile_repository,
    get_repository,
    get_supabase,
)
from storyai.api.main import app
from storyai.api.models.responses import BookResponse, PageResponse, ProfileResponse
from storyai.api.services.book_service import BookService
from storyai.api.services.supabase import SupabaseClient


def make_book(book_id: str = "book-1", user_id: str = "user-1", pages: int = 3, illustrated: int = 0) -> BookResponse:
    """Build a BookResponse; the first ``illustrated`` pages have an image."""
    return BookResponse(
        id=book_id,
        user_id=user_id,
        title="Kiko Goes to the Moon",
        theme="space",
        target_age="3-5",
        moral="Be brave",
        language="English",
        cover_prompt="Kiko on the moon",
        character_description="A small orange cat with a blue scarf",
        cover_url=None,
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        pages=[
            PageResponse(
                id=f"page-{n}",
                book_id=book_id,
                page_number=n,
                content=f"Page {n} text.",
                illustration_prompt=f"Scene {n}",
                illustration_url=f"https://cdn.test/p{n}.png" if n <= illustrated else None,
            )
            for n in range(1, pages + 1)
        ],
    )


def make_profile(user_id: str = "user-1", role: str = "user", **fields) -> ProfileResponse:
    return ProfileResponse(
        id=user_id,
        full_name=fields.get("full_name", "Siti"),
        email=fields.get("email", "siti@example.com"),
        role=role,
        phone_number=fields.get("phone_number"),
        avatar_url=fields.get("avatar_url"),
        credits=10,
    )


@pytest.fixture(autouse=True)
def no_database(monkeypatch):
    """Keep the app lifespan from connecting to a real database."""
    monkeypatch.setattr(config, "DATABASE_URL", "")


@pytest.fixture
def user_headers():
    token = create_access_token("user-1", email="siti@example.com", role="user", name="Siti")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    token = create_access_token(
        config.ADMIN_USER_ID, email=config.ADMIN_EMAIL, role="admin", name="Administrator"
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def mock_repository():
    """Create a mock book repository for unit tests."""
    return AsyncMock(spec=BookRepository)


@pytest.fixture
def mock_service():
    """Create a mock book service for unit tests."""
    return AsyncMock(spec=BookService)


@pytest.fixture
def mock_profiles():
    return AsyncMock(spec=ProfileRepository)


@pytest.fixture
def mock_brand():
    return AsyncMock(spec=BrandRepository)


@pytest.fixture
def mock_supabase():
    supabase = AsyncMock(spec=SupabaseClient)
    supabase.has_service_role = True
    supabase.enabled = True
    return supabase


@pytest.fixture
def client_with_mocks(mock_repository, mock_service, mock_profiles, mock_brand, mock_supabase):
    """TestClient with every database and backend dependency mocked."""
    app.dependency_overrides[get_repository] = lambda: mock_repository
    app.dependency_overrides[get_book_service] = lambda: mock_service
    app.dependency_overrides[get_profile_repository] = lambda: mock_profiles
    app.dependency_overrides[get_optional_profile_repository] = lambda: mock_profiles
    app.dependency_overrides[get_brand_repository] = lambda: mock_brand
    app.dependency_overrides[get_supabase] = lambda: mock_supabase

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def mock_genai_client():
    """A genai client whose generate_content returns one inline image part."""
    client = MagicMock()
    fake_part = MagicMock()
    fake_part.inline_data.data = b"fake-png-bytes"
    fake_response = MagicMock()
    fake_response.candidates = [MagicMock()]
    fake_response.candidates[0].content.parts = [fake_part]
    client.models.generate_content.return_value = fake_response
    return client


@pytest.fixture
def book_factory():
    return make_book


@pytest.fixture
def profile_factory():
    return make_profile
