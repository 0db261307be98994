"""Unit tests for profile repository search."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from storyai.api.database.profile_repository import ProfileRepository, escape_like


@pytest.fixture
def mock_connection():
    """Create a mock asyncpg connection."""
    conn = MagicMock()
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchrow = AsyncMock(return_value=None)
    return conn


@pytest.fixture
def repository(mock_connection):
    return ProfileRepository(mock_connection)


class TestEscapeLike:
    def test_plain_text_unchanged(self):
        assert escape_like("siti") == "siti"

    def test_wildcards_are_escaped(self):
        assert escape_like("100%_off") == "100\\%\\_off"

    def test_backslash_is_escaped_first(self):
        assert escape_like("a\\b") == "a\\\\b"


class TestListProfiles:
    async def test_search_matches_wildcards_literally(self, repository, mock_connection):
        await repository.list(search="jo_hn%")

        mock_connection.fetch.assert_awaited_once()
        sql, pattern = mock_connection.fetch.call_args.args
        assert "ILIKE $1 ESCAPE '\\'" in sql
        assert pattern == "%jo\\_hn\\%%"

    async def test_no_search_lists_everyone(self, repository, mock_connection):
        await repository.list()

        sql = mock_connection.fetch.call_args.args[0]
        assert "ILIKE" not in sql
        assert "ORDER BY full_name" in sql
