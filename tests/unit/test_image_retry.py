"""Unit tests for image generation retry logic."""

import logging

import pytest
from google.genai.errors import ClientError, ServerError


def _make_client_error(code: int, message: str = "Error", status: str = None) -> ClientError:
    """Create a ClientError for testing."""
    error = {"code": code, "message": message}
    if status:
        error["status"] = status
    return ClientError(code=code, response_json={"error": error})


def _make_server_error(code: int = 503, message: str = "Model overloaded") -> ServerError:
    return ServerError(
        code=code,
        response_json={"error": {"code": code, "message": message, "status": "UNAVAILABLE"}},
    )


@pytest.fixture
def sleeps(monkeypatch):
    """Record retry waits instead of sleeping."""
    recorded = []
    monkeypatch.setattr("time.sleep", lambda seconds: recorded.append(seconds))
    return recorded


class TestImageRetryDecorator:
    """Tests for the @image_retry decorator behavior."""

    def test_retries_on_rate_limit(self, sleeps):
        """Should retry when ClientError with 429 status (rate limit) is raised."""
        from storyai.config.image import image_retry

        call_count = 0

        @image_retry
        def rate_limited_function():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise _make_client_error(429, "Rate limit exceeded")
            return "success"

        assert rate_limited_function() == "success"
        assert call_count == 3
        assert len(sleeps) == 2

    def test_does_not_retry_on_bad_request(self, sleeps):
        """Should NOT retry when ClientError with 400 status is raised."""
        from storyai.config.image import image_retry

        call_count = 0

        @image_retry
        def bad_request_function():
            nonlocal call_count
            call_count += 1
            raise _make_client_error(400, "Bad request")

        with pytest.raises(ClientError):
            bad_request_function()
        assert call_count == 1
        assert sleeps == []

    def test_does_not_retry_on_server_error(self, sleeps):
        """Only rate limits are retried; a 503 propagates at once."""
        from storyai.config.image import image_retry

        call_count = 0

        @image_retry
        def overloaded_function():
            nonlocal call_count
            call_count += 1
            raise _make_server_error()

        with pytest.raises(ServerError):
            overloaded_function()
        assert call_count == 1

    def test_gives_up_after_three_retries(self, sleeps):
        """Four attempts in total, then the rate-limit error propagates."""
        from storyai.config.image import image_retry

        call_count = 0

        @image_retry
        def always_limited():
            nonlocal call_count
            call_count += 1
            raise _make_client_error(429, "Quota exhausted")

        with pytest.raises(ClientError):
            always_limited()
        assert call_count == 4
        assert len(sleeps) == 3

    def test_backoff_doubles_with_jitter(self, sleeps):
        """Waits are 2s, 4s, 8s plus up to 1s of jitter."""
        from storyai.config.image import image_retry

        @image_retry
        def always_limited():
            raise _make_client_error(429)

        with pytest.raises(ClientError):
            always_limited()

        for wait, base in zip(sleeps, (2, 4, 8)):
            assert base <= wait <= base + 1

    def test_logs_each_retry(self, sleeps, caplog):
        from storyai.config.image import image_retry

        call_count = 0

        @image_retry
        def limited_once():
            nonlocal call_count
            call_count += 1
            if call_count == 1:
                raise _make_client_error(429)
            return "ok"

        with caplog.at_level(logging.WARNING, logger="storyai.config.image"):
            limited_once()

        retries = [r for r in caplog.records if "Rate limit hit" in r.getMessage()]
        assert len(retries) == 1
        assert "(Attempt 1/3)" in retries[0].getMessage()
        assert retries[0].attempt == 1


class TestIsRateLimitError:
    """Tests for rate-limit detection."""

    def test_http_429(self):
        from storyai.config.image import is_rate_limit_error

        assert is_rate_limit_error(_make_client_error(429))

    def test_resource_exhausted_status(self):
        from storyai.config.image import is_rate_limit_error

        error = Exception("quota")
        error.status = "RESOURCE_EXHAUSTED"
        assert is_rate_limit_error(error)

    def test_message_mentions_429(self):
        from storyai.config.image import is_rate_limit_error

        assert is_rate_limit_error(RuntimeError("got HTTP 429 from upstream"))

    def test_other_errors(self):
        from storyai.config.image import is_rate_limit_error

        assert not is_rate_limit_error(_make_client_error(400, "Bad request"))
        assert not is_rate_limit_error(ConnectionError("Network unreachable"))
