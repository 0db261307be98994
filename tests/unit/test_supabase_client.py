"""Unit tests for the hosted backend REST client."""

import json

import httpx
import pytest

from storyai.api.services.supabase import SupabaseClient, SupabaseError

URL = "https://project.supabase.test"


def _client(handler, service_role_key: str = "service-key") -> SupabaseClient:
    return SupabaseClient(
        URL,
        anon_key="anon-key",
        service_role_key=service_role_key,
        transport=httpx.MockTransport(handler),
    )


class TestAuth:
    async def test_password_sign_in(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["apikey"] = request.headers["apikey"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"access_token": "t", "user": {"id": "u1"}})

        client = _client(handler)
        session = await client.sign_in_with_password("siti@example.com", "secret")
        await client.aclose()

        assert session["user"]["id"] == "u1"
        assert seen["url"] == f"{URL}/auth/v1/token?grant_type=password"
        assert seen["apikey"] == "anon-key"
        assert seen["body"] == {"email": "siti@example.com", "password": "secret"}

    async def test_bad_credentials_carry_backend_message(self):
        def handler(request):
            return httpx.Response(400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"})

        with pytest.raises(SupabaseError) as exc:
            await _client(handler).sign_in_with_password("a@b.c", "wrong")

        assert exc.value.status_code == 400
        assert exc.value.message == "Invalid login credentials"

    async def test_create_user_uses_service_key(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "new-user", "email": "n@example.com"})

        user = await _client(handler).create_user("n@example.com", "secret1", {"full_name": "N", "role": "admin"})

        assert user["id"] == "new-user"
        assert seen["auth"] == "Bearer service-key"
        assert seen["body"]["email_confirm"] is True
        assert seen["body"]["user_metadata"] == {"full_name": "N", "role": "admin"}

    async def test_create_user_without_service_key(self):
        def handler(request):
            raise AssertionError("no request expected")

        with pytest.raises(SupabaseError) as exc:
            await _client(handler, service_role_key="").create_user("n@example.com", "secret1", {})

        assert exc.value.status_code == 503
        assert "SUPABASE_SERVICE_ROLE_KEY" in exc.value.message

    async def test_connection_error_becomes_502(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(SupabaseError) as exc:
            await _client(handler).sign_in_with_password("a@b.c", "x")

        assert exc.value.status_code == 502


class TestStorage:
    async def test_upload_returns_public_url(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["upsert"] = request.headers["x-upsert"]
            seen["type"] = request.headers["content-type"]
            seen["body"] = request.content
            return httpx.Response(200, json={"Key": "storybook-media/books/b1/cover.png"})

        url = await _client(handler).upload("storybook-media", "books/b1/cover.png", b"png", "image/png")

        assert url == f"{URL}/storage/v1/object/public/storybook-media/books/b1/cover.png"
        assert seen["path"] == "/storage/v1/object/storybook-media/books/b1/cover.png"
        assert seen["upsert"] == "true"
        assert seen["type"] == "image/png"
        assert seen["body"] == b"png"

    async def test_upload_failure(self):
        def handler(request):
            return httpx.Response(404, json={"message": "Bucket not found"})

        with pytest.raises(SupabaseError, match="Bucket not found"):
            await _client(handler).upload("missing", "a.jpg", b"x", "image/jpeg")

    def test_not_configured(self):
        client = SupabaseClient("", anon_key="", service_role_key="")

        assert not client.enabled
        assert not client.has_service_role
