"""API tests for login and the current user."""

from unittest.mock import AsyncMock

from storyai.api.auth.tokens import verify_token
from storyai.api.services.supabase import SupabaseError


class TestLogin:
    def test_builtin_admin(self, client_with_mocks, mock_supabase):
        response = client_with_mocks.post("/auth/login", json={"username": "admin", "password": "admin123"})

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == "admin-id"
        assert data["user"]["role"] == "admin"
        assert data["user"]["credits"] == 9999
        assert data["user"]["email"] == "admin@storybook.ai"
        payload = verify_token(data["access_token"])
        assert payload["sub"] == "admin-id"
        assert payload["role"] == "admin"
        mock_supabase.sign_in_with_password.assert_not_called()

    def test_backend_user(self, client_with_mocks, mock_supabase, mock_profiles, profile_factory):
        mock_supabase.sign_in_with_password = AsyncMock(
            return_value={
                "access_token": "backend-token",
                "user": {"id": "user-1", "email": "siti@example.com", "user_metadata": {"full_name": "Siti"}},
            }
        )
        mock_profiles.ensure_profile = AsyncMock(return_value=profile_factory())

        response = client_with_mocks.post("/auth/login", json={"username": "siti@example.com", "password": "pw"})

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "user"
        mock_profiles.ensure_profile.assert_awaited_once_with(
            "user-1", email="siti@example.com", full_name="Siti"
        )
        assert verify_token(response.json()["access_token"])["email"] == "siti@example.com"

    def test_wrong_password(self, client_with_mocks, mock_supabase):
        mock_supabase.sign_in_with_password = AsyncMock(side_effect=SupabaseError(400, "Invalid login credentials"))

        response = client_with_mocks.post("/auth/login", json={"username": "siti@example.com", "password": "bad"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password"

    def test_wrong_admin_password_falls_through_to_backend(self, client_with_mocks, mock_supabase):
        mock_supabase.sign_in_with_password = AsyncMock(side_effect=SupabaseError(400, "Invalid login credentials"))

        response = client_with_mocks.post("/auth/login", json={"username": "admin", "password": "nope"})

        assert response.status_code == 401
        mock_supabase.sign_in_with_password.assert_awaited_once()


class TestMe:
    def test_me(self, client_with_mocks, user_headers):
        response = client_with_mocks.get("/auth/me", headers=user_headers)

        assert response.status_code == 200
        assert response.json() == {"id": "user-1", "email": "siti@example.com", "role": "user", "name": "Siti"}


class TestHealth:
    def test_health_is_public(self, client_with_mocks):
        response = client_with_mocks.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_database_check(self, client_with_mocks, mock_repository, user_headers):
        mock_repository.count_books = AsyncMock(return_value=12)

        response = client_with_mocks.get("/health/database", headers=user_headers)

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "books": 12}

    def test_database_check_failure(self, client_with_mocks, mock_repository, user_headers):
        mock_repository.count_books = AsyncMock(side_effect=OSError("connection refused"))

        response = client_with_mocks.get("/health/database", headers=user_headers)

        assert response.status_code == 503
        assert "connection refused" in response.json()["detail"]
