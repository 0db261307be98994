"""Async client for the hosted backend's auth and object storage REST APIs.

Relational data goes through the Postgres connection (see ``database``);
this client covers the two services that only speak HTTP:

- GoTrue auth: password sign-in, admin user creation, metadata updates
- Storage: object upload and public URLs
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)


class SupabaseError(Exception):
    """A request to the hosted backend failed."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    """Pull the human-readable message out of an error response."""
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        for key in ("error_description", "msg", "message", "error"):
            if data.get(key):
                return str(data[key])
    return f"HTTP {response.status_code}"


class SupabaseClient:
    """
    Thin async wrapper over the Supabase auth and storage endpoints.

    Args:
        url: Project URL, e.g. https://xyz.supabase.co
        anon_key: Public anon key (password sign-in)
        service_role_key: Service key (admin user management, uploads)
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        url: str,
        anon_key: str = "",
        service_role_key: str = "",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.service_role_key = service_role_key
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def enabled(self) -> bool:
        return bool(self.url and (self.anon_key or self.service_role_key))

    @property
    def has_service_role(self) -> bool:
        return bool(self.url and self.service_role_key)

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def _headers(self, service: bool = False) -> dict[str, str]:
        key = self.service_role_key if service else (self.anon_key or self.service_role_key)
        return {"apikey": key, "Authorization": f"Bearer {key}"}

    def _require(self, service: bool = False) -> None:
        if service and not self.has_service_role:
            raise SupabaseError(
                503,
                "Server configuration error: SUPABASE_SERVICE_ROLE_KEY or SUPABASE_URL is missing.",
            )
        if not self.enabled:
            raise SupabaseError(503, "Server configuration error: SUPABASE_URL is missing.")

    async def _request(self, method: str, path: str, service: bool = False, **kwargs) -> httpx.Response:
        self._require(service=service)
        headers = {**self._headers(service=service), **kwargs.pop("headers", {})}
        try:
            response = await self._http().request(method, path, headers=headers, **kwargs)
        except httpx.RequestError as e:
            raise SupabaseError(502, f"Failed to connect to backend: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(f"Backend {method} {path} failed: {response.status_code} {message}")
            raise SupabaseError(response.status_code, message)
        return response

    # === Auth ===

    async def sign_in_with_password(self, email: str, password: str) -> dict:
        """Sign in with email and password. Returns the session payload."""
        response = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return response.json()

    async def create_user(self, email: str, password: str, user_metadata: dict) -> dict:
        """Create a confirmed auth user (no sign-up email). Requires the service key."""
        response = await self._request(
            "POST",
            "/auth/v1/admin/users",
            service=True,
            json={
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": user_metadata,
            },
        )
        data = response.json()
        # Older GoTrue versions wrap the user object
        return data.get("user", data) if isinstance(data, dict) else data

    async def update_user_metadata(self, user_id: str, user_metadata: dict) -> dict:
        """Merge metadata into an auth user. Requires the service key."""
        response = await self._request(
            "PUT",
            f"/auth/v1/admin/users/{quote(user_id)}",
            service=True,
            json={"user_metadata": user_metadata},
        )
        return response.json()

    # === Storage ===

    def public_url(self, bucket: str, path: str) -> str:
        """Public URL of an object in a public bucket."""
        return f"{self.url}/storage/v1/object/public/{bucket}/{quote(path)}"

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = True,
    ) -> str:
        """Upload an object and return its public URL."""
        await self._request(
            "POST",
            f"/storage/v1/object/{bucket}/{quote(path)}",
            service=self.has_service_role,
            content=data,
            headers={
                "Content-Type": content_type,
                "x-upsert": "true" if upsert else "false",
            },
        )
        return self.public_url(bucket, path)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
