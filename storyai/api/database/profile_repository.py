"""Repositories for user profiles and the brand settings row."""

from datetime import datetime, timezone
from typing import Optional

import asyncpg

from .. import config
from ..models.responses import BrandResponse, ProfileResponse

# Columns a caller may update through update()
PROFILE_COLUMNS = ("full_name", "email", "role", "phone_number", "avatar_url", "credits")


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so ``text`` matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProfileRepository:
    """Repository for the profiles table."""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def ensure_profile(
        self,
        user_id: str,
        email: Optional[str],
        full_name: Optional[str] = None,
        role: str = "user",
    ) -> ProfileResponse:
        """Create the profile on first sign-in; return the stored row either way."""
        await self.conn.execute(
            """
            INSERT INTO profiles (id, full_name, email, role)
            VALUES ($1, $2, $3, $4)
            ON CONFLICT (id) DO NOTHING
            """,
            user_id,
            full_name,
            email,
            role,
        )
        return await self.get(user_id)

    async def get(self, user_id: str) -> Optional[ProfileResponse]:
        row = await self.conn.fetchrow("SELECT * FROM profiles WHERE id = $1", user_id)
        return self._record_to_response(row) if row else None

    async def list(self, search: Optional[str] = None) -> list[ProfileResponse]:
        """List profiles by name; ``search`` matches name or email, case-insensitively."""
        if search:
            rows = await self.conn.fetch(
                r"""
                SELECT * FROM profiles
                WHERE full_name ILIKE $1 ESCAPE '\' OR email ILIKE $1 ESCAPE '\'
                ORDER BY full_name
                """,
                f"%{escape_like(search)}%",
            )
        else:
            rows = await self.conn.fetch("SELECT * FROM profiles ORDER BY full_name")
        return [self._record_to_response(r) for r in rows]

    async def create(
        self,
        user_id: str,
        email: str,
        full_name: str,
        role: str,
    ) -> ProfileResponse:
        row = await self.conn.fetchrow(
            """
            INSERT INTO profiles (id, full_name, email, role)
            VALUES ($1, $2, $3, $4)
            ON CONFLICT (id) DO UPDATE
                SET full_name = EXCLUDED.full_name,
                    email = EXCLUDED.email,
                    role = EXCLUDED.role
            RETURNING *
            """,
            user_id,
            full_name,
            email,
            role,
        )
        return self._record_to_response(row)

    async def update(self, user_id: str, **fields) -> Optional[ProfileResponse]:
        """Update the given columns. Unknown or None-valued fields are ignored."""
        updates = {k: v for k, v in fields.items() if k in PROFILE_COLUMNS and v is not None}
        if not updates:
            return await self.get(user_id)

        assignments = ", ".join(f"{column} = ${i}" for i, column in enumerate(updates, start=2))
        row = await self.conn.fetchrow(
            f"UPDATE profiles SET {assignments} WHERE id = $1 RETURNING *",
            user_id,
            *updates.values(),
        )
        return self._record_to_response(row) if row else None

    async def delete(self, user_id: str) -> bool:
        result = await self.conn.execute("DELETE FROM profiles WHERE id = $1", user_id)
        return result.split()[-1] != "0"

    @staticmethod
    def _record_to_response(row: asyncpg.Record) -> ProfileResponse:
        return ProfileResponse(
            id=row["id"],
            full_name=row["full_name"],
            email=row["email"],
            role=row["role"] or "user",
            phone_number=row["phone_number"],
            avatar_url=row["avatar_url"],
            credits=row["credits"] if row["credits"] is not None else 10,
            created_at=row["created_at"],
        )


class BrandRepository:
    """Repository for the single brand settings row."""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def get(self) -> BrandResponse:
        """Stored brand settings, or the defaults when the row does not exist yet."""
        row = await self.conn.fetchrow(
            "SELECT * FROM brand_settings WHERE id = $1",
            config.BRAND_SETTINGS_ID,
        )
        if not row:
            return BrandResponse(name=config.DEFAULT_BRAND_NAME)
        return BrandResponse(
            name=row["name"],
            tagline=row["tagline"] or "",
            logo_url=row["logo_url"],
            updated_at=row["updated_at"],
        )

    async def upsert(
        self,
        name: str,
        tagline: str = "",
        logo_url: Optional[str] = None,
    ) -> BrandResponse:
        row = await self.conn.fetchrow(
            """
            INSERT INTO brand_settings (id, name, tagline, logo_url, updated_at)
            VALUES ($1, $2, $3, $4, $5)
            ON CONFLICT (id) DO UPDATE
                SET name = EXCLUDED.name,
                    tagline = EXCLUDED.tagline,
                    logo_url = EXCLUDED.logo_url,
                    updated_at = EXCLUDED.updated_at
            RETURNING *
            """,
            config.BRAND_SETTINGS_ID,
            name,
            tagline,
            logo_url,
            datetime.now(timezone.utc),
        )
        return BrandResponse(
            name=row["name"],
            tagline=row["tagline"] or "",
            logo_url=row["logo_url"],
            updated_at=row["updated_at"],
        )
