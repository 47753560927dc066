"""Read access to the per-user card theme stored in the ``profiles`` table."""

from __future__ import annotations

from typing import Any, Optional, Protocol

import httpx
from pydantic import BaseModel

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class ProfileTheme(BaseModel):
    """Background images for the front and back card faces."""

    front_image_url: str = ""
    back_image_url: str = ""

    @classmethod
    def from_row(cls, row: Any) -> "ProfileTheme":
        if not isinstance(row, dict):
            return cls()
        return cls(
            front_image_url=str(row.get("front_bg_url") or ""),
            back_image_url=str(row.get("back_bg_url") or ""),
        )


class ProfileReader(Protocol):
    async def fetch_theme(self, user_id: str, access_token: str) -> ProfileTheme: ...


class ProfileStore:
    """PostgREST-backed ``ProfileReader``.

    A missing row, or a failed read, yields the empty theme.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        anon_key: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        base = (url or settings.identity.url).rstrip("/")
        self.rest_url = f"{base}/rest/v1"
        self.anon_key = settings.identity.anon_key if anon_key is None else anon_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=settings.identity.timeout_seconds
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_theme(self, user_id: str, access_token: str) -> ProfileTheme:
        try:
            response = await self._client.get(
                f"{self.rest_url}/profiles",
                params={"id": f"eq.{user_id}", "select": "front_bg_url,back_bg_url"},
                headers={
                    "apikey": self.anon_key,
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                },
            )
            response.raise_for_status()
            rows = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Could not load profile theme for user %s: %s", user_id, e)
            return ProfileTheme()

        if not isinstance(rows, list) or not rows:
            return ProfileTheme()
        return ProfileTheme.from_row(rows[0])
