"""
HTTP client for the TurboVax dashboard endpoint.

Клиент дашборда на httpx: один GET за цикл, без ретраев.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from .config import DEFAULT_DASHBOARD_URL
from .errors import FetchError
from .models import Snapshot, decode_snapshot

logger = logging.getLogger(__name__)


class DashboardClient:
    """
    Thin async wrapper around ``httpx.AsyncClient`` bound to one URL.
    """

    def __init__(
        self,
        url: str = DEFAULT_DASHBOARD_URL,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
        return self._client

    async def fetch(self) -> str:
        """GET the dashboard and return the body; any failure raises FetchError."""
        try:
            response = await self.client.get(self.url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"Dashboard returned HTTP {e.response.status_code} for {self.url}"
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch {self.url}: {e!r}") from e
        return response.text

    async def fetch_snapshot(self) -> Snapshot:
        text = await self.fetch()
        snapshot = decode_snapshot(text)
        logger.debug(
            "Decoded snapshot from %s: %s locations, %s portals",
            snapshot.last_updated_at,
            len(snapshot.locations),
            len(snapshot.portals),
        )
        return snapshot

    async def close(self) -> None:
        # Чужой клиент (например, в тестах) не закрываем
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    @asynccontextmanager
    async def session(self) -> AsyncIterator["DashboardClient"]:
        """
        Async context manager that guarantees the HTTP client is closed.

        Пример:
            async with DashboardClient().session() as dashboard:
                snapshot = await dashboard.fetch_snapshot()
        """
        try:
            yield self
        finally:
            await self.close()


__all__ = ["DashboardClient"]
