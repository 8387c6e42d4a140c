"""
Async client for the AssetFlow REST API.
Every collection endpoint returns the full list; there is no server-side paging.
"""
import logging
from typing import Any

import httpx

from assetflow.config import settings

logger = logging.getLogger("assetflow.upstream")


class UpstreamError(Exception):
    """Raised when a collection cannot be fetched from the AssetFlow API."""


class AssetFlowClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout if timeout is not None else settings.request_timeout_seconds,
            transport=transport,
        )

    async def fetch_collection(self, path: str, token: str | None = None) -> list[dict[str, Any]]:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            resp = await self._http.get(path, headers=headers)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"GET {path} failed: {exc}") from exc
        if resp.status_code != 200:
            raise UpstreamError(f"GET {path} returned {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamError(f"GET {path} returned invalid JSON") from exc
        if not isinstance(data, list):
            raise UpstreamError(f"GET {path} did not return a list")
        logger.debug("Fetched %d items from %s", len(data), path)
        return data

    async def aclose(self):
        await self._http.aclose()
