"""Documentation fetcher.

Responsibility:
- GET every documentation URL of a format, concurrently, in one attempt.
- Return texts in input order; the first failure aborts the whole batch.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

import httpx

from adapters.http_client import build_async_client, html_to_text, is_html_response
from core.config import AppSettings
from core.errors import DocumentationFetchError
from core.interfaces.documents import DocumentSource

logger = logging.getLogger(__name__)


class HttpDocumentationSource(DocumentSource):
    """Fetches documents over plain HTTP GET."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    async def _fetch_one(self, client: httpx.AsyncClient, url: str) -> str:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise DocumentationFetchError(url, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise DocumentationFetchError(url, str(exc) or type(exc).__name__) from exc

        logger.debug("Fetched %s (%d bytes)", url, len(response.content))
        if is_html_response(response):
            return html_to_text(response.text)
        return response.text

    async def fetch(self, urls: Sequence[str]) -> list[str]:
        if not urls:
            return []
        async with build_async_client(self._settings, transport=self._transport) as client:
            return list(await asyncio.gather(*(self._fetch_one(client, url) for url in urls)))

