"""Wrapper de httpx + lectura de disco.

Por qué un wrapper:
- Estandariza timeouts, headers y redirects para todas las descargas.
- Los recursos no distinguen remoto/local: piden bytes o texto y reciben
  `None` si algo falla.
- Facilita testeo: se puede inyectar un `httpx.AsyncClient` con
  `MockTransport`.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

from core.config import AppSettings
from core.resources.paths import is_remote

logger = logging.getLogger(__name__)

_FILE_SCHEME = "file://"


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que fetcher y proxy se comporten igual.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "*/*",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
    )


def local_path(location: str) -> Path:
    if location.lower().startswith(_FILE_SCHEME):
        location = location[len(_FILE_SCHEME):]
    return Path(location)


class HttpContentFetcher:
    """`ContentFetcher` for `http(s)://` URLs and local paths.

    Only HTTP 200 counts as success. When `client` is given it is reused
    and left open; otherwise one client is opened per request.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._client = client

    async def _get(self, client: httpx.AsyncClient, url: str) -> bytes | None:
        response = await client.get(url)
        if response.status_code != 200:
            logger.warning("GET %s -> HTTP %s", url, response.status_code)
            return None
        return response.content

    async def _fetch_remote(self, url: str) -> bytes | None:
        try:
            if self._client is not None:
                return await self._get(self._client, url)
            async with build_async_client(self._settings) as client:
                return await self._get(client, url)
        except httpx.HTTPError as exc:
            logger.warning("GET %s failed: %s", url, exc)
            return None

    async def _read_local(self, location: str) -> bytes | None:
        path = local_path(location)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            logger.warning("Cannot read %s: %s", path, exc)
            return None

    async def fetch_bytes(self, location: str) -> bytes | None:
        if is_remote(location):
            return await self._fetch_remote(location)
        return await self._read_local(location)

    async def fetch_text(self, location: str) -> str | None:
        data = await self.fetch_bytes(location)
        if data is None:
            return None
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.warning("%s is not UTF-8 text: %s", location, exc)
            return None
