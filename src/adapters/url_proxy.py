"""Proxy de firmas: pide a un servicio HTTP la URL descargable de una ruta.

Contrato del servicio:
- `GET <endpoint>?path=<location>` -> `200 {"url": "..."}`.
- Cualquier otra respuesta se trata como fallo (el recurso queda en error).
"""

from __future__ import annotations

import logging

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings

logger = logging.getLogger(__name__)


class SigningServiceProxy:
    """`UrlProxy` backed by a signing endpoint."""

    def __init__(
        self,
        endpoint: str,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.endpoint = endpoint
        self._settings = settings
        self._client = client

    async def _ask(self, client: httpx.AsyncClient, location: str) -> str | None:
        response = await client.get(self.endpoint, params={"path": location})
        if response.status_code != 200:
            logger.warning("Signing %s -> HTTP %s", location, response.status_code)
            return None
        try:
            payload = response.json()
        except ValueError:
            logger.warning("Signing %s returned a non-JSON body", location)
            return None
        url = payload.get("url") if isinstance(payload, dict) else None
        if not isinstance(url, str) or not url:
            logger.warning("Signing %s returned no url", location)
            return None
        return url

    async def get_url(self, location: str) -> str | None:
        try:
            if self._client is not None:
                return await self._ask(self._client, location)
            async with build_async_client(self._settings, extra_headers={"Accept": "application/json"}) as client:
                return await self._ask(client, location)
        except httpx.HTTPError as exc:
            logger.warning("Signing %s failed: %s", location, exc)
            return None
