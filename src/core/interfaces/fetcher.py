"""Contrato de obtención de contenido.

Por qué Protocol:
- Los recursos no saben si una ruta es remota (HTTP) o local (disco); solo
  piden bytes o texto.
- En tests se sustituye por un fake sin red.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ContentFetcher(Protocol):
    """Minimal retrieval contract.

    Rules:
    - Both methods are async because retrieval is I/O.
    - Failure is reported as `None`, never raised.
    """

    async def fetch_bytes(self, location: str) -> bytes | None:
        ...

    async def fetch_text(self, location: str) -> str | None:
        ...
