"""Contrato del proxy de firmas de URL.

Un proxy convierte una ruta lógica de recurso en una URL descargable
(posiblemente firmada/autenticada). Es opcional por manager.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class UrlProxy(Protocol):
    async def get_url(self, location: str) -> str | None:
        """Return the fetchable URL for `location`, or None when signing failed."""

        ...
