"""Snapshots de progreso emitidos por el ResourceManager.

Por qué inmutables:
- Los observadores reciben una foto del momento; el manager sigue mutando sus
  contadores después de notificar.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ResourceLoaderState(IntEnum):
    """Loader phase carried by every `ResourceState`."""

    IDLE = 1
    LOADING = 2
    RESOURCE_START = 3
    RESOURCE_COMPLETE = 4
    RESOURCE_FAILED = 5


@dataclass(frozen=True)
class ResourceState:
    number_loaded: int
    total_resources: int
    code: ResourceLoaderState
    status: str

    def __str__(self) -> str:
        return f"[{self.number_loaded}/{self.total_resources}] {int(self.code)}-{self.status}"
