"""Registro de tipos de recurso.

Por qué un objeto explícito:
- El mapa tag -> fábrica se construye al arrancar (`build_default_registry`)
  en vez de depender de efectos secundarios al importar módulos.
- Un documento puede declarar tipos que esta build no conoce: `create`
  devuelve None y el llamador salta la entrada.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Callable

from core.resources.resource import Resource

ResourceCreator = Callable[[], Resource]


class ResourceRegistry:
    def __init__(self) -> None:
        self._creators: dict[str, ResourceCreator] = {}

    def register(self, tag: str, creator: ResourceCreator) -> None:
        normalized = tag.strip()
        if not normalized:
            raise ValueError("resource type tag must not be empty")
        self._creators[normalized] = creator

    def create(self, tag: str) -> Resource | None:
        creator = self._creators.get(tag)
        if creator is None:
            return None
        return creator()

    def tags(self) -> list[str]:
        return sorted(self._creators)

    def __contains__(self, tag: object) -> bool:
        return tag in self._creators


def build_default_registry() -> ResourceRegistry:
    from core.resources.bitmap import BitmapResource  # noqa: PLC0415
    from core.resources.model_resource import ModelResource  # noqa: PLC0415
    from core.resources.text import TextResource  # noqa: PLC0415

    registry = ResourceRegistry()
    registry.register(TextResource.TYPE, TextResource)
    registry.register(BitmapResource.TYPE, BitmapResource)
    registry.register(ModelResource.TYPE, ModelResource)
    return registry


@lru_cache(maxsize=1)
def default_registry() -> ResourceRegistry:
    return build_default_registry()
