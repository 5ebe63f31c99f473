"""Registro de tipos de elemento (misma forma que el de recursos)."""

from __future__ import annotations

from functools import lru_cache
from typing import Callable

from core.scene.elements import (
    ElementBase,
    ImageElement,
    ModelElement,
    SpriteElement,
    TextElement,
)

ElementCreator = Callable[[], ElementBase]

_SHAPE_TAGS = ("rectangle", "ellipse", "line", "polyline", "polygon", "path", "arc")


class ElementRegistry:
    def __init__(self) -> None:
        self._creators: dict[str, ElementCreator] = {}

    def register(self, tag: str, creator: ElementCreator) -> None:
        normalized = tag.strip()
        if not normalized:
            raise ValueError("element type tag must not be empty")
        self._creators[normalized] = creator

    def create(self, tag: str) -> ElementBase | None:
        creator = self._creators.get(tag)
        if creator is None:
            return None
        return creator()

    def tags(self) -> list[str]:
        return sorted(self._creators)


def _shape_creator(tag: str) -> ElementCreator:
    return lambda: ElementBase(tag)


def build_default_element_registry() -> ElementRegistry:
    registry = ElementRegistry()
    for cls in (ImageElement, ModelElement, SpriteElement, TextElement):
        registry.register(cls.TYPE, cls)
    for tag in _SHAPE_TAGS:
        registry.register(tag, _shape_creator(tag))
    return registry


@lru_cache(maxsize=1)
def default_element_registry() -> ElementRegistry:
    return build_default_element_registry()
