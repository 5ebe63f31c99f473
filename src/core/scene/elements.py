"""Elementos de un modelo.

Solo se interpreta lo que afecta al pipeline de recursos: `fill` y las
referencias `source` (o los `frames` de un sprite). Geometría, estilos y
eventos se guardan tal cual en `properties` para que el round-trip
`parse(serialize(x))` sea fiel.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from core.domain.size import Size
from core.scene.fill import fill_resource_key

if TYPE_CHECKING:
    from core.resources.manager import ResourceManager
    from core.scene.model import Model


class ElementBase:
    """Generic element; shapes without resource references use it as is."""

    TYPE: str = ""
    #: Keys this class reads into attributes instead of `properties`.
    FIELDS: tuple[str, ...] = ("type", "id", "size", "fill")

    def __init__(self, type_tag: str | None = None) -> None:
        self.type = type_tag or self.TYPE
        self.id: str | None = None
        self.size: Size | None = None
        self.fill: Any = None
        self.properties: dict[str, Any] = {}
        self.model: Model | None = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type={self.type!r}, id={self.id!r})"

    def parse(self, o: dict[str, Any]) -> None:
        if o.get("type"):
            self.type = str(o["type"])
        if o.get("id"):
            self.id = str(o["id"])
        if o.get("size"):
            self.size = Size.parse(o["size"])
        if o.get("fill") is not None:
            self.fill = copy.deepcopy(o["fill"])
        for name, value in o.items():
            if name not in self.FIELDS and value is not None:
                self.properties[name] = copy.deepcopy(value)

    def serialize(self) -> dict[str, Any]:
        o: dict[str, Any] = {"type": self.type}
        if self.id:
            o["id"] = self.id
        if self.size:
            o["size"] = str(self.size)
        if self.fill is not None:
            o["fill"] = copy.deepcopy(self.fill)
        o.update(copy.deepcopy(self.properties))
        return o

    def clone_to(self, e: ElementBase) -> None:
        e.type = self.type
        e.id = self.id
        e.size = self.size
        e.fill = copy.deepcopy(self.fill)
        e.properties = copy.deepcopy(self.properties)

    def clone(self) -> ElementBase:
        e = self.__class__(self.type)
        self.clone_to(e)
        return e

    def get_resource_keys(self) -> list[str]:
        """Keys referenced by this element, in registration order."""

        keys: list[str] = []
        key = fill_resource_key(self.fill)
        if key:
            keys.append(key)
        return keys

    def register_resources(self, rm: ResourceManager) -> None:
        for key in self.get_resource_keys():
            rm.register(key)


class _SourcedElement(ElementBase):
    """Element that renders a single resource referenced by `source`."""

    FIELDS = ElementBase.FIELDS + ("source",)

    def __init__(self, type_tag: str | None = None, source: str | None = None) -> None:
        super().__init__(type_tag)
        self.source = source

    def parse(self, o: dict[str, Any]) -> None:
        super().parse(o)
        if o.get("source"):
            self.source = str(o["source"])

    def serialize(self) -> dict[str, Any]:
        o = super().serialize()
        if self.source:
            o["source"] = self.source
        return o

    def clone_to(self, e: ElementBase) -> None:
        super().clone_to(e)
        if isinstance(e, _SourcedElement):
            e.source = self.source

    def get_resource_keys(self) -> list[str]:
        keys = super().get_resource_keys()
        if self.source:
            keys.append(self.source)
        return keys


class ImageElement(_SourcedElement):
    TYPE = "image"


class ModelElement(_SourcedElement):
    TYPE = "model"


class TextElement(_SourcedElement):
    """Text drawn from inline `text` or from a text resource (`source`)."""

    TYPE = "text"


class SpriteElement(ElementBase):
    """Frames, each referencing a bitmap resource by `source`."""

    TYPE = "sprite"
    FIELDS = ElementBase.FIELDS + ("frames",)

    def __init__(self, type_tag: str | None = None) -> None:
        super().__init__(type_tag)
        self.frames: list[dict[str, Any]] = []

    def parse(self, o: dict[str, Any]) -> None:
        super().parse(o)
        frames = o.get("frames")
        if isinstance(frames, list):
            self.frames = [copy.deepcopy(f) for f in frames if isinstance(f, dict)]

    def serialize(self) -> dict[str, Any]:
        o = super().serialize()
        if self.frames:
            o["frames"] = copy.deepcopy(self.frames)
        return o

    def clone_to(self, e: ElementBase) -> None:
        super().clone_to(e)
        if isinstance(e, SpriteElement):
            e.frames = copy.deepcopy(self.frames)

    def get_resource_keys(self) -> list[str]:
        keys = super().get_resource_keys()
        for frame in self.frames:
            source = frame.get("source")
            if source:
                keys.append(str(source))
        return keys
