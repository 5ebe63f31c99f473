"""Recurso de imagen (bitmap).

La imagen se decodifica con Pillow al descargarla: bytes que no son una
imagen válida cuentan como fallo de carga.
"""

from __future__ import annotations

import io
import logging
from typing import Any

from PIL import Image, UnidentifiedImageError

from core.domain.size import Size
from core.errors import ResourceInvalidError, ResourceKeyUndefinedError
from core.resources.resource import Resource

logger = logging.getLogger(__name__)


class BitmapResource(Resource):
    TYPE = "bitmap"

    def __init__(
        self,
        key: str | None = None,
        uri: str | None = None,
        locale: str | None = None,
        image: Image.Image | None = None,
    ) -> None:
        super().__init__(key=key, uri=uri, locale=locale)
        self.image = image
        self.size: Size | None = None

    @classmethod
    def create(
        cls,
        key: str,
        uri_or_image: str | Image.Image,
        locale: str | None = None,
    ) -> "BitmapResource":
        if isinstance(uri_or_image, str):
            return cls(key=key, uri=uri_or_image, locale=locale)
        return cls(key=key, image=uri_or_image, locale=locale)

    def clone(self) -> "BitmapResource":
        if not self.key:
            raise ResourceKeyUndefinedError("cannot clone a bitmap resource without key")
        if self.image is not None:
            o = BitmapResource.create(self.key, self.image, self.locale)
        elif self.uri:
            o = BitmapResource.create(self.key, self.uri, self.locale)
        else:
            raise ResourceInvalidError(f"bitmap resource {self.key!r} has no image or uri")
        self.clone_to(o)
        o.size = self.size
        return o

    def parse(self, o: dict[str, Any]) -> None:
        super().parse(o)
        if o.get("size"):
            self.size = Size.parse(o["size"])

    def serialize(self) -> dict[str, Any]:
        o = super().serialize()
        if self.size:
            o["size"] = str(self.size)
        return o

    def has_embedded_content(self) -> bool:
        return self.image is not None

    async def load(self, location: str) -> bool:
        data = await self.require_manager().get_fetcher().fetch_bytes(location)
        if data is None:
            return False
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            logger.warning("Cannot decode image %s: %s", location, exc)
            return False
        self.image = image
        if self.size is None:
            self.size = Size(*image.size)
        return True
