"""Recurso de texto: inline (`text`) o descargado desde `uri`."""

from __future__ import annotations

from typing import Any

from core.resources.resource import Resource


class TextResource(Resource):
    TYPE = "text"

    def __init__(
        self,
        key: str | None = None,
        uri: str | None = None,
        locale: str | None = None,
        text: str | None = None,
    ) -> None:
        super().__init__(key=key, uri=uri, locale=locale)
        self.text = text

    @classmethod
    def from_text(cls, key: str, text: str, locale: str | None = None) -> "TextResource":
        return cls(key=key, text=text, locale=locale)

    @classmethod
    def from_uri(cls, key: str, uri: str, locale: str | None = None) -> "TextResource":
        return cls(key=key, uri=uri, locale=locale)

    def clone(self) -> "TextResource":
        o = TextResource()
        self.clone_to(o)
        if self.text:
            o.text = self.text
        return o

    def parse(self, o: dict[str, Any]) -> None:
        super().parse(o)
        if o.get("text"):
            self.text = str(o["text"])

    def serialize(self) -> dict[str, Any]:
        o = super().serialize()
        if self.text:
            o["text"] = self.text
        return o

    def has_embedded_content(self) -> bool:
        return bool(self.text)

    async def load(self, location: str) -> bool:
        text = await self.require_manager().get_fetcher().fetch_text(location)
        if not text:
            return False
        self.text = text
        return True
