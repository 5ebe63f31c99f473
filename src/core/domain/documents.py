"""Esquema del documento JSON de un modelo (Pydantic v2).

Por qué Pydantic aquí:
- Valida la forma del documento en el borde (JSON -> objetos) sin acoplar las
  clases de runtime (recursos, elementos) a Pydantic.
- `extra="allow"` conserva los campos que el Core no interpreta (geometría,
  estilos, tipos de recurso desconocidos) para que el round-trip sea fiel.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class ResourceEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str = Field(..., min_length=1, description="Resource type tag (text, bitmap, model...).")
    key: str | None = Field(default=None, description="Case-insensitive resource identity.")
    locale: str | None = Field(default=None, description="Optional locale id (e.g. en-US).")
    uri: str | None = Field(default=None, description="Retrieval path (see prefix rules).")


class ElementEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str = Field(..., min_length=1, description="Element type tag.")
    id: str | None = None
    fill: Any = None


class ModelDocument(BaseModel):
    """Top-level serialized model."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(default="model")
    size: Any = None
    fill: Any = None
    resources: list[ResourceEntry] = Field(default_factory=list)
    elements: list[ElementEntry] = Field(default_factory=list)

    def header(self) -> dict[str, Any]:
        """Model-level properties without the resource and element lists."""

        data = self.model_dump(exclude={"resources", "elements"}, exclude_none=True)
        return data


def entry_payload(entry: BaseModel) -> dict[str, Any]:
    """Plain dict for an entry, extras included, unset optionals dropped."""

    return entry.model_dump(exclude_none=True)
