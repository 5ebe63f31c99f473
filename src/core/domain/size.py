"""Dimensiones serializables (`"WxH"`)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    @classmethod
    def parse(cls, source: Any) -> "Size":
        """Accept `"100x50"`, a `Size`, or a mapping with width/height."""

        if isinstance(source, Size):
            return cls(source.width, source.height)
        if isinstance(source, str):
            parts = source.lower().split("x")
            if len(parts) != 2:
                raise ValueError(f"invalid size: {source!r}")
            return cls(float(parts[0]), float(parts[1]))
        if isinstance(source, dict):
            return cls(float(source["width"]), float(source["height"]))
        raise ValueError(f"invalid size: {source!r}")

    def __str__(self) -> str:
        return f"{_format_number(self.width)}x{_format_number(self.height)}"
