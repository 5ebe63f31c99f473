"""Mini-gramática de relleno que referencia recursos.

    image(<key>) | image(<opacity>;<key>) | model(<key>) | model(<opacity>;<key>)

`<opacity>` es un float en [0, 1]. Cualquier otro relleno (colores,
gradientes) no referencia recursos.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_RESOURCE_FILL_KINDS = ("image", "model")


@dataclass(frozen=True)
class FillReference:
    kind: str
    key: str
    opacity: float | None = None


def parse_fill_reference(fill: Any) -> FillReference | None:
    if not isinstance(fill, str):
        return None
    prefix = fill[:6].lower()
    if prefix not in ("image(", "model("):
        return None

    body = fill[6:-1]
    opacity: float | None = None
    key = body
    if ";" in body:
        parts = body.split(";")
        key = parts[1]
        try:
            opacity = min(1.0, max(0.0, float(parts[0])))
        except ValueError:
            opacity = None
    return FillReference(kind=prefix[:-1], key=key, opacity=opacity)


def fill_resource_key(fill: Any) -> str | None:
    """Referenced resource key of a fill, or None."""

    ref = parse_fill_reference(fill)
    return ref.key if ref is not None else None


def format_fill_reference(kind: str, key: str, opacity: float | None = None) -> str:
    if kind not in _RESOURCE_FILL_KINDS:
        raise ValueError(f"unsupported fill kind: {kind!r}")
    if opacity is None:
        return f"{kind}({key})"
    return f"{kind}({opacity};{key})"
