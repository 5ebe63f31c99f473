"""Resolución de rutas de recursos.

Convención de prefijos compartida por todas las variantes:

| Prefijo              | Significado                                              |
|----------------------|----------------------------------------------------------|
| `:`                  | ruta absoluta del servidor, sin proxy, se quita el `:`   |
| `/`                  | relativa al `base_path` del modelo dueño (compartida)     |
| `http://`/`https://` | URL remota absoluta                                      |
| otro                 | relativa a la carpeta privada de recursos del modelo     |
"""

from __future__ import annotations

from dataclasses import dataclass


def is_remote(location: str) -> bool:
    lowered = location.lower()
    return lowered.startswith("http://") or lowered.startswith("https://")


def join_paths(base: str | None, path: str) -> str:
    base = base or ""
    if path.startswith("/"):
        path = path[1:]
    if base.endswith("/"):
        return base + path
    return base + "/" + path


@dataclass(frozen=True)
class ResolvedLocation:
    location: str
    use_proxy: bool


def resolve_location(
    uri: str,
    *,
    base_path: str | None,
    local_resource_path: str | None,
) -> ResolvedLocation | None:
    """Apply the prefix convention; None when the needed root is not set."""

    if uri.startswith(":"):
        return ResolvedLocation(uri[1:], use_proxy=False)
    if uri.startswith("/"):
        if not base_path:
            return None
        return ResolvedLocation(join_paths(base_path, uri), use_proxy=True)
    if is_remote(uri):
        return ResolvedLocation(uri, use_proxy=True)
    if not local_resource_path:
        return None
    return ResolvedLocation(join_paths(local_resource_path, uri), use_proxy=True)
