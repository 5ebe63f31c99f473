"""Exportación JSON del modelo.

Por qué JSON:
- Es el mismo formato que se lee: el archivo exportado vuelve a cargarse con
  `Model.load` / `Model.parse_json`.
"""

from __future__ import annotations

from pathlib import Path

from core.scene.model import Model


def export_model_json(*, model: Model, output_path: Path) -> Path:
    """Exporta `model` a JSON UTF-8 indentado."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(model.formatted_json() + "\n", encoding="utf-8")
    return output_path
