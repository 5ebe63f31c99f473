"""Pytest configuration ensuring `src/` is importable.

Also provides a small on-disk model tree and helpers shared by the tests.
"""
from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if SRC.exists() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from PIL import Image  # noqa: E402

from core.resources.resource import Resource  # noqa: E402

_ENV_VARS = (
    "MODELRES_HTTP_TIMEOUT_SECONDS",
    "MODELRES_USER_AGENT",
    "MODELRES_DEFAULT_LOCALE",
    "MODELRES_RESOURCE_FOLDER",
    "MODELRES_SIGNING_ENDPOINT",
    "MODELRES_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep real env vars and `.env` files out of the tests."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


class LoadTracker:
    """Records initialization order and concurrent activity of scripted resources."""

    def __init__(self) -> None:
        self.order: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def enter(self, key: str) -> None:
        self.order.append(key)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)

    def exit(self) -> None:
        self.in_flight -= 1


class ScriptedResource(Resource):
    """Resource that yields to the loop a few times, then reports `succeed`."""

    TYPE = "scripted"

    def __init__(self, key: str | None = None, tracker: LoadTracker | None = None, succeed: bool = True) -> None:
        super().__init__(key=key, uri=f"scripted/{key}")
        self.tracker = tracker or LoadTracker()
        self.succeed = succeed

    async def load(self, location: str) -> bool:
        return self.succeed

    async def initialize(self) -> None:
        manager = self.require_manager()
        self.tracker.enter(self.key or "")
        for _ in range(3):
            await asyncio.sleep(0)
        self.tracker.exit()
        manager.unregister(self, self.succeed)


@pytest.fixture
def tracker() -> LoadTracker:
    return LoadTracker()


def write_png(path: Path, size: tuple[int, int] = (4, 3)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=(255, 0, 0)).save(path, format="PNG")
    return path


CARD_DOCUMENT = {
    "type": "model",
    "size": "200x100",
    "fill": "image(0.5;background)",
    "resources": [
        {"type": "bitmap", "key": "background", "uri": "/shared/bg.png"},
        {"type": "text", "key": "title", "locale": "en-US", "uri": "title.en.txt"},
        {"type": "text", "key": "title", "locale": "fr-FR", "uri": "title.fr.txt"},
        {"type": "text", "key": "subtitle", "text": "inline"},
        {"type": "video", "key": "clip", "uri": "clip.mp4"},
    ],
    "elements": [
        {"type": "text", "id": "heading", "source": "title", "x": 10},
        {"type": "rectangle", "id": "frame", "fill": "#fff", "width": 3},
        {"type": "text", "source": "subtitle"},
        {"type": "hologram", "id": "skip"},
    ],
}


@pytest.fixture
def models_root(tmp_path: Path) -> Path:
    """`<tmp>/models/` holding a `card/` model and a `shared/` folder."""

    root = tmp_path / "models"
    card = root / "card"
    card.mkdir(parents=True)
    (card / "model.json").write_text(json.dumps(CARD_DOCUMENT), encoding="utf-8")
    (card / "title.en.txt").write_text("Hello", encoding="utf-8")
    (card / "title.fr.txt").write_text("Bonjour", encoding="utf-8")
    write_png(root / "shared" / "bg.png")
    return root


class RecordingProxy:
    """`UrlProxy` answering `answer` (or the location itself with `echo`)."""

    def __init__(self, answer: str | None = None, *, echo: bool = False) -> None:
        self.answer = answer
        self.echo = echo
        self.calls: list[str] = []

    async def get_url(self, location: str) -> str | None:
        self.calls.append(location)
        return location if self.echo else self.answer
