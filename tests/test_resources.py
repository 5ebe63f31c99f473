from __future__ import annotations

import asyncio

import pytest
from PIL import Image

from adapters.http_client import HttpContentFetcher
from conftest import RecordingProxy, write_png
from core.domain.size import Size
from core.errors import ResourceInvalidError, ResourceKeyUndefinedError, ResourceManagerUndefinedError
from core.resources.bitmap import BitmapResource
from core.resources.paths import join_paths, resolve_location
from core.resources.text import TextResource
from core.scene.elements import ImageElement, TextElement
from core.scene.model import Model


def _local_model(tmp_path, **manager_kwargs) -> Model:
    model = Model(fetcher=HttpContentFetcher(), **manager_kwargs)
    model.size = Size(100, 100)
    model.set_base_path(tmp_path.as_posix() + "/")
    model.set_model_path(tmp_path.as_posix() + "/card")
    return model


def test_resolve_location_prefixes():
    kwargs = {"base_path": "https://cdn.test/models/", "local_resource_path": "https://cdn.test/models/card/"}

    assert resolve_location(":/srv/a.png", **kwargs).location == "/srv/a.png"
    assert resolve_location(":/srv/a.png", **kwargs).use_proxy is False
    assert resolve_location("/shared/a.png", **kwargs).location == "https://cdn.test/models/shared/a.png"
    assert resolve_location("https://x.test/a.png", **kwargs).location == "https://x.test/a.png"
    assert resolve_location("a.png", **kwargs).location == "https://cdn.test/models/card/a.png"
    assert resolve_location("a.png", base_path="/", local_resource_path=None) is None
    assert resolve_location("/a.png", base_path=None, local_resource_path="r/") is None


def test_join_paths():
    assert join_paths("a/", "/b") == "a/b"
    assert join_paths("a", "b") == "a/b"


def test_text_and_bitmap_load_from_disk(tmp_path):
    (tmp_path / "card").mkdir()
    (tmp_path / "card" / "title.txt").write_text("Hello", encoding="utf-8")
    write_png(tmp_path / "shared" / "logo.png", size=(8, 5))

    model = _local_model(tmp_path)
    title = TextResource.from_uri("title", "title.txt")
    logo = BitmapResource.create("logo", "/shared/logo.png")
    title.add_to(model)
    logo.add_to(model)
    model.add(TextElement(source="title"))
    model.add(ImageElement(source="logo"))

    assert asyncio.run(model.prepare_resources()) is True
    assert title.text == "Hello"
    assert logo.image.size == (8, 5)
    assert logo.size == Size(8, 5)


def test_undecodable_bitmap_fails(tmp_path):
    (tmp_path / "card").mkdir()
    (tmp_path / "card" / "broken.png").write_bytes(b"not an image")

    model = _local_model(tmp_path)
    res = BitmapResource.create("logo", "broken.png")
    res.add_to(model)
    model.add(ImageElement(source="logo"))

    assert asyncio.run(model.prepare_resources()) is False
    assert res.error is True and res.image is None


def test_missing_file_and_empty_text_fail(tmp_path):
    (tmp_path / "card").mkdir()
    (tmp_path / "card" / "empty.txt").write_text("", encoding="utf-8")

    model = _local_model(tmp_path)
    TextResource.from_uri("a", "nope.txt").add_to(model)
    TextResource.from_uri("b", "empty.txt").add_to(model)
    model.add(TextElement(source="a"))
    model.add(TextElement(source="b"))

    assert asyncio.run(model.prepare_resources()) is False
    assert model.resource_manager.number_loaded == 0
    assert all(r.error for r in model.resources)


def test_unresolvable_uri_fails_instead_of_stalling():
    model = Model.create(10, 10)
    res = TextResource.from_uri("title", "title.txt")
    res.add_to(model)
    model.add(TextElement(source="title"))

    assert asyncio.run(model.prepare_resources()) is False
    assert res.error is True


def test_proxy_signs_location(tmp_path):
    (tmp_path / "card").mkdir()
    signed = tmp_path / "signed.txt"
    signed.write_text("signed", encoding="utf-8")
    proxy = RecordingProxy(signed.as_posix())

    model = _local_model(tmp_path, url_proxy=proxy)
    res = TextResource.from_uri("title", "title.txt")
    res.add_to(model)
    model.add(TextElement(source="title"))

    assert asyncio.run(model.prepare_resources()) is True
    assert res.text == "signed"
    assert proxy.calls == [tmp_path.as_posix() + "/card/title.txt"]


def test_proxy_refusal_marks_failure(tmp_path):
    (tmp_path / "card").mkdir()
    (tmp_path / "card" / "title.txt").write_text("Hello", encoding="utf-8")
    model = _local_model(tmp_path, url_proxy=RecordingProxy(None))
    res = TextResource.from_uri("title", "title.txt")
    res.add_to(model)
    model.add(TextElement(source="title"))

    assert asyncio.run(model.prepare_resources()) is False
    assert res.error is True and res.text is None


def test_colon_paths_bypass_the_proxy(tmp_path):
    target = tmp_path / "server" / "title.txt"
    target.parent.mkdir()
    target.write_text("absolute", encoding="utf-8")
    proxy = RecordingProxy(None)

    model = _local_model(tmp_path, url_proxy=proxy)
    res = TextResource.from_uri("title", ":" + target.as_posix())
    res.add_to(model)
    model.add(TextElement(source="title"))

    assert asyncio.run(model.prepare_resources()) is True
    assert res.text == "absolute"
    assert proxy.calls == []


def test_initialize_without_manager_raises():
    with pytest.raises(ResourceManagerUndefinedError):
        asyncio.run(TextResource.from_uri("a", "a.txt").initialize())


def test_bitmap_clone_requires_key_and_payload():
    with pytest.raises(ResourceKeyUndefinedError):
        BitmapResource().clone()
    with pytest.raises(ResourceInvalidError):
        BitmapResource(key="logo").clone()

    image = Image.new("RGB", (2, 2))
    clone = BitmapResource.create("logo", image, locale="en").clone()
    assert clone.image is image
    assert (clone.key, clone.locale) == ("logo", "en")


def test_resource_serialization():
    res = BitmapResource(key="logo", uri="logo.png", locale="en-US")
    res.size = Size(10, 20)

    payload = res.serialize()
    assert payload == {"type": "bitmap", "key": "logo", "locale": "en-US", "uri": "logo.png", "size": "10x20"}

    parsed = BitmapResource()
    parsed.parse(payload)
    assert parsed.serialize() == payload
    assert TextResource.from_text("a", "hi").serialize() == {"type": "text", "key": "a", "text": "hi"}
