from __future__ import annotations

import asyncio

import httpx

from adapters.http_client import HttpContentFetcher, build_async_client
from adapters.url_proxy import SigningServiceProxy
from core.config import AppSettings
from core.resources.text import TextResource
from core.scene.elements import TextElement
from core.scene.model import Model


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.host == "sign.test":
        path = request.url.params.get("path", "")
        if path.endswith("forbidden.txt"):
            return httpx.Response(403)
        return httpx.Response(200, json={"url": f"https://cdn.test/signed?src={path}"})
    if request.url.host == "cdn.test":
        if request.url.path == "/ok.txt":
            return httpx.Response(200, text="hello")
        if request.url.path == "/signed":
            return httpx.Response(200, text="signed content")
        if request.url.path == "/moved":
            return httpx.Response(204)
        return httpx.Response(404)
    raise httpx.ConnectError("unreachable", request=request)


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(_handler))


def test_fetcher_accepts_only_200():
    async def scenario():
        async with _client() as client:
            fetcher = HttpContentFetcher(client=client)
            return (
                await fetcher.fetch_text("https://cdn.test/ok.txt"),
                await fetcher.fetch_bytes("https://cdn.test/missing.txt"),
                await fetcher.fetch_bytes("https://cdn.test/moved"),
                await fetcher.fetch_bytes("https://down.test/x"),
            )

    assert asyncio.run(scenario()) == ("hello", None, None, None)


def test_fetcher_reads_local_files(tmp_path):
    target = tmp_path / "a.txt"
    target.write_text("local", encoding="utf-8")
    (tmp_path / "latin.txt").write_bytes("caf\xe9".encode("latin-1"))
    fetcher = HttpContentFetcher()

    assert asyncio.run(fetcher.fetch_text(target.as_posix())) == "local"
    assert asyncio.run(fetcher.fetch_text("file://" + target.as_posix())) == "local"
    assert asyncio.run(fetcher.fetch_bytes((tmp_path / "nope").as_posix())) is None
    assert asyncio.run(fetcher.fetch_text((tmp_path / "latin.txt").as_posix())) is None


def test_build_async_client_uses_settings():
    settings = AppSettings(_env_file=None, user_agent="modelres-test/1.0", http_timeout_seconds=3)

    async def scenario():
        async with build_async_client(settings, extra_headers={"X-Test": "1"}) as client:
            return client.headers["User-Agent"], client.headers["X-Test"], client.timeout.read

    assert asyncio.run(scenario()) == ("modelres-test/1.0", "1", 3)


def test_signing_proxy():
    async def scenario():
        async with _client() as client:
            proxy = SigningServiceProxy("https://sign.test/sign", client=client)
            return (
                await proxy.get_url("https://cdn.test/a.txt"),
                await proxy.get_url("https://cdn.test/forbidden.txt"),
            )

    signed, refused = asyncio.run(scenario())
    assert signed == "https://cdn.test/signed?src=https://cdn.test/a.txt"
    assert refused is None


def test_remote_resource_through_proxy():
    async def scenario():
        async with _client() as client:
            model = Model(
                fetcher=HttpContentFetcher(client=client),
                url_proxy=SigningServiceProxy("https://sign.test/sign", client=client),
            )
            model.set_base_path("https://cdn.test/models/")
            ok = TextResource.from_uri("ok", "/a.txt")
            refused = TextResource.from_uri("refused", "https://cdn.test/forbidden.txt")
            ok.add_to(model)
            refused.add_to(model)
            model.add(TextElement(source="ok"))
            model.add(TextElement(source="refused"))
            result = await model.prepare_resources()
            return result, ok, refused

    result, ok, refused = asyncio.run(scenario())
    assert result is False
    assert ok.text == "signed content"
    assert refused.error is True
