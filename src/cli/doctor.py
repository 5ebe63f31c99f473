"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import io

import typer
from PIL import Image
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, get_user_env_file

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_pillow() -> tuple[bool, str]:
    """Encode and decode a 1x1 PNG to detect a broken Pillow install."""

    try:
        buffer = io.BytesIO()
        Image.new("RGB", (1, 1)).save(buffer, format="PNG")
        with Image.open(io.BytesIO(buffer.getvalue())) as image:
            image.load()
        return True, "PNG decode OK"
    except Exception as exc:
        return False, str(exc)


@app.command()
def run(
    url: str = typer.Option("https://example.com", "--url", help="URL used for the connectivity check."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="modelres Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    env_file = get_user_env_file()
    table.add_row("User config", "OK" if env_file.exists() else "OPTIONAL", str(env_file))
    table.add_row("Default locale", "OK" if settings.default_locale else "OPTIONAL", settings.default_locale or "-")
    table.add_row("Resource folder", "OK", settings.resource_folder or "(model folder)")
    if settings.signing_endpoint:
        table.add_row("Signing endpoint", "OK", settings.signing_endpoint)
    else:
        table.add_row("Signing endpoint", "OPTIONAL", "No endpoint set -> unsigned URLs")

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http(url, settings))
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)
    if settings.signing_endpoint:
        ok_sign, detail_sign = asyncio.run(_check_http(settings.signing_endpoint, settings))
        table.add_row("Signing reachability", "OK" if ok_sign else "FAIL", detail_sign)

    # Bitmaps
    ok_img, detail_img = _check_pillow()
    table.add_row("Pillow", "OK" if ok_img else "FAIL", detail_img)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] Remote resources will fail to load; local models still work."
        )
