"""CLI principal (Typer).

Comandos:
- `prepare SOURCE`: carga el modelo y todos sus recursos, muestra el progreso.
- `keys SOURCE`: histograma de claves referenciadas (no descarga recursos).
- `doctor run`: diagnóstico de configuración y conectividad.

La CLI solo presenta: la orquestación vive en `core.services.resource_pipeline`.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.json_exporter import export_model_json
from cli import doctor
from cli.ui_components import (
    build_keys_table,
    build_resources_table,
    build_summary_panel,
    format_state,
    print_banner,
)
from core.config import AppSettings
from core.domain.resource_state import ResourceState
from core.errors import ModelResError
from core.services.resource_pipeline import (
    PipelineHooks,
    PrepareRequest,
    prepare as prepare_model,
    reference_counts,
)

app = typer.Typer(no_args_is_help=True, help="Load models and their localized resources.")
app.add_typer(doctor.app, name="doctor")

console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every progress state (DEBUG)."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Do not print the banner."),
) -> None:
    settings = AppSettings()
    _configure_logging("DEBUG" if verbose else settings.log_level)
    if not no_banner:
        print_banner(console)


@app.command()
def prepare(
    source: str = typer.Argument(..., help="Model file, model folder or URL."),
    locale: str | None = typer.Option(None, "--locale", "-l", help="Locale to prepare, e.g. en-US."),
    export: Path | None = typer.Option(None, "--export", help="Write the prepared model as JSON."),
) -> None:
    """Load a model and every resource it references."""

    settings = AppSettings()

    def on_progress(state: ResourceState) -> None:
        console.print(format_state(state))

    def on_warning(message: str) -> None:
        console.print(f"[yellow]{message}[/yellow]")

    hooks = PipelineHooks(warning=on_warning, progress=on_progress)
    try:
        result = asyncio.run(
            prepare_model(settings=settings, request=PrepareRequest(source=source, locale=locale), hooks=hooks)
        )
    except ModelResError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc

    rm = result.model.resource_manager
    console.print(build_resources_table(result.model.resources))
    console.print(
        build_summary_panel(
            success=result.success,
            loaded=rm.number_loaded,
            total=rm.total_resource_count,
            failed_keys=result.failed_keys,
        )
    )

    if export is not None:
        path = export_model_json(model=result.model, output_path=export)
        console.print(f"[green]Model exported to:[/green] {path}")

    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def keys(
    source: str = typer.Argument(..., help="Model file, model folder or URL."),
    locale: str | None = typer.Option(None, "--locale", "-l", help="Locale used for the lookup."),
) -> None:
    """Show how often each resource key is referenced."""

    settings = AppSettings()
    try:
        counts = asyncio.run(reference_counts(settings=settings, request=PrepareRequest(source=source, locale=locale)))
    except ModelResError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc
    console.print(build_keys_table(counts))


def run() -> None:
    app()
