"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.resource_state import ResourceLoaderState, ResourceState
from core.resources.resource import Resource

_STATE_STYLES: dict[ResourceLoaderState, str] = {
    ResourceLoaderState.IDLE: "bold",
    ResourceLoaderState.LOADING: "cyan",
    ResourceLoaderState.RESOURCE_START: "dim",
    ResourceLoaderState.RESOURCE_COMPLETE: "green",
    ResourceLoaderState.RESOURCE_FAILED: "red",
}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    """

    title = Text("MODELRES", style="bold cyan")
    subtitle = Text("Modelos • Recursos localizados • Carga secuencial", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def format_state(state: ResourceState) -> Text:
    """Una línea de progreso coloreada según la fase."""

    return Text(str(state), style=_STATE_STYLES.get(state.code, "white"))


def _status(resource: Resource) -> str:
    if resource.error:
        return "[red]error[/red]"
    if resource.available:
        return "[green]ready[/green]"
    return "[dim]idle[/dim]"


def build_resources_table(resources: list[Resource], *, title: str = "Resources") -> Table:
    table = Table(title=title)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Type", style="white")
    table.add_column("Locale", style="magenta")
    table.add_column("Uri", style="dim")
    table.add_column("Status")
    for resource in resources:
        table.add_row(
            resource.key or "",
            resource.type,
            resource.locale or "-",
            resource.uri or "(embedded)",
            _status(resource),
        )
    return table


def build_keys_table(counts: dict[str, int]) -> Table:
    table = Table(title="Referenced keys")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("References", style="white", justify="right")
    for key, count in sorted(counts.items()):
        table.add_row(key, str(count))
    return table


def build_summary_panel(*, success: bool, loaded: int, total: int, failed_keys: list[str]) -> Panel:
    body = Text()
    body.append(f"Loaded {loaded}/{total} resources\n")
    if failed_keys:
        body.append("Failed:\n", style="bold")
        for key in failed_keys:
            body.append(f"- {key}\n", style="red")
    border = "green" if success else "red"
    title = Text("Ready" if success else "Incomplete", style=f"bold {border}")
    return Panel(body, title=title, border_style=border)
