"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import BaseEntity
from core.errors import HttpStatusError, HolocampusError

_MAX_CELL = 60


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("HOLOCAMPUS", style="bold cyan")
    subtitle = Text("Administración • Edificios • Notificaciones", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, BaseEntity):
        return str(value.id)
    if isinstance(value, list):
        return ", ".join(_cell(v) for v in value)
    if hasattr(value, "value"):
        value = value.value
    text = str(value)
    if len(text) > _MAX_CELL:
        return text[: _MAX_CELL - 1] + "…"
    return text


def build_entity_table(title: str, items: Sequence[BaseEntity], *, total: int | None = None) -> Table:
    """Tabla con una fila por entidad y una columna por campo del modelo."""

    caption = f"{len(items)} of {total}" if total is not None else None
    table = Table(title=title, caption=caption)
    if not items:
        table.add_column("(empty)", style="dim")
        return table

    columns = list(type(items[0]).model_fields)
    for name in columns:
        table.add_column(name, style="cyan" if name == "id" else "white", no_wrap=name == "id")
    for item in items:
        table.add_row(*(_cell(getattr(item, name)) for name in columns))
    return table


def build_entity_panel(title: str, entity: BaseEntity) -> Panel:
    """Panel con los campos de una sola entidad."""

    body = Text()
    for name in type(entity).model_fields:
        body.append(f"{name}: ", style="bold")
        body.append(_cell(getattr(entity, name)) + "\n")
    return Panel(body, title=Text(title, style="bold yellow"), border_style="yellow")


def format_error(exc: HolocampusError) -> str:
    if isinstance(exc, HttpStatusError):
        key = exc.error_key
        suffix = f" [dim]({key})[/dim]" if key and key != exc.message else ""
        return f"[red]{exc}[/red]{suffix}"
    return f"[red]{exc}[/red]"
