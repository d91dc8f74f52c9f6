"""CLI de administración (Typer + Rich).

Por qué pasa todo por el Core:
- Las mutaciones usan `EntityDialog`, así que publican las mismas
  notificaciones de cambio que cualquier otra interfaz.
- La CLI solo traduce argumentos y pinta resultados.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console

from cli import doctor
from cli.ui_components import build_entity_panel, build_entity_table, format_error, print_banner
from core.config import AppSettings
from core.errors import HolocampusError
from core.logging_setup import setup_logging
from core.services.application import Application
from core.services.event_bus import ACK, modification_event

app = typer.Typer(no_args_is_help=True, help="Holocampus admin console.")
app.add_typer(doctor.app, name="doctor")

_console = Console()

T = TypeVar("T")


@app.callback()
def _configure(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR."),
    banner: bool = typer.Option(False, "--banner", help="Show the welcome banner."),
) -> None:
    setup_logging(log_level or AppSettings().log_level)
    if banner:
        print_banner(_console)


def parse_fields(values: list[str] | None) -> dict[str, Any]:
    """`key=value` -> dict. Soporta `a.b=v` (anidado) y valores JSON (`5`, `true`, `[...]`)."""

    out: dict[str, Any] = {}
    for item in values or []:
        if "=" not in item:
            raise typer.BadParameter(f"expected key=value, got {item!r}")
        key, raw = item.split("=", 1)
        try:
            value: Any = json.loads(raw)
        except json.JSONDecodeError:
            value = raw
        target = out
        parts = key.strip().split(".")
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        target[parts[-1]] = value
    return out


def _run(action: Callable[[Application], Awaitable[T]]) -> T:
    async def runner() -> T:
        application = Application.from_settings()
        try:
            return await action(application)
        finally:
            await application.aclose()

    try:
        return asyncio.run(runner())
    except HolocampusError as exc:
        _console.print(format_error(exc))
        raise typer.Exit(code=1) from exc
    except ValidationError as exc:
        _console.print(f"[red]Invalid fields:[/red] {exc}")
        raise typer.Exit(code=2) from exc
    except KeyError as exc:
        raise typer.BadParameter(str(exc.args[0] if exc.args else exc)) from exc


@app.command(name="list")
def list_entities(
    entity: str = typer.Argument(..., help="Entity name, e.g. building, notification."),
    page: int = typer.Option(0, min=0),
    size: Optional[int] = typer.Option(None, min=1),
    sort: Optional[list[str]] = typer.Option(None, help="field,asc|desc (repeatable)."),
) -> None:
    """List a page of entities."""

    async def action(application: Application):
        req = {
            "page": page,
            "size": size or application.settings.items_per_page,
            "sort": sort or None,
        }
        return await application.service(entity).query(req)

    response = _run(action)
    _console.print(build_entity_table(entity, response.body or [], total=response.total_count))


@app.command()
def show(entity: str, entity_id: int = typer.Argument(..., metavar="ID")) -> None:
    """Show one entity."""

    async def action(application: Application):
        return await application.service(entity).find(entity_id)

    response = _run(action)
    _console.print(build_entity_panel(f"{entity} {entity_id}", response.body))


@app.command()
def search(
    entity: str,
    query: str,
    page: int = typer.Option(0, min=0),
    size: Optional[int] = typer.Option(None, min=1),
) -> None:
    """Full-text search over an entity index."""

    async def action(application: Application):
        req = {"query": query, "page": page, "size": size or application.settings.items_per_page}
        return await application.service(entity).search(req)

    response = _run(action)
    _console.print(build_entity_table(f"{entity} ~ {query}", response.body or [], total=response.total_count))


@app.command()
def create(
    entity: str,
    field: Optional[list[str]] = typer.Option(None, "--field", "-f", help="key=value (repeatable)."),
) -> None:
    """Create an entity from --field values."""

    changes = parse_fields(field)

    async def action(application: Application):
        dialog = application.dialog(entity)
        await dialog.open()
        dialog.edit(**changes)
        return await dialog.save()

    saved = _run(action)
    _console.print(build_entity_panel(f"{entity} created", saved))


@app.command()
def update(
    entity: str,
    entity_id: int = typer.Argument(..., metavar="ID"),
    field: Optional[list[str]] = typer.Option(None, "--field", "-f", help="key=value (repeatable)."),
) -> None:
    """Update fields of an existing entity."""

    changes = parse_fields(field)

    async def action(application: Application):
        dialog = application.dialog(entity)
        await dialog.open(entity_id)
        dialog.edit(**changes)
        return await dialog.save()

    saved = _run(action)
    _console.print(build_entity_panel(f"{entity} {entity_id} updated", saved))


@app.command()
def delete(
    entity: str,
    entity_id: int = typer.Argument(..., metavar="ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Delete an entity."""

    if not yes:
        typer.confirm(f"Delete {entity} {entity_id}?", abort=True)

    async def action(application: Application):
        service = application.service(entity)
        response = await service.delete(entity_id)
        application.events.broadcast(modification_event(service.entity_name), ACK)
        return response

    _run(action)
    _console.print(f"[green]Deleted {entity} {entity_id}[/green]")


def run() -> None:
    app()
