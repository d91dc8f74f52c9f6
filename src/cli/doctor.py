"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import HttpxTransport
from core.config import AppSettings, write_user_env_vars
from core.errors import HolocampusError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with HttpxTransport.from_settings(settings) as transport:
            response = await transport.request(
                "GET",
                f"{settings.api_url}/buildings",
                params=[("page", "0"), ("size", "1")],
            )
        return True, f"HTTP {response.status_code}"
    except HolocampusError as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Holocampus Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("API root", "OK", settings.api_root)
    if settings.auth_token:
        table.add_row("Auth token", "OK", "Bearer token configured")
    else:
        table.add_row("Auth token", "OPTIONAL", "No token set -> anonymous requests")
    table.add_row("Page size", "OK", str(settings.items_per_page))

    ok_api, detail_api = asyncio.run(_check_api(settings))
    table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)

    if not ok_api:
        _console.print(
            "\n[yellow]Note:[/yellow] run `holocampus doctor setup` to point the client at another server."
        )
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = AppSettings()
    api_root = typer.prompt("API root", default=settings.api_root, show_default=True).strip()
    token = typer.prompt("Auth token (empty for none)", default="", hide_input=True, show_default=False).strip()

    if not api_root:
        raise typer.BadParameter("api_root is required")

    values = {"HOLOCAMPUS_API_ROOT": api_root}
    if token:
        values["HOLOCAMPUS_AUTH_TOKEN"] = token
    env_path = write_user_env_vars(values)

    _console.print(f"[green]Saved config to:[/green] {env_path}")
