"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, get_user_env_file, read_user_env_vars, write_user_env_vars
from core.domain.errors import ConfigurationError
from core.session import SessionStore

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_backend(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get("/dictionary/entries/en", params={"limit": 1, "page": 1})
        return response.is_success, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    store = SessionStore.from_settings(settings)

    table = Table(title="lexideck doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    try:
        backend_url = settings.require_backend_url()
    except ConfigurationError as exc:
        table.add_row("Backend URL", "FAIL", escape(str(exc)))
        _console.print(table)
        _console.print("\n[yellow]Hint:[/yellow] `lexideck doctor set-backend <url>`")
        raise typer.Exit(code=1)
    table.add_row("Backend URL", "OK", escape(backend_url))

    stored = read_user_env_vars()
    if stored:
        table.add_row("User config", "OK", escape(f"{len(stored)} variable(s) in {get_user_env_file()}"))
    else:
        table.add_row("User config", "OPTIONAL", "No user .env yet (doctor set-backend writes one)")

    if store.is_authenticated:
        table.add_row("Session", "OK", escape(f"Token stored in {store.path}"))
    else:
        table.add_row("Session", "OPTIONAL", "Not signed in -> favorites/history disabled")

    ok_http, detail_http = asyncio.run(_check_backend(settings))
    table.add_row("Backend connectivity", "OK" if ok_http else "FAIL", escape(detail_http))

    _console.print(table)
    if not ok_http:
        raise typer.Exit(code=1)


@app.command(name="set-backend")
def set_backend(url: str = typer.Argument(..., help="Base URL of the dictionary backend.")) -> None:
    """Store the backend URL in the user config .env."""

    url = url.strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise typer.BadParameter("url must start with http:// or https://")

    env_path = write_user_env_vars({"LEXIDECK_BACKEND_URL": url})
    _console.print(f"[green]Saved backend URL to:[/green] {escape(str(env_path))}")
