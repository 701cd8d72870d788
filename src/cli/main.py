"""lexideck command line.

One-shot commands print a single list or panel; `browse` runs the
interactive page where `n` plays the role of scrolling to the end of the
list.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from adapters.http_client import DictionaryApiClient
from cli import doctor
from cli.ui_components import (
    build_favorites_table,
    build_history_table,
    build_list_footer,
    build_word_detail_panel,
    build_words_table,
    print_banner,
    render_view,
)
from core.config import AppSettings
from core.domain.errors import AuthenticationError, ConfigurationError, RequestFailedError
from core.domain.models import SignInCredentials
from core.services.dictionary_view import DictionaryView, Tab
from core.services.favorites import FavoritesController
from core.services.pagination import PaginatedList, history_list, word_list
from core.services.word_detail import WordDetailController
from core.session import SessionStore

app = typer.Typer(no_args_is_help=True, help="Browse an English dictionary backend from the terminal.")
app.add_typer(doctor.app, name="doctor")

_console = Console()

BROWSE_HELP = (
    "n: next page  o WORD: open  f WORD: toggle favorite  "
    "t words|favorites|history: switch tab  r: retry  q: quit"
)


def build_api(settings: AppSettings, *, token: str | None) -> DictionaryApiClient:
    """Client factory used by every command (tests replace it)."""

    return DictionaryApiClient(settings, token=token)


def _fail(message: str) -> NoReturn:
    _console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code=1)


def _open_api(settings: AppSettings, store: SessionStore, *, require_auth: bool = False) -> DictionaryApiClient:
    if require_auth and not store.is_authenticated:
        _fail("Not signed in. Run `lexideck signin` first.")
    try:
        return build_api(settings, token=store.token)
    except ConfigurationError as exc:
        _fail(str(exc))


async def _fill(pages: PaginatedList, count: int) -> None:
    await pages.start()
    for _ in range(max(0, count - 1)):
        if not await pages.request_next_page():
            break


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP traffic at DEBUG level."),
) -> None:
    settings = AppSettings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.command()
def signin(
    email: str = typer.Option(..., prompt=True, help="Account e-mail."),
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Account password."),
) -> None:
    """Sign in and store the session token."""

    settings = AppSettings()
    store = SessionStore.from_settings(settings)

    async def _signin() -> None:
        async with _open_api(settings, store) as api:
            response = await api.signin(SignInCredentials(email=email, password=password))
        store.set_token(response.token)
        name = response.user.name or response.user.email
        _console.print(f"[green]Signed in as[/green] {escape(name)} ({escape(response.user.email)})")

    try:
        asyncio.run(_signin())
    except AuthenticationError as exc:
        _fail(str(exc))


@app.command()
def signout() -> None:
    """Forget the stored session token."""

    store = SessionStore.from_settings(AppSettings())
    store.clear_token()
    _console.print("Signed out.")


@app.command()
def words(
    pages: int = typer.Option(1, "--pages", "-p", min=1, help="Number of batches to load."),
) -> None:
    """Print the word grid."""

    settings = AppSettings()
    store = SessionStore.from_settings(settings)

    async def _words() -> None:
        async with _open_api(settings, store) as api:
            listing = word_list(api, settings)
            await _fill(listing, pages)
            favorites = FavoritesController(api)
            if store.is_authenticated:
                await favorites.load()

        _console.print(build_words_table(listing.items, favorites=set(favorites.words)))
        footer = build_list_footer(
            loading=False,
            error=listing.error,
            has_more=listing.has_more,
            empty_label="No more words",
        )
        if footer is not None:
            _console.print(footer)
        if listing.error:
            raise typer.Exit(code=1)

    asyncio.run(_words())


@app.command()
def show(word: str = typer.Argument(..., help="Word to look up.")) -> None:
    """Print phonetics and meanings of a word."""

    settings = AppSettings()
    store = SessionStore.from_settings(settings)

    async def _show() -> None:
        async with _open_api(settings, store) as api:
            controller = WordDetailController(api)
            detail = await controller.load(word)
        if detail is None:
            _fail(controller.error)
        _console.print(build_word_detail_panel(detail))

    asyncio.run(_show())


@app.command()
def favorites() -> None:
    """Print the signed-in user's favorites."""

    settings = AppSettings()
    store = SessionStore.from_settings(settings)

    async def _favorites() -> None:
        async with _open_api(settings, store, require_auth=True) as api:
            controller = FavoritesController(api)
            await controller.load()
        if controller.error:
            _fail(controller.error)
        _console.print(build_favorites_table(controller.entries))

    asyncio.run(_favorites())


def _mutate_favorite(word: str, *, add: bool) -> None:
    settings = AppSettings()
    store = SessionStore.from_settings(settings)

    async def _mutate() -> None:
        async with _open_api(settings, store, require_auth=True) as api:
            if add:
                await api.add_favorite(word)
            else:
                await api.remove_favorite(word)

    try:
        asyncio.run(_mutate())
    except RequestFailedError as exc:
        _fail(f"Could not update favorite: {exc}")
    verb = "Added" if add else "Removed"
    _console.print(f"{verb} [cyan]{escape(word)}[/cyan].")


@app.command()
def favorite(word: str = typer.Argument(...)) -> None:
    """Add a word to favorites."""

    _mutate_favorite(word, add=True)


@app.command()
def unfavorite(word: str = typer.Argument(...)) -> None:
    """Remove a word from favorites."""

    _mutate_favorite(word, add=False)


@app.command()
def history(
    pages: int = typer.Option(1, "--pages", "-p", min=1, help="Number of pages to load."),
) -> None:
    """Print the signed-in user's lookup history."""

    settings = AppSettings()
    store = SessionStore.from_settings(settings)

    async def _history() -> None:
        async with _open_api(settings, store, require_auth=True) as api:
            listing = history_list(api, settings)
            await _fill(listing, pages)
        _console.print(build_history_table(listing.items))
        if listing.error:
            _fail(listing.error)

    asyncio.run(_history())


def parse_browse_command(line: str) -> tuple[str, str]:
    """Split an interactive command into (action, argument)."""

    text = line.strip()
    if not text:
        return "next", ""
    head, _, rest = text.partition(" ")
    action = {
        "n": "next",
        "next": "next",
        "o": "open",
        "open": "open",
        "f": "favorite",
        "fav": "favorite",
        "t": "tab",
        "tab": "tab",
        "r": "retry",
        "retry": "retry",
        "q": "quit",
        "quit": "quit",
        "h": "help",
        "help": "help",
        "?": "help",
    }.get(head.lower(), "unknown")
    return action, rest.strip()


async def run_browse(view: DictionaryView, console: Console, prompt: Callable[[], str]) -> None:
    """Interactive loop over a `DictionaryView` until the user quits."""

    await view.open()
    try:
        while True:
            render_view(console, view)
            try:
                line = prompt()
            except typer.Abort:
                break
            action, arg = parse_browse_command(line)
            if action == "quit":
                break
            if action == "next":
                if not await view.next_page():
                    console.print("[dim]Nothing more to load.[/dim]")
            elif action == "open" and arg:
                await view.select_word(arg)
            elif action == "favorite" and arg:
                state = await view.toggle_favorite(arg)
                if state is not None:
                    label = "added to" if state else "removed from"
                    console.print(f"[cyan]{escape(arg)}[/cyan] {label} favorites")
            elif action == "tab":
                try:
                    await view.select_tab(Tab(arg.lower()))
                except ValueError:
                    console.print(f"[yellow]Unknown tab {escape(repr(arg))}.[/yellow]")
            elif action == "retry":
                await view.retry()
            else:
                console.print(f"[dim]{BROWSE_HELP}[/dim]")
    finally:
        view.close()


@app.command()
def browse() -> None:
    """Interactive dictionary page (tabs, detail, favorites)."""

    settings = AppSettings()
    store = SessionStore.from_settings(settings)
    print_banner(_console)
    _console.print(f"[dim]{BROWSE_HELP}[/dim]")

    async def _browse() -> None:
        async with _open_api(settings, store) as api:
            view = DictionaryView(api, settings, authenticated=store.is_authenticated)
            await run_browse(view, _console, lambda: typer.prompt(">", default="", show_default=False))

    asyncio.run(_browse())


def run() -> None:
    app()


if __name__ == "__main__":
    run()
