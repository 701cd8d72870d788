"""Rich components for the CLI.

Kept apart from the commands so tables and panels are reusable between the
one-shot commands and the interactive `browse` loop.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import FavoriteEntry, HistoryEntry, WordDetail
from core.services.dictionary_view import DictionaryView, Tab, chunk_rows

FAVORITE_MARK = "★"


def print_banner(console: Console) -> None:
    title = Text("lexideck", style="bold cyan")
    subtitle = Text("English dictionary • Favorites • History", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_tabs_bar(active: Tab) -> Text:
    bar = Text()
    for tab in Tab:
        style = "bold reverse blue" if tab is active else "dim"
        bar.append(f" {tab.label()} ", style=style)
        bar.append(" ")
    return bar


def build_words_table(
    words: list[str],
    *,
    favorites: set[str] | None = None,
    selected: str | None = None,
) -> Table:
    """Word grid, three words per row; favorites carry a star."""

    favorites = favorites or set()
    table = Table(title="Word list", show_header=False, show_lines=True, expand=True)
    for _ in range(3):
        table.add_column(justify="center")
    for row in chunk_rows(words):
        cells: list[Text] = []
        for word in row:
            label = f"{FAVORITE_MARK} {word}" if word in favorites else word
            style = "bold on grey23" if word == selected else ""
            cells.append(Text(label, style=style))
        table.add_row(*cells)
    return table


def build_word_detail_panel(detail: WordDetail) -> Panel:
    body = Text()
    body.append(detail.word + "\n", style="bold")
    phonetic = detail.primary_phonetic
    if phonetic and (phonetic.text or phonetic.audio):
        if phonetic.text:
            body.append(phonetic.text, style="magenta")
        if phonetic.audio:
            body.append(f"  ♪ {phonetic.audio}", style="dim")
        body.append("\n")

    body.append("\nMeanings\n", style="bold")
    for meaning in detail.meanings:
        body.append(meaning.part_of_speech or "-", style="italic cyan")
        if meaning.first_definition:
            body.append(f"  {meaning.first_definition}")
        body.append("\n")

    return Panel(body, title=Text("Word detail", style="bold magenta"), border_style="magenta")


def build_favorites_table(entries: list[FavoriteEntry]) -> Table:
    table = Table(title="Favorites")
    table.add_column("Word", style="cyan", no_wrap=True)
    table.add_column("Added", style="dim")
    for entry in entries:
        table.add_row(entry.word, entry.added)
    return table


def build_history_table(entries: list[HistoryEntry]) -> Table:
    table = Table(title="History")
    table.add_column("Word", style="cyan", no_wrap=True)
    table.add_column("Looked up", style="dim")
    for entry in entries:
        table.add_row(entry.word, entry.added)
    return table


def build_list_footer(*, loading: bool, error: str, has_more: bool, empty_label: str) -> Text | None:
    if loading:
        return Text("Loading...", style="blue")
    if error:
        return Text(error, style="red")
    if not has_more:
        return Text(empty_label, style="dim")
    return None


def build_detail_area(view: DictionaryView) -> Panel:
    detail = view.detail
    if not view.selected_word:
        return Panel(Text("Select a word", style="dim"), border_style="grey50")
    if detail.loading:
        return Panel(Text("Loading...", style="blue"), border_style="magenta")
    if detail.error:
        return Panel(Text(detail.error, style="red"), border_style="red")
    if detail.detail is not None:
        return build_word_detail_panel(detail.detail)
    return Panel(Text("Select a word", style="dim"), border_style="grey50")


def render_view(console: Console, view: DictionaryView) -> None:
    """Print the whole page: tabs, active list, notices and detail panel."""

    console.print(build_tabs_bar(view.active_tab))
    if view.notice:
        console.print(Text(view.notice, style="yellow"))

    parts: list[object] = []
    if view.active_tab is Tab.WORDS and view.words is not None:
        favorites = set(view.favorites.words)
        parts.append(build_words_table(view.words.items, favorites=favorites, selected=view.selected_word))
        footer = build_list_footer(
            loading=view.words.loading,
            error=view.words.error,
            has_more=view.words.has_more,
            empty_label="No more words",
        )
        if footer is not None:
            parts.append(footer)
    elif view.active_tab is Tab.FAVORITES and view.authenticated:
        parts.append(build_favorites_table(view.favorites.entries))
        if view.favorites.error:
            parts.append(Text(view.favorites.error, style="red"))
    elif view.active_tab is Tab.HISTORY and view.history is not None:
        parts.append(build_history_table(view.history.items))
        footer = build_list_footer(
            loading=view.history.loading,
            error=view.history.error,
            has_more=view.history.has_more,
            empty_label="No more history",
        )
        if footer is not None:
            parts.append(footer)

    if parts:
        console.print(Group(*parts))
    console.print(build_detail_area(view))
