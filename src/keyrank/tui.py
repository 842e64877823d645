"""TUI type-ahead picker for ranked search."""

import json
from collections.abc import Sequence
from typing import Any

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.widgets import Footer, Header, Input, Label, ListItem, ListView, Static

from .config import Config
from .fuzzy import fuzzy_match_positions, is_subsequence
from .search import KeySpec, iter_candidates, search


def format_item(item: Any) -> str:
    """Format item as a single line."""
    if isinstance(item, str):
        return item
    try:
        return json.dumps(item, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        return repr(item)


def best_field(pattern: str, item: Any, keys: Sequence[KeySpec]) -> tuple[str, list[int]]:
    """Return the best matching field value of item and its match positions."""
    best_value, best_positions, best_score = None, [], None
    for value, weight in iter_candidates(item, keys):
        if best_value is None:
            best_value = value
        if not is_subsequence(pattern, value):
            continue
        matched, score, positions = fuzzy_match_positions(pattern, value)
        if matched and (best_score is None or score * weight > best_score):
            best_value, best_positions, best_score = value, positions, score * weight

    if best_value is None:
        return format_item(item), []
    return best_value, best_positions


def highlight(value: str, positions: list[int]) -> Text:
    """Render value with matched characters emphasized."""
    text = Text(value)
    for idx in positions:
        text.stylize("bold reverse", idx, idx + 1)
    return text


class ResultItem(ListItem):
    """List item representing one ranked result."""

    SCORE_WIDTH = 7

    def __init__(self, item: Any, label: Text, score: float | None = None, show_score: bool = False):
        super().__init__()
        self.item = item
        self.label = label
        self.score = score
        self.show_score = show_score

    def compose(self) -> ComposeResult:
        line = Text()
        if self.show_score:
            score_col = "" if self.score is None else f"{self.score:g}"
            line.append(f"{score_col:>{self.SCORE_WIDTH}} ", style="dim")
        line.append_text(self.label)
        yield Label(line)


class SearchApp(App[Any]):
    """Interactive picker that re-ranks items on every keystroke."""

    CSS = """
    Screen {
        background: $surface;
    }

    #main-container {
        padding: 1 2;
    }

    #input-container {
        height: auto;
        margin-bottom: 1;
    }

    #query-input {
        width: 100%;
    }

    #result-list {
        height: 1fr;
        min-height: 5;
        border: solid $primary;
    }

    #status {
        height: auto;
        margin-top: 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("escape", "quit", "Quit"),
        Binding("down", "cursor_down", "Down", show=False),
        Binding("up", "cursor_up", "Up", show=False),
    ]

    def __init__(
        self,
        items: Sequence[Any],
        keys: Sequence[KeySpec],
        config: Config | None = None,
        query: str = "",
    ):
        super().__init__()
        self.items = items
        self.keys = keys
        self.config = config or Config()
        self.initial_query = query
        self.shown: list[Any] = []

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="main-container"):
            with Container(id="input-container"):
                yield Input(
                    value=self.initial_query,
                    placeholder=self.config.ui.placeholder,
                    id="query-input",
                )
            yield ListView(id="result-list")
            yield Static("", id="status")
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_results(self.initial_query)
        self.query_one("#query-input", Input).focus()

    def _refresh_results(self, query: str = "") -> None:
        """Re-rank items for query and rebuild the result list."""
        list_view = self.query_one("#result-list", ListView)
        list_view.clear()

        max_results = self.config.ui.max_results
        show_score = self.config.ui.show_score

        if query:
            results = search(query, self.items, self.keys)
            rows = []
            for result in results[:max_results]:
                value, positions = best_field(query, result.item, self.keys)
                rows.append(ResultItem(result.item, highlight(value, positions), result.score, show_score))
            total = len(results)
        else:
            rows = []
            for item in self.items[:max_results]:
                value, _ = best_field("", item, self.keys)
                rows.append(ResultItem(item, Text(value), show_score=show_score))
            total = len(self.items)

        self.shown = [row.item for row in rows]
        for row in rows:
            list_view.append(row)

        if rows:
            list_view.index = 0

        self._update_status(f"{total}/{len(self.items)}")

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "query-input":
            self._refresh_results(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter in query input - pick highlighted result."""
        if event.input.id == "query-input":
            self._select_highlighted()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, ResultItem):
            self.exit(event.item.item)

    def _select_highlighted(self) -> None:
        if not self.shown:
            return
        index = self.query_one("#result-list", ListView).index or 0
        self.exit(self.shown[min(index, len(self.shown) - 1)])

    def action_cursor_down(self) -> None:
        self.query_one("#result-list", ListView).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#result-list", ListView).action_cursor_up()

    def action_quit(self) -> None:
        """Quit without result."""
        self.exit(None)

    def _update_status(self, message: str) -> None:
        """Update status bar."""
        self.query_one("#status", Static).update(message)


def run_tui(
    items: Sequence[Any],
    keys: Sequence[KeySpec],
    config: Config | None = None,
    query: str = "",
) -> Any:
    """Run TUI and return selected item or None."""
    app = SearchApp(items, keys, config, query)
    return app.run()
