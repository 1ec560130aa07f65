"""Inline fuzzy picker built on Textual."""

from typing import List, Optional, Tuple

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.fuzzy import Matcher
from textual.widgets import Input, OptionList
from textual.widgets.option_list import Option

from worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def filter_choices(labels: List[str], query: str) -> List[Tuple[int, float]]:
    """Rank labels against query.

    Returns (index, score) pairs, best match first. An empty query keeps
    every label in its original order. Matching is case-insensitive and
    accepts the query's characters spread out across the label.
    """
    query = query.strip()
    if not query:
        return [(index, 1.0) for index in range(len(labels))]

    matcher = Matcher(query, case_sensitive=False)
    scored = []
    for index, label in enumerate(labels):
        score = matcher.match(label)
        if score > 0:
            scored.append((index, score))
    # Stable: equal scores keep their original order
    scored.sort(key=lambda item: -item[1])
    return scored


class FuzzyPickerApp(App[Optional[int]]):
    """Type to filter, Enter to choose, Escape to go back."""

    DEFAULT_CSS = """
    FuzzyPickerApp {
        height: auto;
    }

    #query {
        border: none;
        height: 1;
        padding: 0 1;
    }

    #choices {
        border: none;
        height: auto;
        max-height: 20;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Back"),
        Binding("ctrl+c", "cancel", "Cancel", show=False),
        Binding("down", "cursor_down", "Down", show=False),
        Binding("up", "cursor_up", "Up", show=False),
    ]

    def __init__(self, labels: List[str], prompt: str):
        super().__init__()
        self.labels = labels
        self.prompt = prompt

    def compose(self) -> ComposeResult:
        yield Input(placeholder=self.prompt, id="query")
        yield OptionList(id="choices")

    def on_mount(self) -> None:
        self._refresh_choices("")
        self.query_one("#query", Input).focus()

    def _refresh_choices(self, query: str) -> None:
        option_list = self.query_one("#choices", OptionList)
        option_list.clear_options()
        option_list.add_options(
            Option(self.labels[index], id=str(index))
            for index, _score in filter_choices(self.labels, query)
        )
        if option_list.option_count:
            option_list.highlighted = 0

    def on_input_changed(self, event: Input.Changed) -> None:
        self._refresh_choices(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        option_list = self.query_one("#choices", OptionList)
        if option_list.highlighted is None:
            return
        option = option_list.get_option_at_index(option_list.highlighted)
        self.exit(int(option.id))

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(int(event.option.id))

    def action_cursor_down(self) -> None:
        self.query_one("#choices", OptionList).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#choices", OptionList).action_cursor_up()

    def action_cancel(self) -> None:
        self.exit(None)


def fuzzy_select(labels: List[str], prompt: str) -> Optional[int]:
    """Show the picker; returns the chosen index or None when cancelled."""
    if not labels:
        return None
    try:
        result = FuzzyPickerApp(labels, prompt).run(inline=True)
    except KeyboardInterrupt:
        return None
    logger.debug(f"Picker '{prompt.strip()}' returned {result!r}")
    return result
