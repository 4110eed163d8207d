"""Interactive worktree picker using Textual."""

from typing import List, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, Input, OptionList
from textual.widgets.option_list import Option

from git_phantom.__version__ import __version__
from git_phantom.models.worktree import Worktree


def fuzzy_match(query: str, candidate: str) -> bool:
    """Case-insensitive subsequence match ("ftx" matches "feature-x")."""
    remaining = iter(candidate.lower())
    return all(char in remaining for char in query.lower())


def worktree_label(wt: Worktree) -> Text:
    """Option label; built as Text so names and markers are never read as markup."""
    label = Text(wt.name)
    if wt.branch:
        label.append(f"  ({wt.branch})", style="dim")
    if not wt.is_clean:
        label.append("  [dirty]", style="yellow")
    return label


class WorktreeSelectorApp(App[Optional[str]]):
    """Pick a worktree by typing part of its name. Exits with the name or None."""

    TITLE = "phantom"
    SUB_TITLE = f"v{__version__}"

    CSS = """
    Screen {
        background: $surface;
    }

    #filter {
        dock: top;
    }

    OptionList {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("down", "cursor_down", "Next", show=False),
        Binding("up", "cursor_up", "Previous", show=False),
    ]

    def __init__(self, worktrees: List[Worktree]):
        super().__init__()
        self.worktrees = worktrees
        self.visible: List[Worktree] = list(worktrees)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Input(placeholder="Filter worktrees...", id="filter")
        yield OptionList(*self._options(), id="worktrees")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#filter", Input).focus()
        self._highlight_first()

    def _options(self) -> List[Option]:
        return [Option(worktree_label(wt), id=wt.name) for wt in self.visible]

    def _highlight_first(self) -> None:
        option_list = self.query_one("#worktrees", OptionList)
        if self.visible:
            option_list.highlighted = 0

    def on_input_changed(self, event: Input.Changed) -> None:
        """Refilter as the user types."""
        self.visible = [wt for wt in self.worktrees if fuzzy_match(event.value, wt.name)]
        option_list = self.query_one("#worktrees", OptionList)
        option_list.clear_options()
        option_list.add_options(self._options())
        self._highlight_first()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        option_list = self.query_one("#worktrees", OptionList)
        if option_list.highlighted is None:
            return
        self.exit(self.visible[option_list.highlighted].name)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(event.option.id)

    def action_cursor_down(self) -> None:
        self.query_one("#worktrees", OptionList).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#worktrees", OptionList).action_cursor_up()

    def action_cancel(self) -> None:
        self.exit(None)


def select_worktree(worktrees: List[Worktree]) -> Optional[str]:
    """Run the picker; None when there is nothing to pick or the user cancels."""
    if not worktrees:
        return None
    return WorktreeSelectorApp(worktrees).run()
