"""Terminal output for git-phantom"""
from typing import List

from rich.console import Console
from rich.table import Table
from rich.text import Text

from git_phantom.models.worktree import Worktree

console = Console()
err_console = Console(stderr=True)


def print_plain(text: str) -> None:
    """Print machine-readable output: no markup, highlighting or wrapping."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def print_error(message: str) -> None:
    err_console.print(f"Error: {message}", style="red", markup=False, highlight=False, soft_wrap=True)


def print_warning(message: str) -> None:
    err_console.print(message, style="yellow", markup=False, highlight=False, soft_wrap=True)


def display_worktree_table(worktrees: List[Worktree]) -> None:
    """Display worktrees with their branch and status."""
    if not worktrees:
        console.print("No worktrees found.")
        return

    table = Table()
    table.add_column("Name")
    table.add_column("Branch")
    table.add_column("Status")

    for wt in worktrees:
        table.add_row(
            Text(wt.name),
            Text(wt.branch or "(detached)"),
            "clean" if wt.is_clean else "dirty",
            style=None if wt.is_clean else "yellow",
        )

    console.print(table)
