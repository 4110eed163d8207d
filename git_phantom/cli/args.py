"""Command-line argument parsing for git-phantom."""

import argparse
from typing import List, Optional

from git_phantom.__version__ import __version__
from git_phantom.constants import PaneDirection


def _add_select(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--select",
        action="store_true",
        help="Pick the worktree interactively instead of naming it",
    )


def _add_tmux(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-t", "--tmux",
        dest="tmux",
        action="store_const",
        const=PaneDirection.NEW,
        help="Open in a new tmux window",
    )
    group.add_argument(
        "--tmux-vertical", "--tmux-v",
        dest="tmux",
        action="store_const",
        const=PaneDirection.VERTICAL,
        help="Open in a vertical tmux split",
    )
    group.add_argument(
        "--tmux-horizontal", "--tmux-h",
        dest="tmux",
        action="store_const",
        const=PaneDirection.HORIZONTAL,
        help="Open in a horizontal tmux split",
    )


def _add_after_create(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--shell", action="store_true", help="Enter the worktree's shell afterwards")
    group.add_argument("--exec", metavar="COMMAND", help="Run COMMAND in the worktree afterwards")
    parser.add_argument("--no-hooks", action="store_true", help="Skip post-create hooks")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="phantom",
        description="Manage named git worktrees without disturbing your main checkout",
        epilog="Hooks are read from phantom.config.json at the repository root.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"phantom {__version__}")

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    create = commands.add_parser("create", help="Create a worktree on a new branch")
    create.add_argument("name", help="Worktree and branch name")
    create.add_argument("--base", metavar="REF", help="Start the branch from REF (default: HEAD)")
    _add_after_create(create)

    attach = commands.add_parser("attach", help="Create a worktree for an existing branch")
    attach.add_argument("name", help="Name of the existing branch")
    _add_after_create(attach)

    list_cmd = commands.add_parser("list", help="List worktrees")
    list_cmd.add_argument("--names", action="store_true", help="Print only worktree names")
    _add_select(list_cmd)

    where = commands.add_parser("where", help="Print the path of a worktree")
    where.add_argument("name", nargs="?", help="Worktree name")
    _add_select(where)

    delete = commands.add_parser("delete", help="Delete a worktree")
    delete.add_argument("name", nargs="?", help="Worktree name")
    delete.add_argument(
        "-f", "--force", action="store_true", help="Delete even with uncommitted changes"
    )
    delete.add_argument(
        "--current", action="store_true", help="Delete the worktree you are currently in"
    )
    _add_select(delete)

    shell = commands.add_parser("shell", help="Open a shell in a worktree")
    shell.add_argument("name", nargs="?", help="Worktree name")
    _add_select(shell)
    _add_tmux(shell)

    exec_cmd = commands.add_parser(
        "exec",
        help="Run a command in a worktree",
        usage="phantom exec [--select] [-i] [--tmux] [NAME] COMMAND [ARGS...]",
    )
    _add_select(exec_cmd)
    _add_tmux(exec_cmd)
    exec_cmd.add_argument(
        "-i", "--interactive",
        action="store_true",
        help="Connect the command to your terminal's input",
    )
    exec_cmd.add_argument(
        "args",
        nargs=argparse.REMAINDER,
        help="Worktree name (omitted with --select) followed by the command",
    )

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
