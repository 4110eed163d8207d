"""Command-line interface for git-phantom"""

import argparse
import os
import shlex
import sys
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from rich.markup import escape

from git_phantom.cli.args import parse_args
from git_phantom.config import PhantomConfig, load_config
from git_phantom.constants import ExitCode, PaneDirection
from git_phantom.core import ExecutionBridge, HookRunner, ValidationService, WorktreeLifecycle
from git_phantom.core.execution import user_shell
from git_phantom.display import console, display_worktree_table, print_error, print_plain, print_warning
from git_phantom.exceptions import ConfigNotFoundError, ConfigParseError, ConfigValidationError, NotAGitRepositoryError
from git_phantom.logging_config import get_logger, setup_logging
from git_phantom.models.errors import ErrorKind
from git_phantom.models.result import Err, Result
from git_phantom.services import GitBackend, SubprocessBackend, TmuxBackend
from git_phantom.ui import select_worktree

logger = get_logger(__name__)


def _carried_exit_code(error) -> int:
    return error.exit_code or ExitCode.GENERAL_ERROR


# One entry per ErrorKind; a callable reads the code from the error itself
EXIT_CODES: Dict[ErrorKind, object] = {
    ErrorKind.INVALID_NAME: ExitCode.VALIDATION_ERROR,
    ErrorKind.WORKTREE_NOT_FOUND: ExitCode.NOT_FOUND,
    ErrorKind.WORKTREE_ALREADY_EXISTS: ExitCode.VALIDATION_ERROR,
    ErrorKind.WORKTREE_BUSY: ExitCode.GENERAL_ERROR,
    ErrorKind.BRANCH_NOT_FOUND: ExitCode.VALIDATION_ERROR,
    ErrorKind.BRANCH_ALREADY_EXISTS: ExitCode.VALIDATION_ERROR,
    ErrorKind.UNCOMMITTED_CHANGES: ExitCode.VALIDATION_ERROR,
    ErrorKind.VCS_FAILURE: ExitCode.GENERAL_ERROR,
    ErrorKind.PROCESS_SPAWN_ERROR: _carried_exit_code,
    ErrorKind.HOOK_COMMAND_FAILED: _carried_exit_code,
    ErrorKind.HOOK_COPY_FAILED: ExitCode.GENERAL_ERROR,
}


def exit_code_for(error, not_found: int = ExitCode.NOT_FOUND) -> int:
    """Exit code for a failure value; ``not_found`` overrides WORKTREE_NOT_FOUND."""
    if error.kind == ErrorKind.WORKTREE_NOT_FOUND:
        return not_found
    code = EXIT_CODES[error.kind]
    if callable(code):
        return code(error)
    return code


class PhantomCLI:
    """Translates parsed arguments into core calls, output and exit codes."""

    def __init__(
        self,
        git_root: str,
        cwd: str,
        env: Mapping[str, str],
        vcs: Optional[GitBackend] = None,
        process: Optional[SubprocessBackend] = None,
        multiplexer: Optional[TmuxBackend] = None,
    ):
        self.git_root = git_root
        self.cwd = cwd
        self.env = dict(env)
        self.vcs = vcs or GitBackend()
        self.process = process or SubprocessBackend()
        self.multiplexer = multiplexer or TmuxBackend()

        self.validation = ValidationService(self.vcs)
        self.lifecycle = WorktreeLifecycle(self.vcs, self.validation)
        self.bridge = ExecutionBridge(self.validation, self.process, self.multiplexer)
        self.hooks = HookRunner(self.process)

    @classmethod
    def from_environment(cls) -> "PhantomCLI":
        """Build from the real working directory and environment."""
        cwd = os.getcwd()
        vcs = GitBackend()
        return cls(vcs.find_git_root(cwd), cwd, os.environ, vcs=vcs)

    def dispatch(self, args: argparse.Namespace) -> int:
        handlers: Dict[str, Callable[[argparse.Namespace], int]] = {
            "create": self.cmd_create,
            "attach": self.cmd_attach,
            "list": self.cmd_list,
            "where": self.cmd_where,
            "delete": self.cmd_delete,
            "shell": self.cmd_shell,
            "exec": self.cmd_exec,
        }
        return handlers[args.command](args)

    # Commands

    def cmd_create(self, args: argparse.Namespace) -> int:
        result = self.lifecycle.create(self.git_root, args.name, args.base)
        return self._after_new_worktree(args, result, "Created")

    def cmd_attach(self, args: argparse.Namespace) -> int:
        result = self.lifecycle.attach(self.git_root, args.name)
        return self._after_new_worktree(args, result, "Attached")

    def cmd_list(self, args: argparse.Namespace) -> int:
        result = self.lifecycle.list_worktrees(self.git_root)
        if isinstance(result, Err):
            return self._fail(result.error)
        worktrees = result.value

        if args.select:
            picked = select_worktree(worktrees)
            if picked:
                print_plain(picked)
        elif args.names:
            for wt in worktrees:
                print_plain(wt.name)
        else:
            display_worktree_table(worktrees)
        return ExitCode.SUCCESS

    def cmd_where(self, args: argparse.Namespace) -> int:
        name, code = self._resolve_name(args)
        if name is None:
            return code

        result = self.lifecycle.where(self.git_root, name)
        if isinstance(result, Err):
            return self._fail(result.error)
        print_plain(result.value)
        return ExitCode.SUCCESS

    def cmd_delete(self, args: argparse.Namespace) -> int:
        name, code = self._resolve_name(args, allow_current=True)
        if name is None:
            return code

        config = self._load_config()
        result = self.lifecycle.delete(self.git_root, name, force=args.force)
        if isinstance(result, Err):
            return self._fail(result.error, not_found=ExitCode.VALIDATION_ERROR)
        console.print(escape(result.value))

        if config.post_delete.commands:
            console.print("\nRunning post-delete commands...")
            hooked = self.hooks.run_hooks(
                self.git_root, name, config.post_delete, self.env, cwd=self.git_root
            )
            if isinstance(hooked, Err):
                return self._fail(hooked.error)
        return ExitCode.SUCCESS

    def cmd_shell(self, args: argparse.Namespace) -> int:
        name, code = self._resolve_name(args)
        if name is None:
            return code

        if args.tmux:
            return self._open_in_tmux(name, args.tmux)

        found = self.lifecycle.where(self.git_root, name)
        if isinstance(found, Err):
            return self._fail(found.error)
        console.print(f"Entering worktree '{escape(name)}' at {escape(found.value)}")
        console.print("Type 'exit' to return to your original directory\n")
        return self._exit_code(self.bridge.enter_shell(self.git_root, name, self.env))

    def cmd_exec(self, args: argparse.Namespace) -> int:
        remaining: List[str] = list(args.args)
        if not args.select and not remaining:
            return self._usage_error("Usage: phantom exec <worktree-name> <command> [args...]")
        command = remaining if args.select else remaining[1:]
        if not command:
            return self._usage_error("No command given")

        if args.select:
            name, code = self._resolve_name(argparse.Namespace(name=None, select=True))
            if name is None:
                return code
        else:
            name = remaining[0]

        if args.tmux:
            return self._open_in_tmux(name, args.tmux, shlex.join(command))
        result = self.bridge.exec_in(
            self.git_root, name, command, self.env, interactive=args.interactive
        )
        return self._exit_code(result)

    # Helpers

    def _after_new_worktree(self, args: argparse.Namespace, result: Result, verb: str) -> int:
        if isinstance(result, Err):
            return self._fail(result.error)
        console.print(f"[green]{verb} worktree '{escape(args.name)}' at {escape(result.value)}[/green]")

        if not args.no_hooks:
            config = self._load_config()
            if not config.post_create.is_empty:
                console.print("\nRunning post-create hooks...")
                hooked = self.hooks.run_hooks(self.git_root, args.name, config.post_create, self.env)
                if isinstance(hooked, Err):
                    return self._fail(hooked.error)

        if args.shell:
            return self._exit_code(self.bridge.enter_shell(self.git_root, args.name, self.env))
        if args.exec:
            command = [user_shell(self.env), "-c", args.exec]
            return self._exit_code(
                self.bridge.exec_in(self.git_root, args.name, command, self.env, interactive=True)
            )
        return ExitCode.SUCCESS

    def _open_in_tmux(self, name: str, direction: str, command: Optional[str] = None) -> int:
        if not self.multiplexer.is_available(self.env):
            return self._usage_error("The --tmux option can only be used inside a tmux session")

        target = "window" if direction == PaneDirection.NEW else "pane"
        console.print(f"Opening worktree '{escape(name)}' in tmux {target}...")
        result = self.bridge.open_in_multiplexer(self.git_root, name, direction, self.env, command)
        if isinstance(result, Err):
            return self._fail(result.error)
        return ExitCode.SUCCESS

    def _resolve_name(
        self, args: argparse.Namespace, allow_current: bool = False
    ) -> Tuple[Optional[str], int]:
        """Work out which worktree the user means.

        Returns:
            (name, 0), or (None, exit code) when the command should stop here
            (a usage error, or the user cancelled the picker).
        """
        current = allow_current and getattr(args, "current", False)
        if current and (args.name or args.select):
            return None, self._usage_error("Cannot specify --current with a worktree name or --select")
        if args.name and args.select:
            return None, self._usage_error("Cannot specify both a worktree name and --select")

        if current:
            name = self.validation.current_worktree(self.git_root, self.cwd)
            if name is None:
                return None, self._usage_error(
                    "Not in a worktree directory. The --current option can only be used from within a worktree."
                )
            return name, ExitCode.SUCCESS

        if args.select:
            listed = self.lifecycle.list_worktrees(self.git_root)
            if isinstance(listed, Err):
                return None, self._fail(listed.error)
            picked = select_worktree(listed.value)
            if picked is None:
                return None, ExitCode.SUCCESS
            return picked, ExitCode.SUCCESS

        if not args.name:
            return None, self._usage_error("Please provide a worktree name or use --select")
        return args.name, ExitCode.SUCCESS

    def _load_config(self) -> PhantomConfig:
        """Load hooks; a missing file means no hooks, a broken one is a warning."""
        try:
            return load_config(self.git_root)
        except ConfigNotFoundError:
            return PhantomConfig()
        except (ConfigParseError, ConfigValidationError) as e:
            print_warning(f"Configuration warning: {e}")
            return PhantomConfig()

    def _exit_code(self, result: Result) -> int:
        """A child's exit code passes straight through; failures are reported."""
        if isinstance(result, Err):
            return self._fail(result.error)
        return result.value

    def _fail(self, error, not_found: int = ExitCode.NOT_FOUND) -> int:
        print_error(error.message)
        return exit_code_for(error, not_found)

    def _usage_error(self, message: str) -> int:
        print_error(message)
        return ExitCode.VALIDATION_ERROR


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        cli = PhantomCLI.from_environment()
        return cli.dispatch(parsed_args)
    except NotAGitRepositoryError as e:
        print_error(str(e))
        return ExitCode.GENERAL_ERROR
    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return ExitCode.GENERAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
