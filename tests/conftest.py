"""Pytest fixtures for git-phantom tests"""
import os
import tempfile
from pathlib import Path
from unittest.mock import Mock

import git
import pytest

from git_phantom.core import ExecutionBridge, HookRunner, ValidationService, WorktreeLifecycle
from git_phantom.models.result import Ok
from git_phantom.services import GitBackend, SubprocessBackend, TmuxBackend


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with one commit on main."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    try:
        repo.git.branch('-M', 'main')
    except Exception:
        pass

    yield repo

    repo.close()


@pytest.fixture
def git_root(git_repo):
    """Repository root as the string the core works with."""
    return str(Path(git_repo.working_dir).resolve())


@pytest.fixture
def git_repo_with_branches(git_repo):
    """Repository with branches feature-x and bugfix besides main."""
    git_repo.git.branch("feature-x")
    git_repo.git.branch("bugfix")
    yield git_repo


@pytest.fixture
def vcs():
    return GitBackend()


@pytest.fixture
def validation(vcs):
    return ValidationService(vcs)


@pytest.fixture
def lifecycle(vcs, validation):
    return WorktreeLifecycle(vcs, validation)


@pytest.fixture
def base_env(temp_dir):
    """A small, predictable caller environment."""
    return {
        "PATH": os.environ.get("PATH", "/usr/bin:/bin"),
        "HOME": str(temp_dir),
        "SHELL": "/bin/sh",
        "LANG": "C",
    }


@pytest.fixture
def mock_process():
    """Process backend whose children all exit 0."""
    process = Mock(spec=SubprocessBackend)
    process.spawn = Mock(return_value=Ok(0))
    return process


@pytest.fixture
def mock_multiplexer():
    multiplexer = Mock(spec=TmuxBackend)
    multiplexer.is_available = Mock(return_value=True)
    multiplexer.open_pane = Mock(return_value=Ok(0))
    return multiplexer


@pytest.fixture
def bridge(validation, mock_process, mock_multiplexer):
    return ExecutionBridge(validation, mock_process, mock_multiplexer)


@pytest.fixture
def hook_runner():
    return HookRunner(SubprocessBackend())
