"""Tests for the interactive worktree selector"""
import pytest

from git_phantom.models.worktree import Worktree
from git_phantom.ui import fuzzy_match, select_worktree
from git_phantom.ui.selector import worktree_label


class TestFuzzyMatch:
    @pytest.mark.parametrize("query, candidate", [
        ("", "anything"),
        ("feat", "feature-x"),
        ("ftx", "feature-x"),
        ("FX", "feature-x"),
        ("bug", "bugfix"),
    ])
    def test_matches(self, query, candidate):
        assert fuzzy_match(query, candidate)

    @pytest.mark.parametrize("query, candidate", [
        ("xf", "feature-x"),
        ("featurex2", "feature-x"),
        ("z", "bugfix"),
    ])
    def test_no_match(self, query, candidate):
        assert not fuzzy_match(query, candidate)


def test_select_from_empty_list():
    assert select_worktree([]) is None


class TestWorktreeLabel:
    def test_dirty_marker_is_literal_text(self):
        label = worktree_label(Worktree(name="feat", path="/p", branch="feat", is_clean=False))
        assert label.plain == "feat  (feat)  [dirty]"

    def test_brackets_in_names_kept(self):
        label = worktree_label(Worktree(name="fix[1]", path="/p", branch="[bold]x"))
        assert label.plain == "fix[1]  ([bold]x)"

    def test_clean_without_branch(self):
        assert worktree_label(Worktree(name="feat", path="/p")).plain == "feat"
