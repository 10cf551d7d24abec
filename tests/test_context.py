"""Unit tests for ContextAssembler."""

import logging
import warnings

import pytest

from auto_commit.context import ContextAssembler
from auto_commit.errors import (
    EmptyChangeSetWarning,
    NotARepositoryError,
    RepositoryAccessError,
)
from auto_commit.schemas import ChangeSet


class FakeRepository:
    """GitRepository stand-in with canned answers."""

    def __init__(self, *, inside=True, paths=("foo.py",), diff="+added function foo", error=None):
        self.inside = inside
        self.paths = tuple(paths)
        self.diff = diff
        self.error = error
        self.calls: list[str] = []

    def is_inside_repository(self) -> bool:
        self.calls.append("is_inside_repository")
        if self.error is not None:
            raise self.error
        return self.inside

    def list_changed_paths(self):
        self.calls.append("list_changed_paths")
        return self.paths

    def read_staged_diff(self) -> str:
        self.calls.append("read_staged_diff")
        return self.diff


def test_collect_change_set_reads_paths_and_diff():
    repo = FakeRepository(paths=("a.py", "b.py"), diff="diff text")

    change_set = ContextAssembler(repo).collect_change_set()

    assert change_set == ChangeSet(paths=("a.py", "b.py"), raw_diff="diff text")
    assert repo.calls == ["is_inside_repository", "list_changed_paths", "read_staged_diff"]


def test_collect_change_set_outside_repository_raises():
    repo = FakeRepository(inside=False)

    with pytest.raises(NotARepositoryError):
        ContextAssembler(repo).collect_change_set()

    assert repo.calls == ["is_inside_repository"]


def test_collect_change_set_propagates_access_errors():
    repo = FakeRepository(error=RepositoryAccessError("Could not run git"))

    with pytest.raises(RepositoryAccessError):
        ContextAssembler(repo).collect_change_set()


def test_empty_change_set_warns_but_is_returned():
    repo = FakeRepository(paths=(), diff="")

    with pytest.warns(EmptyChangeSetWarning, match="no staged files"):
        change_set = ContextAssembler(repo).collect_change_set()

    assert change_set.is_empty


def test_empty_change_set_is_only_reported_through_the_warning(caplog):
    caplog.set_level(logging.DEBUG, logger="auto_commit.context")

    with pytest.warns(EmptyChangeSetWarning):
        ContextAssembler(FakeRepository(paths=(), diff="")).collect_change_set()

    assert [r for r in caplog.records if r.levelno > logging.DEBUG] == []


def test_non_empty_change_set_does_not_warn():
    repo = FakeRepository()

    with warnings.catch_warnings():
        warnings.simplefilter("error", EmptyChangeSetWarning)
        ContextAssembler(repo).collect_change_set()


def test_build_context_under_limit_keeps_every_token():
    change_set = ChangeSet(paths=("foo.py",), raw_diff="added function foo")

    context = ContextAssembler(FakeRepository()).build_context(change_set)

    assert context == "Changed files: foo.py Diff: added function foo"
    assert context.split() == change_set.render().split()


def test_build_context_truncates_to_token_limit():
    change_set = ChangeSet(paths=("foo.py",), raw_diff="one two three four five")

    context = ContextAssembler(FakeRepository(), token_limit=5).build_context(change_set)

    assert context == "Changed files: foo.py Diff: one"


def test_build_context_with_zero_limit_is_empty():
    change_set = ChangeSet(paths=("foo.py",), raw_diff="+x")

    assert ContextAssembler(FakeRepository(), token_limit=0).build_context(change_set) == ""
