"""Tests for seedkit.core.workspace module."""

import os
from pathlib import Path

import pytest

from seedkit.core.workspace import (
    CandidateKind,
    CloneCandidate,
    RepositoryIdentifier,
    WorkspaceLocator,
    resolve_workspace_root,
)

REPO = RepositoryIdentifier(("example.com", "org", "tpl"))


class TestRepositoryIdentifier:

    def test_parse(self):
        assert RepositoryIdentifier.parse("example.com/org/tpl") == REPO

    def test_parse_ignores_stray_slashes(self):
        assert RepositoryIdentifier.parse("/example.com//org/tpl/") == REPO

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            RepositoryIdentifier(())
        with pytest.raises(ValueError):
            RepositoryIdentifier.parse("")

    def test_str(self):
        assert str(REPO) == "example.com/org/tpl"


class TestResolveWorkspaceRoot:
    """Tests for resolve_workspace_root()."""

    def test_uses_env_value(self):
        assert resolve_workspace_root({"GOPATH": "/opt/go"}) == Path("/opt/go")

    def test_keeps_first_of_many(self):
        value = os.pathsep.join(["/first/go", "/second/go"])
        assert resolve_workspace_root({"GOPATH": value}) == Path("/first/go")

    def test_falls_back_to_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert resolve_workspace_root({}) == tmp_path / "go"

    def test_empty_value_falls_back_to_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert resolve_workspace_root({"GOPATH": ""}) == tmp_path / "go"

    def test_custom_env_var_and_default(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert resolve_workspace_root({"WS": "/ws"}, env_var="WS") == Path("/ws")
        assert resolve_workspace_root({}, env_var="WS", default_dir="code") == tmp_path / "code"


class TestWorkspaceLocator:
    """Tests for WorkspaceLocator."""

    def test_scenario_paths(self):
        locator = WorkspaceLocator(REPO, Path("/home/u/go"))
        assert str(locator.local_path) == "/home/u/go/src/example.com/org/tpl"
        assert str(locator.cache_path) == "/home/u/go/pkg/mod/example.com/org/tpl"
        assert locator.remote_url == "https://example.com/org/tpl.git"

    def test_three_candidates_in_order(self):
        candidates = WorkspaceLocator(REPO, Path("/home/u/go")).candidates()
        assert [c.kind for c in candidates] == [
            CandidateKind.WORKSPACE,
            CandidateKind.CACHE,
            CandidateKind.REMOTE,
        ]
        assert candidates[0].location == "/home/u/go/src/example.com/org/tpl"
        assert candidates[1].location == "/home/u/go/pkg/mod/example.com/org/tpl"
        assert candidates[2].location == "https://example.com/org/tpl.git"
        assert all(c.branch is None for c in candidates)

    def test_labels_are_distinct(self):
        labels = [c.label for c in WorkspaceLocator(REPO, Path("/w")).candidates()]
        assert len(set(labels)) == 3

    @pytest.mark.parametrize("segments", [
        ("a",),
        ("github.com", "padraicbc", "ponzu"),
        ("host", "deep", "nested", "repo"),
    ])
    def test_always_three_candidates(self, segments):
        locator = WorkspaceLocator(RepositoryIdentifier(segments), Path("/w"))
        assert len(locator.candidates()) == 3

    def test_dev_mode_single_candidate(self):
        locator = WorkspaceLocator(REPO, Path("/home/u/go"), dev=True, dev_branch="tpl-dev")
        candidates = locator.candidates()
        assert len(candidates) == 1
        assert candidates[0].kind == CandidateKind.WORKSPACE
        assert candidates[0].location == "/home/u/go/src/example.com/org/tpl"
        assert candidates[0].branch == "tpl-dev"

    def test_dev_mode_with_fork(self):
        locator = WorkspaceLocator(
            REPO, Path("/home/u/go"), dev=True, fork="github.com/me/tpl"
        )
        candidates = locator.candidates()
        assert len(candidates) == 1
        assert candidates[0].location == "/home/u/go/src/github.com/me/tpl"

    @pytest.mark.parametrize("fork", ["/github.com/me/tpl", "//github.com/me/tpl/"])
    def test_fork_with_leading_separator_stays_under_src(self, fork):
        locator = WorkspaceLocator(REPO, Path("/home/u/go"), dev=True, fork=fork)
        location = locator.candidates()[0].location
        assert location.rstrip("/") == "/home/u/go/src/github.com/me/tpl"

    def test_fork_ignored_outside_dev_mode(self):
        locator = WorkspaceLocator(REPO, Path("/home/u/go"), fork="github.com/me/tpl")
        assert locator.candidates()[0].location == "/home/u/go/src/example.com/org/tpl"


class TestCloneCandidate:

    def test_clone_args(self):
        candidate = CloneCandidate(CandidateKind.REMOTE, "https://x/y.git", "network")
        assert candidate.clone_args(Path("/tmp/dest")) == ["https://x/y.git", "/tmp/dest"]

    def test_clone_args_with_branch(self):
        candidate = CloneCandidate(CandidateKind.WORKSPACE, "/src/y", "local", branch="dev")
        assert candidate.clone_args(Path("/tmp/dest")) == [
            "/src/y", "--branch", "dev", "--single-branch", "/tmp/dest",
        ]
