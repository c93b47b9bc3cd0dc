"""Shared test fixtures for seedkit.

Provides:
- git_workspace: Temporary directory that is a real git repo holding a template
- fake_runner: In-memory CommandRunner that simulates clone and module-init
- cli_runner: Click CliRunner
- mock_clone: pytest-subprocess fixture pre-configured for a failing clone
"""

import subprocess
from pathlib import Path

import pytest
from click.testing import CliRunner

from seedkit.process import CommandFailedError

TEMPLATE_FILES = {
    "main.go": "package main\n",
    "go.mod": "module github.com/padraicbc/ponzu\n",
    "go.sum": "",
    ".circleci/config.yml": "version: 2\n",
    ".git/HEAD": "ref: refs/heads/master\n",
    "content/doc.go": "package content\n",
    "management/doc.go": "package management\n",
    "system/doc.go": "package system\n",
}


def write_template(root: Path, files=None) -> Path:
    """Write a template tree under ``root``."""
    for rel, text in (files or TEMPLATE_FILES).items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    return root


class FakeRunner:
    """Stands in for CommandRunner.

    ``git clone`` populates the destination with TEMPLATE_FILES unless the
    source is listed in ``failing``, in which case it leaves a partial file
    behind and raises. ``go mod init`` writes a go.mod in ``cwd``.
    """

    def __init__(self, failing=(), module_init_fails=False, files=None):
        self.failing = set(failing)
        self.module_init_fails = module_init_fails
        self.files = files
        self.calls = []

    def run(self, *args, cwd=None, timeout=None):
        args = [str(arg) for arg in args]
        self.calls.append(args)

        if args[:2] == ["git", "clone"]:
            source, destination = args[2], Path(args[-1])
            if source in self.failing:
                destination.mkdir(parents=True, exist_ok=True)
                (destination / "partial.txt").write_text(source)
                raise CommandFailedError(
                    f"Command failed: {' '.join(args)}\nfatal: repository '{source}' does not exist",
                    returncode=128,
                    stderr=f"fatal: repository '{source}' does not exist",
                )
            write_template(destination, self.files)

        elif args[:3] == ["go", "mod", "init"]:
            if self.module_init_fails:
                raise CommandFailedError(
                    "Command failed: go mod init\ngo: cannot determine module path",
                    returncode=1,
                    stderr="go: cannot determine module path",
                )
            (Path(cwd) / "go.mod").write_text(f"module {args[3]}\n\ngo 1.21\n")

        return subprocess.CompletedProcess(args, 0, "", "")

    @property
    def clone_sources(self):
        return [call[2] for call in self.calls if call[:2] == ["git", "clone"]]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def runner_factory():
    """The FakeRunner class, for tests that need custom failures."""
    return FakeRunner


@pytest.fixture
def git_workspace(tmp_path):
    """Create a real git repo holding a template tree.

    Useful for tests that need actual git operations.
    """
    repo = tmp_path / "template"
    repo.mkdir()
    subprocess.run(["git", "init"], cwd=repo, capture_output=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=repo,
        capture_output=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test User"],
        cwd=repo,
        capture_output=True,
    )
    write_template(repo, {
        rel: text for rel, text in TEMPLATE_FILES.items()
        if not rel.startswith(".git/")
    })
    subprocess.run(["git", "add", "-A"], cwd=repo, capture_output=True)
    subprocess.run(
        ["git", "commit", "-m", "Initial commit"],
        cwd=repo,
        capture_output=True,
    )
    return repo


@pytest.fixture
def cli_runner():
    """Click CliRunner for testing CLI commands."""
    return CliRunner()


@pytest.fixture
def mock_clone(fp):
    """Mock a failing git clone using pytest-subprocess.

    Use `fp` directly for custom subprocess mocking in individual tests.
    """
    fp.register(
        ["git", "clone", fp.any()],
        returncode=128,
        stderr="fatal: repository not found\n",
    )
    return fp
