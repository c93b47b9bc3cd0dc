"""Clone candidate resolution.

Maps a template repository identifier to the ordered list of places it can
be cloned from: the local workspace checkout, the local module cache, and
finally the network. This module is pure path arithmetic and never touches
the filesystem.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional, Tuple


class CandidateKind(str, Enum):
    """Origin a clone candidate points at."""
    WORKSPACE = "workspace"
    CACHE = "cache"
    REMOTE = "remote"


@dataclass(frozen=True)
class RepositoryIdentifier:
    """Path segments naming the template repository (host/org/name)."""
    segments: Tuple[str, ...]

    def __post_init__(self):
        if not self.segments:
            raise ValueError("Repository identifier must not be empty")

    @classmethod
    def parse(cls, value: str) -> "RepositoryIdentifier":
        return cls(tuple(part for part in value.strip("/").split("/") if part))

    def as_path(self) -> Path:
        return Path(*self.segments)

    def __str__(self) -> str:
        return "/".join(self.segments)


@dataclass(frozen=True)
class CloneCandidate:
    """One origin to clone the template from."""
    kind: CandidateKind
    location: str
    label: str
    branch: Optional[str] = None

    def clone_args(self, destination: Path) -> List[str]:
        """Arguments following the clone command for this candidate."""
        args = [self.location]
        if self.branch:
            args += ["--branch", self.branch, "--single-branch"]
        args.append(str(destination))
        return args

    def __str__(self) -> str:
        return self.label


def resolve_workspace_root(
    env: Optional[Mapping[str, str]] = None,
    env_var: str = "GOPATH",
    default_dir: str = "go",
) -> Path:
    """Resolve the workspace root directory.

    A value in ``env_var`` may list several roots separated by os.pathsep;
    only the first is used, as ``go get`` does. When unset, the root is
    ``~/<default_dir>``.
    """
    env = os.environ if env is None else env
    value = env.get(env_var, "")
    if not value:
        return Path.home() / default_dir
    return Path(value.split(os.pathsep)[0])


class WorkspaceLocator:
    """Derives clone candidates for a repository.

    Normal mode yields workspace, cache and remote candidates in that order.
    Development mode yields a single workspace candidate on the development
    branch, optionally pointed at a fork below ``<root>/src``.
    """

    def __init__(
        self,
        repository: RepositoryIdentifier,
        workspace_root: Path,
        dev: bool = False,
        fork: Optional[str] = None,
        dev_branch: str = "ponzu-dev",
    ):
        self.repository = repository
        self.workspace_root = Path(workspace_root)
        self.dev = dev
        self.fork = fork
        self.dev_branch = dev_branch

    @property
    def local_path(self) -> Path:
        return self.workspace_root / "src" / self.repository.as_path()

    @property
    def cache_path(self) -> Path:
        return self.workspace_root / "pkg" / "mod" / self.repository.as_path()

    @property
    def remote_url(self) -> str:
        return "https://" + "/".join(self.repository.segments) + ".git"

    def candidates(self) -> List[CloneCandidate]:
        """Ordered clone candidates, highest priority first."""
        if self.dev:
            local = self.local_path
            if self.fork:
                # Relative to <root>/src even when given with a leading separator
                local = self.workspace_root / "src" / self.fork.lstrip("/\\")
            return [
                CloneCandidate(
                    CandidateKind.WORKSPACE,
                    str(local),
                    f"local workspace [{local}:{self.dev_branch}]",
                    branch=self.dev_branch,
                )
            ]

        return [
            CloneCandidate(
                CandidateKind.WORKSPACE,
                str(self.local_path),
                f"local workspace [{self.local_path}]",
            ),
            CloneCandidate(
                CandidateKind.CACHE,
                str(self.cache_path),
                f"module cache [{self.cache_path}]",
            ),
            CloneCandidate(
                CandidateKind.REMOTE,
                self.remote_url,
                f"network [{self.remote_url}]",
            ),
        ]
