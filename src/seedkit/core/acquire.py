"""Source acquisition cascade.

Clones the template from the first candidate that works. Candidates are tried
strictly in order, one at a time, into the same destination directory. The
destination is emptied after every failed attempt so that at most one
candidate ever leaves bytes behind.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from seedkit.core.workspace import CloneCandidate
from seedkit.errors import SeedkitError
from seedkit.process import DEFAULT_TIMEOUT, CommandError, CommandRunner

logger = logging.getLogger(__name__)


@dataclass
class CloneAttempt:
    """A failed clone attempt."""
    candidate: CloneCandidate
    error: str


@dataclass
class AcquisitionResult:
    """Outcome of the cascade: the candidate used, or every failure."""
    candidate_used: Optional[CloneCandidate] = None
    attempts: List[CloneAttempt] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.candidate_used is not None

    def summary(self) -> str:
        """Diagnostic naming every failed candidate in attempt order."""
        if self.succeeded:
            return f"Cloned from {self.candidate_used.label}"
        if not self.attempts:
            return "No clone sources to try."
        lines = ["Failed to clone files from every source:"]
        for attempt in self.attempts:
            lines.append(f"  - {attempt.candidate.label}: {attempt.error}")
        return "\n".join(lines)


class AcquisitionError(SeedkitError):
    """Every clone candidate failed."""

    def __init__(self, result: AcquisitionResult):
        super().__init__(result.summary())
        self.result = result


class SourceAcquirer:
    """Runs the clone cascade against an empty destination directory."""

    def __init__(
        self,
        runner=None,
        clone_command: Sequence[str] = ("git", "clone"),
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        console: Optional[Console] = None,
    ):
        self.runner = runner or CommandRunner()
        self.clone_command = list(clone_command)
        self.timeout = timeout
        self.console = console or Console()

    def acquire(
        self,
        candidates: Sequence[CloneCandidate],
        destination: Path,
    ) -> AcquisitionResult:
        """Clone the first candidate that succeeds into ``destination``.

        Args:
            candidates: Candidates in priority order
            destination: Existing, empty directory to clone into

        Returns:
            AcquisitionResult; check ``succeeded`` before using the tree
        """
        result = AcquisitionResult()

        for index, candidate in enumerate(candidates):
            logger.debug("Clone attempt %d: %s", index + 1, candidate.label)
            try:
                self.runner.run(
                    *self.clone_command,
                    *candidate.clone_args(destination),
                    timeout=self.timeout,
                )
            except CommandError as e:
                logger.info("Clone from %s failed: %s", candidate.label, e)
                result.attempts.append(CloneAttempt(candidate, str(e)))
                _reset_directory(destination)
                if index + 1 < len(candidates):
                    self.console.print(
                        f"[yellow]Couldn't clone from[/] {escape(candidate.label)} "
                        f"[yellow]- trying[/] {escape(candidates[index + 1].label)}[yellow]...[/]"
                    )
                continue

            result.candidate_used = candidate
            return result

        self.console.print("[red]Clone failure.[/] No source could be cloned.")
        return result


def _reset_directory(path: Path) -> None:
    """Leave ``path`` as an existing, empty directory."""
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True)
