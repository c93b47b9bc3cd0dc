"""Project bootstrap orchestration.

State machine (strictly forward):

    CHECK_EXISTING -> CONFIRM_OVERWRITE -> CREATE -> ACQUIRE -> MATERIALIZE -> DONE
                              |                         |            |
                           ABORTED                    ERROR        ERROR

All work happens in a staging directory beside the target. The target is
only replaced once acquisition and materialization have both succeeded, so
a failed run leaves the filesystem as it found it.
"""

import functools
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Mapping, Optional

from rich.console import Console
from rich.markup import escape

from seedkit.core.acquire import AcquisitionError, SourceAcquirer
from seedkit.core.config import SeedConfig
from seedkit.core.materialize import OverrideBlock, ProjectMaterializer
from seedkit.core.vendor import vendor_core_packages
from seedkit.core.workspace import (
    CloneCandidate,
    RepositoryIdentifier,
    WorkspaceLocator,
    resolve_workspace_root,
)
from seedkit.errors import SeedkitError
from seedkit.process import CommandRunner

logger = logging.getLogger(__name__)

AFFIRMATIVE = ("y", "yes")
NEGATIVE = ("n", "no", "")


class BootstrapState(str, Enum):
    CHECK_EXISTING = "check_existing"
    CONFIRM_OVERWRITE = "confirm_overwrite"
    CREATE = "create"
    ACQUIRE = "acquire"
    MATERIALIZE = "materialize"
    DONE = "done"
    ABORTED = "aborted"
    ERROR = "error"


class BootstrapError(SeedkitError):
    """Bootstrap reached the ERROR state."""

    def __init__(self, message: str, state: BootstrapState):
        super().__init__(message)
        self.state = state


@dataclass
class BootstrapOutcome:
    """Terminal state of a bootstrap run that did not error."""
    state: BootstrapState
    target: Path
    candidate: Optional[CloneCandidate] = None
    history: List[BootstrapState] = field(default_factory=list)


class ProjectBootstrapper:
    """Creates a project at a path from the template repository."""

    def __init__(
        self,
        locator: WorkspaceLocator,
        acquirer: SourceAcquirer,
        materializer: ProjectMaterializer,
        prompt: Callable[[], str],
        console: Optional[Console] = None,
    ):
        self.locator = locator
        self.acquirer = acquirer
        self.materializer = materializer
        self.prompt = prompt
        self.console = console or Console()

    def run(self, path: str) -> BootstrapOutcome:
        """Bootstrap a project at ``path``.

        Args:
            path: Target directory; also used as the module name

        Returns:
            Outcome in state DONE or ABORTED

        Raises:
            BootstrapError: If the run ends in the ERROR state
        """
        target = Path(path)
        history = [BootstrapState.CHECK_EXISTING]

        try:
            target.stat()
            exists = True
        except FileNotFoundError:
            exists = False
        except OSError as e:
            raise BootstrapError(str(e), BootstrapState.CHECK_EXISTING) from e

        dest = Path(os.path.abspath(path))
        if exists:
            resolved = target.resolve()
            cwd = Path.cwd().resolve()
            if resolved == cwd or resolved in cwd.parents:
                raise BootstrapError(
                    f"Refusing to overwrite {path}: it contains the current directory.",
                    BootstrapState.CHECK_EXISTING,
                )

            history.append(BootstrapState.CONFIRM_OVERWRITE)
            if not self._confirm_overwrite(path):
                history.append(BootstrapState.ABORTED)
                return BootstrapOutcome(BootstrapState.ABORTED, target, history=history)

        history.append(BootstrapState.CREATE)
        created_parents = _missing_parents(dest.parent)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(
                prefix=f".{dest.name}.",
                suffix=".staging",
                dir=str(dest.parent),
            ))
        except OSError as e:
            _remove_empty_dirs(created_parents)
            raise BootstrapError(
                f"Failed to create project directory {path}: {e}",
                BootstrapState.CREATE,
            ) from e

        published = False
        try:
            candidate = self._build(staging / "tree", path, history)
            self._publish(staging / "tree", dest, exists)
            published = True
        finally:
            if staging.exists():
                try:
                    shutil.rmtree(staging)
                except OSError as e:
                    logger.warning("Could not remove staging directory %s: %s", staging, e)
            if not published:
                _remove_empty_dirs(created_parents)

        history.append(BootstrapState.DONE)
        if self.locator.dev:
            self.console.print(
                f"Dev build cloned from {escape(candidate.location)}:{escape(candidate.branch or '')}"
            )
        else:
            self.console.print(f"[green]✓[/] New project created at [cyan]{escape(path)}[/]")
        return BootstrapOutcome(BootstrapState.DONE, target, candidate, history)

    def _confirm_overwrite(self, path: str) -> bool:
        self.console.print(f"Using '{escape(path)}' as project directory")
        self.console.print("Path exists, overwrite contents? (y/N):")
        answer = self.prompt().strip().lower()

        if answer in AFFIRMATIVE:
            return True
        if answer not in NEGATIVE:
            logger.warning("Unrecognized overwrite answer: %r", answer)
            self.console.print(
                "[yellow]Input not recognized. No files overwritten. "
                "Answer as 'y' or 'n' only.[/]"
            )
        return False

    def _build(self, tree: Path, path: str, history: List[BootstrapState]) -> CloneCandidate:
        """Acquire and materialize into ``tree``."""
        tree.mkdir()

        history.append(BootstrapState.ACQUIRE)
        try:
            result = self.acquirer.acquire(self.locator.candidates(), tree)
        except OSError as e:
            raise BootstrapError(str(e), BootstrapState.ACQUIRE) from e
        if not result.succeeded:
            error = AcquisitionError(result)
            raise BootstrapError(str(error), BootstrapState.ACQUIRE) from error
        logger.info("Cloned template from %s", result.candidate_used.label)

        history.append(BootstrapState.MATERIALIZE)
        try:
            self.materializer.materialize(tree, path, dev=self.locator.dev)
        except (SeedkitError, OSError) as e:
            raise BootstrapError(str(e), BootstrapState.MATERIALIZE) from e
        return result.candidate_used

    def _publish(self, tree: Path, target: Path, overwrite: bool) -> None:
        """Move the finished tree to ``target``, replacing it if confirmed."""
        try:
            if overwrite:
                if target.is_dir() and not target.is_symlink():
                    shutil.rmtree(target)
                else:
                    target.unlink()
            os.replace(tree, target)
        except OSError as e:
            raise BootstrapError(
                f"Failed to move project into {target}: {e}",
                BootstrapState.MATERIALIZE,
            ) from e


def _missing_parents(path: Path) -> List[Path]:
    """Directories from ``path`` upwards that do not exist yet, deepest first."""
    missing = []
    while not path.exists() and path != path.parent:
        missing.append(path)
        path = path.parent
    return missing


def _remove_empty_dirs(paths: List[Path]) -> None:
    for path in paths:
        try:
            path.rmdir()
        except OSError as e:
            logger.debug("Left directory %s in place: %s", path, e)


# =============================================================================
# Module-level convenience functions
# =============================================================================

def build_bootstrapper(
    config: SeedConfig,
    prompt: Callable[[], str],
    dev: bool = False,
    fork: Optional[str] = None,
    runner=None,
    env: Optional[Mapping[str, str]] = None,
    console: Optional[Console] = None,
) -> ProjectBootstrapper:
    """Wire a bootstrapper from configuration."""
    console = console or Console()
    runner = runner or CommandRunner()

    locator = WorkspaceLocator(
        RepositoryIdentifier.parse(config.repository),
        resolve_workspace_root(
            env,
            env_var=config.workspace_env,
            default_dir=config.default_workspace_dir,
        ),
        dev=dev,
        fork=fork if dev else None,
        dev_branch=config.dev_branch,
    )
    acquirer = SourceAcquirer(
        runner,
        clone_command=config.clone_command,
        timeout=config.clone_timeout_seconds,
        console=console,
    )
    materializer = ProjectMaterializer(
        OverrideBlock(
            module=config.override_module,
            local_path=config.override_path,
            version=config.override_version,
        ),
        vendor=functools.partial(
            vendor_core_packages,
            packages=config.vendor_packages,
            vendor_dir=config.vendor_dir,
            user_content_dir=config.user_content_dir,
        ),
        runner=runner,
        artifacts=config.removed_artifacts,
        module_file=config.module_file,
        module_init_command=config.module_init_command,
        timeout=config.module_init_timeout_seconds,
        console=console,
    )
    return ProjectBootstrapper(locator, acquirer, materializer, prompt, console=console)
