"""Turn a freshly cloned template into a ready-to-build project.

Pipeline, in order:
1. Vendor core packages
2. Remove VCS/CI/module artifacts (best effort)
3. Run module-init inside the tree
4. Append the override block to the new module descriptor
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape

from seedkit.errors import SeedkitError
from seedkit.process import DEFAULT_TIMEOUT, CommandError, CommandRunner

logger = logging.getLogger(__name__)

DEFAULT_ARTIFACTS = (".git", ".circleci", "go.mod", "go.sum")


class MaterializeError(SeedkitError):
    """A fatal step of the materialization pipeline failed."""
    pass


@dataclass(frozen=True)
class OverrideBlock:
    """Pins a submodule and redirects it to a local copy.

    Both directives render from the same ``module`` so they always agree.
    """
    module: str
    local_path: str
    version: str = "v0.0.0"

    def __post_init__(self):
        if not self.module or not self.local_path:
            raise ValueError("Override block needs a module and a local path")

    def render(self) -> str:
        return (
            f"require {self.module} {self.version}\n"
            f"replace {self.module} => {self.local_path}\n"
        )


@dataclass
class MaterializeReport:
    """What the pipeline did to the tree."""
    removed: List[Path] = field(default_factory=list)
    failed_removals: List[Path] = field(default_factory=list)
    module_file: Optional[Path] = None


class ProjectMaterializer:
    """Runs the post-clone pipeline on a project tree."""

    def __init__(
        self,
        override: OverrideBlock,
        vendor: Callable[[Path], object],
        runner=None,
        artifacts: Sequence[str] = DEFAULT_ARTIFACTS,
        module_file: str = "go.mod",
        module_init_command: Sequence[str] = ("go", "mod", "init"),
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        console: Optional[Console] = None,
    ):
        self.override = override
        self.vendor = vendor
        self.runner = runner or CommandRunner()
        self.artifacts = list(artifacts)
        self.module_file = module_file
        self.module_init_command = list(module_init_command)
        self.timeout = timeout
        self.console = console or Console()

    def materialize(self, tree: Path, module_name: str, dev: bool = False) -> MaterializeReport:
        """Run the pipeline on ``tree``.

        Args:
            tree: Root of the cloned template
            module_name: Name passed to module-init
            dev: Only vendor; keep VCS metadata and the original descriptor

        Raises:
            VendorError: If vendoring fails
            MaterializeError: If module-init or the override append fails
        """
        report = MaterializeReport()
        self.vendor(tree)
        if dev:
            return report

        report.removed, report.failed_removals = self.remove_artifacts(tree)
        report.module_file = self.init_module(tree, module_name)
        self.append_override(report.module_file)
        return report

    def remove_artifacts(self, tree: Path) -> Tuple[List[Path], List[Path]]:
        """Remove non-project files. Failures are warned about, not raised.

        Returns:
            Tuple of (removed, failed) paths
        """
        removed, failed = [], []
        for name in self.artifacts:
            path = tree / name
            if not path.exists() and not path.is_symlink():
                continue
            try:
                if path.is_dir() and not path.is_symlink():
                    shutil.rmtree(path)
                else:
                    path.unlink()
            except OSError as e:
                logger.warning("Failed to remove %s: %s", path, e)
                self.console.print(
                    "[yellow]Failed to remove from your project path. "
                    f"Consider removing it manually:[/] {escape(str(path))}"
                )
                failed.append(path)
                continue
            removed.append(path)
        return removed, failed

    def init_module(self, tree: Path, module_name: str) -> Path:
        """Create a fresh module descriptor in ``tree``."""
        self.console.print("[dim]creating mod file...[/]")
        try:
            self.runner.run(
                *self.module_init_command,
                module_name,
                cwd=tree,
                timeout=self.timeout,
            )
        except CommandError as e:
            raise MaterializeError(f"Module init failed for {module_name}: {e}") from e

        module_file = tree / self.module_file
        if not module_file.is_file():
            raise MaterializeError(
                f"Module init did not create {self.module_file} in {tree}"
            )
        return module_file

    def append_override(self, module_file: Path) -> None:
        """Append the override block once."""
        try:
            existing = module_file.read_text()
            with open(module_file, "a") as f:
                if existing and not existing.endswith("\n"):
                    f.write("\n")
                f.write(self.override.render())
        except OSError as e:
            raise MaterializeError(f"Failed to update {module_file}: {e}") from e
        logger.debug("Appended override for %s to %s", self.override.module, module_file)
