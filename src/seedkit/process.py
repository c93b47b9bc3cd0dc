"""Process invocation for seedkit.

Every external program seedkit runs (the clone tool and the module-init
tool) goes through this module, so callers only ever deal with one
narrow capability: run these arguments, wait, succeed or raise.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from seedkit.errors import SeedkitError

logger = logging.getLogger(__name__)

# Default timeout for external commands (seconds)
DEFAULT_TIMEOUT = 600

_UNSET = object()


# =============================================================================
# Exceptions
# =============================================================================

class CommandError(SeedkitError):
    """Base exception for external command failures."""
    pass


class CommandNotFoundError(CommandError):
    """Executable is not installed or not in PATH."""
    pass


class CommandTimeoutError(CommandError):
    """Command timed out."""

    def __init__(self, message: str, timeout: Optional[float]):
        super().__init__(message)
        self.timeout = timeout


class CommandFailedError(CommandError):
    """Command exited with a non-zero exit code."""

    def __init__(self, message: str, returncode: int, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


# =============================================================================
# Core Functions
# =============================================================================


def run_command(
    *args,
    cwd: Optional[Path] = None,
    check: bool = False,
    timeout: Optional[float] = DEFAULT_TIMEOUT
) -> subprocess.CompletedProcess:
    """Run an external command and wait for it to exit.

    Args:
        *args: Command and its arguments
        cwd: Working directory (defaults to cwd)
        check: Raise exception on failure
        timeout: Command timeout in seconds, None waits forever

    Returns:
        CompletedProcess result

    Raises:
        CommandNotFoundError: If the executable cannot be found
        CommandTimeoutError: If command times out
        CommandFailedError: If check=True and command fails
    """
    cmd = [str(arg) for arg in args]
    cmd_str = " ".join(cmd)
    logger.debug("Running: %s (cwd=%s)", cmd_str, cwd)

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd or Path.cwd(),
            capture_output=True,
            text=True,
            timeout=timeout
        )
    except FileNotFoundError:
        raise CommandNotFoundError(
            f"'{cmd[0]}' is not installed or not in PATH."
        )
    except subprocess.TimeoutExpired:
        raise CommandTimeoutError(
            f"Command timed out after {timeout}s: {cmd_str}",
            timeout=timeout
        )

    if check and result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise CommandFailedError(
            f"Command failed: {cmd_str}\n{stderr}".rstrip(),
            returncode=result.returncode,
            stderr=stderr
        )
    return result


class CommandRunner:
    """Runs external commands, raising on any failure.

    This is the capability handed to the acquisition and materialization
    steps. Tests substitute any object with the same ``run`` signature.
    """

    def __init__(self, timeout: Optional[float] = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def run(
        self,
        *args,
        cwd: Optional[Path] = None,
        timeout=_UNSET
    ) -> subprocess.CompletedProcess:
        """Run a command; a per-call timeout (None included) overrides the default."""
        return run_command(
            *args,
            cwd=cwd,
            check=True,
            timeout=self.timeout if timeout is _UNSET else timeout,
        )
