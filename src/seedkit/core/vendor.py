"""Vendor the template's core packages into the new project."""

import logging
import os
from pathlib import Path
from typing import Sequence

from seedkit.errors import SeedkitError

logger = logging.getLogger(__name__)


class VendorError(SeedkitError):
    """Core packages could not be vendored."""
    pass


def vendor_core_packages(
    tree: Path,
    packages: Sequence[str],
    vendor_dir: str,
    user_content_dir: str = "",
) -> Path:
    """Move core packages under the project's vendor directory.

    Each package directory at the project root is moved into
    ``tree/vendor_dir``. Afterwards an empty ``user_content_dir`` is created
    at the root for the user's own code.

    Args:
        tree: Project root
        packages: Package directories to move, relative to the root
        vendor_dir: Vendor directory, relative to the root
        user_content_dir: Directory to recreate empty, or "" for none

    Returns:
        The vendor directory

    Raises:
        VendorError: If a package is missing or cannot be moved
    """
    vendor_path = tree / vendor_dir
    try:
        vendor_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise VendorError(f"Failed to create vendor directory {vendor_path}: {e}") from e

    for package in packages:
        source = tree / package
        if not source.is_dir():
            raise VendorError(f"Core package '{package}' not found in {tree}")
        try:
            os.replace(source, vendor_path / package)
        except OSError as e:
            raise VendorError(f"Failed to vendor '{package}': {e}") from e
        logger.debug("Vendored %s -> %s", source, vendor_path / package)

    if user_content_dir:
        content = tree / user_content_dir
        try:
            content.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise VendorError(f"Failed to create {content}: {e}") from e

    return vendor_path
