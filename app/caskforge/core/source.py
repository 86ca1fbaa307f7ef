"""Source checkout retrieval.

Clones a recipe's git URL into a fresh staging directory.
"""

import logging
import subprocess
from pathlib import Path

from caskforge.models.recipe import PackageMetadata
from caskforge.utils.shell import command_exists, run_command, tail_lines

logger = logging.getLogger(__name__)

# Timeout for git clone (10 minutes)
_CLONE_TIMEOUT: float = 600.0


class SourceFetchError(Exception):
    """Raised when the source checkout cannot be retrieved."""


def fetch_source(package: PackageMetadata, staged_path: Path) -> Path:
    """Shallow-clone the package source into ``staged_path``.

    The staging directory must not exist or be empty; git refuses to
    clone into a populated directory.

    Args:
        package: Package metadata with the git URL and branch.
        staged_path: Destination checkout directory.

    Returns:
        The checkout directory.

    Raises:
        SourceFetchError: If git is missing or the clone fails.
    """
    if not command_exists("git"):
        msg = "git is required to fetch the source but was not found on PATH"
        raise SourceFetchError(msg)

    if not package.checksum_verified:
        logger.warning("No checksum for %s: source is not verified", package.token)

    args = [
        "git",
        "clone",
        "--depth",
        "1",
        "--branch",
        package.branch,
        package.url,
        str(staged_path),
    ]
    logger.info("Cloning %s (branch %s) into %s", package.url, package.branch, staged_path)

    try:
        result = run_command(args, timeout=_CLONE_TIMEOUT)
    except (OSError, subprocess.TimeoutExpired) as e:
        msg = f"Failed to run git: {e}"
        raise SourceFetchError(msg) from e

    if not result.success:
        logger.debug("git clone stderr (tail):\n%s", tail_lines(result.stderr))
        msg = f"Failed to clone {package.url} (branch {package.branch})"
        raise SourceFetchError(msg)

    return staged_path
