"""Filesystem deletion operator.

Handles deletion of zap paths and installed artifacts with dry-run
support and per-path failure isolation.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FilesystemActionResult:
    """Result of a single filesystem deletion operation.

    Attributes:
        path: Absolute path that was operated on.
        success: Whether the operation completed successfully.
        error: Error message if the operation failed, None otherwise.
        dry_run: Whether this was a dry-run (no actual deletion).
        skipped: Whether the path did not exist and nothing was done.
    """

    path: str
    success: bool
    error: str | None = None
    dry_run: bool = False
    skipped: bool = False


class FilesystemOperator:
    """Deletes files, directories and symlinks.

    Missing paths are reported as skipped successes: zapping an
    application that never wrote its preferences is not an error.

    Attributes:
        _dry_run: If True, simulate deletions without modifying the filesystem.
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the FilesystemOperator.

        Args:
            dry_run: If True, report what would be deleted without deleting.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    def delete(self, paths: list[Path]) -> list[FilesystemActionResult]:
        """Delete multiple filesystem paths and return results.

        Paths are deleted individually, with failures isolated per path.

        Args:
            paths: Absolute filesystem paths to delete.

        Returns:
            List of FilesystemActionResult, one per input path.
        """
        return [self._delete_single(path) for path in paths]

    def _delete_single(self, target: Path) -> FilesystemActionResult:
        """Delete a single filesystem path.

        - Directories: shutil.rmtree
        - Files and symlinks (including dead ones): Path.unlink
        """
        path = str(target)

        if not target.exists() and not target.is_symlink():
            logger.debug("Nothing to delete at %s", path)
            return FilesystemActionResult(path=path, success=True, skipped=True)

        if self._dry_run:
            logger.info("Dry-run: would delete %s", path)
            return FilesystemActionResult(path=path, success=True, dry_run=True)

        try:
            # Directories (but not symlinks to directories)
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            else:
                target.unlink()
        except OSError as e:
            logger.warning("Failed to delete %s: %s", path, e)
            return FilesystemActionResult(path=path, success=False, error=str(e))

        logger.info("Deleted %s", path)
        return FilesystemActionResult(path=path, success=True)
