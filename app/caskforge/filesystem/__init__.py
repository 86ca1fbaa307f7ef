"""Filesystem operations for uninstall and zap."""

from caskforge.filesystem.operator import FilesystemActionResult, FilesystemOperator

__all__ = ["FilesystemActionResult", "FilesystemOperator"]
