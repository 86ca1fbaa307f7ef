"""Xcode toolchain detection.

Building from source needs a full Xcode installation: the Command Line
Tools alone do not ship xcodebuild.
"""

import logging
import subprocess
from pathlib import Path

from caskforge.core.errors import ToolchainError
from caskforge.utils.shell import run_command

logger = logging.getLogger(__name__)

XCODE_SELECT = "/usr/bin/xcode-select"
XCODEBUILD_RELPATH = Path("usr/bin/xcodebuild")

TOOLCHAIN_MISSING_MESSAGE = """\
{name} requires Xcode (not just Command Line Tools) to build from source.

Please install Xcode from the Mac App Store, then run:
  sudo xcode-select -s /Applications/Xcode.app/Contents/Developer"""


def get_developer_dir() -> Path | None:
    """Return the active developer directory reported by xcode-select.

    Returns:
        The developer directory, or None if xcode-select is missing or fails.
    """
    try:
        result = run_command([XCODE_SELECT, "-p"], timeout=30.0)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("xcode-select unavailable: %s", e)
        return None

    path = result.stdout.strip()
    if not result.success or not path:
        logger.debug("xcode-select -p failed (exit %d)", result.returncode)
        return None
    return Path(path)


def require_xcodebuild(app_name: str) -> Path:
    """Confirm xcodebuild exists beneath the active developer directory.

    Args:
        app_name: Application name used in the error message.

    Returns:
        Path to the xcodebuild executable.

    Raises:
        ToolchainError: If the developer directory or xcodebuild is missing.
    """
    developer_dir = get_developer_dir()
    xcodebuild = developer_dir / XCODEBUILD_RELPATH if developer_dir else None

    if xcodebuild is None or not xcodebuild.exists():
        logger.info("xcodebuild not found (developer dir: %s)", developer_dir)
        raise ToolchainError(TOOLCHAIN_MISSING_MESSAGE.format(name=app_name))

    logger.info("Using %s", xcodebuild)
    return xcodebuild
