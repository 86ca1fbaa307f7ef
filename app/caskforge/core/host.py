"""Host platform checks.

Compares the running system against a recipe's PlatformRequirement
before anything is fetched or built.
"""

import logging
import platform
from dataclasses import dataclass

from caskforge.core.errors import PlatformError
from caskforge.models.recipe import PlatformRequirement

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HostPlatform:
    """Observed host properties.

    Attributes:
        system: Kernel name as reported by platform.system() ("Darwin" on macOS).
        macos_version: macOS product version, empty when not on macOS.
        arch: Machine architecture ("arm64", "x86_64", ...).
    """

    system: str
    macos_version: str
    arch: str

    @property
    def is_macos(self) -> bool:
        """Whether the host is macOS."""
        return self.system == "Darwin"

    @property
    def macos_tuple(self) -> tuple[int, ...]:
        """macOS version as an integer tuple, empty if unknown."""
        parts: list[int] = []
        for part in self.macos_version.split("."):
            if not part.isdigit():
                break
            parts.append(int(part))
        return tuple(parts)


def detect_host() -> HostPlatform:
    """Read the current host's platform properties."""
    return HostPlatform(
        system=platform.system(),
        macos_version=platform.mac_ver()[0],
        arch=platform.machine(),
    )


def _version_at_least(actual: tuple[int, ...], minimum: tuple[int, ...]) -> bool:
    width = max(len(actual), len(minimum))
    padded_actual = actual + (0,) * (width - len(actual))
    padded_minimum = minimum + (0,) * (width - len(minimum))
    return padded_actual >= padded_minimum


def check_platform(requirement: PlatformRequirement, host: HostPlatform | None = None) -> None:
    """Verify the host satisfies a platform requirement.

    Args:
        requirement: Minimum macOS version and required architecture.
        host: Host properties. If None, the running host is detected.

    Raises:
        PlatformError: If the host is not macOS, is too old, or has the
            wrong CPU architecture.
    """
    host = host or detect_host()
    logger.info(
        "Checking platform: host=%s %s (%s), requires macOS>=%s arch=%s",
        host.system,
        host.macos_version or "-",
        host.arch,
        requirement.macos or "any",
        requirement.arch or "any",
    )

    if not host.is_macos:
        msg = f"This application can only be installed on macOS (host is {host.system})"
        raise PlatformError(msg)

    minimum = requirement.min_macos_tuple
    if minimum is not None and not _version_at_least(host.macos_tuple, minimum):
        msg = (
            f"This application requires macOS {requirement.macos} or newer "
            f"(running {host.macos_version or 'unknown'})"
        )
        raise PlatformError(msg)

    if requirement.arch is not None and host.arch != requirement.arch:
        msg = f"This application requires the {requirement.arch} architecture (host is {host.arch})"
        raise PlatformError(msg)
