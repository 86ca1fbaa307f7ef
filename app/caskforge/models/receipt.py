"""Install receipt model.

A receipt records where an application was placed so that it can be
uninstalled later without re-resolving the recipe.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class InstallReceipt:
    """Record of a completed installation.

    Attributes:
        token: Recipe token.
        version: Installed version.
        app_path: Absolute path of the installed .app bundle.
        binary_path: Absolute path of the binary symlink, None if not linked.
        installed_at: When the install finished (ISO 8601 with timezone).
        source_url: Git URL the build was made from.
    """

    token: str
    version: str
    app_path: str
    binary_path: str | None
    installed_at: str
    source_url: str

    def __post_init__(self) -> None:
        """Validate receipt data after initialization."""
        if not self.token:
            msg = "Receipt token cannot be empty"
            raise ValueError(msg)
        if not self.app_path:
            msg = "Receipt app path cannot be empty"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        result: dict[str, Any] = {
            "token": self.token,
            "version": self.version,
            "app_path": self.app_path,
            "installed_at": self.installed_at,
            "source_url": self.source_url,
        }
        if self.binary_path is not None:
            result["binary_path"] = self.binary_path
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InstallReceipt":
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If a field is empty.
        """
        return cls(
            token=data["token"],
            version=data["version"],
            app_path=data["app_path"],
            binary_path=data.get("binary_path"),
            installed_at=data["installed_at"],
            source_url=data["source_url"],
        )


def create_receipt(
    token: str,
    version: str,
    app_path: str,
    source_url: str,
    binary_path: str | None = None,
) -> InstallReceipt:
    """Create a receipt stamped with the current time."""
    return InstallReceipt(
        token=token,
        version=version,
        app_path=app_path,
        binary_path=binary_path,
        installed_at=datetime.now(UTC).isoformat(),
        source_url=source_url,
    )
