"""Exceptions raised by the build-and-install procedure.

Every failure is terminal: nothing here is caught and retried inside the
procedure. The CLI reports the message and exits non-zero.
"""


class ProcedureError(Exception):
    """Base exception for build-and-install procedure failures."""


class PlatformError(ProcedureError):
    """Raised when the host does not meet the recipe's platform requirements."""


class ToolchainError(ProcedureError):
    """Raised when the Xcode toolchain required for the build is missing."""


class EntitlementsError(ProcedureError):
    """Raised when the entitlements document cannot be written."""


class BuildError(ProcedureError):
    """Raised when xcodebuild exits non-zero."""


class BuildOutputMissingError(ProcedureError):
    """Raised when the build reports success but the bundle is absent."""


class CopyError(ProcedureError):
    """Raised when the built bundle is not present in staging after the copy."""
