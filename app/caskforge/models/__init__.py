"""Data models for caskforge."""

from caskforge.models.receipt import InstallReceipt, create_receipt
from caskforge.models.recipe import (
    NO_CHECK,
    BinaryLink,
    BuildInvocation,
    EntitlementsDocument,
    InstallArtifact,
    PackageMetadata,
    PlatformRequirement,
    Recipe,
    UninstallManifest,
)

__all__ = [
    "NO_CHECK",
    "BinaryLink",
    "BuildInvocation",
    "EntitlementsDocument",
    "InstallArtifact",
    "InstallReceipt",
    "PackageMetadata",
    "PlatformRequirement",
    "Recipe",
    "UninstallManifest",
    "create_receipt",
]
