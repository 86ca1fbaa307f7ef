"""Recipe models for building and installing an application from source.

This module defines the Pydantic models representing a recipe TOML file:
package identity, platform requirements, the xcodebuild invocation, the
generated entitlements document, the produced app bundle and the paths
removed on zap.
"""

from pathlib import Path, PurePosixPath
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Checksum policy for artifacts that only exist after the build
NO_CHECK = "no_check"

# Named macOS releases accepted in platform requirements
MACOS_RELEASES: dict[str, str] = {
    "big_sur": "11",
    "monterey": "12",
    "ventura": "13",
    "sonoma": "14",
    "sequoia": "15",
    "tahoe": "26",
}

ArchType = Literal["arm64", "x86_64"]


class PackageMetadata(BaseModel):
    """Identity, version and source location of a package.

    Attributes:
        token: Short identifier used on the command line (e.g., "trackweight").
        name: Human-readable application name.
        version: Upstream version string.
        desc: One-line description.
        homepage: Project homepage URL.
        url: Git URL of the source checkout.
        branch: Branch to check out.
        sha256: Checksum of the download, or "no_check" when unverifiable.
    """

    model_config = ConfigDict(extra="forbid")

    token: Annotated[str, Field(min_length=1, pattern=r"^[a-z0-9][a-z0-9@._+-]*$")]
    name: Annotated[str, Field(min_length=1)]
    version: Annotated[str, Field(min_length=1)]
    desc: str | None = None
    homepage: str | None = None
    url: Annotated[str, Field(min_length=1, description="Git URL of the source")]
    branch: str = "main"
    sha256: Annotated[str, Field(description="Checksum or 'no_check'")] = NO_CHECK

    @property
    def checksum_verified(self) -> bool:
        """Whether a checksum is declared for the source."""
        return self.sha256 != NO_CHECK


class PlatformRequirement(BaseModel):
    """Install-time precondition on the host.

    Attributes:
        macos: Minimum macOS version, either numeric ("13") or a
            release name ("ventura").
        arch: Required CPU architecture, or None for any.
    """

    model_config = ConfigDict(extra="forbid")

    macos: str | None = None
    arch: ArchType | None = None

    @field_validator("macos")
    @classmethod
    def normalize_macos(cls, v: str | None) -> str | None:
        """Resolve release names to numeric versions."""
        if v is None:
            return None
        value = v.strip().lower().lstrip(":")
        if value in MACOS_RELEASES:
            return MACOS_RELEASES[value]
        parts = value.split(".")
        if not all(part.isdigit() for part in parts):
            msg = f"Unknown macOS version: {v!r}"
            raise ValueError(msg)
        return value

    @property
    def min_macos_tuple(self) -> tuple[int, ...] | None:
        """Minimum macOS version as an integer tuple for comparison."""
        if self.macos is None:
            return None
        return tuple(int(part) for part in self.macos.split("."))


class EntitlementsDocument(BaseModel):
    """Capability declaration handed to the ad-hoc signing step.

    Attributes:
        filename: File name written into the staging directory.
        app_sandbox: Value of com.apple.security.app-sandbox.
    """

    model_config = ConfigDict(extra="forbid")

    filename: Annotated[str, Field(min_length=1)]
    app_sandbox: bool = False

    def as_dict(self) -> dict[str, bool]:
        """Return the entitlement keys and values."""
        return {"com.apple.security.app-sandbox": self.app_sandbox}


class BuildInvocation(BaseModel):
    """Parameters passed to xcodebuild.

    Attributes:
        project: Xcode project file, relative to the checkout.
        scheme: Scheme to build.
        configuration: Build configuration.
        derived_data_path: Isolated output directory, relative to the checkout.
        disable_package_sandbox: Turn off SwiftPM manifest and plugin sandboxing.
        disable_code_signing: Build without a signing certificate.
    """

    model_config = ConfigDict(extra="forbid")

    project: Annotated[str, Field(min_length=1)]
    scheme: Annotated[str, Field(min_length=1)]
    configuration: str = "Release"
    derived_data_path: str = "build"
    disable_package_sandbox: bool = True
    disable_code_signing: bool = True

    def products_dir(self) -> PurePosixPath:
        """Directory xcodebuild places built products in, relative to the checkout."""
        return PurePosixPath(self.derived_data_path, "Build", "Products", self.configuration)

    def arguments(self, entitlements_path: Path) -> list[str]:
        """Build the full xcodebuild argument vector.

        Args:
            entitlements_path: Generated entitlements document attached to
                the ad-hoc signing step.

        Returns:
            Argument list starting with "xcodebuild" and ending with "build".
        """
        args = [
            "xcodebuild",
            "-project",
            self.project,
            "-scheme",
            self.scheme,
            "-configuration",
            self.configuration,
            "-derivedDataPath",
            self.derived_data_path,
        ]
        if self.disable_package_sandbox:
            args += [
                "-IDEPackageSupportDisableManifestSandbox=YES",
                "-IDEPackageSupportDisablePluginExecutionSandbox=YES",
                "OTHER_SWIFT_FLAGS=$(inherited) -disable-sandbox",
            ]
        if self.disable_code_signing:
            args += [
                "CODE_SIGN_IDENTITY=-",
                "CODE_SIGNING_REQUIRED=NO",
                "CODE_SIGNING_ALLOWED=NO",
            ]
        args.append(f"OTHER_CODE_SIGN_FLAGS=--entitlements={entitlements_path}")
        args.append("build")
        return args


class BinaryLink(BaseModel):
    """Executable inside the app bundle exposed on PATH.

    Attributes:
        source: Path inside the bundle (e.g., "Contents/MacOS/TrackWeight").
        target: Link name in the bin directory.
    """

    model_config = ConfigDict(extra="forbid")

    source: Annotated[str, Field(min_length=1)]
    target: Annotated[str, Field(min_length=1)]


class InstallArtifact(BaseModel):
    """The application bundle produced by the build.

    Attributes:
        app: Bundle directory name (e.g., "TrackWeight.app").
        binary: Optional executable linked into the bin directory.
    """

    model_config = ConfigDict(extra="forbid")

    app: Annotated[str, Field(min_length=1, pattern=r"\.app$")]
    binary: BinaryLink | None = None

    def built_path(self, build: BuildInvocation) -> PurePosixPath:
        """Expected location of the bundle after the build, relative to the checkout."""
        return build.products_dir() / self.app


class UninstallManifest(BaseModel):
    """Paths trashed by a full uninstall (zap).

    Attributes:
        trash: Ordered paths, "~" is expanded at deletion time.
    """

    model_config = ConfigDict(extra="forbid")

    trash: list[str] = Field(default_factory=list)

    @field_validator("trash")
    @classmethod
    def unique_paths(cls, v: list[str]) -> list[str]:
        """Reject empty and duplicate entries, keeping declaration order."""
        seen: set[str] = set()
        for path in v:
            if not path.strip():
                msg = "Zap path cannot be empty"
                raise ValueError(msg)
            if path in seen:
                msg = f"Duplicate zap path: {path}"
                raise ValueError(msg)
            seen.add(path)
        return v

    def expanded(self) -> list[Path]:
        """Return trash paths with the user's home directory expanded."""
        return [Path(path).expanduser() for path in self.trash]


class Recipe(BaseModel):
    """A complete build-from-source recipe.

    Attributes:
        package: Identity and source.
        requires: Platform requirements checked before building.
        build: xcodebuild parameters.
        entitlements: Generated entitlements document.
        artifact: Produced bundle and binary link.
        zap: Paths removed on full uninstall.
    """

    model_config = ConfigDict(extra="forbid")

    package: PackageMetadata
    requires: PlatformRequirement = Field(default_factory=PlatformRequirement)
    build: BuildInvocation
    entitlements: EntitlementsDocument
    artifact: InstallArtifact
    zap: UninstallManifest = Field(default_factory=UninstallManifest)

    @property
    def token(self) -> str:
        """Shortcut for the package token."""
        return self.package.token
