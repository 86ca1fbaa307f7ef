"""Build-and-install procedure.

Turns a source checkout into an application bundle in the staging
directory. The steps run in a fixed order and each one is a hard gate:

1. Toolchain check (xcodebuild beneath the active developer directory)
2. Entitlements document written into the checkout
3. xcodebuild invocation
4. Built bundle present at the expected products path
5. Recursive copy of the bundle into the staging directory
6. Bundle present at the staging destination

Exit codes are never trusted on their own: steps 4 and 6 observe the
filesystem directly. Nothing is cleaned up on failure; the caller owns
the staging directory.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from caskforge.core.entitlements import write_entitlements
from caskforge.core.errors import (
    BuildError,
    BuildOutputMissingError,
    CopyError,
)
from caskforge.core.toolchain import require_xcodebuild
from caskforge.models.recipe import Recipe
from caskforge.utils.shell import run_command, tail_lines

logger = logging.getLogger(__name__)

BUILD_FAILED_MESSAGE = """\
Failed to build {name} from source.

This could be due to:
  - Missing Xcode installation
  - Outdated Xcode version
  - Build environment issues

Please try:
  1. Update Xcode from Mac App Store
  2. Run: sudo xcode-select --install
  3. Or download a pre-built version from: {releases}"""


@dataclass(frozen=True, slots=True)
class ProcedureResult:
    """Outcome of a completed procedure.

    Attributes:
        app_path: Bundle location inside the staging directory.
        entitlements_path: Generated entitlements document.
        build_args: Argument vector passed to xcodebuild.
    """

    app_path: Path
    entitlements_path: Path
    build_args: tuple[str, ...]


class BuildAndInstallProcedure:
    """Build a recipe's application bundle from a staged source checkout.

    Example:
        >>> procedure = BuildAndInstallProcedure(load_recipe("trackweight"))
        >>> result = procedure.run(Path("~/.cache/caskforge/staging/trackweight-1.0.3"))
        >>> result.app_path.name
        'TrackWeight.app'
    """

    def __init__(self, recipe: Recipe) -> None:
        self._recipe = recipe

    @property
    def recipe(self) -> Recipe:
        """Recipe this procedure builds."""
        return self._recipe

    def run(self, staged_path: Path) -> ProcedureResult:
        """Run all steps against a staging directory.

        Args:
            staged_path: Directory holding the source checkout. Build output
                and the copied bundle end up here too.

        Returns:
            ProcedureResult describing the staged bundle.

        Raises:
            ToolchainError: If xcodebuild is not available.
            EntitlementsError: If the entitlements document cannot be written.
            BuildError: If xcodebuild exits non-zero.
            BuildOutputMissingError: If the bundle is absent after the build.
            CopyError: If the bundle is absent from staging after the copy.
        """
        name = self._recipe.package.name

        logger.info("Preflight for %s in %s", name, staged_path)
        require_xcodebuild(name)

        entitlements_path = write_entitlements(self._recipe.entitlements, staged_path)

        build_args = self._recipe.build.arguments(entitlements_path)
        self._build(build_args, staged_path)

        built_app = self._verify_build_output(staged_path)
        staged_app = self._copy_artifact(built_app, staged_path)
        self._verify_copy(staged_app)

        logger.info("Staged %s at %s", self._recipe.artifact.app, staged_app)
        return ProcedureResult(
            app_path=staged_app,
            entitlements_path=entitlements_path,
            build_args=tuple(build_args),
        )

    def _build(self, args: list[str], staged_path: Path) -> None:
        """Run xcodebuild with captured output and no timeout."""
        logger.info("Running %s", " ".join(args))
        message = BUILD_FAILED_MESSAGE.format(
            name=self._recipe.package.name,
            releases=self._releases_url(),
        )

        try:
            result = run_command(args, timeout=None, cwd=str(staged_path))
        except (FileNotFoundError, OSError) as e:
            logger.debug("Could not start xcodebuild: %s", e)
            raise BuildError(message) from e

        if not result.success:
            logger.debug(
                "xcodebuild exited %d\nstdout (tail):\n%s\nstderr (tail):\n%s",
                result.returncode,
                tail_lines(result.stdout),
                tail_lines(result.stderr),
            )
            raise BuildError(message)

    def _verify_build_output(self, staged_path: Path) -> Path:
        relative = self._recipe.artifact.built_path(self._recipe.build)
        built_app = staged_path / relative
        if not built_app.exists():
            msg = (
                f"Build completed but {self._recipe.artifact.app} not found "
                f"at expected location: {relative}"
            )
            raise BuildOutputMissingError(msg)
        return built_app

    def _copy_artifact(self, built_app: Path, staged_path: Path) -> Path:
        destination = staged_path / self._recipe.artifact.app
        logger.info("Copying %s to %s", built_app, destination)
        try:
            shutil.copytree(built_app, destination, symlinks=True, dirs_exist_ok=True)
        except OSError as e:
            msg = f"Failed to copy {self._recipe.artifact.app} to staging directory: {e}"
            raise CopyError(msg) from e
        return destination

    def _verify_copy(self, staged_app: Path) -> None:
        if not staged_app.exists():
            msg = f"Failed to copy {self._recipe.artifact.app} to staging directory"
            raise CopyError(msg)

    def _releases_url(self) -> str:
        homepage = self._recipe.package.homepage
        if homepage:
            return f"{homepage.rstrip('/')}/releases"
        return self._recipe.package.url
