"""Install lifecycle orchestration.

Drives one install attempt end to end and owns the staging directory:

    platform check -> fetch -> preflight (build procedure)
        -> move app into appdir -> link binary -> postflight -> receipt

Uninstall and zap are separate routines that only delete paths.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from caskforge.core.host import check_platform
from caskforge.core.paths import get_appdir, get_bindir, get_staging_dir
from caskforge.core.procedure import BuildAndInstallProcedure
from caskforge.core.source import fetch_source
from caskforge.core.state import ReceiptStore
from caskforge.filesystem.operator import FilesystemActionResult, FilesystemOperator
from caskforge.models.receipt import InstallReceipt, create_receipt
from caskforge.models.recipe import Recipe
from caskforge.utils.shell import run_command

logger = logging.getLogger(__name__)

LSREGISTER = (
    "/System/Library/Frameworks/CoreServices.framework/Frameworks/"
    "LaunchServices.framework/Support/lsregister"
)


class InstallError(Exception):
    """Raised when an application cannot be placed or removed."""


@dataclass(frozen=True, slots=True)
class InstallOutcome:
    """Result of a successful install.

    Attributes:
        receipt: Receipt recorded for the install.
        registered: Whether Launch Services accepted the bundle.
    """

    receipt: InstallReceipt
    registered: bool


class Installer:
    """Installs a recipe's application into the applications directory.

    Attributes:
        recipe: Recipe being installed.
        appdir: Directory the .app bundle is moved into.
        bindir: Directory the binary symlink is created in.
    """

    def __init__(
        self,
        recipe: Recipe,
        appdir: Path | None = None,
        bindir: Path | None = None,
        store: ReceiptStore | None = None,
        force: bool = False,
        keep_staging: bool = False,
    ) -> None:
        self.recipe = recipe
        # Absolute so the binary symlink and the receipt do not depend on the cwd
        self.appdir = (appdir if appdir is not None else get_appdir()).expanduser().absolute()
        self.bindir = (bindir if bindir is not None else get_bindir()).expanduser().absolute()
        self._store = store if store is not None else ReceiptStore()
        self._force = force
        self._keep_staging = keep_staging

    @property
    def app_target(self) -> Path:
        """Final location of the installed bundle."""
        return self.appdir / self.recipe.artifact.app

    @property
    def binary_target(self) -> Path | None:
        """Final location of the binary symlink, None if the recipe has no binary."""
        binary = self.recipe.artifact.binary
        if binary is None:
            return None
        return self.bindir / binary.target

    def install(self, staged_path: Path | None = None) -> InstallOutcome:
        """Run one complete install attempt.

        The staging directory is created fresh and removed afterwards.
        On any failure it is abandoned as a whole (deleted unless
        keep_staging is set), any bundle or link already placed is
        removed, no receipt is written and the error propagates unchanged.

        Args:
            staged_path: Override for the staging directory.

        Returns:
            InstallOutcome with the recorded receipt.

        Raises:
            ProcedureError: If a platform, toolchain, build or copy gate fails.
            SourceFetchError: If the source cannot be cloned.
            InstallError: If the bundle or binary cannot be placed.
        """
        package = self.recipe.package
        check_platform(self.recipe.requires)
        self._check_targets()

        staging = staged_path or get_staging_dir(package.token, package.version)
        self._reset_staging(staging)

        app_path: Path | None = None
        binary_path: Path | None = None
        try:
            fetch_source(package, staging)
            result = BuildAndInstallProcedure(self.recipe).run(staging)
            app_path = self._place_app(result.app_path)
            binary_path = self._link_binary(app_path)
            registered = self._register(app_path)

            receipt = create_receipt(
                token=package.token,
                version=package.version,
                app_path=str(app_path),
                source_url=package.url,
                binary_path=str(binary_path) if binary_path else None,
            )
            self._store.save(receipt)
        except Exception:
            self._roll_back(app_path, binary_path)
            self._abandon_staging(staging)
            raise

        if not self._keep_staging:
            shutil.rmtree(staging, ignore_errors=True)

        logger.info("Installed %s %s to %s", package.token, package.version, app_path)
        return InstallOutcome(receipt=receipt, registered=registered)

    def _check_targets(self) -> None:
        """Refuse to start when an install would have to overwrite something."""
        if self._force:
            return
        if self.app_target.exists():
            msg = f"{self.app_target} already exists (use --force to replace it)"
            raise InstallError(msg)
        link = self.binary_target
        if link is not None and link.exists() and not link.is_symlink():
            msg = f"{link} already exists and is not a symlink (use --force to replace it)"
            raise InstallError(msg)

    def _roll_back(self, app_path: Path | None, binary_path: Path | None) -> None:
        """Remove whatever a failed install already placed."""
        if binary_path is not None and binary_path.is_symlink():
            logger.info("Removing %s after failed install", binary_path)
            binary_path.unlink(missing_ok=True)
        if app_path is not None and app_path.exists():
            logger.info("Removing %s after failed install", app_path)
            shutil.rmtree(app_path, ignore_errors=True)

    def _reset_staging(self, staging: Path) -> None:
        if staging.exists():
            logger.info("Removing stale staging directory %s", staging)
            shutil.rmtree(staging)
        staging.parent.mkdir(parents=True, exist_ok=True)

    def _abandon_staging(self, staging: Path) -> None:
        if self._keep_staging:
            logger.info("Keeping staging directory %s for inspection", staging)
            return
        logger.debug("Abandoning staging directory %s", staging)
        shutil.rmtree(staging, ignore_errors=True)

    def _place_app(self, staged_app: Path) -> Path:
        """Move the staged bundle into the applications directory."""
        target = self.app_target
        try:
            self.appdir.mkdir(parents=True, exist_ok=True)
            if target.exists() or target.is_symlink():
                logger.info("Replacing existing %s", target)
                if target.is_dir() and not target.is_symlink():
                    shutil.rmtree(target)
                else:
                    target.unlink()
            shutil.move(str(staged_app), str(target))
        except OSError as e:
            msg = f"Failed to move {staged_app.name} to {self.appdir}: {e}"
            raise InstallError(msg) from e

        if not target.exists():
            msg = f"Failed to move {staged_app.name} to {self.appdir}"
            raise InstallError(msg)

        logger.info("Moved %s to %s", staged_app.name, target)
        return target

    def _link_binary(self, app_path: Path) -> Path | None:
        """Symlink the bundle's executable into the bin directory."""
        binary = self.recipe.artifact.binary
        link = self.binary_target
        if binary is None or link is None:
            return None

        source = app_path / binary.source
        try:
            self.bindir.mkdir(parents=True, exist_ok=True)
            if link.exists() or link.is_symlink():
                if not link.is_symlink() and not self._force:
                    msg = f"{link} already exists and is not a symlink"
                    raise InstallError(msg)
                link.unlink()
            link.symlink_to(source)
        except OSError as e:
            msg = f"Failed to link {binary.target} into {self.bindir}: {e}"
            raise InstallError(msg) from e

        logger.info("Linked %s -> %s", link, source)
        return link

    def _register(self, app_path: Path) -> bool:
        """Refresh Launch Services so the icon shows up.

        Failure is logged and reported but never aborts the install.
        """
        try:
            result = run_command([LSREGISTER, "-f", str(app_path)], timeout=60.0)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("Could not run lsregister: %s", e)
            return False

        if not result.success:
            logger.warning(
                "lsregister exited %d: %s", result.returncode, result.stderr.strip()
            )
            return False
        return True


def uninstall(
    token: str,
    store: ReceiptStore | None = None,
    dry_run: bool = False,
) -> list[FilesystemActionResult]:
    """Remove an installed application and its binary link.

    The receipt is deleted only when every path was removed.

    Args:
        token: Recipe token.
        store: Receipt store. If None, uses the default location.
        dry_run: If True, report what would be deleted.

    Returns:
        One FilesystemActionResult per removed path (binary first).

    Raises:
        InstallError: If the token has no receipt.
    """
    store = store if store is not None else ReceiptStore()
    receipt = store.load(token)
    if receipt is None:
        msg = f"{token} is not installed"
        raise InstallError(msg)

    paths: list[Path] = []
    if receipt.binary_path:
        paths.append(Path(receipt.binary_path))
    paths.append(Path(receipt.app_path))

    results = FilesystemOperator(dry_run=dry_run).delete(paths)

    if not dry_run and all(r.success for r in results):
        store.delete(token)
        logger.info("Uninstalled %s", token)

    return results


def zap(recipe: Recipe, dry_run: bool = False) -> list[FilesystemActionResult]:
    """Delete the user data paths a recipe declares for full removal.

    Args:
        recipe: Recipe providing the zap trash list.
        dry_run: If True, report what would be deleted.

    Returns:
        One FilesystemActionResult per declared path, in declaration order.
    """
    return FilesystemOperator(dry_run=dry_run).delete(recipe.zap.expanded())
