"""Unit tests for the caskforge CLI commands."""

import json
from pathlib import Path
from unittest.mock import patch

from caskforge import __version__
from caskforge.cli.main import app
from caskforge.core.errors import BuildError, ToolchainError
from caskforge.core.installer import InstallError, InstallOutcome
from caskforge.core.state import ReceiptStore
from caskforge.filesystem.operator import FilesystemActionResult
from caskforge.models.receipt import create_receipt
from rich.table import Table
from typer.testing import CliRunner

runner = CliRunner()


def _outcome(registered: bool = True) -> InstallOutcome:
    return InstallOutcome(
        receipt=create_receipt(
            "trackweight",
            "1.0.3",
            "/Applications/TrackWeight.app",
            "https://github.com/krishkrosh/TrackWeight.git",
            binary_path="/opt/homebrew/bin/trackweight",
        ),
        registered=registered,
    )


class TestMain:
    """Tests for global options."""

    def test_version(self) -> None:
        """--version prints the version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"caskforge version {__version__}" in result.stdout


class TestInfo:
    """Tests for caskforge info."""

    def test_info_table(self) -> None:
        """info shows metadata, build arguments and zap paths."""
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "TrackWeight 1.0.3" in result.stdout
        assert "not verified" in result.stdout
        assert "Zap" in result.stdout

    def test_info_toml(self) -> None:
        """--toml prints the resolved recipe."""
        result = runner.invoke(app, ["info", "trackweight", "--toml"])

        assert result.exit_code == 0
        assert 'token = "trackweight"' in result.stdout
        assert "[build]" in result.stdout

    def test_info_unknown(self) -> None:
        """Unknown tokens exit 1."""
        result = runner.invoke(app, ["info", "nope"])

        assert result.exit_code == 1


class TestInstall:
    """Tests for caskforge install."""

    def test_success(self) -> None:
        """A successful install reports the placed paths."""
        with patch("caskforge.cli.commands.install.Installer") as mock_cls:
            mock_cls.return_value.install.return_value = _outcome()

            result = runner.invoke(app, ["install"])

        assert result.exit_code == 0
        assert "TrackWeight 1.0.3 was successfully installed!" in result.stdout
        assert "/opt/homebrew/bin/trackweight" in result.stdout

    def test_passes_options(self, tmp_path: Path) -> None:
        """Directory and behavior flags are forwarded to the installer."""
        with patch("caskforge.cli.commands.install.Installer") as mock_cls:
            mock_cls.return_value.install.return_value = _outcome()

            runner.invoke(
                app,
                [
                    "install",
                    "--appdir",
                    str(tmp_path / "apps"),
                    "--bindir",
                    str(tmp_path / "bin"),
                    "--force",
                    "--keep-staging",
                ],
            )

        kwargs = mock_cls.call_args.kwargs
        assert kwargs["appdir"] == tmp_path / "apps"
        assert kwargs["bindir"] == tmp_path / "bin"
        assert kwargs["force"] is True
        assert kwargs["keep_staging"] is True

    def test_toolchain_missing(self) -> None:
        """Procedure errors are printed and exit 1."""
        with patch("caskforge.cli.commands.install.Installer") as mock_cls:
            mock_cls.return_value.install.side_effect = ToolchainError(
                "TrackWeight requires Xcode (not just Command Line Tools) to build from source."
            )

            result = runner.invoke(app, ["install"])

        assert result.exit_code == 1
        assert "requires Xcode" in result.output

    def test_build_failure(self) -> None:
        """Build failures exit 1 with the troubleshooting message."""
        with patch("caskforge.cli.commands.install.Installer") as mock_cls:
            mock_cls.return_value.install.side_effect = BuildError("Failed to build TrackWeight")

            result = runner.invoke(app, ["install"])

        assert result.exit_code == 1
        assert "Failed to build TrackWeight" in result.output

    def test_not_registered_warns(self) -> None:
        """A failed Launch Services refresh is a warning only."""
        with patch("caskforge.cli.commands.install.Installer") as mock_cls:
            mock_cls.return_value.install.return_value = _outcome(registered=False)

            result = runner.invoke(app, ["install"])

        assert result.exit_code == 0
        assert "Launch Services" in result.output


class TestUninstall:
    """Tests for caskforge uninstall and zap."""

    def test_uninstall(self) -> None:
        """Uninstall reports removed paths."""
        results = [FilesystemActionResult(path="/Applications/TrackWeight.app", success=True)]
        with patch("caskforge.cli.commands.uninstall.uninstall_app", return_value=results):
            result = runner.invoke(app, ["uninstall", "trackweight"])

        assert result.exit_code == 0
        assert "successfully uninstalled" in result.stdout

    def test_uninstall_not_installed(self) -> None:
        """Unknown installs exit 1."""
        with patch(
            "caskforge.cli.commands.uninstall.uninstall_app",
            side_effect=InstallError("trackweight is not installed"),
        ):
            result = runner.invoke(app, ["uninstall", "trackweight"])

        assert result.exit_code == 1
        assert "not installed" in result.output

    def test_uninstall_with_zap(self) -> None:
        """--zap also deletes the declared user data."""
        with (
            patch("caskforge.cli.commands.uninstall.uninstall_app", return_value=[]),
            patch("caskforge.cli.commands.uninstall.zap_paths", return_value=[]) as mock_zap,
        ):
            result = runner.invoke(app, ["uninstall", "trackweight", "--zap"])

        assert result.exit_code == 0
        mock_zap.assert_called_once()

    def test_zap_dry_run(self) -> None:
        """zap --dry-run lists the declared paths without deleting."""
        result = runner.invoke(app, ["zap", "--dry-run"])

        assert result.exit_code == 0
        assert "Application Support/TrackWeight" in result.stdout
        assert "not present" in result.stdout

    def test_zap_abort(self) -> None:
        """Declining the prompt aborts."""
        with patch("caskforge.cli.commands.uninstall.zap_paths") as mock_zap:
            result = runner.invoke(app, ["zap"], input="n\n")

        assert result.exit_code == 0
        assert "Aborted" in result.stdout
        mock_zap.assert_not_called()

    def test_zap_failure_exit_code(self) -> None:
        """A failed deletion exits 1."""
        failing = [FilesystemActionResult(path="/x", success=False, error="denied")]
        with patch("caskforge.cli.commands.uninstall.zap_paths", return_value=failing):
            result = runner.invoke(app, ["zap", "-y"])

        assert result.exit_code == 1


class TestList:
    """Tests for caskforge list."""

    def test_empty(self) -> None:
        """No receipts prints a notice."""
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "No applications installed" in result.stdout

    def test_json(self) -> None:
        """--json prints receipts."""
        ReceiptStore().save(_outcome().receipt)

        result = runner.invoke(app, ["list", "--json"])

        data = json.loads(result.stdout)
        assert data[0]["token"] == "trackweight"

    def test_available(self) -> None:
        """--available lists bundled recipes."""
        result = runner.invoke(app, ["list", "--available"])

        assert "trackweight" in result.stdout.split()

    def test_table(self) -> None:
        """Installed receipts are shown in a table."""
        ReceiptStore().save(_outcome().receipt)

        with patch("caskforge.cli.commands.installed.console") as mock_console:
            result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        mock_console.print.assert_called_once()
        assert isinstance(mock_console.print.call_args[0][0], Table)
