"""Unit tests for shell execution utilities."""

import sys
from unittest.mock import MagicMock, patch

import pytest
from caskforge.utils.shell import CommandResult, command_exists, run_command, tail_lines


class TestRunCommand:
    """Tests for run_command function."""

    @patch("caskforge.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """run_command captures stdout and stderr as text."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=0)

        result = run_command(["xcodebuild", "-version"])

        assert result == CommandResult(stdout="out", stderr="err", returncode=0)
        assert mock_run.call_args.kwargs["capture_output"] is True
        assert mock_run.call_args.kwargs["text"] is True
        assert mock_run.call_args.kwargs["errors"] == "replace"

    @patch("caskforge.utils.shell.subprocess.run")
    def test_passes_cwd_and_timeout(self, mock_run: MagicMock) -> None:
        """run_command forwards cwd and timeout, including no timeout."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["xcodebuild"], cwd="/tmp/checkout", timeout=None)

        assert mock_run.call_args.kwargs["cwd"] == "/tmp/checkout"
        assert mock_run.call_args.kwargs["timeout"] is None

    def test_success_property(self) -> None:
        """success reflects the exit code."""
        assert CommandResult(stdout="", stderr="", returncode=0).success is True
        assert CommandResult(stdout="", stderr="", returncode=65).success is False

    def test_undecodable_output_replaced(self) -> None:
        """Bytes that are not valid UTF-8 do not abort the command."""
        script = "import sys; sys.stdout.buffer.write(b'\\xff\\xfe bad bytes\\n')"

        result = run_command([sys.executable, "-c", script])

        assert result.success is True
        assert "bad bytes" in result.stdout
        assert "\ufffd" in result.stdout

    def test_raises_file_not_found(self) -> None:
        """Missing executables raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            run_command(["nonexistent_command_xyz_12345"])


class TestCommandExists:
    """Tests for command_exists function."""

    @patch("caskforge.utils.shell.shutil.which", return_value="/usr/bin/git")
    def test_found(self, mock_which: MagicMock) -> None:
        """command_exists is True when which finds the command."""
        assert command_exists("git") is True

    @patch("caskforge.utils.shell.shutil.which", return_value=None)
    def test_missing(self, mock_which: MagicMock) -> None:
        """command_exists is False otherwise."""
        assert command_exists("git") is False


class TestTailLines:
    """Tests for tail_lines function."""

    def test_keeps_last_lines(self) -> None:
        """Only the last non-empty lines are kept."""
        text = "\n".join(f"line {i}" for i in range(30)) + "\n\n"

        assert tail_lines(text, count=2) == "line 28\nline 29"

    def test_empty(self) -> None:
        """Empty input gives an empty string."""
        assert tail_lines("") == ""
