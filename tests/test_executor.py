"""Tests for the privileged command executor."""

from __future__ import annotations

import logging
import os
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from enrollment_helper.executor import (
    LAUNCH_FAILURE_EXIT_CODE,
    CommandResult,
    DryRunExecutor,
    PrivilegedExecutor,
)

_COMMAND = "/usr/local/bin/jamf recon --realname 'Ada Lovelace' --building 'NCSU-SAS Hall'"
_SECRET = "correct horse battery staple"


def _completed(returncode: int, stdout: str = "") -> MagicMock:
    proc = MagicMock(spec=subprocess.CompletedProcess)
    proc.returncode = returncode
    proc.stdout = stdout
    return proc


# ------------------------------------------------------------------
# CommandResult
# ------------------------------------------------------------------


class TestCommandResult:
    """Zero is success, everything else is failure."""

    def test_zero_succeeds(self) -> None:
        assert CommandResult(output="", exit_code=0).succeeded

    @pytest.mark.parametrize("code", [1, 2, 127, 255, LAUNCH_FAILURE_EXIT_CODE])
    def test_non_zero_fails(self, code: int) -> None:
        assert not CommandResult(output="", exit_code=code).succeeded


# ------------------------------------------------------------------
# PrivilegedExecutor: argument vector
# ------------------------------------------------------------------


class TestArgv:
    """The credential never reaches the argument vector."""

    def test_default_wrapper(self) -> None:
        argv = PrivilegedExecutor().argv_for(_COMMAND)
        assert argv == ["/bin/zsh", "-c", f"sudo -S -k -p '' {_COMMAND}"]

    def test_custom_shell_and_wrapper(self) -> None:
        argv = PrivilegedExecutor(shell="/bin/bash", escalation=["doas", "-n"]).argv_for("true")
        assert argv == ["/bin/bash", "-c", "doas -n true"]

    def test_empty_wrapper(self) -> None:
        assert PrivilegedExecutor(shell="/bin/sh", escalation=[]).argv_for("true") == [
            "/bin/sh",
            "-c",
            "true",
        ]

    def test_secret_not_in_argv(self) -> None:
        executor = PrivilegedExecutor()
        with patch(
            "enrollment_helper.executor.subprocess.run", return_value=_completed(0)
        ) as mock_run:
            executor.run(_COMMAND, _SECRET)

        argv = mock_run.call_args.args[0]
        assert argv == executor.argv_for(_COMMAND)
        assert not any(_SECRET in arg for arg in argv)


# ------------------------------------------------------------------
# PrivilegedExecutor: run
# ------------------------------------------------------------------


class TestRun:
    """run() pipes the credential to stdin and merges output streams."""

    def test_secret_piped_with_newline(self) -> None:
        with patch(
            "enrollment_helper.executor.subprocess.run", return_value=_completed(0)
        ) as mock_run:
            PrivilegedExecutor().run(_COMMAND, _SECRET)

        kwargs = mock_run.call_args.kwargs
        assert kwargs["input"] == _SECRET + "\n"
        assert kwargs["stdout"] == subprocess.PIPE
        assert kwargs["stderr"] == subprocess.STDOUT
        assert kwargs["text"] is True

    def test_child_gets_own_session(self) -> None:
        with patch(
            "enrollment_helper.executor.subprocess.run", return_value=_completed(0)
        ) as mock_run:
            PrivilegedExecutor().run(_COMMAND, _SECRET)

        assert mock_run.call_args.kwargs["start_new_session"] is True

    def test_success(self) -> None:
        with patch(
            "enrollment_helper.executor.subprocess.run",
            return_value=_completed(0, "\n  Submitting data to jamf...\nDone.\n\n"),
        ):
            result = PrivilegedExecutor().run(_COMMAND, _SECRET)

        assert result.succeeded
        assert result.exit_code == 0
        assert result.output == "Submitting data to jamf...\nDone."

    def test_failure_keeps_real_exit_code(self) -> None:
        with patch(
            "enrollment_helper.executor.subprocess.run",
            return_value=_completed(3, "Sorry, try again.\n"),
        ):
            result = PrivilegedExecutor().run(_COMMAND, _SECRET)

        assert not result.succeeded
        assert result.exit_code == 3
        assert result.output == "Sorry, try again."

    def test_none_stdout(self) -> None:
        with patch(
            "enrollment_helper.executor.subprocess.run", return_value=_completed(0, None)  # type: ignore[arg-type]
        ):
            assert PrivilegedExecutor().run(_COMMAND, _SECRET).output == ""

    def test_secret_not_logged(self, caplog) -> None:
        with (
            caplog.at_level(logging.DEBUG, logger="enrollment_helper.executor"),
            patch(
                "enrollment_helper.executor.subprocess.run",
                return_value=_completed(1, "error output"),
            ),
        ):
            PrivilegedExecutor().run(_COMMAND, _SECRET)

        assert _SECRET not in caplog.text
        assert "exited with status 1" in caplog.text


# ------------------------------------------------------------------
# PrivilegedExecutor: launch failures
# ------------------------------------------------------------------


class TestLaunchFailure:
    """A process that cannot start becomes a failed result, never an exception."""

    def test_missing_shell(self, tmp_path) -> None:
        executor = PrivilegedExecutor(shell=str(tmp_path / "no-such-shell"))
        result = executor.run("true", _SECRET)

        assert not result.succeeded
        assert result.exit_code == LAUNCH_FAILURE_EXIT_CODE
        assert result.output.startswith("Failed to launch process:")
        assert not result.launched

    def test_permission_denied(self) -> None:
        with patch(
            "enrollment_helper.executor.subprocess.run",
            side_effect=PermissionError(13, "Permission denied"),
        ):
            result = PrivilegedExecutor().run(_COMMAND, _SECRET)

        assert result.exit_code == LAUNCH_FAILURE_EXIT_CODE
        assert "Permission denied" in result.output
        assert _SECRET not in result.output


# ------------------------------------------------------------------
# PrivilegedExecutor: real shell
# ------------------------------------------------------------------


@pytest.mark.skipif(not os.path.exists("/bin/sh"), reason="requires /bin/sh")
class TestRealShell:
    """Run against /bin/sh with no escalation wrapper."""

    def test_stdin_and_merged_output(self) -> None:
        executor = PrivilegedExecutor(shell="/bin/sh", escalation=[])
        result = executor.run("read line; echo \"got $line\"; echo oops >&2; exit 4", "pw")

        assert result.exit_code == 4
        assert result.output == "got pw\noops"

    def test_success_exit(self) -> None:
        executor = PrivilegedExecutor(shell="/bin/sh", escalation=[])
        result = executor.run("echo ok", "pw")
        assert result.succeeded
        assert result.output == "ok"
        assert result.launched

    def test_signal_killed_child_is_not_a_launch_failure(self) -> None:
        executor = PrivilegedExecutor(shell="/bin/sh", escalation=[])
        result = executor.run('echo "detailed jamf output"; kill -HUP $$', "pw")

        assert result.exit_code == -1
        assert result.launched
        assert not result.succeeded
        assert result.output == "detailed jamf output"


# ------------------------------------------------------------------
# DryRunExecutor
# ------------------------------------------------------------------


class TestDryRunExecutor:
    """Dry runs record the command and report success."""

    def test_records_and_succeeds(self) -> None:
        executor = DryRunExecutor()
        with patch("enrollment_helper.executor.subprocess.run") as mock_run:
            result = executor.run(_COMMAND, _SECRET)

        mock_run.assert_not_called()
        assert result.succeeded
        assert executor.command_lines == [_COMMAND]
        assert _SECRET not in result.output
