"""Privileged command execution.

The credential is never placed on a command line.  The command runs as
``<shell> -c "<escalation wrapper> <command line>"`` and the credential,
followed by a newline, is written to the wrapper's standard input
(``sudo -S``).  Standard output and standard error are merged into one
stream so the operator sees them in the order they were produced.
The child runs in a session of its own, so a Ctrl-C typed at the terminal
never reaches it.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

# Exit code reported alongside launched=False when the process never started.
LAUNCH_FAILURE_EXIT_CODE = -1

_DEFAULT_SHELL = "/bin/zsh"
_DEFAULT_ESCALATION = ("sudo", "-S", "-k", "-p", "")


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one privileged command run."""

    output: str
    exit_code: int
    launched: bool = True

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class CommandRunner(Protocol):
    """Anything that can run a privileged command line with a credential."""

    def run(self, command_line: str, secret: str) -> CommandResult: ...


class PrivilegedExecutor:
    """Runs a command line through ``sudo -S`` with the credential on stdin.

    Args:
        shell: Shell used to interpret the command line.
        escalation: Privilege-escalation wrapper prepended to the command
            line.  Must read the credential from standard input.
    """

    def __init__(
        self,
        shell: str = _DEFAULT_SHELL,
        escalation: Sequence[str] = _DEFAULT_ESCALATION,
    ) -> None:
        self._shell = shell
        self._escalation = tuple(escalation)

    def argv_for(self, command_line: str) -> list[str]:
        """Return the argument vector handed to the OS for *command_line*."""
        wrapper = " ".join(shlex.quote(part) for part in self._escalation)
        return [self._shell, "-c", f"{wrapper} {command_line}" if wrapper else command_line]

    def run(self, command_line: str, secret: str) -> CommandResult:
        """Run *command_line* with elevated rights and wait for it to exit.

        Blocks until the command finishes; there is no timeout.  Never
        raises for launch problems: a shell that cannot be started is
        reported as a failed :class:`CommandResult`.

        Args:
            command_line: Fully formed, shell-quoted command line.
            secret: Credential written to the escalation wrapper's stdin.

        Returns:
            Combined, trimmed output and the real exit status.
        """
        argv = self.argv_for(command_line)
        logger.info("Running privileged command: %s", command_line)

        try:
            proc = subprocess.run(
                argv,
                input=secret + "\n",
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                start_new_session=True,
            )
        except OSError as exc:
            logger.error("Failed to launch %s: %s", self._shell, exc)
            return CommandResult(
                output=f"Failed to launch process: {exc}",
                exit_code=LAUNCH_FAILURE_EXIT_CODE,
                launched=False,
            )

        output = (proc.stdout or "").strip()
        if proc.returncode == 0:
            logger.info("Privileged command succeeded")
        else:
            logger.warning("Privileged command exited with status %d", proc.returncode)
        if output:
            logger.debug("Command output:\n%s", output)

        return CommandResult(output=output, exit_code=proc.returncode)


class DryRunExecutor:
    """Logs the command line and reports success without running anything."""

    def __init__(self) -> None:
        self.command_lines: list[str] = []

    def run(self, command_line: str, secret: str) -> CommandResult:
        self.command_lines.append(command_line)
        logger.info("Dry run, not executing: %s", command_line)
        return CommandResult(output=f"[dry run] {command_line}", exit_code=0)
