"""
Command Runner - Review Request Action

PURPOSE:
    Runs the external tools the stages need (git, java, javac, mvn, ls, grep)
    and reports their exit code. Output is echoed into the run log so the
    student can see exactly what the compiler or scanner said.

    A non-zero exit code is only an error when the caller says so by passing
    an `error` message. Otherwise the exit code is returned as a status
    value; the pattern scans rely on this, since grep exits 1 when it finds
    nothing.

    No timeout is applied here. The runner's own job timeout covers hung
    commands.
"""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from .errors import CommandFailedError

logger = logging.getLogger(__name__)

# Exit code used by shells when the executable does not exist
COMMAND_NOT_FOUND = 127


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    output: str

    @property
    def lines(self) -> list:
        """Non-empty lines of output."""
        return [line for line in self.output.splitlines() if line.strip()]


def run_command(
    command: str,
    params: Optional[Sequence[str]] = None,
    chdir: Optional[str] = None,
) -> CommandResult:
    """
    Run a command and capture its combined stdout and stderr.

    Args:
        command: The executable to run (looked up on PATH)
        params: Arguments to pass to the command
        chdir: Working directory to run the command in

    Returns:
        CommandResult with the exit code and captured output.
    """
    args = [command, *(params or [])]
    logger.info("[command]%s", " ".join(shlex.quote(arg) for arg in args))

    try:
        completed = subprocess.run(
            args,
            cwd=chdir,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except FileNotFoundError:
        output = f"{command}: command not found"
        logger.info(output)
        return CommandResult(COMMAND_NOT_FOUND, output)

    output = completed.stdout or ""
    if output.strip():
        logger.info(output.rstrip())

    return CommandResult(completed.returncode, output)


def check_exec(
    command: str,
    params: Optional[Sequence[str]] = None,
    *,
    title: Optional[str] = None,
    error: Optional[str] = None,
    chdir: Optional[str] = None,
) -> int:
    """
    Run a command and return its exit code.

    Args:
        command: The executable to run
        params: Arguments to pass to the command
        title: Logged before the command runs, if given
        error: Message for CommandFailedError on a non-zero exit code. If not
               given, a non-zero exit code is returned instead of raised.
        chdir: Working directory to run the command in
    """
    if title:
        logger.info(f"\n{title}...")

    result = run_command(command, params, chdir=chdir)

    if error and result.returncode != 0:
        raise CommandFailedError(error, result.returncode)

    return result.returncode
