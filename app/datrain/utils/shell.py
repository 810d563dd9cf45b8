"""Shell execution utilities.

Provides safe subprocess execution with proper error handling, and the
injectable runner type used by every collaborator that shells out.
"""

import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


# Anything that takes an argv list and returns a CommandResult.
# run_command satisfies it; tests pass a MagicMock.
CommandRunner = Callable[[list[str]], CommandResult]


def run_command(
    args: list[str],
    *,
    check: bool = False,
    timeout: float | None = 60.0,
    cwd: str | None = None,
) -> CommandResult:
    """Execute a shell command and return the result.

    Args:
        args: Command and arguments to execute.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.CalledProcessError: If check=True and command fails.
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=check,
        timeout=timeout,
        cwd=cwd,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


def run_guarded(run: CommandRunner, args: list[str]) -> CommandResult:
    """Run a command, folding launch failures into a failed result.

    A missing executable or an OS-level launch error is reported as
    returncode 127 with the exception text on stderr, so callers only
    ever inspect exit status.

    Args:
        run: Runner used to execute the command.
        args: Command and arguments to execute.

    Returns:
        CommandResult from the runner, or a synthetic failure.
    """
    try:
        return run(args)
    except subprocess.TimeoutExpired as e:
        return CommandResult(stdout="", stderr=f"Timed out after {e.timeout}s", returncode=124)
    except OSError as e:
        return CommandResult(stdout="", stderr=str(e), returncode=127)
