# command_argus/core/commands/executor.py
"""Command executor for running stored commands as processes.

This module provides the CommandExecutor class which turns a Command
into a child process, either directly (program + argv) or through the
host shell, and captures its output once it exits.
"""

import logging
import os
import subprocess
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from command_argus.core.commands.errors import ExecutionFailedError, InvalidPathError
from command_argus.core.commands.models import Command

logger = logging.getLogger(__name__)

# Directories GUI-launched processes on macOS usually miss from PATH
MACOS_EXTRA_PATHS = [
    "/opt/homebrew/bin",
    "/usr/local/bin",
    "/usr/bin",
    "/bin",
    "/usr/sbin",
    "/sbin",
]


@dataclass
class ExecutionResult:
    """Captured result of a finished process.

    Attributes:
        stdout: Standard output, invalid UTF-8 replaced.
        stderr: Standard error, invalid UTF-8 replaced.
        exit_code: Process exit code, -1 if it was killed by a signal.
        success: True if the exit code was 0.
    """

    stdout: str
    stderr: str
    exit_code: int
    success: bool

    @classmethod
    def from_completed(cls, completed: subprocess.CompletedProcess) -> "ExecutionResult":
        returncode = completed.returncode
        exit_code = returncode if returncode >= 0 else -1
        return cls(
            stdout=(completed.stdout or b"").decode("utf-8", errors="replace"),
            stderr=(completed.stderr or b"").decode("utf-8", errors="replace"),
            exit_code=exit_code,
            success=returncode == 0,
        )

    def to_dict(self) -> dict:
        return {
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "success": self.success,
        }


def normalize_path_env(path_env: str, platform: str) -> str:
    """Extend PATH with common binary directories on macOS.

    Entries already present are not added again. On other platforms the
    value is returned unchanged.

    Args:
        path_env: Current PATH value, possibly empty.
        platform: Platform identifier as in ``sys.platform``.

    Returns:
        The PATH value to give the child process.
    """
    if platform != "darwin":
        return path_env

    entries = [entry for entry in path_env.split(":") if entry]
    for extra in MACOS_EXTRA_PATHS:
        if extra not in entries:
            entries.append(extra)
    return ":".join(entries)


class CommandExecutor:
    """Executor for running commands as child processes.

    Execution blocks until the process exits and its output is drained.
    There is no timeout; callers that need one must run the executor on a
    worker of their own.

    Attributes:
        platform: Platform identifier used for shell and PATH handling.

    Example:
        >>> executor = CommandExecutor()
        >>> cmd = Command.new("Echo Test", "echo").with_args(["Hello, World!"])
        >>> result = executor.execute(cmd)
        >>> result.success
        True
    """

    def __init__(self, platform: str | None = None) -> None:
        """Initialize the CommandExecutor.

        Args:
            platform: Platform identifier as in ``sys.platform``.
                Defaults to the running platform.
        """
        self.platform = platform or sys.platform

    def execute(self, command: Command) -> ExecutionResult:
        """Run the program with its arguments directly, without a shell.

        Arguments reach the process exactly as stored.

        Raises:
            InvalidPathError: If the working directory does not exist.
            ExecutionFailedError: If the process could not be spawned.
        """
        argv = [command.command, *command.args]
        return self._run(command, argv, mode="direct")

    def execute_with_shell(self, command: Command) -> ExecutionResult:
        """Run the joined command string through the host shell.

        Uses ``cmd /C`` on Windows and ``sh -c`` elsewhere, so spaces and
        metacharacters are interpreted by the shell.

        Raises:
            InvalidPathError: If the working directory does not exist.
            ExecutionFailedError: If the shell could not be spawned.
        """
        if self.platform.startswith("win"):
            argv = ["cmd", "/C", command.full_command()]
        else:
            argv = ["sh", "-c", command.full_command()]
        return self._run(command, argv, mode="shell")

    def build_environment(
        self, command: Command, base: Mapping[str, str] | None = None
    ) -> dict[str, str]:
        """Build the child environment for a command.

        Starts from ``base`` (the current environment by default), fixes up
        PATH for the platform, then assigns the command's variables in
        order so a later duplicate key overrides an earlier one.
        """
        env = dict(os.environ if base is None else base)

        path_env = normalize_path_env(env.get("PATH", ""), self.platform)
        if path_env:
            env["PATH"] = path_env

        for variable in command.environment_variables:
            env[variable.key] = variable.value
        return env

    def _resolve_working_directory(self, command: Command) -> str | None:
        working_dir = command.working_directory
        if not working_dir:
            return None
        if not Path(working_dir).exists():
            raise InvalidPathError(working_dir)
        return working_dir

    def _run(self, command: Command, argv: list[str], mode: str) -> ExecutionResult:
        cwd = self._resolve_working_directory(command)
        env = self.build_environment(command)

        logger.info("Executing command '%s' (%s mode)", command.name, mode)
        logger.debug("argv=%r cwd=%r", argv, cwd)

        try:
            completed = subprocess.run(argv, cwd=cwd, env=env, capture_output=True)
        except (OSError, ValueError) as e:
            logger.warning("Failed to spawn '%s': %s", command.name, e)
            raise ExecutionFailedError(str(e)) from e

        result = ExecutionResult.from_completed(completed)
        logger.info(
            "Command '%s' exited with code %d", command.name, result.exit_code
        )
        return result
