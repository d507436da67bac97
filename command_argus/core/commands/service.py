# command_argus/core/commands/service.py
"""Command service combining the repository and the executor.

This module provides the entry points used by front-ends. One lock
guards every repository call, since the repository itself does not
serialize concurrent writers. Processes run outside the lock so a
long-running command does not hold up other requests.
"""

import logging
import threading
from collections.abc import Mapping
from uuid import UUID

from command_argus.core.commands.executor import CommandExecutor
from command_argus.core.commands.models import Command
from command_argus.core.commands.repository import CommandRepository
from command_argus.core.commands.schemas import (
    CommandResponse,
    CommandUpdate,
    CreateCommandRequest,
    ExecutionResultResponse,
)
from command_argus.utils.logging import command_context

logger = logging.getLogger(__name__)


class CommandService:
    """Thread-safe facade over CommandRepository and CommandExecutor.

    Attributes:
        repository: Repository holding the command collection.
        executor: Executor used to run commands.

    Example:
        >>> service = CommandService(CommandRepository("data/commands.json"))
        >>> created = service.create_command(
        ...     CreateCommandRequest(name="Echo", command="echo", args=["hi"])
        ... )
        >>> result = service.execute_command(created.id)
        >>> result.stdout
        'hi\\n'
    """

    def __init__(
        self,
        repository: CommandRepository,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.repository = repository
        self.executor = executor or CommandExecutor()
        self._lock = threading.Lock()

    def list_commands(self) -> list[CommandResponse]:
        with self._lock:
            commands = self.repository.list()
        return [CommandResponse.from_command(cmd) for cmd in commands]

    def get_command(self, command_id: UUID | str) -> CommandResponse:
        with self._lock:
            cmd = self.repository.read(command_id)
        return CommandResponse.from_command(cmd)

    def create_command(self, request: CreateCommandRequest) -> CommandResponse:
        cmd = request.to_command()
        with command_context(str(cmd.id)), self._lock:
            created = self.repository.create(cmd)
        return CommandResponse.from_command(created)

    def update_command(
        self, command_id: UUID | str, update: CommandUpdate
    ) -> CommandResponse:
        with command_context(str(command_id)), self._lock:
            updated = self.repository.update(command_id, update.apply_to)
        return CommandResponse.from_command(updated)

    def delete_command(self, command_id: UUID | str) -> None:
        with command_context(str(command_id)), self._lock:
            self.repository.delete(command_id)

    def search_commands_by_name(self, query: str) -> list[CommandResponse]:
        with self._lock:
            commands = self.repository.search_by_name(query)
        return [CommandResponse.from_command(cmd) for cmd in commands]

    def search_commands_by_tags(self, tags: list[str]) -> list[CommandResponse]:
        with self._lock:
            commands = self.repository.search_by_tags(tags)
        return [CommandResponse.from_command(cmd) for cmd in commands]

    def execute_command(
        self, command_id: UUID | str, use_shell: bool = True
    ) -> ExecutionResultResponse:
        """Run a stored command and record the usage.

        Usage is recorded before the process starts and is kept even if
        the run fails.

        Args:
            command_id: Id of the command to run.
            use_shell: Run through the host shell instead of directly.

        Returns:
            Captured process result.
        """
        with command_context(str(command_id)):
            with self._lock:
                cmd = self.repository.read(command_id)
                self.repository.record_usage(cmd.id)
            return self._run(cmd, use_shell)

    def execute_command_with_parameters(
        self,
        command_id: UUID | str,
        parameters: Mapping[str, str],
        use_shell: bool = True,
    ) -> ExecutionResultResponse:
        """Run a stored command after substituting placeholder values.

        Values are merged with parameter defaults and validated before
        anything is recorded. The stored command is not modified.

        Args:
            command_id: Id of the command to run.
            parameters: Placeholder values keyed by name.
            use_shell: Run through the host shell instead of directly.

        Returns:
            Captured process result.

        Raises:
            InvalidCommandError: If a required parameter is missing or a
                select value is not allowed.
        """
        with command_context(str(command_id)):
            with self._lock:
                cmd = self.repository.read(command_id)
                values = cmd.resolve_parameter_values(parameters)
                self.repository.record_usage(cmd.id)

            resolved = cmd.copy()
            resolved.command, resolved.args = cmd.replace_placeholders(values)
            return self._run(resolved, use_shell)

    def _run(self, cmd: Command, use_shell: bool) -> ExecutionResultResponse:
        if use_shell:
            result = self.executor.execute_with_shell(cmd)
        else:
            result = self.executor.execute(cmd)
        return ExecutionResultResponse(**result.to_dict())
