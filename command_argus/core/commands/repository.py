# command_argus/core/commands/repository.py
"""JSON file repository for Command persistence.

This module provides CRUD and search operations for commands stored in a
single JSON file. The whole collection is re-read on every call and
re-written on every mutation, so the file is always a complete snapshot.

The repository does no locking of its own. Callers that share one
instance between threads must serialize access (see CommandService).
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Callable, Iterable
from pathlib import Path
from uuid import UUID

from command_argus.config import settings
from command_argus.core.commands.errors import (
    DuplicateNameError,
    InvalidCommandError,
    IoError,
    NotFoundError,
    SerializationError,
    StorageError,
)
from command_argus.core.commands.models import Command

logger = logging.getLogger(__name__)


def parse_command_id(command_id: UUID | str) -> UUID:
    """Normalize a command id given as UUID or string.

    Raises:
        InvalidCommandError: If the string is not a valid UUID.
    """
    if isinstance(command_id, UUID):
        return command_id
    try:
        return UUID(str(command_id))
    except ValueError as e:
        raise InvalidCommandError(f"malformed command id '{command_id}'") from e


class CommandRepository:
    """Repository for storing and retrieving commands from a JSON file.

    Provides full CRUD operations for Command objects. The repository
    auto-creates the storage directory on initialization; the file itself
    is created by the first mutation.

    Attributes:
        storage_path: Path to the JSON file holding the collection.

    Example:
        >>> repo = CommandRepository(storage_path="data/commands.json")
        >>> created = repo.create(Command.new("List Files", "ls"))
        >>> repo.update(created.id, lambda c: c.add_tag("filesystem"))
    """

    def __init__(self, storage_path: str | Path | None = None) -> None:
        """Initialize the CommandRepository.

        Args:
            storage_path: Path to the JSON file. Defaults to the configured
                platform data directory.

        Raises:
            IoError: If the parent directory cannot be created.
        """
        self.storage_path = Path(storage_path) if storage_path else settings.storage_path

        try:
            self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoError(e) from e

    def _load_all(self) -> list[Command]:
        """Load the full collection from disk.

        Returns:
            Commands in file order, empty list if the file does not exist.

        Raises:
            IoError: If the file exists but cannot be read.
            SerializationError: If the content is not a valid collection.
        """
        if not self.storage_path.exists():
            return []

        try:
            content = self.storage_path.read_text(encoding="utf-8")
        except OSError as e:
            raise IoError(e) from e

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise SerializationError(e) from e

        if not isinstance(data, list):
            raise SerializationError(
                f"expected a list of commands, got {type(data).__name__}"
            )

        try:
            commands = [Command.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SerializationError(f"invalid command record: {e!r}") from e

        logger.debug("Loaded %d commands from %s", len(commands), self.storage_path)
        return commands

    def _save_all(self, commands: list[Command]) -> None:
        """Write the full collection to disk.

        The content goes to a temporary file in the same directory which
        then replaces the target, so the file is never half-written.

        Raises:
            IoError: If the file cannot be written.
        """
        content = json.dumps(
            [cmd.to_dict() for cmd in commands], indent=2, ensure_ascii=False
        )

        tmp_path: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.storage_path.parent,
                prefix=f".{self.storage_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = f.name
                f.write(content)
            os.replace(tmp_path, self.storage_path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise IoError(e) from e

    def create(self, command: Command) -> Command:
        """Store a new command.

        Args:
            command: Command to store, typically built with ``Command.new``.

        Returns:
            The stored command, unchanged.

        Raises:
            InvalidCommandError: If the name or program is blank.
            DuplicateNameError: If a command with the same name exists.
        """
        if not command.name.strip():
            raise InvalidCommandError("name must not be empty")
        if not command.command.strip():
            raise InvalidCommandError("command must not be empty")

        commands = self._load_all()

        if any(c.name == command.name for c in commands):
            raise DuplicateNameError(command.name)

        commands.append(command)
        self._save_all(commands)

        logger.info("Created command '%s' (%s)", command.name, command.id)
        return command.copy()

    def read(self, command_id: UUID | str) -> Command:
        """Retrieve a command by id.

        Raises:
            NotFoundError: If no command has that id.
        """
        command_id = parse_command_id(command_id)
        for cmd in self._load_all():
            if cmd.id == command_id:
                return cmd
        raise NotFoundError(command_id)

    def read_by_name(self, name: str) -> Command:
        """Retrieve a command by exact name.

        Raises:
            StorageError: If no command has that name.
        """
        for cmd in self._load_all():
            if cmd.name == name:
                return cmd
        raise StorageError(f"Command with name '{name}' not found")

    def update(
        self, command_id: UUID | str, mutator: Callable[[Command], None]
    ) -> Command:
        """Modify a stored command in place and persist the collection.

        ``updated_at`` is refreshed after the mutator runs, whatever it did.

        Args:
            command_id: Id of the command to modify.
            mutator: Callable applied to the stored command. A
                ``CommandUpdate`` instance can be passed directly.

        Returns:
            The command after modification.

        Raises:
            NotFoundError: If no command has that id.
            DuplicateNameError: If the command was renamed to a name that
                another command already uses. Nothing is written.
        """
        command_id = parse_command_id(command_id)
        commands = self._load_all()

        target = next((c for c in commands if c.id == command_id), None)
        if target is None:
            raise NotFoundError(command_id)

        original_name = target.name
        mutator(target)
        target.update()

        if target.name != original_name and any(
            c.name == target.name for c in commands if c is not target
        ):
            raise DuplicateNameError(target.name)

        self._save_all(commands)

        logger.info("Updated command '%s' (%s)", target.name, target.id)
        return target.copy()

    def record_usage(self, command_id: UUID | str) -> Command:
        """Mark a stored command as used and persist it."""
        return self.update(command_id, Command.mark_as_used)

    def delete(self, command_id: UUID | str) -> None:
        """Delete a command by id.

        Raises:
            NotFoundError: If no command has that id.
        """
        command_id = parse_command_id(command_id)
        commands = self._load_all()
        remaining = [c for c in commands if c.id != command_id]

        if len(remaining) == len(commands):
            raise NotFoundError(command_id)

        self._save_all(remaining)
        logger.info("Deleted command %s", command_id)

    def list(self) -> list[Command]:
        """List all commands in storage order."""
        return self._load_all()

    def search_by_name(self, query: str) -> list[Command]:
        """Find commands whose name contains ``query``, ignoring case."""
        query_lower = query.lower()
        return [c for c in self._load_all() if query_lower in c.name.lower()]

    def search_by_tags(self, tags: Iterable[str]) -> list[Command]:
        """Find commands carrying at least one of ``tags``."""
        wanted = set(tags)
        return [c for c in self._load_all() if wanted.intersection(c.tags)]
