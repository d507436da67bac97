# command_argus/core/commands/errors.py
"""Error taxonomy shared by the command store and executor.

Every failure surfaced by the core is a subclass of CommandArgusError,
so callers can catch the base class and show ``str(error)`` to the user.
"""

from uuid import UUID


class CommandArgusError(Exception):
    """Base class for command storage and execution errors."""


class NotFoundError(CommandArgusError):
    """Raised when no stored command has the requested id."""

    def __init__(self, command_id: UUID | str):
        super().__init__(f"Command not found: {command_id}")
        self.command_id = command_id


class DuplicateNameError(CommandArgusError):
    """Raised when a command name is already taken in the store."""

    def __init__(self, name: str):
        super().__init__(f"Command with name '{name}' already exists")
        self.name = name


class InvalidCommandError(CommandArgusError):
    """Raised when a command definition or its inputs are not usable."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid command: {reason}")
        self.reason = reason


class IoError(CommandArgusError):
    """Raised when the store file cannot be read or written."""

    def __init__(self, cause: OSError):
        super().__init__(f"IO error: {cause}")
        self.cause = cause


class SerializationError(CommandArgusError):
    """Raised when the store file content cannot be (de)serialized."""

    def __init__(self, cause: Exception | str):
        super().__init__(f"Serialization error: {cause}")
        self.cause = cause


class StorageError(CommandArgusError):
    """Raised for store failures that have no more specific kind."""

    def __init__(self, message: str):
        super().__init__(f"Storage error: {message}")
        self.message = message


class ExecutionFailedError(CommandArgusError):
    """Raised when the process for a command could not be spawned."""

    def __init__(self, cause: str):
        super().__init__(f"Command execution failed: {cause}")
        self.cause = cause


class InvalidPathError(CommandArgusError):
    """Raised when a command's working directory does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Invalid path: {path}")
        self.path = path
