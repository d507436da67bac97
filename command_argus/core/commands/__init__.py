"""Command module for saving, storing and running program invocations.

This module provides:
- Command: Data model for a saved program invocation
- CommandRepository: JSON file repository for command persistence
- CommandExecutor: Runs commands directly or through the host shell
- CommandService: Lock-guarded facade used by front-ends
- Request/response schemas and the error taxonomy
"""

from command_argus.core.commands.errors import (
    CommandArgusError,
    DuplicateNameError,
    ExecutionFailedError,
    InvalidCommandError,
    InvalidPathError,
    IoError,
    NotFoundError,
    SerializationError,
    StorageError,
)
from command_argus.core.commands.executor import CommandExecutor, ExecutionResult
from command_argus.core.commands.models import (
    Command,
    CommandParameter,
    EnvironmentVariable,
    ParameterType,
)
from command_argus.core.commands.repository import CommandRepository
from command_argus.core.commands.schemas import (
    CommandParameterSchema,
    CommandResponse,
    CommandUpdate,
    CreateCommandRequest,
    EnvironmentVariableSchema,
    ExecutionResultResponse,
)
from command_argus.core.commands.service import CommandService

__all__ = [
    "Command",
    "CommandParameter",
    "EnvironmentVariable",
    "ParameterType",
    "CommandRepository",
    "CommandExecutor",
    "ExecutionResult",
    "CommandService",
    "CreateCommandRequest",
    "CommandUpdate",
    "CommandResponse",
    "CommandParameterSchema",
    "EnvironmentVariableSchema",
    "ExecutionResultResponse",
    "CommandArgusError",
    "NotFoundError",
    "DuplicateNameError",
    "InvalidCommandError",
    "IoError",
    "SerializationError",
    "StorageError",
    "ExecutionFailedError",
    "InvalidPathError",
]
