# command_argus/core/commands/models.py
"""Command data model for saved program invocations.

This module defines the Command dataclass which represents a user-defined
program invocation with its arguments, environment, tags, typed parameters
and usage statistics, plus helpers for placeholder detection and
substitution.
"""

import copy
import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from command_argus.core.commands.errors import InvalidCommandError

# Matches {name} or ${name}; the name is any run of characters except "}"
PLACEHOLDER_PATTERN = re.compile(r"\$?\{([^}]+)\}")


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def _checked(
    data: Mapping[str, Any], key: str, expected: type, optional: bool = False
) -> Any:
    """Fetch ``data[key]`` and raise TypeError unless it is an ``expected``."""
    value = data.get(key) if optional else data[key]
    if value is None and optional:
        return None
    if not isinstance(value, expected):
        raise TypeError(
            f"{key} must be {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _checked_strings(data: Mapping[str, Any], key: str) -> list[str] | None:
    values = _checked(data, key, list, optional=True)
    if values is None:
        return None
    for item in values:
        if not isinstance(item, str):
            raise TypeError(f"{key} must contain only strings")
    return list(values)


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class ParameterType(Enum):
    """Kind of value a command parameter expects."""

    TEXT = "text"
    FILE = "file"
    DIRECTORY = "directory"
    SELECT = "select"


@dataclass
class EnvironmentVariable:
    """A key/value pair assigned in the child process environment."""

    key: str
    value: str

    def to_dict(self) -> dict:
        return {"key": self.key, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict) -> "EnvironmentVariable":
        return cls(key=_checked(data, "key", str), value=_checked(data, "value", str))


@dataclass
class CommandParameter:
    """A typed value the user supplies for a placeholder before running.

    Attributes:
        name: Placeholder key, as written between the braces.
        placeholder: Display text shown when asking for the value.
        parameter_type: Kind of value expected.
        required: Whether a non-blank value must be supplied.
        default_value: Value used when the caller supplies none.
        options: Allowed values, only meaningful for SELECT parameters.
    """

    name: str
    placeholder: str
    parameter_type: ParameterType = ParameterType.TEXT
    required: bool = False
    default_value: str | None = None
    options: list[str] | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "placeholder": self.placeholder,
            "parameter_type": self.parameter_type.value,
            "required": self.required,
            "default_value": self.default_value,
            "options": list(self.options) if self.options is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CommandParameter":
        """Create from dictionary."""
        return cls(
            name=_checked(data, "name", str),
            placeholder=_checked(data, "placeholder", str, optional=True) or "",
            parameter_type=ParameterType(data.get("parameter_type", "text")),
            required=bool(data.get("required", False)),
            default_value=_checked(data, "default_value", str, optional=True),
            options=_checked_strings(data, "options"),
        )


@dataclass
class Command:
    """Represents a saved program invocation.

    Commands are created with ``Command.new`` and then mutated in place.
    The record store hands out copies, so changes made by a caller only
    persist when written back through the store's update operation.

    Attributes:
        id: Unique identifier assigned at creation, never changed.
        name: Display name, unique within the store.
        command: Program to run (or the head of the shell string).
        args: Ordered argument strings.
        description: Optional human-readable description.
        working_directory: Directory the process is started in, if any.
        environment_variables: Variables layered onto the inherited
            environment. Later duplicates of a key win.
        tags: Insertion-ordered tags without duplicates.
        created_at: UTC timestamp when the command was created.
        updated_at: UTC timestamp of the last stored modification.
        last_used_at: UTC timestamp of the last run, None if never run.
        use_count: Number of recorded runs.
        parameters: Typed values asked for before running.

    Example:
        >>> cmd = Command.new("List Files", "ls").with_args(["-la"])
        >>> cmd.full_command()
        'ls -la'
    """

    id: uuid.UUID
    name: str
    command: str
    args: list[str] = field(default_factory=list)
    description: str | None = None
    working_directory: str | None = None
    environment_variables: list[EnvironmentVariable] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    last_used_at: datetime | None = None
    use_count: int = 0
    parameters: list[CommandParameter] = field(default_factory=list)

    @classmethod
    def new(cls, name: str, command: str) -> "Command":
        """Create a command with a fresh id and both timestamps set to now.

        Args:
            name: Display name.
            command: Program to run.

        Returns:
            New Command with empty collections and zeroed usage.
        """
        now = utc_now()
        return cls(
            id=uuid.uuid4(),
            name=name,
            command=command,
            created_at=now,
            updated_at=now,
        )

    # Builder setters, used before the command is first stored

    def with_args(self, args: list[str]) -> "Command":
        self.args = list(args)
        return self

    def with_description(self, description: str) -> "Command":
        self.description = description
        return self

    def with_working_directory(self, directory: str) -> "Command":
        self.working_directory = directory
        return self

    def add_environment_variable(self, key: str, value: str) -> None:
        """Append an environment variable. Duplicate keys are kept."""
        self.environment_variables.append(EnvironmentVariable(key=key, value=value))

    def add_tag(self, tag: str) -> None:
        """Append a tag unless an identical one is already present."""
        if tag not in self.tags:
            self.tags.append(tag)

    def remove_tag(self, tag: str) -> None:
        self.tags = [t for t in self.tags if t != tag]

    def add_parameter(self, parameter: CommandParameter) -> None:
        self.parameters.append(parameter)

    def remove_parameter(self, name: str) -> None:
        """Remove every parameter with the given name, if any."""
        self.parameters = [p for p in self.parameters if p.name != name]

    def get_parameter(self, name: str) -> CommandParameter | None:
        return next((p for p in self.parameters if p.name == name), None)

    def mark_as_used(self) -> None:
        """Record a run: set last_used_at to now and bump use_count."""
        self.last_used_at = utc_now()
        self.use_count += 1

    def update(self) -> None:
        """Refresh updated_at after a modification."""
        self.updated_at = max(utc_now(), self.created_at)

    def full_command(self) -> str:
        """Join the program and its arguments with single spaces.

        The result is what shell mode hands to the shell. Arguments that
        contain spaces or shell metacharacters are not quoted.
        """
        return " ".join([self.command, *self.args])

    def detect_placeholders(self) -> list[str]:
        """Find ``{name}`` and ``${name}`` placeholders in the full command.

        Returns:
            Distinct placeholder names in first-seen order.
        """
        names: list[str] = []
        for match in PLACEHOLDER_PATTERN.finditer(self.full_command()):
            name = match.group(1)
            if name not in names:
                names.append(name)
        return names

    def replace_placeholders(self, values: Mapping[str, str]) -> tuple[str, list[str]]:
        """Substitute placeholder values without modifying this command.

        Both ``${name}`` and ``{name}`` are replaced in the program and in
        each argument. Longer names are substituted first, so a name that
        contains another as a substring is resolved before the shorter one.

        Args:
            values: Mapping of placeholder name to replacement value.

        Returns:
            Tuple of (resolved command, resolved args).
        """
        ordered = sorted(values.items(), key=lambda item: len(item[0]), reverse=True)

        def substitute(text: str) -> str:
            for name, value in ordered:
                text = text.replace("${" + name + "}", value)
                text = text.replace("{" + name + "}", value)
            return text

        return substitute(self.command), [substitute(arg) for arg in self.args]

    def resolve_parameter_values(self, values: Mapping[str, str]) -> dict[str, str]:
        """Merge caller values with parameter defaults and validate them.

        Names not declared as parameters are passed through unchanged.

        Args:
            values: Values supplied by the caller, keyed by parameter name.

        Returns:
            Mapping of placeholder name to the value to substitute.

        Raises:
            InvalidCommandError: If a required parameter has no value, or a
                SELECT parameter's value is not one of its options.
        """
        resolved = dict(values)
        for param in self.parameters:
            value = resolved.get(param.name)
            if value is None and param.default_value is not None:
                value = param.default_value
                resolved[param.name] = value

            if param.required and (value is None or not value.strip()):
                label = param.placeholder or param.name
                raise InvalidCommandError(f"{label} is required")

            if (
                param.parameter_type is ParameterType.SELECT
                and param.options
                and value
                and value not in param.options
            ):
                raise InvalidCommandError(
                    f"'{value}' is not a valid option for {param.name}"
                )
        return resolved

    def copy(self) -> "Command":
        """Return an independent copy of this command."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the command.
        """
        return {
            "id": str(self.id),
            "name": self.name,
            "command": self.command,
            "args": list(self.args),
            "description": self.description,
            "working_directory": self.working_directory,
            "environment_variables": [
                env.to_dict() for env in self.environment_variables
            ],
            "tags": list(self.tags),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "last_used_at": self.last_used_at.isoformat()
            if self.last_used_at
            else None,
            "use_count": self.use_count,
            "parameters": [param.to_dict() for param in self.parameters],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Command":
        """Create from dictionary.

        Args:
            data: Dictionary with command data, as produced by ``to_dict``.

        Returns:
            Command instance.

        Raises:
            KeyError: If a mandatory field is missing.
            ValueError: If an id, timestamp or parameter type is malformed.
            TypeError: If a field has the wrong type.
        """
        use_count = data.get("use_count", 0)
        if isinstance(use_count, bool) or not isinstance(use_count, int):
            raise TypeError(f"use_count must be int, got {type(use_count).__name__}")
        if use_count < 0:
            raise ValueError(f"use_count must not be negative: {use_count}")

        last_used_at = _checked(data, "last_used_at", str, optional=True)
        if bool(last_used_at) != (use_count > 0):
            raise ValueError("last_used_at must be set exactly when use_count > 0")

        return cls(
            id=uuid.UUID(_checked(data, "id", str)),
            name=_checked(data, "name", str),
            command=_checked(data, "command", str),
            args=_checked_strings(data, "args") or [],
            description=_checked(data, "description", str, optional=True),
            working_directory=_checked(data, "working_directory", str, optional=True),
            environment_variables=[
                EnvironmentVariable.from_dict(env)
                for env in _checked(data, "environment_variables", list, optional=True)
                or []
            ],
            tags=_checked_strings(data, "tags") or [],
            created_at=_parse_timestamp(_checked(data, "created_at", str)),
            updated_at=_parse_timestamp(_checked(data, "updated_at", str)),
            last_used_at=_parse_timestamp(last_used_at) if last_used_at else None,
            use_count=use_count,
            parameters=[
                CommandParameter.from_dict(param)
                for param in _checked(data, "parameters", list, optional=True) or []
            ],
        )
