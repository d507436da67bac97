# command_argus/core/commands/schemas.py
"""Pydantic models for command requests and responses.

Defines the plain structured values exchanged with callers (a GUI, the
CLI, or anything marshalling across a process boundary), including the
partial-update value accepted by ``CommandRepository.update``.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from command_argus.core.commands.models import (
    Command,
    CommandParameter,
    EnvironmentVariable,
    ParameterType,
)


class EnvironmentVariableSchema(BaseModel):
    """Environment variable as exchanged with callers."""

    key: str = Field(..., description="Variable name")
    value: str = Field(..., description="Variable value")

    def to_model(self) -> EnvironmentVariable:
        return EnvironmentVariable(key=self.key, value=self.value)


class CommandParameterSchema(BaseModel):
    """Command parameter as exchanged with callers.

    Attributes:
        name: Placeholder key.
        placeholder: Display text.
        parameter_type: One of text, file, directory, select.
        required: Whether a value must be supplied.
        default_value: Value used when none is supplied.
        options: Allowed values for select parameters.
    """

    name: str = Field(..., description="Placeholder key")
    placeholder: str = Field("", description="Display text for the value")
    parameter_type: ParameterType = Field(
        ParameterType.TEXT, description="Kind of value expected"
    )
    required: bool = Field(False, description="Whether a value must be supplied")
    default_value: str | None = Field(None, description="Default value")
    options: list[str] | None = Field(None, description="Allowed select values")

    def to_model(self) -> CommandParameter:
        return CommandParameter(
            name=self.name,
            placeholder=self.placeholder,
            parameter_type=self.parameter_type,
            required=self.required,
            default_value=self.default_value,
            options=list(self.options) if self.options is not None else None,
        )


class CreateCommandRequest(BaseModel):
    """Request to create and store a new command."""

    name: str = Field(..., description="Unique display name")
    command: str = Field(..., description="Program to run")
    args: list[str] = Field(default_factory=list, description="Arguments")
    description: str | None = Field(None, description="Human description")
    working_directory: str | None = Field(None, description="Working directory")
    environment_variables: list[EnvironmentVariableSchema] = Field(
        default_factory=list, description="Environment overrides"
    )
    tags: list[str] = Field(default_factory=list, description="Tags")
    parameters: list[CommandParameterSchema] = Field(
        default_factory=list, description="Typed placeholder parameters"
    )

    def to_command(self) -> Command:
        """Build a new, not yet stored Command from this request."""
        cmd = Command.new(self.name, self.command).with_args(self.args)
        if self.description is not None:
            cmd = cmd.with_description(self.description)
        if self.working_directory is not None:
            cmd = cmd.with_working_directory(self.working_directory)
        for env in self.environment_variables:
            cmd.add_environment_variable(env.key, env.value)
        for tag in self.tags:
            cmd.add_tag(tag)
        for param in self.parameters:
            cmd.add_parameter(param.to_model())
        return cmd


class CommandUpdate(BaseModel):
    """Partial update of a stored command.

    Only fields that were explicitly set are applied. Setting
    ``description`` or ``working_directory`` to None clears it.
    """

    name: str | None = None
    command: str | None = None
    args: list[str] | None = None
    description: str | None = None
    working_directory: str | None = None
    environment_variables: list[EnvironmentVariableSchema] | None = None
    tags: list[str] | None = None
    parameters: list[CommandParameterSchema] | None = None

    def apply_to(self, cmd: Command) -> None:
        """Apply the explicitly set fields to ``cmd`` in place.

        Args:
            cmd: Command to modify.
        """
        fields = self.model_fields_set

        if "name" in fields and self.name is not None:
            cmd.name = self.name
        if "command" in fields and self.command is not None:
            cmd.command = self.command
        if "args" in fields and self.args is not None:
            cmd.args = list(self.args)
        if "description" in fields:
            cmd.description = self.description
        if "working_directory" in fields:
            cmd.working_directory = self.working_directory
        if "environment_variables" in fields and self.environment_variables is not None:
            cmd.environment_variables = [
                env.to_model() for env in self.environment_variables
            ]
        if "tags" in fields and self.tags is not None:
            cmd.tags = []
            for tag in self.tags:
                cmd.add_tag(tag)
        if "parameters" in fields and self.parameters is not None:
            cmd.parameters = [param.to_model() for param in self.parameters]

    # Allows passing an instance directly as a repository mutator
    def __call__(self, cmd: Command) -> None:
        self.apply_to(cmd)


class CommandResponse(BaseModel):
    """Stored command as returned to callers."""

    id: str = Field(..., description="Command id (UUID)")
    name: str
    command: str
    args: list[str]
    description: str | None = None
    working_directory: str | None = None
    environment_variables: list[EnvironmentVariableSchema]
    tags: list[str]
    created_at: datetime
    updated_at: datetime
    last_used_at: datetime | None = None
    use_count: int
    parameters: list[CommandParameterSchema]
    placeholders: list[str] = Field(
        default_factory=list, description="Placeholders found in the command"
    )

    @classmethod
    def from_command(cls, cmd: Command) -> "CommandResponse":
        return cls(
            id=str(cmd.id),
            name=cmd.name,
            command=cmd.command,
            args=list(cmd.args),
            description=cmd.description,
            working_directory=cmd.working_directory,
            environment_variables=[
                EnvironmentVariableSchema(key=env.key, value=env.value)
                for env in cmd.environment_variables
            ],
            tags=list(cmd.tags),
            created_at=cmd.created_at,
            updated_at=cmd.updated_at,
            last_used_at=cmd.last_used_at,
            use_count=cmd.use_count,
            parameters=[
                CommandParameterSchema(
                    name=p.name,
                    placeholder=p.placeholder,
                    parameter_type=p.parameter_type,
                    required=p.required,
                    default_value=p.default_value,
                    options=p.options,
                )
                for p in cmd.parameters
            ],
            placeholders=cmd.detect_placeholders(),
        )


class ExecutionResultResponse(BaseModel):
    """Captured result of running a command."""

    stdout: str = Field(..., description="Captured standard output")
    stderr: str = Field(..., description="Captured standard error")
    exit_code: int = Field(..., description="Exit code, -1 if killed")
    success: bool = Field(..., description="True if the exit code was 0")
