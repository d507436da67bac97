"""Tests for the lock-guarded command service."""

import sys
import threading
import uuid
from unittest.mock import patch

import pytest

from command_argus.core.commands.errors import (
    DuplicateNameError,
    InvalidCommandError,
    InvalidPathError,
    NotFoundError,
)
from command_argus.core.commands.executor import ExecutionResult
from command_argus.core.commands.schemas import CommandUpdate, CreateCommandRequest
from command_argus.utils.logging import get_command_id

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell required")


class TestCommandServiceCrud:
    """Test suite for service CRUD and search operations."""

    def test_create_and_get(self, service) -> None:
        """Test creating through the service and reading back."""
        created = service.create_command(
            CreateCommandRequest(name="Echo", command="echo", args=["hi"], tags=["demo"])
        )

        fetched = service.get_command(created.id)

        assert fetched.name == "Echo"
        assert fetched.args == ["hi"]
        assert fetched.tags == ["demo"]
        assert fetched.use_count == 0

    def test_create_duplicate(self, service) -> None:
        """Test duplicate names are rejected through the service."""
        service.create_command(CreateCommandRequest(name="Same", command="echo"))

        with pytest.raises(DuplicateNameError):
            service.create_command(CreateCommandRequest(name="Same", command="ls"))

    def test_update(self, service) -> None:
        """Test a partial update through the service."""
        created = service.create_command(
            CreateCommandRequest(name="Before", command="echo", description="d")
        )

        updated = service.update_command(created.id, CommandUpdate(name="After"))

        assert updated.name == "After"
        assert updated.description == "d"
        assert updated.updated_at >= created.updated_at

    def test_delete(self, service) -> None:
        """Test deleting through the service."""
        created = service.create_command(CreateCommandRequest(name="Gone", command="echo"))
        service.delete_command(created.id)

        with pytest.raises(NotFoundError):
            service.get_command(created.id)

    def test_list_and_search(self, service) -> None:
        """Test list and both searches return responses."""
        service.create_command(CreateCommandRequest(name="Disk Usage", command="du"))
        service.create_command(
            CreateCommandRequest(name="List", command="ls", tags=["filesystem"])
        )

        assert [c.name for c in service.list_commands()] == ["Disk Usage", "List"]
        assert [c.name for c in service.search_commands_by_name("disk")] == ["Disk Usage"]
        assert [c.name for c in service.search_commands_by_tags(["filesystem"])] == ["List"]

    def test_concurrent_creates_are_serialized(self, service) -> None:
        """Test that creates from several threads all persist."""
        errors: list[Exception] = []

        def create(i: int) -> None:
            try:
                service.create_command(CreateCommandRequest(name=f"cmd{i}", command="echo"))
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=create, args=(i,)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(service.list_commands()) == 10


@posix_only
class TestCommandServiceExecution:
    """Test suite for service execution flows."""

    def test_execute_command_records_usage(self, service) -> None:
        """Test executing records usage and returns output."""
        created = service.create_command(
            CreateCommandRequest(name="Echo Test", command="echo", args=["Hello, World!"])
        )

        result = service.execute_command(created.id, use_shell=False)

        assert result.success is True
        assert result.exit_code == 0
        assert "Hello, World!" in result.stdout

        stored = service.get_command(created.id)
        assert stored.use_count == 1
        assert stored.last_used_at is not None

    def test_execute_twice_counts_twice(self, service) -> None:
        """Test use_count grows with every run."""
        created = service.create_command(CreateCommandRequest(name="T", command="true"))

        service.execute_command(created.id)
        service.execute_command(created.id)

        assert service.get_command(created.id).use_count == 2

    def test_execute_missing(self, service) -> None:
        """Test executing an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            service.execute_command(uuid.uuid4())

    def test_usage_recorded_even_if_run_fails(self, service, tmp_path) -> None:
        """Test that usage stays recorded when the working directory is gone."""
        created = service.create_command(
            CreateCommandRequest(
                name="Bad Dir",
                command="echo",
                working_directory=str(tmp_path / "missing"),
            )
        )

        with pytest.raises(InvalidPathError):
            service.execute_command(created.id)

        assert service.get_command(created.id).use_count == 1

    def test_execute_with_parameters(self, service) -> None:
        """Test placeholder substitution without changing the stored command."""
        created = service.create_command(
            CreateCommandRequest(name="Greet", command="echo", args=["{greeting}", "${who}"])
        )

        result = service.execute_command_with_parameters(
            created.id, {"greeting": "hi", "who": "there"}, use_shell=False
        )

        assert result.stdout == "hi there\n"
        stored = service.get_command(created.id)
        assert stored.args == ["{greeting}", "${who}"]
        assert stored.use_count == 1

    def test_execute_with_parameter_defaults(self, service) -> None:
        """Test that parameter defaults fill in missing values."""
        created = service.create_command(
            CreateCommandRequest(
                name="Default",
                command="echo {word}",
                parameters=[{"name": "word", "placeholder": "Word", "default_value": "dflt"}],
            )
        )

        result = service.execute_command_with_parameters(created.id, {})

        assert result.stdout.strip() == "dflt"

    def test_execute_with_missing_required_parameter(self, service) -> None:
        """Test a missing required value fails before anything is recorded."""
        created = service.create_command(
            CreateCommandRequest(
                name="Required",
                command="echo",
                args=["{word}"],
                parameters=[{"name": "word", "placeholder": "Word", "required": True}],
            )
        )

        with pytest.raises(InvalidCommandError):
            service.execute_command_with_parameters(created.id, {})

        assert service.get_command(created.id).use_count == 0


class TestCommandServiceLogContext:
    """Test suite for command id correlation in service calls."""

    def test_command_id_cleared_after_create(self, service) -> None:
        """Test later log lines do not carry the previous command's id."""
        service.create_command(CreateCommandRequest(name="Tagged", command="echo"))

        assert get_command_id() == ""

    def test_command_id_cleared_after_failed_update(self, service) -> None:
        """Test the id is cleared when the operation raises."""
        with pytest.raises(NotFoundError):
            service.update_command(uuid.uuid4(), CommandUpdate(name="x"))

        assert get_command_id() == ""

    def test_command_id_set_while_running(self, service) -> None:
        """Test the executor sees the id of the command being run."""
        seen: list[str] = []

        def fake_execute(cmd):
            seen.append(get_command_id())
            return ExecutionResult(stdout="", stderr="", exit_code=0, success=True)

        created = service.create_command(CreateCommandRequest(name="Seen", command="true"))
        with patch.object(service.executor, "execute", side_effect=fake_execute):
            service.execute_command(created.id, use_shell=False)

        assert seen == [str(created.id)]
        assert get_command_id() == ""
