# tests/conftest.py
"""Shared pytest fixtures for all test modules.

Provides common fixtures for:
- Temporary command storage paths and repositories
- Mock environment variables
"""

import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture
def storage_path(tmp_path: Path) -> Path:
    """Path of a commands file that does not exist yet."""
    return tmp_path / "data" / "commands.json"


@pytest.fixture
def repository(storage_path: Path):
    """CommandRepository backed by a temporary file."""
    from command_argus.core.commands.repository import CommandRepository

    return CommandRepository(storage_path=storage_path)


@pytest.fixture
def service(repository):
    """CommandService over the temporary repository."""
    from command_argus.core.commands.service import CommandService

    return CommandService(repository)


@pytest.fixture
def mock_env_vars(tmp_path: Path) -> Generator[dict[str, str], None, None]:
    """Provide mock COMMAND_ARGUS_ environment variables for testing.

    Yields:
        Dictionary of mock environment variables that were set.
    """
    mock_vars = {
        "COMMAND_ARGUS_DATA_DIR": str(tmp_path / "argus-data"),
        "COMMAND_ARGUS_STORAGE_FILE": "saved.json",
        "COMMAND_ARGUS_LOG_LEVEL": "DEBUG",
        "COMMAND_ARGUS_LOG_JSON": "true",
    }

    with patch.dict(os.environ, mock_vars):
        yield mock_vars
