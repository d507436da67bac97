"""Utility functions for command-argus."""

from command_argus.utils.logging import (
    command_context,
    configure_logging,
    get_command_id,
    set_command_id,
)

__all__ = [
    "command_context",
    "set_command_id",
    "get_command_id",
    "configure_logging",
]
