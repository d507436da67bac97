# command_argus/config.py
"""Application configuration using pydantic-settings.

Provides a centralized Settings class for all environment variables
and the platform-specific data directory where commands are stored.
"""

import os
import sys
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

APP_QUALIFIER = "com"
APP_ORGANIZATION = "command-argus"
APP_NAME = "command-argus"


def platform_data_dir(platform: str | None = None) -> Path:
    """Return the per-user application data directory for this platform.

    Args:
        platform: Platform identifier as in ``sys.platform``. Defaults to
            the running interpreter's platform.

    Returns:
        Path to the data directory. The directory is not created.
    """
    platform = platform or sys.platform
    home = Path.home()

    if platform == "darwin":
        return (
            home
            / "Library"
            / "Application Support"
            / f"{APP_QUALIFIER}.{APP_ORGANIZATION}.{APP_NAME}"
        )

    if platform.startswith("win"):
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else home / "AppData" / "Roaming"
        return base / APP_ORGANIZATION / APP_NAME / "data"

    xdg_data_home = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg_data_home) if xdg_data_home else home / ".local" / "share"
    return base / APP_NAME


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are loaded from .env file and environment variables
    prefixed with COMMAND_ARGUS_. Environment variables take precedence
    over .env file values.
    """

    # Storage
    data_dir: Path | None = None  # Falls back to platform_data_dir()
    storage_file: str = "commands.json"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Execution
    default_shell_mode: bool = True

    model_config = SettingsConfigDict(
        env_prefix="COMMAND_ARGUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def storage_path(self) -> Path:
        """Get the full path of the serialized command collection.

        Returns:
            ``data_dir / storage_file``, using the platform data directory
            when ``data_dir`` is not configured.
        """
        data_dir = self.data_dir or platform_data_dir()
        return data_dir / self.storage_file


# Singleton instance - import this in your code
settings = Settings()
