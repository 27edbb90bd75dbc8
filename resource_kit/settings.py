"""Settings for URL connections opened by resources.

Two-scope settings system:
- User global (~/.resource-kit/settings.yaml)
- Project (.resource-kit/settings.yaml)

Only the ``connection:`` section is interpreted here. Environment variables
``RESOURCE_KIT_CONNECT_TIMEOUT`` and ``RESOURCE_KIT_READ_TIMEOUT`` override
the files.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT_ENV = "RESOURCE_KIT_CONNECT_TIMEOUT"
READ_TIMEOUT_ENV = "RESOURCE_KIT_READ_TIMEOUT"


class ConnectionSettings(BaseModel):
    """Connection customization applied to every URL connection."""

    connect_timeout: float | None = Field(None, description="Connect timeout in seconds (None = no timeout)")
    read_timeout: float | None = Field(None, description="Read timeout in seconds (None = no timeout)")
    follow_redirects: bool = Field(True, description="Follow HTTP redirects")
    headers: dict[str, str] = Field(default_factory=dict, description="Extra request headers")
    user_agent: str | None = Field(None, description="User-Agent request header")


class SettingsManager:
    """Manages settings across user/project scopes."""

    def __init__(self, settings_dir: Path | None = None, user_settings_file: Path | None = None):
        """Initialize settings manager with standard paths.

        Args:
            settings_dir: Base directory for project settings (for testing).
                          If None, uses .resource-kit in current directory.
            user_settings_file: User settings file (for testing).
                                If None, uses ~/.resource-kit/settings.yaml.
        """
        if settings_dir is None:
            settings_dir = Path(".resource-kit")
        if user_settings_file is None:
            user_settings_file = Path.home() / ".resource-kit" / "settings.yaml"

        self.user_settings_file = user_settings_file
        self.project_settings_file = settings_dir / "settings.yaml"

    def get_merged_settings(self) -> dict[str, Any]:
        """Get merged settings from both scopes (project wins).

        Returns:
            Merged settings dictionary
        """
        merged: dict[str, Any] = {}

        user = self._read_settings(self.user_settings_file)
        if user:
            merged = self._deep_merge(merged, user)

        project = self._read_settings(self.project_settings_file)
        if project:
            merged = self._deep_merge(merged, project)

        return merged

    def get_connection_settings(self) -> ConnectionSettings:
        """Build connection settings from files and environment.

        Invalid values are logged and ignored, leaving the defaults.
        """
        section = self.get_merged_settings().get("connection") or {}
        if not isinstance(section, dict):
            logger.warning(f"Ignoring non-mapping 'connection' settings: {section!r}")
            section = {}

        for key, env_name in (("connect_timeout", CONNECT_TIMEOUT_ENV), ("read_timeout", READ_TIMEOUT_ENV)):
            value = os.environ.get(env_name)
            if value:
                section = {**section, key: value}

        try:
            return ConnectionSettings.model_validate(section)
        except ValidationError as e:
            logger.warning(f"Invalid connection settings, using defaults: {e}")
            return ConnectionSettings()

    def set_connection_option(self, key: str, value: Any, scope: str = "project") -> None:
        """Set a single connection option in the given scope.

        Args:
            key: ConnectionSettings field name
            value: New value
            scope: "project" or "user"
        """
        if key not in ConnectionSettings.model_fields:
            raise ValueError(f"Unknown connection setting: {key}")
        path = self.user_settings_file if scope == "user" else self.project_settings_file
        self._update_settings(path, {"connection": {key: value}})
        logger.info(f"Set connection.{key} in {scope} settings")

    def _read_settings(self, path: Path) -> dict[str, Any] | None:
        """Read settings from YAML file.

        Args:
            path: Path to settings file

        Returns:
            Settings dict or None if file doesn't exist
        """
        if not path.exists():
            return None

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
                return data if data else {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None

    def _write_settings(self, path: Path, settings: dict[str, Any]) -> None:
        """Write settings to YAML file.

        Args:
            path: Path to settings file
            settings: Settings dictionary
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(path, "w") as f:
                yaml.dump(settings, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error(f"Failed to write settings to {path}: {e}")
            raise

    def _update_settings(self, path: Path, updates: dict[str, Any]) -> None:
        """Update settings file with new values (deep merge)."""
        existing = self._read_settings(path) or {}
        merged = self._deep_merge(existing, updates)
        self._write_settings(path, merged)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries (overlay takes precedence)."""
        result = base.copy()

        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


_connection_settings: ConnectionSettings | None = None


def get_connection_settings() -> ConnectionSettings:
    """Get the process-wide connection settings, loading them on first use."""
    global _connection_settings
    if _connection_settings is None:
        _connection_settings = SettingsManager().get_connection_settings()
    return _connection_settings


def set_connection_settings(settings: ConnectionSettings | None) -> None:
    """Replace the process-wide connection settings (None reloads on next use)."""
    global _connection_settings
    _connection_settings = settings


def reset_connection_settings() -> None:
    """Drop cached connection settings so they are re-read on next use."""
    set_connection_settings(None)
