"""
Plugin Settings — Load and persist the uploader configuration.

Settings are stored as JSON with the plugin's original camelCase keys:

    {
        "uploadStrategy": "ANONYMOUS_IMGUR",
        "clientId": "abc123",
        "showRemoteUploadConfirmation": true
    }

Saved values are merged over the defaults, so a file written by an
older version (or hand-edited) only needs the keys it overrides.

## Environment Variables

- IMGUR_PASTE_SETTINGS: Settings file path (default: ~/.imgur-paste/settings.json)
- IMGUR_CLIENT_ID: Client id used when the settings file has none
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class PluginSettings(BaseModel):
    """User-facing plugin configuration."""

    model_config = ConfigDict(populate_by_name=True)

    upload_strategy: str = Field(default="ANONYMOUS_IMGUR", alias="uploadStrategy")
    client_id: Optional[str] = Field(default=None, alias="clientId")
    show_remote_upload_confirmation: bool = Field(
        default=True, alias="showRemoteUploadConfirmation"
    )

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True)


def default_settings_path() -> Path:
    """Get the settings file path."""
    override = os.environ.get("IMGUR_PASTE_SETTINGS")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".imgur-paste" / "settings.json"


class SettingsStore:
    """JSON file backend for PluginSettings."""

    def __init__(self, path: Optional[Path] = None):
        self.path = path or default_settings_path()

    def load(self) -> PluginSettings:
        """
        Load settings merged over the defaults.

        A missing, unreadable or invalid file yields the defaults.
        """
        data = self._read()
        merged = {**PluginSettings().to_json_dict(), **data}

        try:
            settings = PluginSettings.model_validate(merged)
        except ValidationError as e:
            logger.warning(f"Invalid settings in {self.path}, using defaults: {e}")
            settings = PluginSettings()

        if not settings.client_id and os.environ.get("IMGUR_CLIENT_ID"):
            settings.client_id = os.environ["IMGUR_CLIENT_ID"]
            logger.debug("Using client id from IMGUR_CLIENT_ID")

        logger.debug(
            f"Settings loaded: strategy={settings.upload_strategy}, "
            f"confirm={settings.show_remote_upload_confirmation}"
        )
        return settings

    def save(self, settings: PluginSettings) -> None:
        """
        Save settings to the JSON file.

        Uses atomic write (write to temp, then rename) to prevent corruption.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        temp_path = self.path.with_suffix(".tmp")
        with temp_path.open("w", encoding="utf-8") as f:
            json.dump(settings.to_json_dict(), f, indent=2)
            f.write("\n")

        temp_path.replace(self.path)
        logger.info(f"Settings saved → {self.path.name}")

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load settings: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {self.path}: not a JSON object")
            return {}
        return data
