"""
Settings management for the editor.

Handles persistent storage of user preferences in settings.ini.
"""
from __future__ import annotations

import os
from configparser import ConfigParser, Error as ConfigError
from pathlib import Path
from typing import Optional


class Settings:
    """Manages application settings via settings.ini."""

    ENV_VAR = "SLEEK_EDITOR_SETTINGS"
    DEFAULT_FILE = Path.home() / ".sleek_editor" / "settings.ini"

    # Section and keys
    SECTION = "preferences"
    KEY_OPEN_DIR = "last_open_dir"
    KEY_EXPORT_DIR = "last_export_dir"
    KEY_EXPORT_FORMAT = "export_format"
    KEY_EXPORT_FILENAME = "export_filename"
    KEY_LOCK_ASPECT = "lock_aspect"
    KEY_REFRESH_ON_CROP = "refresh_on_crop"
    KEY_LOG_LEVEL = "log_level"

    DEFAULTS = {
        KEY_OPEN_DIR: "",
        KEY_EXPORT_DIR: "",
        KEY_EXPORT_FORMAT: "png",
        KEY_EXPORT_FILENAME: "edited-image.png",
        KEY_LOCK_ASPECT: "true",
        KEY_REFRESH_ON_CROP: "true",
        KEY_LOG_LEVEL: "INFO",
    }

    def __init__(self, settings_file: Optional[Path] = None):
        """Initialize settings from file or create defaults."""
        env_file = os.environ.get(self.ENV_VAR)
        self.settings_file = Path(settings_file or env_file or self.DEFAULT_FILE)
        self.config = ConfigParser()
        self._load()

    def _load(self) -> None:
        """Load settings from file or create defaults."""
        if self.settings_file.exists():
            self.config.read(self.settings_file, encoding="utf-8")
        if not self.config.has_section(self.SECTION):
            self.config.add_section(self.SECTION)
        for key, value in self.DEFAULTS.items():
            if not self.config.has_option(self.SECTION, key):
                self.config.set(self.SECTION, key, value)

    def _save(self) -> None:
        """Save settings to file."""
        self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.settings_file, "w", encoding="utf-8") as f:
            self.config.write(f)

    def _get(self, key: str) -> str:
        try:
            return self.config.get(self.SECTION, key)
        except ConfigError:
            return self.DEFAULTS[key]

    def _get_bool(self, key: str) -> bool:
        try:
            return self.config.getboolean(self.SECTION, key)
        except (ConfigError, ValueError):
            return self.DEFAULTS[key] == "true"

    def _set(self, key: str, value: str) -> None:
        self.config.set(self.SECTION, key, value)
        self._save()

    def get_open_dir(self) -> Optional[str]:
        """Get last directory an image was opened from."""
        val = self._get(self.KEY_OPEN_DIR)
        return val if val else None

    def set_open_dir(self, path: str) -> None:
        """Set and save last open directory."""
        self._set(self.KEY_OPEN_DIR, path)

    def get_export_dir(self) -> Optional[str]:
        """Get last export directory."""
        val = self._get(self.KEY_EXPORT_DIR)
        return val if val else None

    def set_export_dir(self, path: str) -> None:
        """Set and save last export directory."""
        self._set(self.KEY_EXPORT_DIR, path)

    def get_export_format(self) -> str:
        """Get export format (default: 'png')."""
        return self._get(self.KEY_EXPORT_FORMAT).strip().lower() or "png"

    def get_export_filename(self) -> str:
        """Get default export filename (default: 'edited-image.png')."""
        return self._get(self.KEY_EXPORT_FILENAME).strip() or self.DEFAULTS[self.KEY_EXPORT_FILENAME]

    def get_lock_aspect(self) -> bool:
        return self._get_bool(self.KEY_LOCK_ASPECT)

    def set_lock_aspect(self, locked: bool) -> None:
        self._set(self.KEY_LOCK_ASPECT, "true" if locked else "false")

    def get_refresh_on_crop(self) -> bool:
        """Whether a committed crop re-captures the original size."""
        return self._get_bool(self.KEY_REFRESH_ON_CROP)

    def get_log_level(self) -> str:
        return self._get(self.KEY_LOG_LEVEL).strip().upper() or "INFO"
