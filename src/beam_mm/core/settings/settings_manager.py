"""
Settings manager for handling persistent application settings.
Manages TOML-based configuration storage in BeamMM's data directory.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import tomlkit
from tomlkit.exceptions import TOMLKitError

from beam_mm.core.errors import StorageError
from beam_mm.utils.file_utils import atomic_write_text

log = logging.getLogger(__name__)


class SettingsManager:
    """Manages loading and saving of application settings to a TOML file."""

    def __init__(self, settings_file: Path):
        """
        Initialize the settings manager.

        Args:
            settings_file: Path to the TOML settings file
        """
        self.settings_file = Path(settings_file)
        self._document = self._get_default_settings()
        self.load_settings()

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from the TOML file.

        A missing file yields the defaults. A file that cannot be read or parsed is
        logged and replaced in memory by the defaults; it is not overwritten until
        the next save.

        Returns:
            Dictionary containing all settings
        """
        if not self.settings_file.exists():
            self._document = self._get_default_settings()
            return self.get_all_settings()

        try:
            with open(self.settings_file, "r", encoding="utf-8") as f:
                self._document = tomlkit.parse(f.read())
        except (TOMLKitError, OSError, UnicodeDecodeError) as e:
            log.error("Error loading settings from %s: %s", self.settings_file, e)
            self._document = self._get_default_settings()

        return self.get_all_settings()

    def save_settings(self) -> None:
        """
        Save current settings to the TOML file, keeping the user's comments.

        Raises:
            StorageError: the file could not be written
        """
        try:
            self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(self.settings_file.parent, e.strerror or str(e)) from e
        atomic_write_text(self.settings_file, tomlkit.dumps(self._document))

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value.

        Args:
            key: Setting key
            default: Default value if key doesn't exist

        Returns:
            Setting value or default
        """
        value = self._document.get(key, default)
        if hasattr(value, "unwrap"):
            return value.unwrap()
        return value

    def get_bool(self, key: str, default: bool = False) -> bool:
        """
        Get a true/false setting. Values of any other type are logged and ignored.
        """
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        log.error(
            "Setting %s in %s must be true or false, got %r; using %r",
            key,
            self.settings_file,
            value,
            default,
        )
        return default

    def get_path(self, key: str) -> Optional[Path]:
        """
        Get a path setting. Missing or empty values give None; non-string values
        are logged and ignored.
        """
        value = self.get(key)
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            log.error(
                "Setting %s in %s must be a string path, got %r; ignoring it",
                key,
                self.settings_file,
                value,
            )
            return None
        return Path(value)

    def set(self, key: str, value: Any, auto_save: bool = True) -> None:
        """
        Set a setting value.

        Args:
            key: Setting key
            value: Setting value
            auto_save: Whether to automatically save to file
        """
        self._document[key] = value
        if auto_save:
            self.save_settings()

    def remove(self, key: str, auto_save: bool = True) -> Any:
        """
        Remove a setting.

        Returns:
            The removed value, or None if key didn't exist
        """
        if key not in self._document:
            return None
        value = self.get(key)
        del self._document[key]
        if auto_save:
            self.save_settings()
        return value

    def _get_default_settings(self) -> tomlkit.TOMLDocument:
        document = tomlkit.document()
        document.add(tomlkit.comment("BeamMM settings"))
        document.add(
            tomlkit.comment("data_dir = \"...\"  # custom BeamNG.drive data directory")
        )
        document.add("confirm_all", False)
        return document

    def get_all_settings(self) -> Dict[str, Any]:
        """
        Get a copy of all current settings.

        Returns:
            Dictionary containing all settings
        """
        return self._document.unwrap()

    def has_key(self, key: str) -> bool:
        return key in self._document
