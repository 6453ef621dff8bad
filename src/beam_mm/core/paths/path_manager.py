"""
Path management for BeamMM.
Locates BeamNG.drive's per-version data directory and BeamMM's own data directory.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from pathlib import Path

from beam_mm.core.errors import (
    DirNotFoundError,
    GameDirNotFoundError,
    StorageError,
    VersionError,
)

log = logging.getLogger(__name__)

GAME_DIR_NAME = "BeamNG.drive"
APP_DIR_NAME = "BeamMM"
VERSION_FILE = "version.txt"
SETTINGS_FILE = "config.toml"

_VERSION_DIR_RE = re.compile(r"^\d+(\.\d+)*$")


def local_data_root() -> Path:
    """Per-user, machine-local application data root (e.g. %LocalAppData%)."""
    if sys.platform == "win32":
        localappdata = os.environ.get("LOCALAPPDATA")
        if localappdata:
            return Path(localappdata)
        return Path.home() / "AppData" / "Local"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"

    # Linux
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def roaming_data_root() -> Path:
    """Per-user roaming application data root (e.g. %AppData%)."""
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    return local_data_root()


def _ensure_dir(directory: Path) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(directory, e.strerror or str(e)) from e


def _version_key(name: str) -> tuple[int, ...]:
    return tuple(int(part) for part in name.split("."))


def detect_game_version(data_dir: Path) -> str:
    """
    Get the game's major.minor version, e.g. `0.32`.

    Reads `version.txt` in the data directory when present. Otherwise the newest
    numerically named version directory is assumed to be the current one.

    Raises:
        DirNotFoundError: data_dir does not exist
        VersionError: the version cannot be determined
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise DirNotFoundError(data_dir)

    version_path = data_dir / VERSION_FILE
    if version_path.is_file():
        try:
            full_version = version_path.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise StorageError(version_path, e.strerror or str(e)) from e
        parts = full_version.split(".")
        if len(parts) < 2 or not parts[0].isdigit() or not parts[1].isdigit():
            raise VersionError(f"unexpected contents of {version_path}: '{full_version}'")
        return f"{parts[0]}.{parts[1]}"

    candidates = [
        d.name
        for d in data_dir.iterdir()
        if d.is_dir() and _VERSION_DIR_RE.match(d.name)
    ]
    if not candidates:
        raise VersionError(f"no {VERSION_FILE} and no version directories in {data_dir}")
    version = max(candidates, key=_version_key)
    log.debug("No %s found, using newest version directory %s", VERSION_FILE, version)
    return version


class PathManager:
    """Manages all path resolution and directory operations."""

    def __init__(
        self,
        custom_data_dir: Path | str | None = None,
        app_dir: Path | str | None = None,
    ):
        """
        Initialize path manager.

        Args:
            custom_data_dir: BeamNG.drive data directory chosen by the user
            app_dir: Override for BeamMM's own data directory
        """
        self.custom_data_dir = Path(custom_data_dir) if custom_data_dir else None
        self._app_dir = Path(app_dir) if app_dir else None

    def beamng_dir(self) -> Path:
        """
        Get the BeamNG.drive data directory.

        Raises:
            DirNotFoundError: a custom directory was given but does not exist
            GameDirNotFoundError: no data directory found automatically
        """
        if self.custom_data_dir is not None:
            if self.custom_data_dir.is_dir():
                return self.custom_data_dir
            raise DirNotFoundError(self.custom_data_dir)

        searched = []
        for root in (local_data_root(), roaming_data_root()):
            candidate = root / GAME_DIR_NAME
            if candidate in searched:
                continue
            searched.append(candidate)
            if candidate.is_dir():
                log.debug("Found BeamNG.drive data directory at %s", candidate)
                return candidate
        raise GameDirNotFoundError(searched)

    def mods_dir(self, data_dir: Path | None = None, version: str | None = None) -> Path:
        """
        Get the mods folder for the current game version.

        Raises:
            DirNotFoundError: the data dir or its <version>/mods folder is missing.
                Launching the game once creates it.
        """
        data_dir = Path(data_dir) if data_dir is not None else self.beamng_dir()
        if not data_dir.is_dir():
            raise DirNotFoundError(data_dir)
        if version is None:
            version = detect_game_version(data_dir)
        mods_dir = data_dir / version / "mods"
        if not mods_dir.is_dir():
            raise DirNotFoundError(mods_dir)
        return mods_dir

    def beammm_dir(self) -> Path:
        """BeamMM's own data directory, created if missing."""
        directory = self._app_dir or local_data_root() / APP_DIR_NAME
        _ensure_dir(directory)
        return directory

    def presets_dir(self) -> Path:
        directory = self.beammm_dir() / "presets"
        _ensure_dir(directory)
        return directory

    def settings_file(self) -> Path:
        return self.beammm_dir() / SETTINGS_FILE
