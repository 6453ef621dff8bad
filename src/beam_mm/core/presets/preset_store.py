"""
Preset store for BeamMM.
Handles preset CRUD with one JSON file per preset in BeamMM's own data directory.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Iterator

from beam_mm.core.errors import (
    DuplicateNameError,
    InvalidNameError,
    NotFoundError,
    ParseError,
    StorageError,
)
from beam_mm.domain.models import Preset, PresetSummary
from beam_mm.utils.file_utils import read_json, write_json

log = logging.getLogger(__name__)


class PresetListing:
    """Name-ordered view over the store. Iterating again reflects the current presets."""

    def __init__(self, store: "PresetStore"):
        self._store = store

    def __iter__(self) -> Iterator[PresetSummary]:
        for name in sorted(self._store._presets):
            preset = self._store._presets.get(name)
            if preset is None:
                continue
            yield PresetSummary(preset.name, preset.enabled, len(preset.mods))


class PresetStore:
    """
    Manages presets with file-based persistence.

    Every mutation is written to disk immediately. Mod ids are not checked against
    the mod database here; stale ids are dealt with during reconciliation.

    Usage:
        store = PresetStore(presets_dir)
        store.create("Racing", ["modA", "modB"])
        store.set_enabled("Racing", True)
    """

    def __init__(self, presets_dir: Path | str):
        """
        Initialize the store and load every preset file.

        Args:
            presets_dir: Directory holding the preset JSON files
        """
        self._presets_dir = Path(presets_dir)
        self._presets_dir.mkdir(parents=True, exist_ok=True)
        self._presets: dict[str, Preset] = {}
        # Files presets were loaded from; older files may not match the sanitized name
        self._files: dict[str, Path] = {}
        self._load_all()

    def _load_all(self) -> None:
        """Load all presets from disk."""
        for preset_file in sorted(self._presets_dir.iterdir()):
            if not self._is_preset_file(preset_file):
                continue
            preset = self._parse_preset(preset_file, read_json(preset_file))
            if preset.name in self._presets:
                raise ParseError(
                    preset_file, f"duplicate preset name '{preset.name}'"
                )
            self._presets[preset.name] = preset
            self._files[preset.name] = preset_file
        log.debug("Loaded %d presets from %s", len(self._presets), self._presets_dir)

    @staticmethod
    def _is_preset_file(path: Path) -> bool:
        # Older BeamMM releases saved presets without the .json extension
        if path.name.startswith(".") or not path.is_file():
            return False
        return path.suffix in ("", ".json")

    @staticmethod
    def _parse_preset(preset_file: Path, data: object) -> Preset:
        if not isinstance(data, dict):
            raise ParseError(preset_file, "preset is not a JSON object")
        name = data.get("name")
        mods = data.get("mods", [])
        enabled = data.get("enabled", False)
        if not isinstance(name, str) or not name.strip():
            # Presets written by older versions may lack the name field
            name = preset_file.stem
        if not isinstance(mods, list) or not all(isinstance(m, str) for m in mods):
            raise ParseError(preset_file, "'mods' must be a list of strings")
        if not isinstance(enabled, bool):
            raise ParseError(preset_file, "'enabled' must be true or false")
        return Preset(name=name, mods=list(dict.fromkeys(mods)), enabled=enabled)

    @staticmethod
    def _sanitize_filename(name: str) -> str:
        """Sanitize preset name for use as filename."""
        return "".join(c if c.isalnum() or c in "._- " else "_" for c in name)

    def _preset_file(self, name: str) -> Path:
        known = self._files.get(name)
        if known is not None:
            return known
        return self._presets_dir / f"{self._sanitize_filename(name)}.json"

    def _save(self, preset: Preset) -> None:
        """Write a preset, then make it the stored one. A failed write changes nothing."""
        write_json(self._preset_file(preset.name), preset.to_dict(), indent=2)
        self._presets[preset.name] = preset

    def _require(self, name: str) -> Preset:
        preset = self._presets.get(name)
        if preset is None:
            raise NotFoundError("preset", [name])
        return preset

    def __contains__(self, name: object) -> bool:
        return name in self._presets

    def __len__(self) -> int:
        return len(self._presets)

    def get(self, name: str) -> Preset:
        """Get a preset by name. Raises NotFoundError if absent."""
        return self._require(name)

    def presets(self) -> list[Preset]:
        """All presets ordered by name."""
        return [self._presets[name] for name in sorted(self._presets)]

    def list(self) -> PresetListing:
        return PresetListing(self)

    def create(self, name: str, mods: Iterable[str] | None = None) -> Preset:
        """
        Create and persist a new, disabled preset.

        Raises:
            InvalidNameError: the name is blank
            DuplicateNameError: a preset with this name (or file name) exists
        """
        if not name or not name.strip():
            raise InvalidNameError(name)
        if name in self._presets or self._preset_file(name).exists():
            raise DuplicateNameError(name)
        preset = Preset(name=name, mods=list(dict.fromkeys(mods or [])))
        self._save(preset)
        self._files[name] = self._preset_file(name)
        log.info("Created preset %s with %d mods", name, len(preset.mods))
        return preset

    def delete(self, name: str) -> None:
        """Delete a preset. Raises NotFoundError if absent."""
        self._require(name)
        preset_file = self._preset_file(name)
        try:
            preset_file.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(preset_file, e.strerror or str(e)) from e
        del self._presets[name]
        self._files.pop(name, None)
        log.info("Deleted preset %s", name)

    def add_mod(self, name: str, mod_id: str) -> bool:
        return bool(self.add_mods(name, [mod_id]))

    def add_mods(self, name: str, mod_ids: Iterable[str]) -> list[str]:
        """
        Add mods to a preset, skipping ids it already holds.

        Returns:
            The ids that were added
        """
        preset = self._require(name)
        added = []
        for mod_id in mod_ids:
            if mod_id not in preset.mods and mod_id not in added:
                added.append(mod_id)
        if added:
            self._save(replace(preset, mods=[*preset.mods, *added]))
            log.info("Added %s to preset %s", ", ".join(added), name)
        return added

    def remove_mod(self, name: str, mod_id: str) -> bool:
        return bool(self.remove_mods(name, [mod_id]))

    def remove_mods(self, name: str, mod_ids: Iterable[str]) -> list[str]:
        """
        Remove mods from a preset; ids it does not hold are ignored.

        Returns:
            The ids that were removed
        """
        preset = self._require(name)
        to_remove = set(mod_ids)
        removed = [m for m in preset.mods if m in to_remove]
        if removed:
            self._save(
                replace(preset, mods=[m for m in preset.mods if m not in to_remove])
            )
            log.info("Removed %s from preset %s", ", ".join(removed), name)
        return removed

    def set_enabled(self, name: str, enabled: bool) -> bool:
        """
        Toggle a preset's own flag.

        Returns:
            True if the flag changed value
        """
        preset = self._require(name)
        enabled = bool(enabled)
        if preset.enabled == enabled:
            return False
        self._save(replace(preset, enabled=enabled))
        log.info("Preset %s %s", name, "enabled" if enabled else "disabled")
        return True
