"""
Mod manager facade for one BeamMM invocation.

Reads db.json and the presets at the start, queues explicit per-mod commands as
one-off overrides, and writes db.json once at the end through the reconciliation
engine.
"""

from __future__ import annotations

import logging
from typing import Iterable

from beam_mm.core.errors import NotFoundError
from beam_mm.core.mod_database import ModDatabase
from beam_mm.core.paths import PathManager
from beam_mm.core.presets import PresetListing, PresetStore
from beam_mm.core.reconciliation import ReconciliationEngine, ReconciliationResult
from beam_mm.domain.models import Mod, Preset

log = logging.getLogger(__name__)


class ModManager:
    """Ties the mod database, the preset store and the reconciliation engine together."""

    def __init__(
        self,
        database: ModDatabase,
        presets: PresetStore,
        engine: ReconciliationEngine | None = None,
    ):
        self.database = database
        self.presets = presets
        self.engine = engine or ReconciliationEngine()
        # Explicit per-mod commands for this run only, applied last
        self._overrides: dict[str, bool] = {}

    @classmethod
    def from_paths(cls, path_manager: PathManager) -> "ModManager":
        mods_dir = path_manager.mods_dir()
        log.debug("Using mods directory %s", mods_dir)
        database = ModDatabase.load(mods_dir)
        presets = PresetStore(path_manager.presets_dir())
        return cls(database, presets)

    # Presets

    def create_preset(self, name: str, mods: Iterable[str] | None = None) -> Preset:
        return self.presets.create(name, mods)

    def delete_preset(self, name: str) -> None:
        self.presets.delete(name)

    def enable_preset(self, name: str) -> bool:
        return self.presets.set_enabled(name, True)

    def disable_preset(self, name: str) -> bool:
        return self.presets.set_enabled(name, False)

    def add_to_preset(self, name: str, mod_ids: Iterable[str]) -> list[str]:
        return self.presets.add_mods(name, mod_ids)

    def remove_from_preset(self, name: str, mod_ids: Iterable[str]) -> list[str]:
        return self.presets.remove_mods(name, mod_ids)

    def list_presets(self) -> PresetListing:
        return self.presets.list()

    # Mods

    def set_mods_enabled(self, mod_ids: Iterable[str], enabled: bool) -> None:
        """
        Queue explicit enable/disable commands for this run.

        Raises:
            NotFoundError: listing every id that is not installed; nothing is queued
        """
        mod_ids = list(mod_ids)
        missing = [m for m in mod_ids if m not in self.database]
        if missing:
            raise NotFoundError("mod", missing)
        for mod_id in mod_ids:
            self._overrides[mod_id] = bool(enabled)

    def set_all_mods_enabled(self, enabled: bool) -> None:
        self.set_mods_enabled(self.database.mod_ids(), enabled)

    def list_mods(self) -> list[Mod]:
        return sorted(self.database.mods(), key=lambda m: m.id.lower())

    def reconcile(self, save: bool = True) -> ReconciliationResult:
        """Compute the final mod states and write db.json if any changed."""
        result = self.engine.apply(
            self.database, self.presets.presets(), self._overrides, save=save
        )
        self._overrides.clear()
        if result.written:
            log.info("Updated %d mods in %s", len(result.changed), self.database.path)
        return result
