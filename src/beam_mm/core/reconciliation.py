"""
Reconciliation of preset and per-mod activation intents into db.json.

The desired state of every mod is computed in layers, each one overriding the
previous for the ids it mentions:

1. baseline: the flag currently stored in the mod database
2. disabled presets: their mods are switched off
3. enabled presets: their mods are switched on (so "on" beats "off")
4. explicit overrides: one-off enable/disable commands for single mods

Preset entries naming mods that are not installed are skipped and reported as
stale references. The database is only written when a flag actually changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from beam_mm.core.errors import NotFoundError
from beam_mm.core.mod_database import ModDatabase
from beam_mm.domain.models import Preset, StaleReference

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationPlan:
    desired: dict[str, bool]
    changes: dict[str, bool]
    stale: list[StaleReference] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)


@dataclass(frozen=True)
class ReconciliationResult:
    changed: dict[str, bool]
    stale: list[StaleReference]
    written: bool


class ReconciliationEngine:
    """Computes and applies the final enabled state of every installed mod."""

    @staticmethod
    def _preset_layer(
        database: ModDatabase,
        presets: Iterable[Preset],
        enabled: bool,
        stale: list[StaleReference],
    ) -> dict[str, bool]:
        layer: dict[str, bool] = {}
        for preset in presets:
            if preset.enabled != enabled:
                continue
            for mod_id in preset.mods:
                if mod_id not in database:
                    stale.append(StaleReference(preset.name, mod_id))
                    continue
                layer[mod_id] = enabled
        return layer

    def plan(
        self,
        database: ModDatabase,
        presets: Iterable[Preset],
        overrides: Mapping[str, bool] | None = None,
    ) -> ReconciliationPlan:
        """
        Compute the desired state without touching the database.

        Args:
            database: The loaded mod database
            presets: Every known preset, enabled or not
            overrides: Explicit per-mod commands for this run (mod id -> enabled)

        Raises:
            NotFoundError: an override names a mod that is not installed
        """
        overrides = dict(overrides or {})
        missing = [mod_id for mod_id in overrides if mod_id not in database]
        if missing:
            raise NotFoundError("mod", missing)

        presets = list(presets)
        stale: list[StaleReference] = []
        baseline = database.enabled_state()

        desired = dict(baseline)
        for layer in (
            self._preset_layer(database, presets, False, stale),
            self._preset_layer(database, presets, True, stale),
            {mod_id: bool(state) for mod_id, state in overrides.items()},
        ):
            desired.update(layer)

        changes = {
            mod_id: state
            for mod_id, state in desired.items()
            if baseline[mod_id] != state
        }
        return ReconciliationPlan(desired=desired, changes=changes, stale=stale)

    def apply(
        self,
        database: ModDatabase,
        presets: Iterable[Preset],
        overrides: Mapping[str, bool] | None = None,
        *,
        save: bool = True,
    ) -> ReconciliationResult:
        """
        Apply the plan to the database and persist it if anything changed.

        Returns:
            What changed, which preset entries were stale, and whether db.json was written
        """
        plan = self.plan(database, presets, overrides)

        for ref in plan.stale:
            log.debug(
                "Preset '%s' references mod '%s' which is not installed; skipping",
                ref.preset,
                ref.mod_id,
            )

        for mod_id, state in plan.changes.items():
            database.set_enabled(mod_id, state)

        written = False
        if plan.has_changes and save:
            database.save()
            written = True
        elif not plan.has_changes:
            log.debug("No mod state changed; leaving mod database untouched")

        return ReconciliationResult(
            changed=dict(plan.changes), stale=list(plan.stale), written=written
        )
