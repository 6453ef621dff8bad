from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Mod:
    id: str
    enabled: bool
    # Every other field of the db.json record, untouched
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass
class Preset:
    name: str
    mods: list[str] = field(default_factory=list)
    enabled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "mods": list(self.mods), "enabled": self.enabled}


@dataclass(frozen=True)
class PresetSummary:
    name: str
    enabled: bool
    mod_count: int


@dataclass(frozen=True)
class StaleReference:
    """A preset entry naming a mod that is not in the mod database."""

    preset: str
    mod_id: str
