"""
In-memory model of BeamNG.drive's mods/db.json.

The game owns the schema of this file. BeamMM only understands the `mods` table and
each record's `active` flag; every other key, at any level, is carried through a
load/save cycle unchanged and in its original order.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator

from beam_mm.core.errors import NotFoundError, ParseError
from beam_mm.domain.models import Mod
from beam_mm.utils.file_utils import atomic_write_text, detect_indent, read_text

log = logging.getLogger(__name__)

DB_FILENAME = "db.json"


def resolve_db_path(path: Path | str) -> Path:
    """Accept either the db.json file itself or the mods directory holding it."""
    path = Path(path)
    if path.is_dir():
        return path / DB_FILENAME
    return path


class ModDatabase:
    """Mod activation state as stored in db.json."""

    def __init__(
        self,
        document: dict[str, Any],
        path: Path | None = None,
        source_text: str | None = None,
    ):
        self._validate(document, path)
        self._document = document
        self._mods: dict[str, dict[str, Any]] = document["mods"]
        self.path = path
        self._source_text = source_text
        self._indent = detect_indent(source_text) if source_text is not None else 2
        self._trailing_newline = (
            source_text.endswith("\n") if source_text is not None else True
        )
        self._dirty = False

    @classmethod
    def load(cls, path: Path | str) -> "ModDatabase":
        """
        Load db.json from disk.

        Args:
            path: Path to db.json, or to the mods directory containing it

        Raises:
            StorageError: the file is missing or unreadable
            ParseError: the file is not JSON or lacks the mods table
        """
        db_path = resolve_db_path(path)
        text = read_text(db_path)
        database = cls.from_text(text, db_path)
        log.debug("Loaded %d mods from %s", len(database), db_path)
        return database

    @classmethod
    def from_text(cls, text: str, path: Path | None = None) -> "ModDatabase":
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(
                path, f"{e.msg} (line {e.lineno}, column {e.colno})"
            ) from e
        return cls(document, path=path, source_text=text)

    @staticmethod
    def _validate(document: Any, path: Path | None) -> None:
        if not isinstance(document, dict):
            raise ParseError(path, "top level is not a JSON object")
        mods = document.get("mods")
        if not isinstance(mods, dict):
            raise ParseError(path, "missing 'mods' object")
        for mod_id, record in mods.items():
            if not isinstance(record, dict):
                raise ParseError(path, f"mod '{mod_id}' is not a JSON object")
            if not isinstance(record.get("active"), bool):
                raise ParseError(path, f"mod '{mod_id}' has no boolean 'active' flag")

    @property
    def dirty(self) -> bool:
        """True when a flag changed since the last load or save."""
        return self._dirty

    def __contains__(self, mod_id: object) -> bool:
        return mod_id in self._mods

    def __len__(self) -> int:
        return len(self._mods)

    def mod_ids(self) -> Iterator[str]:
        return iter(list(self._mods))

    def mods(self) -> Iterator[Mod]:
        for mod_id in list(self._mods):
            yield self.get(mod_id)

    def get(self, mod_id: str) -> Mod:
        record = self._record(mod_id)
        metadata = copy.deepcopy({k: v for k, v in record.items() if k != "active"})
        return Mod(id=mod_id, enabled=record["active"], metadata=metadata)

    def is_enabled(self, mod_id: str) -> bool:
        return self._record(mod_id)["active"]

    def enabled_state(self) -> dict[str, bool]:
        """Snapshot of every mod's flag, in file order."""
        return {mod_id: record["active"] for mod_id, record in self._mods.items()}

    def _record(self, mod_id: str) -> dict[str, Any]:
        try:
            return self._mods[mod_id]
        except KeyError:
            raise NotFoundError("mod", [mod_id]) from None

    def set_enabled(self, mod_id: str, enabled: bool) -> bool:
        """
        Set a single mod's flag.

        Returns:
            True if the flag changed value

        Raises:
            NotFoundError: the mod is not installed
        """
        record = self._record(mod_id)
        enabled = bool(enabled)
        if record["active"] == enabled:
            return False
        record["active"] = enabled
        self._dirty = True
        log.debug("Mod %s -> %s", mod_id, "enabled" if enabled else "disabled")
        return True

    def set_many_enabled(self, mod_ids: Iterable[str], enabled: bool) -> list[str]:
        """
        Set several mods at once. All ids are checked before anything changes.

        Returns:
            The ids whose flag changed value

        Raises:
            NotFoundError: listing every id that is not installed
        """
        mod_ids = list(mod_ids)
        missing = [m for m in mod_ids if m not in self._mods]
        if missing:
            raise NotFoundError("mod", missing)
        return [m for m in mod_ids if self.set_enabled(m, enabled)]

    def set_all_enabled(self, enabled: bool) -> list[str]:
        return self.set_many_enabled(list(self._mods), enabled)

    def to_text(self) -> str:
        """
        Serialize the database. An unchanged database gives back its source text.

        Raises:
            ParseError: the document holds a number JSON cannot represent, such as
                one that overflowed to infinity on load
        """
        if not self._dirty and self._source_text is not None:
            return self._source_text
        try:
            text = json.dumps(
                self._document, indent=self._indent, ensure_ascii=False, allow_nan=False
            )
        except ValueError as e:
            raise ParseError(self.path, f"cannot write back db.json: {e}") from e
        if self._trailing_newline:
            text += "\n"
        return text

    def save(self, path: Path | str | None = None) -> Path:
        """
        Write the database atomically.

        Args:
            path: Target file or mods directory; defaults to where it was loaded from

        Returns:
            The path written
        """
        if path is not None:
            target = resolve_db_path(path)
        elif self.path is not None:
            target = self.path
        else:
            raise ValueError("ModDatabase has no path to save to")

        text = self.to_text()
        atomic_write_text(target, text)
        self._source_text = text
        self._dirty = False
        self.path = target
        log.info("Saved mod database %s", target)
        return target
