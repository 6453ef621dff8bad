"""
Exception hierarchy for BeamMM.
Every failure that reaches the command line derives from BeamMMError.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class BeamMMError(Exception):
    """Base exception for BeamMM."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class StorageError(BeamMMError):
    """A file could not be read or written."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot access {self.path}: {reason}")


class ParseError(BeamMMError):
    """A file is not valid JSON/TOML or does not have the expected structure."""

    def __init__(self, path: Path | str | None, reason: str):
        self.path = Path(path) if path is not None else None
        self.reason = reason
        where = f" in {self.path}" if self.path is not None else ""
        super().__init__(f"Invalid data{where}: {reason}")


class NotFoundError(BeamMMError):
    """A preset or mod that an operation requires does not exist."""

    def __init__(self, kind: str, names: Iterable[str]):
        self.kind = kind
        self.names = list(names)
        joined = ", ".join(f"'{n}'" for n in self.names)
        plural = "s" if len(self.names) != 1 else ""
        super().__init__(f"{kind.capitalize()}{plural} not found: {joined}")


class DirNotFoundError(NotFoundError):
    """A directory that was specified or derived does not exist."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)
        super().__init__("directory", [str(self.directory)])


class GameDirNotFoundError(NotFoundError):
    """The BeamNG.drive data directory could not be located automatically."""

    def __init__(self, searched: Iterable[Path] = ()):
        self.searched = [Path(p) for p in searched]
        BeamMMError.__init__(
            self,
            "BeamNG.drive data directory not found. Launch the game once or "
            "pass --custom-data-dir.",
        )
        self.kind = "directory"
        self.names = [str(p) for p in self.searched]


class DuplicateNameError(BeamMMError):
    """A preset with the requested name already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Preset '{name}' already exists")


class InvalidNameError(BeamMMError):
    """A preset name cannot be used."""

    def __init__(self, name: str, reason: str = "name must not be blank"):
        self.name = name
        super().__init__(f"Invalid preset name '{name}': {reason}")


class VersionError(BeamMMError):
    """The installed game version could not be determined."""

    def __init__(self, reason: str):
        super().__init__(f"Cannot determine BeamNG.drive version: {reason}")
