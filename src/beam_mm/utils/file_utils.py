"""
File helpers shared by the mod database, the preset store and the settings file.

Writes go through a temporary directory created next to the target and are moved
into place with a single rename, so a reader never sees a partially written file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Any

from beam_mm.core.errors import ParseError, StorageError

log = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ParseError(path, f"not UTF-8 text ({e.reason})") from e
    except OSError as e:
        raise StorageError(path, e.strerror or str(e)) from e


def read_json(path: Path) -> Any:
    """
    Read and decode a JSON file.

    Raises:
        StorageError: the file is missing or unreadable
        ParseError: the content is not valid JSON
    """
    text = read_text(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(path, f"{e.msg} (line {e.lineno}, column {e.colno})") from e


def atomic_write_text(path: Path, text: str) -> None:
    """
    Replace the contents of `path` with `text`.

    The data is written to a file inside a temporary directory in the same parent
    directory and then renamed over the target. On failure the target keeps its
    previous contents and the temporary directory is removed.
    """
    path = Path(path)
    parent = path.parent
    try:
        with TemporaryDirectory(dir=str(parent), prefix=".beammm-") as tmp_root_str:
            tmp_file = Path(tmp_root_str) / path.name
            with open(tmp_file, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            # Atomic replace
            tmp_file.replace(path)
    except OSError as e:
        raise StorageError(path, e.strerror or str(e)) from e
    log.debug("Wrote %s (%d bytes)", path, len(text))


def write_json(
    path: Path,
    data: Any,
    indent: int | str | None = 2,
    trailing_newline: bool = True,
) -> None:
    text = json.dumps(data, indent=indent, ensure_ascii=False)
    if trailing_newline:
        text += "\n"
    atomic_write_text(path, text)


def detect_indent(text: str) -> int | str | None:
    """
    Guess the indentation of a JSON document.

    Returns the indent unit suitable for `json.dumps`: a number of spaces, a tab
    string, or None for a document written on a single line.
    """
    lines = text.splitlines()
    if len(lines) < 2:
        return None
    for line in lines[1:]:
        stripped = line.lstrip(" \t")
        if not stripped:
            continue
        leading = line[: len(line) - len(stripped)]
        if not leading:
            # Multi-line but unindented
            return 0
        if leading[0] == "\t":
            return "\t"
        return len(leading)
    return None
