import json
from pathlib import Path

import pytest

# NOTE: Changing this JSON will most likely break some tests!
DB_JSON = """{
  "mods": {
    "mod1": {
      "active": true,
      "other": {
        "key": "value"
      }
    },
    "mod2": {
      "active": false,
      "other": {
        "key": "value"
      }
    }
  },
  "other": {
    "key": "value"
  }
}
"""


def write_db(mods_dir: Path, mods: dict[str, bool], extra: dict | None = None) -> Path:
    """Write a db.json holding the given mods (id -> active)."""
    document = {
        "mods": {
            mod_id: {"active": active, "filename": f"/mods/repo/{mod_id}.zip"}
            for mod_id, active in mods.items()
        }
    }
    document.update(extra or {})
    db_path = mods_dir / "db.json"
    db_path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    return db_path


def write_preset(presets_dir: Path, name: str, mods: list[str], enabled: bool) -> Path:
    path = presets_dir / f"{name}.json"
    path.write_text(
        json.dumps({"name": name, "mods": mods, "enabled": enabled}, indent=4),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def mods_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "mods"
    directory.mkdir()
    (directory / "db.json").write_text(DB_JSON, encoding="utf-8")
    return directory


@pytest.fixture
def presets_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "presets"
    directory.mkdir()
    return directory


@pytest.fixture
def game_dir(tmp_path: Path) -> Path:
    """A BeamNG.drive data directory for version 0.32 holding the mock db.json."""
    data_dir = tmp_path / "BeamNG.drive"
    mods = data_dir / "0.32" / "mods"
    mods.mkdir(parents=True)
    (data_dir / "version.txt").write_text("0.32.5.0\n", encoding="utf-8")
    (mods / "db.json").write_text(DB_JSON, encoding="utf-8")
    return data_dir


@pytest.fixture
def app_dir(tmp_path: Path) -> Path:
    return tmp_path / "BeamMM"
