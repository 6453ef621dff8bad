import sys
from pathlib import Path

import pytest

from beam_mm.core.errors import DirNotFoundError, GameDirNotFoundError, VersionError
from beam_mm.core.paths import PathManager
from beam_mm.core.paths.path_manager import detect_game_version


@pytest.fixture
def linux_home(tmp_path: Path, monkeypatch) -> Path:
    data_home = tmp_path / "share"
    data_home.mkdir()
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("XDG_DATA_HOME", str(data_home))
    return data_home


def test_version_from_version_txt(game_dir: Path):
    assert detect_game_version(game_dir) == "0.32"


def test_version_from_directories(tmp_path: Path):
    for name in ("0.9", "0.31", "0.32", "notaversion"):
        (tmp_path / name).mkdir()
    assert detect_game_version(tmp_path) == "0.32"


def test_malformed_version_txt(tmp_path: Path):
    (tmp_path / "version.txt").write_text("beta", encoding="utf-8")
    with pytest.raises(VersionError):
        detect_game_version(tmp_path)


def test_no_version_information(tmp_path: Path):
    with pytest.raises(VersionError):
        detect_game_version(tmp_path)


def test_version_of_missing_dir(tmp_path: Path):
    with pytest.raises(DirNotFoundError):
        detect_game_version(tmp_path / "missing")


def test_custom_data_dir(game_dir: Path):
    paths = PathManager(custom_data_dir=game_dir)
    assert paths.beamng_dir() == game_dir
    assert paths.mods_dir() == game_dir / "0.32" / "mods"


def test_missing_custom_data_dir(tmp_path: Path):
    paths = PathManager(custom_data_dir=tmp_path / "missing")
    with pytest.raises(DirNotFoundError):
        paths.beamng_dir()


def test_mods_dir_must_exist(game_dir: Path):
    paths = PathManager(custom_data_dir=game_dir)
    with pytest.raises(DirNotFoundError) as exc_info:
        paths.mods_dir(version="0.31")
    assert exc_info.value.directory == game_dir / "0.31" / "mods"


def test_game_dir_found_automatically(linux_home: Path):
    (linux_home / "BeamNG.drive").mkdir()
    assert PathManager().beamng_dir() == linux_home / "BeamNG.drive"


def test_game_dir_not_found(linux_home: Path):
    with pytest.raises(GameDirNotFoundError):
        PathManager().beamng_dir()


def test_app_dirs_are_created(linux_home: Path):
    paths = PathManager()
    assert paths.beammm_dir() == linux_home / "BeamMM"
    assert paths.presets_dir().is_dir()
    assert paths.settings_file() == linux_home / "BeamMM" / "config.toml"


def test_app_dir_override(tmp_path: Path):
    paths = PathManager(app_dir=tmp_path / "custom")
    assert paths.presets_dir() == tmp_path / "custom" / "presets"
    assert paths.presets_dir().is_dir()
