from pathlib import Path

import pytest

from beam_mm.core.errors import StorageError
from beam_mm.core.settings import SettingsManager


def test_defaults_when_missing(tmp_path: Path):
    settings = SettingsManager(tmp_path / "config.toml")
    assert settings.get("confirm_all") is False
    assert settings.get("data_dir") is None
    assert not (tmp_path / "config.toml").exists()


def test_set_and_reload(tmp_path: Path):
    path = tmp_path / "config.toml"
    settings = SettingsManager(path)
    settings.set("data_dir", "/games/BeamNG.drive")

    reloaded = SettingsManager(path)
    assert reloaded.get("data_dir") == "/games/BeamNG.drive"
    assert reloaded.has_key("data_dir")


def test_user_comments_survive_save(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text(
        "# my settings\nconfirm_all = true  # I know what I'm doing\n",
        encoding="utf-8",
    )
    settings = SettingsManager(path)
    assert settings.get("confirm_all") is True

    settings.set("data_dir", "D:/BeamNG")
    text = path.read_text(encoding="utf-8")
    assert "# my settings" in text
    assert "# I know what I'm doing" in text
    assert 'data_dir = "D:/BeamNG"' in text


def test_malformed_file_falls_back_to_defaults(tmp_path: Path, caplog):
    path = tmp_path / "config.toml"
    path.write_text("confirm_all = = true", encoding="utf-8")

    settings = SettingsManager(path)

    assert settings.get("confirm_all") is False
    assert "Error loading settings" in caplog.text


def test_remove(tmp_path: Path):
    settings = SettingsManager(tmp_path / "config.toml")
    settings.set("data_dir", "x", auto_save=False)
    assert settings.remove("data_dir", auto_save=False) == "x"
    assert settings.remove("data_dir", auto_save=False) is None


def test_save_failure_raises(tmp_path: Path):
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    settings = SettingsManager(blocker / "config.toml")
    with pytest.raises(StorageError):
        settings.save_settings()


def test_typed_getters(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text('confirm_all = true\ndata_dir = "D:/BeamNG"\n', encoding="utf-8")
    settings = SettingsManager(path)

    assert settings.get_bool("confirm_all") is True
    assert settings.get_path("data_dir") == Path("D:/BeamNG")
    assert settings.get_path("missing") is None


@pytest.mark.parametrize(
    "content",
    ['confirm_all = "false"\ndata_dir = 5\n', "confirm_all = 1\ndata_dir = [1]\n"],
)
def test_wrongly_typed_values_fall_back(tmp_path: Path, caplog, content: str):
    path = tmp_path / "config.toml"
    path.write_text(content, encoding="utf-8")
    settings = SettingsManager(path)

    assert settings.get_bool("confirm_all", False) is False
    assert settings.get_path("data_dir") is None
    assert "confirm_all" in caplog.text
    assert "data_dir" in caplog.text
