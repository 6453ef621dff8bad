import logging
from pathlib import Path

import pytest

from beam_mm.core.errors import NotFoundError
from beam_mm.core.mod_database import ModDatabase
from beam_mm.core.reconciliation import ReconciliationEngine
from beam_mm.domain.models import Preset, StaleReference

from conftest import write_db


@pytest.fixture
def engine() -> ReconciliationEngine:
    return ReconciliationEngine()


@pytest.fixture
def database(tmp_path: Path) -> ModDatabase:
    write_db(
        tmp_path,
        {"modA": False, "modB": False, "modC": False, "modD": True},
        extra={"version": 1},
    )
    return ModDatabase.load(tmp_path)


def test_racing_offroad_scenario(engine, database):
    presets = [
        Preset("Racing", ["modA", "modB"], enabled=True),
        Preset("Offroad", ["modB", "modC"], enabled=False),
    ]

    result = engine.apply(database, presets)

    assert database.enabled_state() == {
        "modA": True,
        "modB": True,
        "modC": False,
        "modD": True,
    }
    assert result.changed == {"modA": True, "modB": True}
    assert result.written
    assert result.stale == []


def test_enabled_preset_wins_regardless_of_order(engine, database):
    presets = [
        Preset("Off", ["modB"], enabled=False),
        Preset("On", ["modB"], enabled=True),
        Preset("Off2", ["modB"], enabled=False),
    ]
    plan = engine.plan(database, presets)
    assert plan.desired["modB"] is True


def test_disabled_preset_turns_its_mods_off(engine, database):
    plan = engine.plan(database, [Preset("Off", ["modD"], enabled=False)])
    assert plan.changes == {"modD": False}


def test_untouched_mods_keep_their_state(engine, database):
    before = database.enabled_state()
    plan = engine.plan(database, [Preset("Racing", ["modA"], enabled=True)])

    for mod_id in ("modB", "modC", "modD"):
        assert plan.desired[mod_id] == before[mod_id]


def test_explicit_override_beats_presets(engine, database):
    presets = [Preset("Racing", ["modA", "modB"], enabled=True)]

    plan = engine.plan(database, presets, overrides={"modA": False, "modC": True})

    assert plan.desired["modA"] is False
    assert plan.desired["modB"] is True
    assert plan.desired["modC"] is True


def test_override_for_unknown_mod_fails_before_changes(engine, database):
    with pytest.raises(NotFoundError):
        engine.apply(database, [], overrides={"modA": True, "ghost": True})
    assert not database.is_enabled("modA")
    assert not database.dirty


def test_stale_reference_is_reported_not_raised(engine, database, caplog):
    presets = [Preset("Racing", ["modA", "modX"], enabled=True)]

    with caplog.at_level(logging.DEBUG, logger="beam_mm.core.reconciliation"):
        result = engine.apply(database, presets)

    assert result.stale == [StaleReference("Racing", "modX")]
    assert database.is_enabled("modA")
    # Rendering the warning is left to the caller
    assert "modX" in caplog.text
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


def test_stale_reference_in_disabled_preset(engine, database):
    presets = [Preset("Offroad", ["modX"], enabled=False)]
    result = engine.apply(database, presets)
    assert result.stale == [StaleReference("Offroad", "modX")]
    assert not result.written


def test_no_write_when_nothing_changes(engine, database, monkeypatch):
    presets = [Preset("Racing", ["modA"], enabled=True)]
    first = engine.apply(database, presets)
    assert first.written

    saves = []
    monkeypatch.setattr(database, "save", lambda *a, **k: saves.append(a))

    second = engine.apply(database, presets)
    assert second.changed == {}
    assert not second.written
    assert saves == []


def test_no_write_leaves_file_untouched(engine, database):
    db_path = database.path
    mtime = db_path.stat().st_mtime_ns
    content = db_path.read_bytes()

    result = engine.apply(database, [Preset("Racing", ["modD"], enabled=True)])

    assert not result.written
    assert db_path.read_bytes() == content
    assert db_path.stat().st_mtime_ns == mtime


def test_written_file_preserves_metadata(engine, database):
    engine.apply(database, [Preset("Racing", ["modA"], enabled=True)])

    reloaded = ModDatabase.load(database.path)
    assert reloaded.is_enabled("modA")
    assert reloaded.get("modA").metadata == {"filename": "/mods/repo/modA.zip"}


def test_apply_without_save(engine, database):
    result = engine.apply(
        database, [Preset("Racing", ["modA"], enabled=True)], save=False
    )
    assert result.changed == {"modA": True}
    assert not result.written
    assert database.dirty
    assert not ModDatabase.load(database.path).is_enabled("modA")
