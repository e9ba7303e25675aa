from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskboard.settings_manager import SEEDED_KEY, SettingsManager


def test_seed_marker_round_trips_through_file(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "settings.json"
    sm = SettingsManager(str(path))
    assert sm.is_seeded is False

    sm.mark_seeded()

    assert json.loads(path.read_text(encoding="utf-8")) == {SEEDED_KEY: True}
    assert SettingsManager(str(path)).is_seeded is True


def test_marker_presence_counts_even_when_false(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({SEEDED_KEY: False}), encoding="utf-8")

    assert SettingsManager(str(path)).is_seeded is True


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    sm = SettingsManager(str(path))

    assert sm.data == {}
    assert sm.is_seeded is False
    assert sm.scan_enabled is True
    assert sm.data_path is None


def test_options_read_stored_values(tmp_path: Path) -> None:
    sm = SettingsManager(str(tmp_path / "settings.json"))
    sm.set("nfc_enabled", False)
    sm.set("data_path", str(tmp_path / "board.json"))

    assert sm.nfc_enabled is False
    assert sm.data_path == str(tmp_path / "board.json")


def test_memory_only_settings_never_touch_disk(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    sm = SettingsManager(None)

    sm.mark_seeded()

    assert sm.is_seeded is True
    assert list(tmp_path.iterdir()) == []


def test_mark_seeded_raises_and_stays_unseeded_when_write_fails(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.mkdir()
    sm = SettingsManager(str(path))

    with pytest.raises(OSError):
        sm.mark_seeded()

    assert sm.is_seeded is False
