# -*- coding: utf-8 -*-
# ===================================================================
# Settings Panel - tests/test_settings_form.py
# Testes do formulário gerado a partir do registro
# ===================================================================

import json
import sys
from dataclasses import dataclass
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest
from pytestqt.qtbot import QtBot
from PyQt5.QtWidgets import QCheckBox, QComboBox, QLabel, QLineEdit, QSpinBox

from app.core.settings_store import SettingsStore
from app.ui.settings_form import RecordForm, field_label
from models.build_settings import BuildSettings, CompressionLevel
from models.pokemon_settings import PokemonSettings


def _read(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.mark.parametrize(
    "name, expected",
    [
        ("max_retries", "Max Retries"),
        ("maxRetries", "Max Retries"),
        ("id", "Id"),
        ("duration_s", "Duration S"),
    ],
)
def test_field_label(name: str, expected: str):
    assert field_label(name) == expected


def test_default_inspector_creates_one_editor_per_field(qtbot: QtBot, tmp_path: Path):
    store = SettingsStore(PokemonSettings, tmp_path / "P.json")
    form = RecordForm(store.bind_form())
    qtbot.addWidget(form)

    assert form.field_paths() == ["id", "name"]
    assert isinstance(form.editor("id"), QSpinBox)
    assert isinstance(form.editor("name"), QLineEdit)


def test_typing_in_line_edit_persists_record(qtbot: QtBot, tmp_path: Path):
    store = SettingsStore(PokemonSettings, tmp_path / "P.json")
    form = RecordForm(store.bind_form())
    qtbot.addWidget(form)
    form.show()

    qtbot.keyClicks(form.editor("name"), "Pikachu")

    assert store.get_or_create().name == "Pikachu"
    assert _read(store.path) == {"id": 0, "name": "Pikachu"}


def test_spin_box_change_persists_record(qtbot: QtBot, tmp_path: Path):
    store = SettingsStore(PokemonSettings, tmp_path / "P.json")
    form = RecordForm(store.bind_form())
    qtbot.addWidget(form)

    with qtbot.waitSignal(form.value_committed, timeout=1000) as blocker:
        form.editor("id").setValue(25)

    assert blocker.args == ["id"]
    assert _read(store.path)["id"] == 25


def test_nested_and_enum_editors(qtbot: QtBot, tmp_path: Path):
    store = SettingsStore(BuildSettings, tmp_path / "B.json")
    form = RecordForm(store.bind_form())
    qtbot.addWidget(form)

    assert "splash.enabled" in form.field_paths()
    assert isinstance(form.editor("splash.enabled"), QCheckBox)
    assert isinstance(form.editor("compression"), QComboBox)
    assert isinstance(form.editor("scenes"), QLabel)

    form.editor("splash.enabled").setChecked(False)
    form.editor("compression").setCurrentIndex(2)

    data = _read(store.path)
    assert data["splash"]["enabled"] is False
    assert data["compression"] == "best"
    assert store.get_or_create().compression is CompressionLevel.BEST


def test_same_value_does_not_write_file(qtbot: QtBot, tmp_path: Path):
    store = SettingsStore(PokemonSettings, tmp_path / "P.json")
    form = RecordForm(store.bind_form())
    qtbot.addWidget(form)

    assert form.set_field_value("id", 0) is False
    assert not store.path.exists()


def test_refresh_updates_widgets_without_persisting(qtbot: QtBot, tmp_path: Path):
    store = SettingsStore(PokemonSettings, tmp_path / "P.json")
    form = RecordForm(store.bind_form())
    qtbot.addWidget(form)

    store.get_or_create().name = "Mewtwo"
    store.get_or_create().id = 150
    form.refresh()

    assert form.editor("name").text() == "Mewtwo"
    assert form.editor("id").value() == 150
    assert not store.path.exists()


def test_persist_failure_keeps_value_and_shows_status(qtbot: QtBot, tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("arquivo comum", encoding="utf-8")
    store = SettingsStore(PokemonSettings, blocker / "P.json")
    form = RecordForm(store.bind_form())
    qtbot.addWidget(form)

    with qtbot.waitSignal(form.persist_failed, timeout=1000):
        changed = form.set_field_value("name", "Ditto")

    assert changed is False
    assert store.get_or_create().name == "Ditto"
    assert not form.status_label.isHidden()
    assert str(store.path) in form.status_label.text()


def test_custom_renderer_replaces_default_inspector(qtbot: QtBot, tmp_path: Path):
    store = SettingsStore(PokemonSettings, tmp_path / "P.json")
    calls = []

    def on_gui(form: RecordForm) -> None:
        calls.append(form)
        form.add_field("name")

    form = RecordForm(store.bind_form(), on_gui=on_gui)
    qtbot.addWidget(form)

    assert calls == [form]
    assert form.field_paths() == ["name"]

    form.set_field_value("id", 9)
    assert _read(store.path)["id"] == 9


@dataclass
class _WideNumbers:
    big: int = 2 ** 40
    small: int = 3
    ratio: float = 0.123456


def test_wide_numbers_are_shown_without_clamping_or_rounding(qtbot: QtBot, tmp_path: Path):
    store = SettingsStore(_WideNumbers, tmp_path / "W.json")
    form = RecordForm(store.bind_form())
    qtbot.addWidget(form)

    assert isinstance(form.editor("big"), QLineEdit)
    assert isinstance(form.editor("ratio"), QLineEdit)
    assert form.editor("big").text() == "1099511627776"
    assert form.editor("ratio").text() == "0.123456"

    form.editor("small").setValue(4)

    assert _read(store.path) == {"big": 2 ** 40, "small": 4, "ratio": 0.123456}


def test_number_line_persists_parsed_value(qtbot: QtBot, tmp_path: Path):
    store = SettingsStore(_WideNumbers, tmp_path / "W.json")
    form = RecordForm(store.bind_form())
    qtbot.addWidget(form)

    form.editor("big").setText("2199023255553")
    form.editor("big").editingFinished.emit()
    form.editor("ratio").setText(" 1e-7 ")
    form.editor("ratio").editingFinished.emit()

    assert store.get_or_create().big == 2199023255553
    assert _read(store.path)["big"] == 2199023255553
    assert _read(store.path)["ratio"] == 1e-7
    assert form.editor("ratio").text() == "1e-07"


def test_number_line_reverts_invalid_text(qtbot: QtBot, tmp_path: Path):
    store = SettingsStore(_WideNumbers, tmp_path / "W.json")
    form = RecordForm(store.bind_form())
    qtbot.addWidget(form)

    form.editor("big").setText("2.5")
    form.editor("big").editingFinished.emit()

    assert form.editor("big").text() == "1099511627776"
    assert store.get_or_create().big == 2 ** 40
    assert not store.path.exists()


def test_spin_box_is_disabled_for_values_beyond_its_range(qtbot: QtBot, tmp_path: Path):
    store = SettingsStore(PokemonSettings, tmp_path / "P.json")
    form = RecordForm(store.bind_form())
    qtbot.addWidget(form)

    store.get_or_create().id = 2 ** 40
    form.refresh()

    assert not form.editor("id").isEnabled()
    assert store.get_or_create().id == 2 ** 40
    assert not store.path.exists()
