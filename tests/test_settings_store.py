import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

import app.core.settings_store as settings_store
from app.core.record_codec import dump_record, parse_record
from app.core.settings_store import SettingsStore, StoreState
from models.pokemon_settings import PokemonSettings


def _store(tmp_path: Path) -> SettingsStore:
    return SettingsStore(PokemonSettings, tmp_path / "ProjectSettings" / "SettingsPanel" / "PokemonSettings.json")


def test_get_or_create_returns_same_instance_without_rereading(tmp_path: Path, monkeypatch):
    store = _store(tmp_path)
    first = store.get_or_create()

    def fail_read(*_args, **_kwargs):
        raise AssertionError("arquivo não deveria ser relido")

    monkeypatch.setattr(settings_store, "read_record", fail_read)

    assert store.get_or_create() is first


def test_round_trip_across_fresh_store(tmp_path: Path):
    store = _store(tmp_path)
    store.persist(PokemonSettings(id=25, name="Pikachu"))

    fresh = _store(tmp_path)

    assert fresh.get_or_create() == PokemonSettings(id=25, name="Pikachu")


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path):
    store = _store(tmp_path)
    store.path.parent.mkdir(parents=True)
    store.path.write_text("%%% não é json %%%", encoding="utf-8")

    record = store.get_or_create()

    assert record == PokemonSettings()
    assert store.state is StoreState.LOADED


@pytest.mark.parametrize(
    "content",
    [
        "[" * 200000,
        pytest.param(
            '{"id": ' + "1" * 5000 + ', "name": "Mew"}',
            marks=pytest.mark.skipif(
                not hasattr(sys, "get_int_max_str_digits") or sys.get_int_max_str_digits() == 0,
                reason="interpretador sem limite de dígitos para int",
            ),
        ),
    ],
)
def test_unparseable_json_falls_back_to_defaults(tmp_path: Path, content: str):
    store = _store(tmp_path)
    store.path.parent.mkdir(parents=True)
    store.path.write_text(content, encoding="utf-8")

    assert store.get_or_create() == PokemonSettings()
    assert store.state is StoreState.LOADED


def test_missing_file_gives_defaults_and_is_not_created(tmp_path: Path):
    store = _store(tmp_path)

    assert store.get_or_create() == PokemonSettings()
    assert not store.path.exists()
    assert not store.path.parent.exists()


def test_persist_then_read_raw_file_keeps_non_ascii(tmp_path: Path):
    store = _store(tmp_path)

    store.persist(PokemonSettings(id=7, name="Bulbasaur"))
    assert parse_record(PokemonSettings, store.path.read_text(encoding="utf-8")) == PokemonSettings(7, "Bulbasaur")

    store.persist(PokemonSettings(id=25, name="ピカチュウ"))
    raw = store.path.read_bytes()
    assert "ピカチュウ".encode("utf-8") in raw
    assert parse_record(PokemonSettings, raw.decode("utf-8")) == PokemonSettings(25, "ピカチュウ")


def test_persist_creates_missing_directory_tree(tmp_path: Path):
    target = tmp_path / "a" / "b" / "c" / "PokemonSettings.json"
    store = SettingsStore(PokemonSettings, target)

    path = store.persist(PokemonSettings(id=1, name="Mew"))

    assert path == target
    assert target.is_file()


def test_persist_overwrites_with_byte_exact_content(tmp_path: Path):
    store = _store(tmp_path)
    record = PokemonSettings(id=133, name="Eevee")

    store.persist(record)
    first = store.path.read_bytes()
    store.persist(record)

    assert store.path.read_bytes() == first == dump_record(record).encode("utf-8")


def test_persist_without_argument_writes_cached_instance(tmp_path: Path):
    store = _store(tmp_path)
    store.get_or_create().name = "Snorlax"

    store.persist()

    assert _store(tmp_path).get_or_create().name == "Snorlax"


def test_persist_rejects_other_record_types(tmp_path: Path):
    store = _store(tmp_path)

    with pytest.raises(TypeError):
        store.persist({"id": 1})


def test_write_failure_propagates_and_cache_survives(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("arquivo comum", encoding="utf-8")
    store = SettingsStore(PokemonSettings, blocker / "sub" / "PokemonSettings.json")
    record = store.get_or_create()
    record.name = "Ditto"

    with pytest.raises(OSError):
        store.persist()

    assert store.get_or_create() is record
    assert record.name == "Ditto"


def test_state_goes_from_unloaded_to_loaded(tmp_path: Path):
    store = _store(tmp_path)
    assert store.state is StoreState.UNLOADED
    assert not store.is_loaded

    store.get_or_create()

    assert store.state is StoreState.LOADED
    assert store.is_loaded


def test_reload_replaces_cache_with_file_content(tmp_path: Path):
    store = _store(tmp_path)
    store.persist(PokemonSettings(id=4, name="Charmander"))
    cached = store.get_or_create()
    cached.name = "alterado só em memória"

    reloaded = store.reload()

    assert reloaded is not cached
    assert reloaded == PokemonSettings(id=4, name="Charmander")


def test_store_requires_dataclass_record_type(tmp_path: Path):
    with pytest.raises(TypeError):
        SettingsStore(dict, tmp_path / "x.json")
