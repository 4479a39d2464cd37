import json

import pytest

from literary_db import LiteraryDBConfig
from literary_db.kv_store import InMemoryKeyValueStore, KeyValueStoreConfig
from literary_graphs.filters import (
    STORAGE_KEY,
    FilterKind,
    FilterPresetStore,
    SavedFilter,
    create_default_filter,
)


def test_default_filter_shape():
    preset = create_default_filter("Everything")

    assert preset.name == "Everything"
    assert preset.id.startswith("filter-")
    assert len(preset.criteria) == 1
    criterion = preset.criteria[0]
    assert criterion.kind == FilterKind.NODE_TYPE
    assert criterion.config.types == {"book": True, "author": True, "theme": True}
    assert preset.created_at.endswith("Z")


def test_save_list_get_delete(memory_store):
    presets = FilterPresetStore(memory_store)
    first = create_default_filter("one")
    second = create_default_filter("two")

    assert presets.list() == []
    assert presets.save(first)
    assert presets.save(second)
    assert [p.name for p in presets.list()] == ["one", "two"]
    assert presets.get(second.id).name == "two"
    assert presets.get("nope") is None

    assert presets.delete(first.id)
    assert [p.id for p in presets.list()] == [second.id]


def test_save_replaces_in_place(memory_store):
    presets = FilterPresetStore(memory_store)
    a, b = create_default_filter("a"), create_default_filter("b")
    presets.save(a)
    presets.save(b)

    a.name = "renamed"
    presets.save(a)

    assert [p.name for p in presets.list()] == ["renamed", "b"]


def test_update_last_used(memory_store):
    presets = FilterPresetStore(memory_store)
    preset = create_default_filter("used")
    presets.save(preset)

    updated = presets.update_last_used(preset.id)

    assert updated.last_used is not None
    assert presets.get(preset.id).last_used == updated.last_used
    assert presets.update_last_used("missing") is None


def test_persisted_json_uses_fixed_key_and_camel_case(memory_store):
    presets = FilterPresetStore(memory_store)
    presets.save(create_default_filter("json"))

    raw = json.loads(memory_store.get_bytes(STORAGE_KEY))
    assert raw[0]["name"] == "json"
    assert "createdAt" in raw[0]
    assert "lastUsed" not in raw[0]
    assert raw[0]["criteria"][0]["type"] == "nodeType"


def test_round_trip_survives_filesystem_store(fs_store):
    presets = FilterPresetStore(fs_store)
    preset = create_default_filter("disk")
    presets.save(preset)

    loaded = FilterPresetStore(fs_store).get(preset.id)
    assert isinstance(loaded, SavedFilter)
    assert loaded.to_dict() == preset.to_dict()


def test_corrupt_document_reads_as_empty(memory_store):
    memory_store.set_bytes(STORAGE_KEY, b"{not json")
    assert FilterPresetStore(memory_store).list() == []


@pytest.mark.parametrize(
    "document",
    [
        b'[{"id": "f", "criteria": ["oops"]}]',
        b'[{"id": "f", "criteria": [{"type": "nodeType", "config": {"types": ["book"]}}]}]',
        b'[{"id": "f", "criteria": [{"type": "series", "config": "include"}]}]',
        b'["just a string"]',
        b'{"id": "f"}',
    ],
)
def test_wrongly_shaped_document_reads_as_empty(memory_store, document):
    memory_store.set_bytes(STORAGE_KEY, document)
    presets = FilterPresetStore(memory_store)

    assert presets.list() == []
    assert presets.get("f") is None
    assert presets.save(create_default_filter("fresh"))
    assert [p.name for p in presets.list()] == ["fresh"]


def test_read_only_store_reports_failure():
    store = InMemoryKeyValueStore(KeyValueStoreConfig(read_only=True))
    presets = FilterPresetStore(store)
    assert presets.save(create_default_filter("ro")) is False
    assert presets.delete("anything") is False


def test_from_config_uses_namespace(tmp_path):
    cfg = LiteraryDBConfig(store_root=str(tmp_path / "kv"), namespace="reading-group")
    presets = FilterPresetStore.from_config(cfg)
    presets.save(create_default_filter("ns"))

    assert presets.key == "reading-group:saved-filters"
    assert presets.store.list("reading-group:") == ["reading-group:saved-filters"]


def test_update_last_used_reports_failed_write(memory_store):
    presets = FilterPresetStore(memory_store)
    preset = create_default_filter("frozen")
    presets.save(preset)
    memory_store.config.read_only = True

    assert presets.update_last_used(preset.id) is None
    assert presets.get(preset.id).last_used is None
