from __future__ import annotations

import json
from pathlib import Path

import pytest

from errors import ConfigurationError, DuplicateAppId, InvalidIdentifier, StorageUnavailable
from persistence import (
    DiskAppDocumentStore,
    InMemoryAppDocumentStore,
    document_store_from_uri,
)


def test_find_one_missing_returns_none(disk_store):
    assert disk_store.find_one("nobody") is None


def test_insert_then_find(disk_store):
    doc = disk_store.insert("app1", {"a": [1, 2, {"b": None}]})
    assert doc.created_at == doc.updated_at

    got = disk_store.find_one("app1")
    assert got is not None
    assert got.app_id == "app1"
    assert got.payload == {"a": [1, 2, {"b": None}]}
    assert got.created_at == doc.created_at


def test_insert_existing_app_id_is_rejected(disk_store):
    disk_store.insert("app1", {"first": True})
    with pytest.raises(DuplicateAppId):
        disk_store.insert("app1", {"second": True})
    assert disk_store.find_one("app1").payload == {"first": True}
    # No stray temp files left behind.
    assert sorted(p.name for p in disk_store.root.iterdir()) == ["app1.json"]


def test_upsert_creates_then_replaces(disk_store):
    created = disk_store.upsert("app1", {"v": 1})
    replaced = disk_store.upsert("app1", [1, 2, 3])

    assert replaced.created_at == created.created_at
    assert replaced.updated_at >= created.updated_at
    assert disk_store.find_one("app1").payload == [1, 2, 3]


def test_on_disk_layout(disk_store):
    disk_store.upsert("app1", {"x": 1})
    raw = json.loads((disk_store.root / "app1.json").read_text(encoding="utf-8"))
    assert set(raw) == {"appId", "payload", "createdAt", "updatedAt"}
    assert raw["appId"] == "app1"
    assert raw["payload"] == {"x": 1}


def test_corrupt_document_is_a_storage_fault(disk_store):
    (disk_store.root / "broken.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageUnavailable):
        disk_store.find_one("broken")


def test_upsert_overwrites_corrupt_document(disk_store):
    (disk_store.root / "broken.json").write_text("{not json", encoding="utf-8")
    disk_store.upsert("broken", {"fixed": True})
    assert disk_store.find_one("broken").payload == {"fixed": True}


@pytest.mark.parametrize("app_id", ["../escape", "a/b", "", "x" * 51])
def test_unsafe_app_ids_never_touch_disk(disk_store, app_id):
    with pytest.raises(InvalidIdentifier):
        disk_store.upsert(app_id, {"x": 1})
    assert list(disk_store.root.iterdir()) == []


def test_open_fails_when_root_is_a_file(tmp_path: Path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    store = DiskAppDocumentStore(blocker / "docs")
    with pytest.raises(StorageUnavailable):
        store.open()


def test_memory_store_insert_and_upsert(memory_store):
    payload = {"nested": {"k": 1}}
    memory_store.insert("app1", payload)
    payload["nested"]["k"] = 2  # caller mutation must not leak into the store
    assert memory_store.find_one("app1").payload == {"nested": {"k": 1}}

    with pytest.raises(DuplicateAppId):
        memory_store.insert("app1", {})

    memory_store.upsert("app1", "replaced")
    assert memory_store.find_one("app1").payload == "replaced"
    assert len(memory_store) == 1


def test_store_from_uri(tmp_path: Path):
    assert isinstance(document_store_from_uri("memory://"), InMemoryAppDocumentStore)

    by_url = document_store_from_uri(f"file://{tmp_path}/docs")
    assert isinstance(by_url, DiskAppDocumentStore)
    assert by_url.root == tmp_path / "docs"

    by_path = document_store_from_uri(str(tmp_path / "other"))
    assert isinstance(by_path, DiskAppDocumentStore)
    assert by_path.root == tmp_path / "other"


def test_store_from_uri_rejects_unknown_scheme():
    with pytest.raises(ConfigurationError):
        document_store_from_uri("mongodb://localhost:27017/app")


def test_deep_payload_is_stored_verbatim(disk_store):
    nested: dict = {"leaf": 1.5}
    for i in range(300):
        nested = {"level": i, "child": nested}
    disk_store.upsert("deep", nested)
    assert disk_store.find_one("deep").payload == nested
