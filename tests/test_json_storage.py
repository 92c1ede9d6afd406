"""
RecordStore load/mutate/persist behavior against temporary files.
"""
from __future__ import annotations

import json
import logging
import threading

import pytest

from galeria.core.errors import StorageError
from galeria.repositories.json_storage import RecordStore


def test_missing_file_is_created_empty(tmp_path):
    path = tmp_path / "users.json"
    store = RecordStore(path)
    assert store.records() == []
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_parent_directories_are_created(tmp_path):
    path = tmp_path / "a" / "b" / "likes.json"
    store = RecordStore(path)
    with store.mutate() as records:
        records.append({"username": "ana"})
    assert path.exists()


def test_corrupt_file_loads_empty_and_logs(tmp_path, caplog):
    path = tmp_path / "posts.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.ERROR):
        store = RecordStore(path)
    assert store.records() == []
    assert "could not read" in caplog.text
    # load never rewrites a file it could not parse
    assert path.read_text(encoding="utf-8") == "{not json"


def test_non_array_document_loads_empty(tmp_path):
    path = tmp_path / "posts.json"
    path.write_text('{"username": "ana"}', encoding="utf-8")
    assert RecordStore(path).records() == []


def test_round_trip_through_the_file(tmp_path):
    path = tmp_path / "posts.json"
    store = RecordStore(path)
    rows = [{"imagePath": "http://h/uploads/1.png", "imageName": "año", "timestamp": 1}, {"imageName": "b"}]
    with store.mutate() as records:
        records.extend(rows)
    assert RecordStore(path).records() == rows
    text = path.read_text(encoding="utf-8")
    assert text == json.dumps(rows, ensure_ascii=False, indent=2)
    assert "año" in text


def test_reads_are_idempotent_snapshots(tmp_path):
    store = RecordStore(tmp_path / "users.json")
    with store.mutate() as records:
        records.append({"username": "ana"})
    first = store.records()
    first[0]["username"] = "changed"
    first.append({"username": "extra"})
    assert store.records() == store.records() == [{"username": "ana"}]


def test_failed_block_leaves_mirror_and_file_untouched(tmp_path):
    path = tmp_path / "users.json"
    store = RecordStore(path)
    with pytest.raises(RuntimeError):
        with store.mutate() as records:
            records.append({"username": "ana"})
            raise RuntimeError("boom")
    assert store.records() == []
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_write_failure_raises_storage_error_and_keeps_mirror(tmp_path, monkeypatch):
    store = RecordStore(tmp_path / "users.json")
    with store.mutate() as records:
        records.append({"username": "ana"})

    def broken_write(self, *args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(type(store.path), "write_text", broken_write)
    with pytest.raises(StorageError):
        with store.mutate() as records:
            records.append({"username": "bob"})
    assert store.records() == [{"username": "ana"}]


def test_concurrent_mutations_do_not_lose_updates(tmp_path):
    path = tmp_path / "likes.json"
    store = RecordStore(path)

    def worker(n: int) -> None:
        for i in range(25):
            with store.mutate() as records:
                records.append({"worker": n, "i": i})

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == 100
    assert len(RecordStore(path).records()) == 100


def test_close_without_failed_writes_touches_nothing(tmp_path):
    path = tmp_path / "users.json"
    path.write_text("{corrupt", encoding="utf-8")
    store = RecordStore(path)
    store.close()
    assert path.read_text(encoding="utf-8") == "{corrupt"


def test_close_restores_last_good_state_after_failed_write(tmp_path, monkeypatch):
    path = tmp_path / "users.json"
    store = RecordStore(path)
    with store.mutate() as records:
        records.append({"username": "ana"})

    def broken_write(self, *args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(type(store.path), "write_text", broken_write)
    with pytest.raises(StorageError):
        with store.mutate() as records:
            records.append({"username": "bob"})
    monkeypatch.undo()

    path.write_text('[{"userna', encoding="utf-8")
    store.close()
    assert json.loads(path.read_text(encoding="utf-8")) == [{"username": "ana"}]
