"""Tests for the local key-value analysis store."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from unittest.mock import patch

from sqlalchemy import select

from analyzer.db import LocalStorageEntry, build_engine, session_scope
from analyzer.storage import STORAGE_KEY, LocalAnalysisStorage, utc_timestamp


def test_empty_store_lists_nothing(storage) -> None:
    assert storage.list() == []
    assert storage.list("-created_date") == []


def test_create_assigns_id_and_timestamp(storage) -> None:
    created = storage.create({"file_name": "chat.json"})

    assert created["file_name"] == "chat.json"
    assert created["id"]
    assert created["created_date"].endswith("Z")
    datetime.fromisoformat(created["created_date"].replace("Z", "+00:00"))


def test_create_does_not_mutate_input(storage) -> None:
    data = {"file_name": "chat.json", "key_insights": ["one"]}
    storage.create(data)
    assert data == {"file_name": "chat.json", "key_insights": ["one"]}


def test_round_trip_preserves_structure(storage, sample_analysis) -> None:
    created = storage.create({"file_name": "chat.json", "total_messages": 3, **sample_analysis})
    assert storage.list() == [created]


def test_new_records_are_prepended(storage) -> None:
    first = storage.create({"file_name": "first"})
    second = storage.create({"file_name": "second"})

    assert [record["id"] for record in storage.list()] == [second["id"], first["id"]]
    assert first["id"] != second["id"]


def test_newest_first_sort_orders_by_created_date(storage) -> None:
    stamps = iter(["2024-03-01T00:00:00.000Z", "2024-01-01T00:00:00.000Z", "2024-05-01T00:00:00.000Z"])
    with patch("analyzer.storage.utc_timestamp", side_effect=lambda: next(stamps)):
        for name in ("march", "january", "may"):
            storage.create({"file_name": name})

    records = storage.list("-created_date")
    assert [record["file_name"] for record in records] == ["may", "march", "january"]
    dates = [record["created_date"] for record in records]
    assert dates == sorted(dates, reverse=True)


def test_records_persist_across_instances(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'shared.db'}"
    LocalAnalysisStorage(build_engine(url)).create({"file_name": "kept"})

    reopened = LocalAnalysisStorage(build_engine(url))
    assert [record["file_name"] for record in reopened.list()] == ["kept"]


def test_all_records_live_under_one_key(storage) -> None:
    storage.create({"file_name": "a"})
    storage.create({"file_name": "b"})

    with session_scope(storage.engine) as session:
        keys = session.execute(select(LocalStorageEntry.key)).scalars().all()
    assert keys == [STORAGE_KEY]


def test_corrupt_value_lists_as_empty(storage) -> None:
    with session_scope(storage.engine) as session:
        session.add(LocalStorageEntry(key=STORAGE_KEY, value="{not json"))

    assert storage.list() == []


def test_in_memory_database_is_supported() -> None:
    memory_storage = LocalAnalysisStorage(build_engine("sqlite:///:memory:"))
    memory_storage.create({"file_name": "x"})
    assert len(memory_storage.list()) == 1


def test_utc_timestamp_format() -> None:
    stamp = utc_timestamp(datetime(2024, 2, 3, 4, 5, 6, 789000).astimezone())
    assert stamp.endswith("Z")
    assert len(stamp) == len("2024-02-03T04:05:06.789Z")


def test_concurrent_creates_keep_every_record(storage) -> None:
    def save_batch(worker: int) -> list:
        return [storage.create({"file_name": f"w{worker}-{n}"})["id"] for n in range(10)]

    with ThreadPoolExecutor(max_workers=4) as pool:
        created_ids = [record_id for batch in pool.map(save_batch, range(4)) for record_id in batch]

    stored_ids = {record["id"] for record in storage.list()}
    assert len(created_ids) == 40
    assert stored_ids == set(created_ids)
