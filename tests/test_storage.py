"""Tests for client-side ticker persistence."""

from __future__ import annotations

import json

import pytest

from stockresearch.client.storage import (
    JsonFileTileStorage,
    MemoryTileStorage,
    load_tickers,
    save_tickers,
    tiles_key,
)


EMAIL = "trader@example.com"


class TestTilesKey:
    def test_key_is_per_email(self):
        assert tiles_key(EMAIL) == "stockresearch:tiles:trader@example.com"
        assert tiles_key("other@example.com") != tiles_key(EMAIL)


class TestLoadTickers:
    """Tests for load_tickers tolerance of bad data."""

    def test_missing_key(self):
        assert load_tickers(MemoryTileStorage(), EMAIL) == []

    @pytest.mark.parametrize("raw", ["not json", "{\"a\": 1}", "\"AAPL\"", "42", "null", ""])
    def test_corrupt_values_read_as_empty(self, raw: str):
        storage = MemoryTileStorage({tiles_key(EMAIL): raw})
        assert load_tickers(storage, EMAIL) == []

    def test_non_string_entries_dropped(self):
        storage = MemoryTileStorage({tiles_key(EMAIL): json.dumps(["AAPL", 3, "", None, "MSFT"])})
        assert load_tickers(storage, EMAIL) == ["AAPL", "MSFT"]

    def test_save_then_load_keeps_order(self):
        storage = MemoryTileStorage()
        save_tickers(storage, EMAIL, ["TSLA", "AAPL", "MSFT"])
        assert load_tickers(storage, EMAIL) == ["TSLA", "AAPL", "MSFT"]
        assert load_tickers(storage, "other@example.com") == []


class TestJsonFileTileStorage:
    """Tests for the on-disk storage backend."""

    def test_default_path_from_settings(self, tmp_path, monkeypatch):
        from stockresearch.core.config import settings

        monkeypatch.setattr(settings, "client_storage_path", str(tmp_path / "default.json"))
        assert JsonFileTileStorage().path == tmp_path / "default.json"

    def test_missing_file(self, tmp_path):
        storage = JsonFileTileStorage(tmp_path / "storage.json")
        assert storage.get_item("anything") is None

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        save_tickers(JsonFileTileStorage(path), EMAIL, ["AAPL", "MSFT"])

        assert path.exists()
        assert load_tickers(JsonFileTileStorage(path), EMAIL) == ["AAPL", "MSFT"]

    def test_keys_are_independent(self, tmp_path):
        storage = JsonFileTileStorage(tmp_path / "storage.json")
        storage.set_item("a", "1")
        storage.set_item("b", "2")
        storage.remove_item("a")

        assert storage.get_item("a") is None
        assert storage.get_item("b") == "2"

    def test_remove_missing_key_is_noop(self, tmp_path):
        path = tmp_path / "storage.json"
        storage = JsonFileTileStorage(path)
        storage.remove_item("missing")
        assert not path.exists()

    def test_unreadable_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{broken", encoding="utf-8")
        storage = JsonFileTileStorage(path)

        assert storage.get_item(tiles_key(EMAIL)) is None
        assert load_tickers(storage, EMAIL) == []

    def test_non_object_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert JsonFileTileStorage(path).get_item("0") is None

    def test_write_recovers_unreadable_file(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{broken", encoding="utf-8")
        storage = JsonFileTileStorage(path)

        save_tickers(storage, EMAIL, ["NVDA"])
        assert json.loads(path.read_text(encoding="utf-8")) == {tiles_key(EMAIL): "[\"NVDA\"]"}
