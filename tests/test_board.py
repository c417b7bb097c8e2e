"""Tests for the ordered tile board."""

from __future__ import annotations

from stockresearch.client.board import TileBoard


def symbols(board: TileBoard) -> list[str]:
    return [tile.symbol for tile in board.tiles]


class TestTileBoard:
    """Tests for TileBoard ordering operations."""

    def test_most_recent_first_daily_last(self, make_tile):
        board = TileBoard()
        board.push_front(make_tile("AAPL"))
        board.push_front(make_tile("MSFT"))
        board.set_daily_pick(make_tile("NVDA"))

        assert symbols(board) == ["MSFT", "AAPL", "NVDA"]

        board.push_front(make_tile("AAPL"))
        assert symbols(board) == ["AAPL", "MSFT", "NVDA"]

    def test_daily_pick_stays_last_after_later_inserts(self, make_tile):
        board = TileBoard()
        board.set_daily_pick(make_tile("NVDA"))
        board.push_front(make_tile("AAPL"))
        board.push_front(make_tile("TSLA"))
        assert symbols(board) == ["TSLA", "AAPL", "NVDA"]
        assert board.tiles[-1].is_stock_of_day is True

    def test_refresh_preserves_relative_order_of_others(self, make_tile):
        board = TileBoard()
        for symbol in ("AAPL", "MSFT", "TSLA", "META"):
            board.push_front(make_tile(symbol))
        assert board.research_symbols() == ["META", "TSLA", "MSFT", "AAPL"]

        board.push_front(make_tile("MSFT"))
        assert board.research_symbols() == ["MSFT", "META", "TSLA", "AAPL"]

    def test_refresh_replaces_tile(self, make_tile):
        board = TileBoard()
        first = board.push_front(make_tile("AAPL"))
        second = board.push_front(make_tile("AAPL"))
        assert len(board) == 1
        assert board.tiles[0] is second
        assert board.tiles[0] is not first

    def test_push_back_keeps_arrival_order(self, make_tile):
        board = TileBoard()
        board.set_daily_pick(make_tile("NVDA"))
        board.push_back(make_tile("AAPL"))
        board.push_back(make_tile("MSFT"))
        assert symbols(board) == ["AAPL", "MSFT", "NVDA"]

        board.push_back(make_tile("AAPL"))
        assert symbols(board) == ["MSFT", "AAPL", "NVDA"]

    def test_single_daily_pick(self, make_tile):
        board = TileBoard()
        board.set_daily_pick(make_tile("NVDA"))
        board.set_daily_pick(make_tile("AAPL"))
        assert [t.symbol for t in board.tiles if t.is_stock_of_day] == ["AAPL"]

    def test_same_symbol_coexists_across_tags(self, make_tile):
        board = TileBoard()
        board.set_daily_pick(make_tile("NVDA"))
        board.push_front(make_tile("NVDA"))

        assert symbols(board) == ["NVDA", "NVDA"]
        assert [t.is_stock_of_day for t in board.tiles] == [False, True]
        assert board.research_symbols() == ["NVDA"]

    def test_remove_daily_pick_symbol_is_noop(self, make_tile):
        board = TileBoard()
        board.push_front(make_tile("AAPL"))
        board.set_daily_pick(make_tile("NVDA"))

        assert board.remove("NVDA") is False
        assert symbols(board) == ["AAPL", "NVDA"]

    def test_remove_same_symbol_only_drops_research_tile(self, make_tile):
        board = TileBoard()
        board.set_daily_pick(make_tile("NVDA"))
        board.push_front(make_tile("NVDA"))

        assert board.remove("nvda") is True
        assert symbols(board) == ["NVDA"]
        assert board.daily_pick is not None

    def test_tags_are_forced_by_slot(self, make_tile):
        board = TileBoard()
        board.push_front(make_tile("AAPL", is_stock_of_day=True))
        board.set_daily_pick(make_tile("NVDA", is_stock_of_day=False))
        assert [t.is_stock_of_day for t in board.tiles] == [False, True]

    def test_clear(self, make_tile):
        board = TileBoard()
        board.push_front(make_tile("AAPL"))
        board.set_daily_pick(make_tile("NVDA"))
        board.clear()
        assert board.tiles == []
        assert board.daily_pick is None
        assert len(board) == 0
