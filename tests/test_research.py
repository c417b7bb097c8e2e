"""Tests for research synthesis, the stock of the day and ticker search."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from stockresearch.core.exceptions import UnknownTickerError
from stockresearch.research import TICKERS, get_stock_of_day, search_tickers, synthesize
from stockresearch.schemas.research import ResearchResponse, format_display_date


class TestSynthesize:
    """Tests for synthesize()."""

    @pytest.mark.parametrize("symbol", [t.symbol for t in TICKERS])
    def test_deterministic_for_every_ticker(self, symbol: str):
        """Two calls agree on everything except the timestamp."""
        first = synthesize(symbol, now=datetime(2026, 1, 1, tzinfo=timezone.utc))
        second = synthesize(symbol, now=datetime(2026, 6, 1, tzinfo=timezone.utc))

        assert first.direction == second.direction
        assert first.thesis == second.thesis
        assert first.consensus == second.consensus
        assert first.retrieved_at != second.retrieved_at

    @pytest.mark.parametrize("symbol", [t.symbol for t in TICKERS])
    def test_synthesized_scores_in_range(self, symbol: str):
        record = synthesize(symbol)
        for entry in record.consensus:
            assert 6.0 <= entry.score < 10.0

    def test_unknown_ticker_raises(self):
        with pytest.raises(UnknownTickerError) as exc_info:
            synthesize("ZZZZ")
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Ticker not found"

    def test_lookup_is_case_insensitive(self):
        record = synthesize("aapl")
        assert record.symbol == "AAPL"
        assert record.name == "Apple Inc."

    def test_bullish_record(self):
        """AAPL's sentiment score (8.9) is above the threshold."""
        record = synthesize("AAPL")
        assert record.direction == "bullish"
        assert record.thesis == [
            "Apple Inc. shows expanding demand across core segments",
            "Liquidity and balance sheet flexibility support ongoing investment pace",
            "Alt data points to upward revisions in near-term estimates",
        ]
        assert record.move_summary.startswith("Momentum supported")

    def test_bearish_record(self):
        """NVDA's synthesized sentiment score (6.2) is below the threshold."""
        record = synthesize("NVDA")
        assert record.direction == "bearish"
        assert record.thesis[0] == "NVIDIA Corporation shows moderating demand across core segments"
        assert record.thesis[2] == "Alt data points to mixed revisions in near-term estimates"
        assert record.move_summary.startswith("Caution around")

    def test_consensus_sources_in_order(self):
        record = synthesize("AAPL")
        assert [c.source for c in record.consensus] == [
            "Reddit",
            "Analysts",
            "Bloggers",
            "YouTube",
            "TikTok",
        ]
        assert [c.score for c in record.consensus] == [7.4, 7.8, 9.9, 6.3, 7.4]

    def test_retrieved_at_defaults_to_now(self):
        before = datetime.now(timezone.utc)
        record = synthesize("MSFT")
        assert record.retrieved_at >= before


class TestStockOfDay:
    """Tests for get_stock_of_day()."""

    def test_is_a_singleton(self):
        assert get_stock_of_day() is get_stock_of_day()

    def test_hand_authored_content(self):
        pick = get_stock_of_day()
        assert pick.symbol == "NVDA"
        assert pick.direction == "bullish"
        assert [c.score for c in pick.consensus] == [8.6, 9.1, 8.4, 8.8, 7.9]


class TestSearchTickers:
    """Tests for search_tickers()."""

    def test_empty_query_returns_nothing(self):
        assert search_tickers("") == []
        assert search_tickers("   ") == []

    def test_matches_symbol_case_insensitively(self):
        symbols = [t.symbol for t in search_tickers("msf")]
        assert symbols == ["MSFT"]

    def test_matches_name(self):
        symbols = [t.symbol for t in search_tickers("corporation")]
        assert "MSFT" in symbols
        assert "NVDA" in symbols

    def test_results_capped_at_ten(self):
        # 14 of the 15 tickers contain an "a"
        assert len(search_tickers("a")) == 10

    def test_table_order_preserved(self):
        symbols = [t.symbol for t in search_tickers("in")]
        order = [t.symbol for t in TICKERS]
        assert symbols == sorted(symbols, key=order.index)


class TestDisplayDate:
    """Tests for display date formatting."""

    def test_long_form(self):
        assert format_display_date(datetime(2026, 10, 6, tzinfo=timezone.utc)) == "October 6, 2026"

    def test_response_carries_display_date(self):
        record = synthesize("AAPL", now=datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc))
        response = ResearchResponse.from_record(record)
        data = response.model_dump(by_alias=True)
        assert data["displayDate"] == "March 14, 2026"
        assert data["moveSummary"] == record.move_summary
        assert "retrievedAt" in data
