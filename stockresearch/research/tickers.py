"""Static ticker reference table and lookups."""

from __future__ import annotations

from typing import List, Optional

from stockresearch.schemas.research import TickerSearchResult


SEARCH_LIMIT = 10

TICKERS: tuple[TickerSearchResult, ...] = (
    TickerSearchResult(symbol="AAPL", name="Apple Inc."),
    TickerSearchResult(symbol="MSFT", name="Microsoft Corporation"),
    TickerSearchResult(symbol="AMZN", name="Amazon.com, Inc."),
    TickerSearchResult(symbol="GOOGL", name="Alphabet Inc. (Class A)"),
    TickerSearchResult(symbol="TSLA", name="Tesla, Inc."),
    TickerSearchResult(symbol="META", name="Meta Platforms, Inc."),
    TickerSearchResult(symbol="NFLX", name="Netflix, Inc."),
    TickerSearchResult(symbol="NVDA", name="NVIDIA Corporation"),
    TickerSearchResult(symbol="ORCL", name="Oracle Corporation"),
    TickerSearchResult(symbol="IBM", name="International Business Machines Corporation"),
    TickerSearchResult(symbol="INTC", name="Intel Corporation"),
    TickerSearchResult(symbol="AMD", name="Advanced Micro Devices, Inc."),
    TickerSearchResult(symbol="BABA", name="Alibaba Group Holding Limited"),
    TickerSearchResult(symbol="JPM", name="JPMorgan Chase & Co."),
    TickerSearchResult(symbol="BAC", name="Bank of America Corporation"),
)

_BY_SYMBOL = {ticker.symbol: ticker for ticker in TICKERS}


def find_ticker(symbol: str) -> Optional[TickerSearchResult]:
    """Case-insensitive exact symbol lookup."""
    return _BY_SYMBOL.get((symbol or "").strip().upper())


def search_tickers(query: str, limit: int = SEARCH_LIMIT) -> List[TickerSearchResult]:
    """Substring match on symbol or name, in table order."""
    term = (query or "").strip().lower()
    if not term:
        return []
    matches = [
        ticker
        for ticker in TICKERS
        if term in ticker.symbol.lower() or term in ticker.name.lower()
    ]
    return matches[:limit]
