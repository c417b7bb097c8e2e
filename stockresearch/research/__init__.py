"""Synthesized research: hash scorer, ticker table, record builder."""

from .engine import get_stock_of_day, synthesize
from .scoring import score
from .tickers import TICKERS, find_ticker, search_tickers


__all__ = [
    "TICKERS",
    "find_ticker",
    "get_stock_of_day",
    "score",
    "search_tickers",
    "synthesize",
]
