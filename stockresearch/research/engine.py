"""Research synthesis.

``synthesize`` builds a full research record for a ticker from hash-derived
scores, so repeated calls agree on everything except ``retrieved_at``.
``get_stock_of_day`` returns the hand-authored daily pick.
"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional

from stockresearch.core.exceptions import UnknownTickerError
from stockresearch.core.logging import get_logger
from stockresearch.schemas.research import ConsensusScore, ResearchRecord

from .scoring import score
from .tickers import find_ticker


logger = get_logger("research.engine")

BULLISH_THRESHOLD = 7.5

# (source, seed label, summary) in display order
CONSENSUS_SOURCES = (
    ("Reddit", "reddit", "Retail investor chatter and watchlists."),
    ("Analysts", "analysts", "Street estimate revisions and PT changes."),
    ("Bloggers", "bloggers", "Independent research and newsletter picks."),
    ("YouTube", "youtube", "Creator breakdowns of catalysts and risks."),
    ("TikTok", "tiktok", "Short-form buzz and momentum clips."),
)

MOVE_SUMMARIES = {
    "bullish": "Momentum supported by improving demand signals and positive revisions.",
    "bearish": "Caution around slowing indicators and profit-taking after a strong run.",
}


def _thesis(name: str, bullish: bool) -> list[str]:
    return [
        f"{name} shows {'expanding' if bullish else 'moderating'} demand across core segments",
        "Liquidity and balance sheet flexibility support ongoing investment pace",
        f"Alt data points to {'upward' if bullish else 'mixed'} revisions in near-term estimates",
    ]


def synthesize(symbol: str, now: Optional[datetime] = None) -> ResearchRecord:
    """
    Build research for a ticker in the reference table.

    Args:
        symbol: Ticker symbol, any case
        now: Timestamp for ``retrieved_at`` (defaults to the current UTC time)

    Raises:
        UnknownTickerError: symbol is not in the table
    """
    ticker = find_ticker(symbol)
    if ticker is None:
        raise UnknownTickerError()

    bullish = score(ticker.symbol, "sentiment") >= BULLISH_THRESHOLD
    direction = "bullish" if bullish else "bearish"

    record = ResearchRecord(
        symbol=ticker.symbol,
        name=ticker.name,
        retrieved_at=now or datetime.now(timezone.utc),
        direction=direction,
        move_summary=MOVE_SUMMARIES[direction],
        thesis=_thesis(ticker.name, bullish),
        consensus=[
            ConsensusScore(source=source, score=score(ticker.symbol, seed), summary=summary)
            for source, seed, summary in CONSENSUS_SOURCES
        ],
    )
    logger.debug(f"Synthesized research for {ticker.symbol}: {direction}")
    return record


@lru_cache
def get_stock_of_day() -> ResearchRecord:
    """Daily pick, timestamped on first access in this process."""
    return ResearchRecord(
        symbol="NVDA",
        name="NVIDIA Corporation",
        retrieved_at=datetime.now(timezone.utc),
        direction="bullish",
        move_summary="AI hardware demand remains strong with fresh enterprise orders.",
        thesis=[
            "Data center revenue momentum persists as generative AI adoption accelerates.",
            "Gaming GPU refresh cycle benefits from improving consumer spending.",
            "Margin profile remains resilient despite supply-chain normalization.",
        ],
        consensus=[
            ConsensusScore(source="Reddit", score=8.6, summary="Retail momentum and chatter about new GPU drops."),
            ConsensusScore(source="Analysts", score=9.1, summary="Target hikes tied to robust data center growth."),
            ConsensusScore(source="Bloggers", score=8.4, summary="AI leadership narrative remains intact."),
            ConsensusScore(source="YouTube", score=8.8, summary="Creator community bullish on product roadmap."),
            ConsensusScore(source="TikTok", score=7.9, summary="Trending clips on AI PC builds and GPU demand."),
        ],
    )
