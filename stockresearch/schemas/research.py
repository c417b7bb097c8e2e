"""Research record schemas.

Field names are snake_case in Python and camelCase on the wire
(``retrievedAt``, ``moveSummary``, ``displayDate``).
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


Direction = Literal["bullish", "bearish"]
ConsensusSource = Literal["Reddit", "Analysts", "Bloggers", "YouTube", "TikTok"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConsensusScore(CamelModel):
    """Per-source sentiment rating."""

    source: ConsensusSource
    score: float = Field(..., ge=0, le=10, description="Rating out of 10")
    summary: str


class ResearchRecord(CamelModel):
    """Research snapshot for one ticker."""

    symbol: str = Field(..., description="Ticker symbol (uppercase)")
    name: str = Field(..., description="Company name")
    retrieved_at: datetime = Field(..., description="When the record was produced")
    direction: Direction
    move_summary: str
    thesis: List[str] = Field(..., min_length=3, max_length=3)
    consensus: List[ConsensusScore]


class ResearchResponse(ResearchRecord):
    """Research record as served, with a human-readable date."""

    display_date: str = Field(..., description="Long-form date, e.g. 'October 16, 2026'")

    @classmethod
    def from_record(cls, record: ResearchRecord) -> ResearchResponse:
        return cls(
            **record.model_dump(),
            display_date=format_display_date(record.retrieved_at),
        )


class TickerSearchResult(BaseModel):
    """Ticker suggestion."""

    symbol: str
    name: str


def format_display_date(value: datetime) -> str:
    """Render a timestamp as 'Month D, YYYY'."""
    return f"{value:%B} {value.day}, {value.year}"
