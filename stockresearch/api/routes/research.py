"""Research routes. All of them require a session."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query

from stockresearch.api.dependencies import require_session
from stockresearch.research import get_stock_of_day, search_tickers, synthesize
from stockresearch.schemas.research import ResearchResponse, TickerSearchResult

router = APIRouter(dependencies=[Depends(require_session)])


@router.get(
    "/stock-of-day",
    response_model=ResearchResponse,
    summary="Stock of the day",
    responses={401: {"description": "Not authenticated"}},
)
async def stock_of_day() -> ResearchResponse:
    return ResearchResponse.from_record(get_stock_of_day())


@router.get(
    "/search",
    response_model=List[TickerSearchResult],
    summary="Search tickers",
    description="Case-insensitive substring match on symbol or name (max 10).",
    responses={401: {"description": "Not authenticated"}},
)
async def search(q: str = Query(default="")) -> List[TickerSearchResult]:
    return search_tickers(q)


@router.get(
    "/research/{ticker}",
    response_model=ResearchResponse,
    summary="Research a ticker",
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Ticker not found"},
    },
)
async def research(ticker: str) -> ResearchResponse:
    return ResearchResponse.from_record(synthesize(ticker))
