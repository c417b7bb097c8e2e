"""Ordered tile sequence shown to the user.

The board holds two tag classes:

- research tiles, ordered most recently requested first, unique by symbol
- at most one daily-pick tile, always after every research tile

The classes never de-duplicate against each other, so a research tile for the
daily-pick symbol sits alongside the daily pick.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from stockresearch.schemas.research import ResearchResponse


class Tile(ResearchResponse):
    """Research record as held by the client."""

    is_stock_of_day: bool = False


def _normalize(symbol: str) -> str:
    return (symbol or "").strip().upper()


class TileBoard:
    """Explicit ordered structure behind the tile list."""

    def __init__(self) -> None:
        self._research: List[Tile] = []
        self._daily: Optional[Tile] = None

    @property
    def tiles(self) -> List[Tile]:
        """Render order: research tiles front to back, then the daily pick."""
        return [*self._research, *([self._daily] if self._daily else [])]

    @property
    def research_tiles(self) -> List[Tile]:
        return list(self._research)

    @property
    def daily_pick(self) -> Optional[Tile]:
        return self._daily

    def research_symbols(self) -> List[str]:
        return [tile.symbol for tile in self._research]

    def index_of(self, symbol: str) -> Optional[int]:
        """Position of the research tile for symbol, if any."""
        symbol = _normalize(symbol)
        for index, tile in enumerate(self._research):
            if tile.symbol == symbol:
                return index
        return None

    def set_daily_pick(self, tile: Tile) -> Tile:
        """Replace the daily pick. It stays last regardless of later inserts."""
        self._daily = tile.model_copy(update={"is_stock_of_day": True})
        return self._daily

    def push_front(self, tile: Tile) -> Tile:
        """Insert a research tile first, replacing any tile with its symbol.

        The other research tiles keep their relative order.
        """
        tile = tile.model_copy(update={"is_stock_of_day": False})
        existing = self.index_of(tile.symbol)
        if existing is not None:
            del self._research[existing]
        self._research.insert(0, tile)
        return tile

    def push_back(self, tile: Tile) -> Tile:
        """Append a research tile behind the others, still ahead of the daily pick."""
        tile = tile.model_copy(update={"is_stock_of_day": False})
        existing = self.index_of(tile.symbol)
        if existing is not None:
            del self._research[existing]
        self._research.append(tile)
        return tile

    def remove(self, symbol: str) -> bool:
        """Drop the research tile for symbol. The daily pick is never removed."""
        existing = self.index_of(symbol)
        if existing is None:
            return False
        del self._research[existing]
        return True

    def clear(self) -> None:
        self._research.clear()
        self._daily = None

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def __len__(self) -> int:
        return len(self._research) + (1 if self._daily else 0)
