"""Python client: API access, tile board and per-user saved tickers."""

from .api import ResearchApiClient
from .board import Tile, TileBoard
from .reconciler import Status, TileReconciler
from .storage import (
    JsonFileTileStorage,
    MemoryTileStorage,
    TileStorage,
    load_tickers,
    save_tickers,
    tiles_key,
)


__all__ = [
    "JsonFileTileStorage",
    "MemoryTileStorage",
    "ResearchApiClient",
    "Status",
    "Tile",
    "TileBoard",
    "TileReconciler",
    "TileStorage",
    "load_tickers",
    "save_tickers",
    "tiles_key",
]
