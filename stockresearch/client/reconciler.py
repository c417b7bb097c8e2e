"""Client-side tile reconciliation.

``TileReconciler`` merges API responses into a ``TileBoard`` and mirrors the
research symbols into per-user storage after every change. It also drives the
user flows around it (session check, login, research requests, suggestions),
reporting progress through two status lines the way a page would.

Any 401 from the API drops the client back to the signed-out state, whatever
call triggered it. Other failures only update the status line; tiles already
on the board are left alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

import httpx

from stockresearch.core.exceptions import ApiError, AuthRequiredError
from stockresearch.core.logging import get_logger
from stockresearch.schemas.research import TickerSearchResult

from .api import ResearchApiClient
from .board import Tile, TileBoard
from .storage import TileStorage, load_tickers, save_tickers


logger = get_logger("client.reconciler")

REQUEST_ERRORS = (ApiError, httpx.HTTPError)


@dataclass
class Status:
    message: str = ""
    tone: str = "neutral"

    def set(self, message: str = "", tone: str = "neutral") -> None:
        self.message = message
        self.tone = tone


class TileReconciler:
    """Keeps the tile board, the session email and saved tickers consistent."""

    def __init__(
        self,
        api: ResearchApiClient,
        storage: TileStorage,
        on_change: Optional[Callable[[List[Tile]], None]] = None,
    ):
        self.api = api
        self.storage = storage
        self.on_change = on_change
        self.board = TileBoard()
        self.email: Optional[str] = None
        self.auth_status = Status()
        self.research_status = Status()

    @property
    def tiles(self) -> List[Tile]:
        return self.board.tiles

    @property
    def signed_in(self) -> bool:
        return self.email is not None

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self.board.tiles)

    def _persist(self) -> None:
        if self.email:
            save_tickers(self.storage, self.email, self.board.research_symbols())

    # Board operations

    def install_daily_pick(self, tile: Tile) -> Tile:
        installed = self.board.set_daily_pick(tile)
        self._changed()
        return installed

    def install_research_tile(self, tile: Tile) -> Tile:
        installed = self.board.push_front(tile)
        self._persist()
        self._changed()
        return installed

    def restore_research_tile(self, tile: Tile) -> Tile:
        """Re-add a saved tile behind the ones already restored. Storage is not rewritten."""
        installed = self.board.push_back(tile)
        self._changed()
        return installed

    def remove(self, symbol: str) -> bool:
        """Remove a research tile. The daily pick cannot be removed."""
        removed = self.board.remove(symbol)
        self._persist()
        self._changed()
        return removed

    def clear_for_logout(self) -> None:
        """Forget the board and the email. Saved tickers stay in storage."""
        self.board.clear()
        self.email = None
        self._changed()

    # Flows

    async def bootstrap(self, email: str) -> None:
        """Rebuild the board for a freshly signed-in user.

        Saved tickers are fetched in list order and end up on the board in
        that same order, ahead of the daily pick.
        """
        self.board.clear()
        self.email = email
        self._changed()

        await self.load_daily_pick()
        for ticker in load_tickers(self.storage, email):
            if self.email != email:
                break
            await self.request_research(ticker, silent=True, restore=True)

    async def load_daily_pick(self) -> Optional[Tile]:
        try:
            tile = await self.api.stock_of_day()
        except AuthRequiredError as e:
            self.clear_for_logout()
            self.research_status.set(e.message, "error")
            return None
        except REQUEST_ERRORS as e:
            self.research_status.set(str(e), "error")
            return None
        return self.install_daily_pick(tile)

    async def request_research(
        self, ticker: str, silent: bool = False, restore: bool = False
    ) -> Optional[Tile]:
        """Fetch research and put it first on the board.

        ``silent`` skips the "Researching..." message, for bulk reloads.
        ``restore`` appends behind the other research tiles instead.
        """
        ticker = (ticker or "").strip().upper()
        if not ticker:
            return None

        if not silent:
            self.research_status.set("Researching...")
        try:
            tile = await self.api.research(ticker)
        except AuthRequiredError as e:
            self.clear_for_logout()
            self.research_status.set(e.message, "error")
            return None
        except REQUEST_ERRORS as e:
            self.research_status.set(str(e), "error")
            return None

        if restore:
            installed = self.restore_research_tile(tile)
        else:
            installed = self.install_research_tile(tile)
        self.research_status.set("")
        return installed

    async def suggest(self, term: str) -> List[TickerSearchResult]:
        """Best-effort ticker suggestions; failures yield []."""
        term = (term or "").strip()
        if not term:
            return []
        try:
            return await self.api.search(term)
        except AuthRequiredError:
            self.clear_for_logout()
            return []
        except REQUEST_ERRORS as e:
            logger.debug(f"Suggestion lookup failed: {e}")
            return []

    async def check_session(self) -> Optional[str]:
        """Resume a session if the server still knows us."""
        try:
            data = await self.api.session()
        except AuthRequiredError as e:
            self.clear_for_logout()
            self.auth_status.set(e.message, "error")
            return None
        except REQUEST_ERRORS as e:
            self.auth_status.set(str(e), "error")
            return None

        if not data.get("authenticated"):
            self.clear_for_logout()
            return None
        await self.bootstrap(data["email"])
        return data["email"]

    async def request_code(self, email: str) -> bool:
        email = (email or "").strip()
        if not email:
            return False

        self.auth_status.set("Sending code...")
        try:
            await self.api.login(email)
        except AuthRequiredError as e:
            self.clear_for_logout()
            self.auth_status.set(e.message, "error")
            return False
        except REQUEST_ERRORS as e:
            self.auth_status.set(str(e), "error")
            return False

        self.auth_status.set("Code sent. Check the server logs in this demo.", "success")
        return True

    async def sign_in(self, email: str, code: str) -> Optional[str]:
        email = (email or "").strip()
        code = (code or "").strip()
        if not email or not code:
            return None

        self.auth_status.set("Verifying...")
        try:
            verified = await self.api.verify(email, code)
        except AuthRequiredError as e:
            self.clear_for_logout()
            self.auth_status.set(e.message, "error")
            return None
        except REQUEST_ERRORS as e:
            self.auth_status.set(str(e), "error")
            return None

        await self.bootstrap(verified)
        self.auth_status.set("")
        return verified

    async def sign_out(self) -> None:
        try:
            await self.api.logout()
        except (AuthRequiredError, *REQUEST_ERRORS) as e:
            logger.warning(f"Logout request failed: {e}")
        finally:
            self.clear_for_logout()
