"""Async HTTP client for the research API."""

from __future__ import annotations

from typing import Any, List, Optional
from urllib.parse import quote

import httpx

from stockresearch.core.config import settings
from stockresearch.core.exceptions import ApiError, AuthRequiredError
from stockresearch.core.logging import get_logger
from stockresearch.schemas.research import TickerSearchResult

from .board import Tile


logger = get_logger("client.api")

API_PREFIX = "/api"


class ResearchApiClient:
    """
    Thin wrapper over the JSON API.

    Cookies returned by ``/verify`` are kept by the underlying httpx client,
    so one instance represents one signed-in browser.

    Raises:
        AuthRequiredError: on any 401 response
        ApiError: on any other non-2xx response, carrying the server's
            ``error`` text when present
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=base_url or settings.client_base_url,
            timeout=timeout if timeout is not None else settings.client_timeout,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> ResearchApiClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def fetch_json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self.http.request(method, f"{API_PREFIX}{path}", **kwargs)

        if response.status_code == 401:
            raise AuthRequiredError(message="Session expired. Please log in again.")

        if response.is_error:
            try:
                detail = response.json()
            except ValueError:
                detail = {}
            message = (detail.get("error") if isinstance(detail, dict) else None) or response.reason_phrase
            logger.debug(f"{method} {path} failed: {response.status_code} {message}")
            raise ApiError(message=message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.debug(f"{method} {path} returned a non-JSON body: {e}")
            raise ApiError(
                message="Unexpected response from server", status_code=response.status_code
            ) from e

    async def login(self, email: str) -> str:
        data = await self.fetch_json("POST", "/login", json={"email": email})
        return data["message"]

    async def verify(self, email: str, code: str) -> str:
        data = await self.fetch_json("POST", "/verify", json={"email": email, "code": code})
        return data["email"]

    async def session(self) -> dict[str, Any]:
        return await self.fetch_json("GET", "/session")

    async def logout(self) -> None:
        await self.fetch_json("POST", "/logout")

    async def stock_of_day(self) -> Tile:
        data = await self.fetch_json("GET", "/stock-of-day")
        return Tile.model_validate({**data, "isStockOfDay": True})

    async def research(self, ticker: str) -> Tile:
        data = await self.fetch_json("GET", f"/research/{quote(ticker, safe='')}")
        return Tile.model_validate({**data, "isStockOfDay": False})

    async def search(self, term: str) -> List[TickerSearchResult]:
        data = await self.fetch_json("GET", "/search", params={"q": term})
        return [TickerSearchResult.model_validate(item) for item in data]
