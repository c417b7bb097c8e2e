"""Pytest configuration and fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Generator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport

from stockresearch.cache.store import MemoryStore


TEST_CODE = "123456"
TEST_EMAIL = "trader@example.com"


class FakeClock:
    """Controllable UTC clock, starting at the real current time."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def make_tile():
    """Factory for client tiles built from synthesized research."""
    from stockresearch.client.board import Tile
    from stockresearch.research import synthesize
    from stockresearch.schemas.research import ResearchResponse

    def _make(symbol: str, is_stock_of_day: bool = False) -> Tile:
        response = ResearchResponse.from_record(synthesize(symbol))
        return Tile(**response.model_dump(), is_stock_of_day=is_stock_of_day)

    return _make


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def fixed_code(monkeypatch) -> str:
    """Make every issued login code TEST_CODE."""
    from stockresearch.auth import otp

    monkeypatch.setattr(otp, "generate_login_code", lambda: TEST_CODE)
    return TEST_CODE


@pytest.fixture
def app(store: MemoryStore) -> FastAPI:
    """Full application with the API mounted at /api."""
    from stockresearch.main import create_app

    return create_app(store)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def signed_in_client(client: TestClient, fixed_code: str) -> TestClient:
    """Client holding a valid session cookie for TEST_EMAIL."""
    client.post("/api/login", json={"email": TEST_EMAIL})
    response = client.post("/api/verify", json={"email": TEST_EMAIL, "code": fixed_code})
    assert response.status_code == 200
    return client


@pytest_asyncio.fixture
async def http(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async httpx client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
