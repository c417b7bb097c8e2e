"""Tests for research API endpoints."""

from __future__ import annotations

import pytest
from fastapi import status
from fastapi.testclient import TestClient


PROTECTED_PATHS = ["/api/stock-of-day", "/api/search?q=app", "/api/research/AAPL"]


class TestAuthGate:
    """Every research endpoint requires a session."""

    @pytest.mark.parametrize("path", PROTECTED_PATHS)
    def test_requires_session(self, client: TestClient, path: str):
        response = client.get(path)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {
            "error": "Authentication required",
            "code": "AUTHENTICATION_REQUIRED",
        }

    def test_unknown_ticker_still_401_when_signed_out(self, client: TestClient):
        response = client.get("/api/research/ZZZZ")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestStockOfDayEndpoint:
    """Tests for GET /api/stock-of-day."""

    def test_returns_tile_shape(self, signed_in_client: TestClient):
        response = signed_in_client.get("/api/stock-of-day")
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["symbol"] == "NVDA"
        assert data["direction"] == "bullish"
        assert len(data["thesis"]) == 3
        assert len(data["consensus"]) == 5
        assert {"retrievedAt", "moveSummary", "displayDate"} <= data.keys()

    def test_timestamp_is_stable(self, signed_in_client: TestClient):
        first = signed_in_client.get("/api/stock-of-day").json()
        second = signed_in_client.get("/api/stock-of-day").json()
        assert first["retrievedAt"] == second["retrievedAt"]


class TestSearchEndpoint:
    """Tests for GET /api/search."""

    def test_empty_query(self, signed_in_client: TestClient):
        assert signed_in_client.get("/api/search?q=").json() == []
        assert signed_in_client.get("/api/search").json() == []

    def test_matches(self, signed_in_client: TestClient):
        response = signed_in_client.get("/api/search", params={"q": "APPLE"})
        assert response.json() == [{"symbol": "AAPL", "name": "Apple Inc."}]

    def test_limit(self, signed_in_client: TestClient):
        assert len(signed_in_client.get("/api/search", params={"q": "a"}).json()) == 10


class TestResearchEndpoint:
    """Tests for GET /api/research/{ticker}."""

    def test_research_record(self, signed_in_client: TestClient):
        response = signed_in_client.get("/api/research/aapl")
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["symbol"] == "AAPL"
        assert data["direction"] == "bullish"
        assert [c["score"] for c in data["consensus"]] == [7.4, 7.8, 9.9, 6.3, 7.4]
        assert data["displayDate"]

    def test_repeat_requests_agree(self, signed_in_client: TestClient):
        first = signed_in_client.get("/api/research/MSFT").json()
        second = signed_in_client.get("/api/research/MSFT").json()
        for field in ("direction", "thesis", "consensus", "moveSummary"):
            assert first[field] == second[field]

    def test_unknown_ticker(self, signed_in_client: TestClient):
        response = signed_in_client.get("/api/research/ZZZZ")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Ticker not found", "code": "UNKNOWN_TICKER"}


class TestUnexpectedErrors:
    def test_internal_errors_are_generic(self, signed_in_client: TestClient, monkeypatch):
        from stockresearch.api.routes import research

        def boom(symbol):
            raise RuntimeError("database password is hunter2")

        monkeypatch.setattr(research, "synthesize", boom)
        response = signed_in_client.get("/api/research/AAPL")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "An unexpected error occurred", "code": "INTERNAL_ERROR"}
        assert "hunter2" not in response.text
