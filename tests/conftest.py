"""Pytest configuration and fixtures."""

import os
import tempfile
from datetime import date, timedelta

import httpx
import pytest

from main import app
from src.api.dependencies import get_metrics_calculator, get_quote_service
from src.database.db import create_db_engine, create_session_factory, get_db, init_db
from src.services.quote_service import AlphaVantageClient, QuoteService
from src.utils.config import DatabaseConfig, QuoteAPIConfig
from src.utils.event_store import EventStore
from src.utils.metrics import QuoteMetricsCalculator

TEST_API_CONFIG = QuoteAPIConfig(
    api_key="test-key",
    base_url="https://alphavantage.test/query",
    request_timeout=5,
)


def recent_weekdays(count: int, today: date | None = None) -> list[date]:
    """The last `count` weekdays up to and including today, ascending."""
    day = today or date.today()
    days = []
    while len(days) < count:
        if day.weekday() < 5:
            days.append(day)
        day -= timedelta(days=1)
    return list(reversed(days))


def build_time_series(symbol: str, days: list[date]) -> dict:
    """Alpha Vantage TIME_SERIES_DAILY payload, newest entry first like the real API."""
    series = {}
    for index, day in reversed(list(enumerate(days))):
        close = 150 + (index % 7) * 1.25 + index * 0.1
        series[day.isoformat()] = {
            "1. open": f"{close:.2f}",
            "2. high": f"{close * 1.02:.2f}",
            "3. low": f"{close * 0.98:.2f}",
            "4. close": f"{close:.2f}",
            "5. volume": "1000000",
        }
    return {
        "Meta Data": {
            "1. Information": "Daily Prices (open, high, low, close) and Volumes",
            "2. Symbol": symbol,
        },
        "Time Series (Daily)": series,
    }


class StubAlphaVantage:
    """Canned Alpha Vantage behaviour keyed on the queried symbol.

    INVALID answers with an error message, RATELIMIT with a rate-limit
    note, NETWORKERROR drops the connection, STALE only has prices from
    three years ago and BROKEN returns HTML. Any other symbol gets 60
    recent weekdays of prices.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.offline = False
        self.transport = httpx.MockTransport(self.handle)

    def queried_symbols(self, function: str) -> list[str]:
        return [
            r.url.params.get("symbol")
            for r in self.requests
            if r.url.params.get("function") == function
        ]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        function = request.url.params.get("function")
        symbol = request.url.params.get("symbol")

        if self.offline or symbol == "NETWORKERROR":
            raise httpx.ConnectError("Connection refused", request=request)
        if symbol == "RATELIMIT":
            return httpx.Response(
                200,
                json={
                    "Note": "Thank you for using Alpha Vantage! Our standard API call "
                    "frequency is 5 calls per minute and 500 calls per day."
                },
            )

        if function == "OVERVIEW":
            name = "Apple Inc." if symbol == "AAPL" else ""
            return httpx.Response(200, json={"Symbol": symbol, "Name": name})

        if function == "TIME_SERIES_DAILY":
            if symbol == "INVALID":
                return httpx.Response(
                    200,
                    json={"Error Message": "Invalid API call. Please retry or visit the documentation"},
                )
            if symbol == "BROKEN":
                return httpx.Response(200, text="<html>maintenance</html>")
            if symbol == "STALE":
                old = date.today() - timedelta(days=3 * 365)
                return httpx.Response(200, json=build_time_series(symbol, recent_weekdays(20, old)))
            return httpx.Response(200, json=build_time_series(symbol, recent_weekdays(60)))

        return httpx.Response(400, json={"error": "Unknown function"})


@pytest.fixture
def stub_api():
    return StubAlphaVantage()


@pytest.fixture
def quote_event_store():
    return EventStore()


@pytest.fixture
def quote_service(stub_api, quote_event_store):
    """Quote service wired to the stubbed Alpha Vantage API."""
    client = AlphaVantageClient(TEST_API_CONFIG, transport=stub_api.transport)
    return QuoteService(client=client, event_store=quote_event_store, api_config=TEST_API_CONFIG)


@pytest.fixture(scope="function")
def test_db():
    """Create a file-based test database."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    engine = create_db_engine(DatabaseConfig(database_url=f"sqlite:///{db_path}"))
    init_db(engine)

    yield engine

    engine.dispose()
    os.unlink(db_path)


@pytest.fixture
def test_session(test_db):
    """Create a test database session."""
    TestingSessionLocal = create_session_factory(test_db)
    session = TestingSessionLocal()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def test_client(test_session, quote_service, quote_event_store):
    """Create a test client with the test database and stubbed quote source."""

    def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_quote_service] = lambda: quote_service
    app.dependency_overrides[get_metrics_calculator] = lambda: QuoteMetricsCalculator(
        quote_event_store
    )

    from fastapi.testclient import TestClient

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()
