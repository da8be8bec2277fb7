"""Quote service fetching daily price history from Alpha Vantage with synthetic fallback."""

import asyncio
import math
import re
import time
from dataclasses import replace
from datetime import date
from typing import Any

import httpx

from src.models.market_data import PricePoint, PriceSeries, QuoteResult
from src.services.fallback_generator import company_name_for, generate_fallback
from src.services.period_filter import filter_by_period, get_period_window
from src.utils.config import QuoteAPIConfig, config
from src.utils.event_store import EventStore
from src.utils.logger import StructuredLogger
from src.utils.metrics import QUOTE_FETCH_EVENT
from src.utils.trace_context import get_current_trace

SOURCE_NAME = "Alpha Vantage"
TIME_SERIES_KEY = "Time Series (Daily)"
CLOSE_KEY = "4. close"

# Four-digit codes are Tokyo Stock Exchange listings
TOKYO_SUFFIX = ".T"
_FOUR_DIGIT_CODE = re.compile(r"[0-9]{4}")


class QuoteSourceError(Exception):
    """Base class for failures reported by or about the quote source."""

    reason = "source_error"


class RateLimitError(QuoteSourceError):
    reason = "rate_limited"


class InvalidSymbolError(QuoteSourceError):
    reason = "invalid_symbol"


class MalformedResponseError(QuoteSourceError):
    reason = "malformed_response"


class EmptySeriesError(QuoteSourceError):
    reason = "empty_series"


# Lower value wins when both lookups fail
_ERROR_PRIORITY = {RateLimitError: 0, InvalidSymbolError: 1}


def normalize_symbol(symbol: str) -> str:
    """Upper-case and trim a symbol, adding the Tokyo suffix to four-digit codes."""
    normalized = symbol.strip().upper()
    if _FOUR_DIGIT_CODE.fullmatch(normalized):
        return normalized + TOKYO_SUFFIX
    return normalized


def fallback_reason(error: BaseException) -> str:
    if isinstance(error, QuoteSourceError):
        return error.reason
    if isinstance(error, httpx.HTTPError):
        return "transport_error"
    return "unexpected_error"


def _raise_for_api_error(data: dict[str, Any]) -> None:
    """Translate Alpha Vantage error payloads into exceptions."""
    if "Note" in data or "Information" in data:
        raise RateLimitError(str(data.get("Note") or data.get("Information")))
    if "Error Message" in data:
        raise InvalidSymbolError(str(data["Error Message"]))


class AlphaVantageClient:
    """Thin async client for the two Alpha Vantage lookups the viewer needs."""

    def __init__(
        self,
        api_config: QuoteAPIConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            api_config: Credentials, endpoint and timeout (defaults to global config)
            transport: Optional httpx transport, used to stub the API in tests
        """
        self.api_config = api_config or config.quote_api
        self.transport = transport

    async def _query(self, function: str, symbol: str, **extra: str) -> dict[str, Any]:
        params = {
            "function": function,
            "symbol": symbol,
            **extra,
            "apikey": self.api_config.api_key,
        }

        async with httpx.AsyncClient(
            timeout=self.api_config.request_timeout, transport=self.transport
        ) as client:
            response = await client.get(self.api_config.base_url, params=params)
            response.raise_for_status()
            try:
                data = response.json()
            except ValueError as e:
                raise MalformedResponseError(f"{function} response is not JSON") from e

        if not isinstance(data, dict):
            raise MalformedResponseError(f"{function} response is not a JSON object")

        _raise_for_api_error(data)
        return data

    async def get_company_name(self, symbol: str) -> str:
        """
        Look up a company name via the OVERVIEW function.

        A blank name falls back to the static name table.
        """
        data = await self._query("OVERVIEW", symbol)
        name = str(data.get("Name") or "").strip()
        return name or company_name_for(symbol)

    async def get_daily_prices(self, symbol: str) -> PriceSeries:
        """
        Fetch the full daily closing-price history, sorted by ascending date.

        Entries with an unparseable date or a close that is not a positive
        finite number are skipped.

        Raises:
            MalformedResponseError: If the payload has no usable series
        """
        data = await self._query("TIME_SERIES_DAILY", symbol, outputsize="full")

        time_series = data.get(TIME_SERIES_KEY)
        if not isinstance(time_series, dict):
            raise MalformedResponseError("Invalid API response or no data available")

        prices = []
        for date_str, day_data in time_series.items():
            try:
                close = float(day_data[CLOSE_KEY])
                day = date.fromisoformat(date_str)
            except (KeyError, TypeError, ValueError):
                continue
            if math.isfinite(close) and close > 0:
                prices.append(PricePoint(date=day, price=close))

        if not prices:
            raise MalformedResponseError("No valid price data found")

        prices.sort(key=lambda point: point.date)
        return prices


class QuoteService:
    """Produces a quote for any symbol, degrading to synthetic data on failure."""

    def __init__(
        self,
        client: AlphaVantageClient | None = None,
        event_store: EventStore | None = None,
        api_config: QuoteAPIConfig | None = None,
    ):
        """
        Initialize the quote service.

        Args:
            client: Remote quote client (defaults to an AlphaVantageClient)
            event_store: Optional event store receiving one event per fetch
            api_config: Quote API settings (defaults to global config)
        """
        self.api_config = api_config or config.quote_api
        self.client = client or AlphaVantageClient(self.api_config)
        self.event_store = event_store
        self.logger = StructuredLogger("QuoteService")

    async def _fetch_live(
        self, symbol: str, query_symbol: str, period: str, today: date | None
    ) -> QuoteResult:
        if not query_symbol:
            raise InvalidSymbolError("Symbol is empty")

        results = await asyncio.gather(
            self.client.get_company_name(query_symbol),
            self.client.get_daily_prices(query_symbol),
            return_exceptions=True,
        )
        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            raise min(errors, key=lambda e: _ERROR_PRIORITY.get(type(e), len(_ERROR_PRIORITY)))

        company_name, history = results
        prices = filter_by_period(history, period, today)
        if not prices:
            raise EmptySeriesError("No price data available for the selected period")

        return QuoteResult.from_series(symbol=symbol, company_name=company_name, prices=prices)

    async def fetch_quote(self, symbol: str, period: str, today: date | None = None) -> QuoteResult:
        """
        Fetch a symbol's price history over a lookback period.

        Source failures of any kind (rate limit, invalid symbol, empty
        period, transport or payload errors) are logged and answered with
        generated fallback data, so this never raises for a bad symbol or
        an unreachable API.

        Args:
            symbol: Ticker as typed by the caller; echoed back unchanged
            period: One of "1mo", "3mo", "6mo", "1y", "2y"
            today: End of the lookback window (defaults to the current date)

        Returns:
            QuoteResult with a non-empty price series

        Raises:
            InvalidPeriodError: If period is not a known token
        """
        get_period_window(period, today)
        query_symbol = normalize_symbol(symbol)
        trace_id = get_current_trace()
        context = {
            "source": SOURCE_NAME,
            "symbol": symbol,
            "query_symbol": query_symbol,
            "period": period,
        }

        if self.api_config.is_demo_key:
            self.logger.warning(
                "Using demo API key. For production use, get a free API key from Alpha Vantage.",
                context=context,
            )

        self.logger.info("Starting quote fetch", context=context)
        start_time = time.perf_counter()

        try:
            quote = await self._fetch_live(symbol, query_symbol, period, today)
        except Exception as e:
            reason = fallback_reason(e)
            self.logger.warning(
                "Quote fetch failed, falling back to generated data",
                context={**context, "result": "fallback", "reason": reason},
                exception=e,
            )
            quote = replace(generate_fallback(query_symbol, period, today), symbol=symbol)
            self._record_fetch(context, "fallback", start_time, trace_id, reason=reason)
            return quote

        self.logger.info(
            "Successfully fetched quote",
            context={
                **context,
                "result": "success",
                "points": len(quote.prices),
                "current_price": quote.current_price,
            },
        )
        self._record_fetch(context, "live", start_time, trace_id)
        return quote

    def _record_fetch(
        self,
        context: dict[str, Any],
        status: str,
        start_time: float,
        trace_id: str | None,
        reason: str | None = None,
    ) -> None:
        if self.event_store is None:
            return

        event_context = {"symbol": context["symbol"], "period": context["period"], "status": status}
        if reason:
            event_context["reason"] = reason

        self.event_store.add_event(
            event_type=QUOTE_FETCH_EVENT,
            component="QuoteService",
            message=f"Quote fetch for {context['symbol']!r} served {status} data",
            context=event_context,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            trace_id=trace_id,
        )
