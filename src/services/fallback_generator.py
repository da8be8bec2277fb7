"""Synthetic price series used when the quote source is unavailable."""

import random
from datetime import date, timedelta

from src.models.market_data import PricePoint, QuoteResult
from src.services.period_filter import get_period_window

COMPANY_NAMES: dict[str, str] = {
    "AAPL": "Apple Inc.",
    "GOOGL": "Alphabet Inc.",
    "GOOG": "Alphabet Inc.",
    "TSLA": "Tesla Inc.",
    "MSFT": "Microsoft Corporation",
    "AMZN": "Amazon.com Inc.",
    "NVDA": "NVIDIA Corporation",
    "META": "Meta Platforms Inc.",
    "NFLX": "Netflix Inc.",
    "ADBE": "Adobe Inc.",
}

BASE_PRICES: dict[str, float] = {
    "AAPL": 150.0,
    "GOOGL": 2800.0,
    "TSLA": 800.0,
    "MSFT": 330.0,
    "AMZN": 3300.0,
    "NVDA": 220.0,
    "META": 320.0,
}

# Half-width of the uniform daily move
MAX_DAILY_DRIFT = 0.025
RANDOM_BASE_PRICE_RANGE = (100.0, 300.0)

SATURDAY = 5


def company_name_for(symbol: str) -> str:
    """Static company name of a symbol, or a generic name for unknown ones."""
    return COMPANY_NAMES.get(symbol, f"{symbol} Corporation")


def _base_price(symbol: str, rng: random.Random) -> float:
    if symbol in BASE_PRICES:
        return BASE_PRICES[symbol]
    low, high = RANDOM_BASE_PRICE_RANGE
    return low + rng.random() * (high - low)


def generate_fallback(
    symbol: str,
    period: str,
    today: date | None = None,
    rng: random.Random | None = None,
) -> QuoteResult:
    """
    Generate a weekday-only random-walk series covering the period's window.

    Each trading day moves the previous (already rounded) price by a
    uniform factor in [-2.5%, +2.5%], then rounds to cents.

    Args:
        symbol: Symbol used for the base price and company name lookups
        period: Period token selecting the window
        today: Last day of the window (defaults to the current local date)
        rng: Random source (defaults to a fresh unseeded generator)

    Returns:
        QuoteResult flagged as fallback data
    """
    rng = rng or random.Random()
    start_date, end_date = get_period_window(period, today)

    price = _base_price(symbol, rng)
    prices: list[PricePoint] = []

    current = start_date
    while current <= end_date:
        if current.weekday() < SATURDAY:
            price = round(price * (1 + rng.uniform(-MAX_DAILY_DRIFT, MAX_DAILY_DRIFT)), 2)
            prices.append(PricePoint(date=current, price=price))
        current += timedelta(days=1)

    return QuoteResult.from_series(
        symbol=symbol,
        company_name=company_name_for(symbol),
        prices=prices,
        is_fallback=True,
    )
