"""Lookback window calculation and period filtering of price series."""

import calendar
from collections.abc import Sequence
from datetime import date

from src.models.market_data import PERIODS, PricePoint, PriceSeries

# Calendar offset of each period token, in months
PERIOD_MONTHS: dict[str, int] = {
    "1mo": 1,
    "3mo": 3,
    "6mo": 6,
    "1y": 12,
    "2y": 24,
}


class InvalidPeriodError(ValueError):
    """Raised for a period token outside PERIODS."""


def subtract_months(day: date, months: int) -> date:
    """Move a date back by whole months, clamping to the target month's last day."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def get_period_window(period: str, today: date | None = None) -> tuple[date, date]:
    """
    Compute the inclusive [start, end] window of a period token.

    Args:
        period: One of "1mo", "3mo", "6mo", "1y", "2y"
        today: End of the window (defaults to the current local date)

    Raises:
        InvalidPeriodError: If the token is unknown
    """
    if period not in PERIOD_MONTHS:
        raise InvalidPeriodError(f"Invalid period: {period!r}. Use one of {', '.join(PERIODS)}")

    end_date = today or date.today()
    return subtract_months(end_date, PERIOD_MONTHS[period]), end_date


def filter_by_period(
    series: Sequence[PricePoint],
    period: str,
    today: date | None = None,
) -> PriceSeries:
    """
    Keep the points that fall inside the period's lookback window.

    Order is preserved and the input is not re-sorted. The result may be
    empty.
    """
    start_date, end_date = get_period_window(period, today)
    return [point for point in series if start_date <= point.date <= end_date]
