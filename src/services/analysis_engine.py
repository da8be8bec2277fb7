"""Analysis engine for summarizing price series."""

import math
from collections.abc import Sequence

from src.models.market_data import AnalysisSummary, PricePoint

# Annualization factor for daily returns
TRADING_DAYS_PER_YEAR = 252


class EmptyInputError(ValueError):
    """Raised when statistics are requested for an empty price series."""


def calculate_returns(prices: Sequence[float]) -> list[float]:
    """Calculate simple returns between consecutive prices."""
    return [(prices[i] - prices[i - 1]) / prices[i - 1] for i in range(1, len(prices))]


def calculate_volatility(returns: Sequence[float]) -> float:
    """
    Calculate annualized volatility, as a percentage, from daily returns.

    Uses the population variance of the returns. An empty sequence has
    zero volatility.
    """
    if not returns:
        return 0.0

    mean_return = sum(returns) / len(returns)
    variance = sum((r - mean_return) ** 2 for r in returns) / len(returns)
    return math.sqrt(variance * TRADING_DAYS_PER_YEAR) * 100


def calculate_total_return(prices: Sequence[float]) -> float:
    """Percentage change from the first to the last price."""
    if len(prices) <= 1:
        return 0.0
    return (prices[-1] - prices[0]) / prices[0] * 100


def analyze(series: Sequence[PricePoint]) -> AnalysisSummary:
    """
    Summarize a price series.

    Args:
        series: Price points ordered by ascending date

    Returns:
        AnalysisSummary with max, min, average, annualized volatility and
        total return

    Raises:
        EmptyInputError: If the series has no points
    """
    if not series:
        raise EmptyInputError("Price data cannot be empty")

    prices = [point.price for point in series]

    return AnalysisSummary(
        max=max(prices),
        min=min(prices),
        average=sum(prices) / len(prices),
        volatility=calculate_volatility(calculate_returns(prices)),
        total_return=calculate_total_return(prices),
    )
