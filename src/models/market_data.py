"""Market data models for price series, quotes and their analytics."""

from dataclasses import dataclass, field
from datetime import date
from typing import Literal, get_args

PeriodToken = Literal["1mo", "3mo", "6mo", "1y", "2y"]
PERIODS: tuple[str, ...] = get_args(PeriodToken)


@dataclass(frozen=True)
class PricePoint:
    """Closing price of one trading day."""

    date: date
    price: float


# Ascending by date
PriceSeries = list[PricePoint]


@dataclass(frozen=True)
class QuoteResult:
    """Price history of a symbol over a lookback period."""

    symbol: str
    company_name: str
    prices: PriceSeries = field(default_factory=list)
    current_price: float = 0.0
    previous_price: float = 0.0
    is_fallback: bool = False

    @classmethod
    def from_series(
        cls,
        symbol: str,
        company_name: str,
        prices: PriceSeries,
        is_fallback: bool = False,
    ) -> "QuoteResult":
        """
        Build a quote whose current/previous prices come from the series tail.

        Raises:
            ValueError: If prices is empty
        """
        if not prices:
            raise ValueError("A quote needs at least one price point")
        current = prices[-1].price
        previous = prices[-2].price if len(prices) > 1 else current
        return cls(
            symbol=symbol,
            company_name=company_name,
            prices=list(prices),
            current_price=current,
            previous_price=previous,
            is_fallback=is_fallback,
        )

    @property
    def price_change(self) -> float:
        return self.current_price - self.previous_price

    @property
    def price_change_percent(self) -> float:
        if self.previous_price == 0:
            return 0.0
        return self.price_change / self.previous_price * 100


@dataclass(frozen=True)
class AnalysisSummary:
    """Descriptive statistics of a price series.

    volatility and total_return are percentages.
    """

    max: float
    min: float
    average: float
    volatility: float
    total_return: float
