"""Watchlist models and their JSON blob encoding."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _format_timestamp(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


@dataclass
class WatchlistItem:
    """A symbol the user follows."""

    symbol: str
    company_name: str
    added_at: datetime
    last_price: float | None = None
    price_change: float | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "symbol": self.symbol,
            "companyName": self.company_name,
            "addedAt": _format_timestamp(self.added_at),
        }
        if self.last_price is not None:
            data["lastPrice"] = self.last_price
        if self.price_change is not None:
            data["priceChange"] = self.price_change
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WatchlistItem":
        """
        Decode a stored item.

        Raises:
            KeyError, TypeError, ValueError: If the item is malformed
        """
        last_price = data.get("lastPrice")
        price_change = data.get("priceChange")
        return cls(
            symbol=str(data["symbol"]).upper(),
            company_name=str(data["companyName"]),
            added_at=_parse_timestamp(data["addedAt"]),
            last_price=float(last_price) if last_price is not None else None,
            price_change=float(price_change) if price_change is not None else None,
        )


@dataclass
class Watchlist:
    """Whole watchlist collection, persisted as one blob."""

    items: list[WatchlistItem] = field(default_factory=list)
    last_updated: datetime = field(default_factory=lambda: datetime.now(UTC))

    def find(self, symbol: str) -> WatchlistItem | None:
        key = symbol.strip().upper()
        return next((item for item in self.items if item.symbol == key), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "lastUpdated": _format_timestamp(self.last_updated),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Watchlist":
        return cls(
            items=[WatchlistItem.from_dict(item) for item in data["items"]],
            last_updated=_parse_timestamp(data["lastUpdated"]),
        )
