"""Watchlist service persisting the user's symbols as one JSON blob."""

import json
from datetime import UTC, datetime

from src.database.key_value_store import KeyValueStore
from src.models.watchlist import Watchlist, WatchlistItem
from src.services.quote_service import QuoteService
from src.utils.config import config
from src.utils.logger import StructuredLogger


class InvalidWatchlistSymbolError(ValueError):
    """Raised when a symbol is blank once surrounding whitespace is removed."""


class WatchlistStore:
    """Read-modify-write access to the watchlist blob.

    Every mutation loads the whole collection, changes it and writes it
    back under a single key. There is no locking, so concurrent writers
    race and the last write wins.
    """

    def __init__(self, kv_store: KeyValueStore, storage_key: str | None = None):
        """
        Initialize the watchlist store.

        Args:
            kv_store: Backing key-value store
            storage_key: Key of the blob (defaults to WATCHLIST_STORAGE_KEY)
        """
        self.kv_store = kv_store
        self.storage_key = storage_key or config.watchlist.storage_key
        self.logger = StructuredLogger("WatchlistStore")

    def load(self) -> Watchlist:
        """
        Read the stored watchlist.

        Missing or malformed data yields an empty watchlist.
        """
        stored = self.kv_store.get(self.storage_key)
        if not stored:
            return Watchlist()

        try:
            return Watchlist.from_dict(json.loads(stored))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            self.logger.warning(
                "Failed to load watchlist, starting with an empty one",
                context={"storage_key": self.storage_key},
                exception=e,
            )
            return Watchlist()

    def save(self, watchlist: Watchlist) -> None:
        self.kv_store.set(self.storage_key, json.dumps(watchlist.to_dict()))

    def _persist(self, items: list[WatchlistItem]) -> Watchlist:
        watchlist = Watchlist(items=items, last_updated=datetime.now(UTC))
        self.save(watchlist)
        return watchlist

    def add(self, symbol: str, company_name: str) -> Watchlist:
        """
        Add a symbol; adding one that is already present changes nothing.

        Raises:
            InvalidWatchlistSymbolError: If the symbol is blank
        """
        key = symbol.strip().upper()
        if not key:
            raise InvalidWatchlistSymbolError("Symbol cannot be blank")

        current = self.load()
        if current.find(key) is not None:
            return current

        item = WatchlistItem(symbol=key, company_name=company_name, added_at=datetime.now(UTC))
        self.logger.info("Added symbol to watchlist", context={"symbol": key})
        return self._persist([*current.items, item])

    def remove(self, symbol: str) -> Watchlist:
        key = symbol.strip().upper()
        current = self.load()
        return self._persist([item for item in current.items if item.symbol != key])

    def contains(self, symbol: str) -> bool:
        return self.load().find(symbol) is not None

    def update_price(self, symbol: str, price: float, change: float) -> None:
        """Record the latest price of a symbol. Unknown symbols are left alone."""
        key = symbol.strip().upper()
        current = self.load()
        for item in current.items:
            if item.symbol == key:
                item.last_price = price
                item.price_change = change
        self._persist(current.items)

    async def refresh_prices(self, quote_service: QuoteService, period: str = "1mo") -> Watchlist:
        """
        Fetch a quote for every item and store its latest price and change.

        Items are refreshed one after another.
        """
        for item in self.load().items:
            quote = await quote_service.fetch_quote(item.symbol, period)
            self.update_price(item.symbol, quote.current_price, quote.price_change)
        return self.load()
