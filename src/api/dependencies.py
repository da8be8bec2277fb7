"""FastAPI dependencies providing services to the routes."""

from fastapi import Depends
from sqlalchemy.orm import Session

from src.database.db import get_db
from src.database.key_value_store import SqlKeyValueStore
from src.services.quote_service import QuoteService
from src.services.watchlist_service import WatchlistStore
from src.utils.event_store import event_store
from src.utils.metrics import QuoteMetricsCalculator

_quote_service: QuoteService | None = None
_metrics_calculator: QuoteMetricsCalculator | None = None


def get_quote_service() -> QuoteService:
    """Shared quote service recording fetches in the process event store."""
    global _quote_service
    if _quote_service is None:
        _quote_service = QuoteService(event_store=event_store)
    return _quote_service


def get_watchlist_store(db: Session = Depends(get_db)) -> WatchlistStore:
    return WatchlistStore(SqlKeyValueStore(db))


def get_metrics_calculator() -> QuoteMetricsCalculator:
    global _metrics_calculator
    if _metrics_calculator is None:
        _metrics_calculator = QuoteMetricsCalculator(event_store)
    return _metrics_calculator
