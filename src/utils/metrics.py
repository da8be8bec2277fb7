"""Quote metrics aggregated from the event store."""

from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any

from src.utils.event_store import EventStore

QUOTE_FETCH_EVENT = "quote_fetch"


@dataclass
class QuoteMetrics:
    """Aggregated quote-fetch statistics."""

    total_fetches: int
    live_fetches: int
    fallback_fetches: int
    fallback_rate: float
    average_fetch_duration_ms: float
    uptime_seconds: int
    fallback_reasons: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class QuoteMetricsCalculator:
    """Calculates quote metrics from `quote_fetch` events."""

    def __init__(self, event_store: EventStore, start_time: datetime | None = None):
        """
        Initialize the metrics calculator.

        Args:
            event_store: The event store to read from
            start_time: Reference point for uptime (defaults to now)
        """
        self.event_store = event_store
        self.start_time = start_time or datetime.now(UTC)

    def calculate(self) -> QuoteMetrics:
        fetches = self.event_store.get_events_by_type(QUOTE_FETCH_EVENT)

        live = [e for e in fetches if e.context.get("status") == "live"]
        fallbacks = [e for e in fetches if e.context.get("status") == "fallback"]
        total = len(fetches)

        # Percentage of fetches served from synthetic data
        fallback_rate = len(fallbacks) / total * 100 if total else 0.0

        durations = [e.duration_ms for e in fetches if e.duration_ms is not None]
        average_duration = sum(durations) / len(durations) if durations else 0.0

        reasons = Counter(e.context.get("reason", "unknown") for e in fallbacks)

        return QuoteMetrics(
            total_fetches=total,
            live_fetches=len(live),
            fallback_fetches=len(fallbacks),
            fallback_rate=fallback_rate,
            average_fetch_duration_ms=average_duration,
            uptime_seconds=int((datetime.now(UTC) - self.start_time).total_seconds()),
            fallback_reasons=dict(reasons),
        )
