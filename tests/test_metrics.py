"""Property-based tests for quote metrics calculation."""

from datetime import UTC, datetime, timedelta

from hypothesis import given
from hypothesis import strategies as st

from src.utils.event_store import EventStore
from src.utils.metrics import QUOTE_FETCH_EVENT, QuoteMetricsCalculator


def record(store: EventStore, status: str, duration_ms: float, reason: str | None = None):
    context = {"symbol": "AAPL", "period": "1mo", "status": status}
    if reason:
        context["reason"] = reason
    store.add_event(
        event_type=QUOTE_FETCH_EVENT,
        component="QuoteService",
        message="Quote fetch",
        context=context,
        duration_ms=duration_ms,
    )


class TestQuoteMetrics:
    @given(
        live=st.integers(min_value=0, max_value=30),
        rate_limited=st.integers(min_value=0, max_value=30),
        invalid=st.integers(min_value=0, max_value=30),
    )
    def test_fallback_rate_is_accurate(self, live, rate_limited, invalid):
        """
        **Property: fallback_rate equals fallback_fetches / total_fetches * 100**
        """
        store = EventStore()
        for _ in range(live):
            record(store, "live", 100.0)
        for _ in range(rate_limited):
            record(store, "fallback", 20.0, "rate_limited")
        for _ in range(invalid):
            record(store, "fallback", 30.0, "invalid_symbol")

        metrics = QuoteMetricsCalculator(store).calculate()

        total = live + rate_limited + invalid
        assert metrics.total_fetches == total
        assert metrics.live_fetches == live
        assert metrics.fallback_fetches == rate_limited + invalid
        if total:
            assert abs(metrics.fallback_rate - (rate_limited + invalid) / total * 100) < 1e-9
        else:
            assert metrics.fallback_rate == 0.0
        assert sum(metrics.fallback_reasons.values()) == rate_limited + invalid

    def test_average_duration(self):
        store = EventStore()
        record(store, "live", 100.0)
        record(store, "fallback", 50.0, "transport_error")

        metrics = QuoteMetricsCalculator(store).calculate()

        assert metrics.average_fetch_duration_ms == 75.0
        assert metrics.fallback_reasons == {"transport_error": 1}

    def test_other_events_are_ignored(self):
        store = EventStore()
        store.add_event("something_else", "Other", "noise", context={"status": "live"})

        assert QuoteMetricsCalculator(store).calculate().total_fetches == 0

    def test_uptime(self):
        start = datetime.now(UTC) - timedelta(seconds=90)

        metrics = QuoteMetricsCalculator(EventStore(), start_time=start).calculate()

        assert metrics.uptime_seconds >= 90
        assert metrics.to_dict()["uptime_seconds"] == metrics.uptime_seconds
