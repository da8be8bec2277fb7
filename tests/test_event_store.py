"""Tests for the in-memory event store."""

import uuid
from datetime import UTC, datetime, timedelta

from hypothesis import given
from hypothesis import strategies as st

from src.utils.event_store import EventStore


class TestEventStore:
    @given(
        num_events=st.integers(min_value=1, max_value=50),
        num_traces=st.integers(min_value=1, max_value=5),
    )
    def test_trace_history_is_complete_and_ordered(self, num_events, num_traces):
        """
        **Property: a trace's events come back complete and in insertion order**
        """
        store = EventStore()
        traces = [str(uuid.uuid4()) for _ in range(num_traces)]

        for i in range(num_events):
            store.add_event(
                event_type="quote_fetch",
                component="QuoteService",
                message=f"Event {i}",
                context={"index": i},
                trace_id=traces[i % num_traces],
            )

        for n, trace_id in enumerate(traces):
            indexes = [e.context["index"] for e in store.get_events_by_trace(trace_id)]
            assert indexes == list(range(n, num_events, num_traces))

    def test_max_size_drops_oldest(self):
        store = EventStore(max_size=3)
        for i in range(5):
            store.add_event("quote_fetch", "QuoteService", f"Event {i}")

        assert [e.message for e in store.get_all_events()] == ["Event 2", "Event 3", "Event 4"]

    def test_get_events_by_type(self):
        store = EventStore()
        store.add_event("quote_fetch", "QuoteService", "a")
        store.add_event("other", "QuoteService", "b")
        store.add_event("quote_fetch", "QuoteService", "c")

        assert [e.message for e in store.get_events_by_type("quote_fetch")] == ["a", "c"]
        assert [e.message for e in store.get_events_by_type("quote_fetch", limit=1)] == ["c"]
        assert store.get_events_by_type("quote_fetch", limit=0) == []

    def test_recent_events(self):
        store = EventStore()
        for i in range(5):
            store.add_event("quote_fetch", "QuoteService", f"Event {i}")

        assert [e.message for e in store.get_recent_events(2)] == ["Event 3", "Event 4"]
        assert store.get_recent_events(0) == []

    def test_clear_old_events(self):
        store = EventStore()
        old = store.add_event("quote_fetch", "QuoteService", "old")
        old.timestamp = (datetime.now(UTC) - timedelta(hours=2)).isoformat().replace("+00:00", "Z")
        store.add_event("quote_fetch", "QuoteService", "new")

        removed = store.clear_old_events(max_age_seconds=3600)

        assert removed == 1
        assert [e.message for e in store.get_all_events()] == ["new"]

    def test_to_dict_drops_unset_fields(self):
        store = EventStore()
        event = store.add_event("quote_fetch", "QuoteService", "no duration")

        data = event.to_dict()

        assert "duration_ms" not in data
        assert "trace_id" not in data
        assert data["message"] == "no duration"

    def test_clear(self):
        store = EventStore()
        store.add_event("quote_fetch", "QuoteService", "a")

        store.clear()

        assert store.size() == 0
