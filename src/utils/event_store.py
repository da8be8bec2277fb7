"""In-memory event store for quote fetches and other tracked operations."""

import threading
import uuid
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any


def _utc_now() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass
class Event:
    """A single recorded operation."""

    id: str
    timestamp: str
    trace_id: str | None
    event_type: str
    component: str
    message: str
    context: dict[str, Any] = field(default_factory=dict)
    duration_ms: float | None = None

    @property
    def recorded_at(self) -> datetime:
        return datetime.fromisoformat(self.timestamp.replace("Z", "+00:00"))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary, dropping unset fields."""
        return {k: v for k, v in asdict(self).items() if v is not None}


class EventStore:
    """Bounded, thread-safe event buffer with age-based purging."""

    def __init__(self, max_size: int = 10000, max_age_seconds: int = 3600):
        """
        Initialize the event store.

        Args:
            max_size: Oldest events are dropped once this many are held
            max_age_seconds: Default age limit used by clear_old_events
        """
        self.max_size = max_size
        self.max_age_seconds = max_age_seconds
        self._events: deque[Event] = deque(maxlen=max_size)
        self._lock = threading.RLock()

    def add_event(
        self,
        event_type: str,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
        duration_ms: float | None = None,
        trace_id: str | None = None,
    ) -> Event:
        event = Event(
            id=str(uuid.uuid4()),
            timestamp=_utc_now(),
            trace_id=trace_id,
            event_type=event_type,
            component=component,
            message=message,
            context=dict(context or {}),
            duration_ms=duration_ms,
        )
        with self._lock:
            self._events.append(event)
        return event

    def get_recent_events(self, limit: int = 100) -> list[Event]:
        """Return up to `limit` newest events, oldest first."""
        if limit <= 0:
            return []
        with self._lock:
            return list(self._events)[-limit:]

    def get_events_by_trace(self, trace_id: str) -> list[Event]:
        with self._lock:
            return [e for e in self._events if e.trace_id == trace_id]

    def get_events_by_type(self, event_type: str, limit: int | None = None) -> list[Event]:
        with self._lock:
            matching = [e for e in self._events if e.event_type == event_type]
        if limit is None:
            return matching
        return matching[-limit:] if limit > 0 else []

    def clear_old_events(self, max_age_seconds: int | None = None) -> int:
        """
        Drop events older than the given age.

        Returns:
            Number of events removed
        """
        cutoff = datetime.now(UTC) - timedelta(seconds=max_age_seconds or self.max_age_seconds)
        with self._lock:
            kept = [e for e in self._events if e.recorded_at > cutoff]
            removed = len(self._events) - len(kept)
            self._events = deque(kept, maxlen=self.max_size)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._events)

    def get_all_events(self) -> list[Event]:
        with self._lock:
            return list(self._events)


# Process-wide store shared by the quote service and the metrics endpoint
event_store = EventStore()
