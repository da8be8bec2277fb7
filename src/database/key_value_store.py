"""Key-value stores holding serialized blobs under string keys."""

from typing import Protocol

from sqlalchemy.orm import Session

from src.database.models import KeyValueRecord


class KeyValueStore(Protocol):
    """Minimal string-to-string storage used by the watchlist."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store; contents live as long as the instance."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class SqlKeyValueStore:
    """Store backed by the key_value table."""

    def __init__(self, session: Session):
        """
        Args:
            session: SQLAlchemy session; each write is committed immediately
        """
        self.session = session

    def get(self, key: str) -> str | None:
        record = self.session.get(KeyValueRecord, key)
        return record.value if record is not None else None

    def set(self, key: str, value: str) -> None:
        record = self.session.get(KeyValueRecord, key)
        if record is None:
            self.session.add(KeyValueRecord(key=key, value=value))
        else:
            record.value = value
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
