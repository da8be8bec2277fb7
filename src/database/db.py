"""Engine and session wiring for the key-value table."""

from collections.abc import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.database.models import Base
from src.utils.config import DatabaseConfig, config


def create_db_engine(database: DatabaseConfig) -> Engine:
    """
    Build an engine for the configured database.

    SQLite connections are shared across FastAPI's worker threads, so the
    same-thread check is turned off for them.
    """
    connect_args = {}
    if database.database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database.database_url, echo=database.echo, connect_args=connect_args)


def create_session_factory(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


engine = create_db_engine(config.database)
SessionLocal = create_session_factory(engine)


def init_db(bind: Engine | None = None) -> None:
    """Create the key_value table if it does not exist yet."""
    Base.metadata.create_all(bind=bind or engine)


def get_db() -> Iterator[Session]:
    """Yield a request-scoped session and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
