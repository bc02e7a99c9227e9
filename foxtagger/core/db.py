"""
Database plumbing for the persisted ledger.

One engine per database file, opened once by the store that owns it.
Sessions are short-lived and scoped over that engine's sessionmaker.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from foxtagger.core.config import Config
from foxtagger.core.models import Base


def _enable_wal(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def get_engine(config: Config) -> Engine:
    """
    Create the SQLite engine for ``config.database_path``.

    WAL mode is switched on as each pooled connection is opened, so
    the cron runner and the RPC CLI can read while the other writes.
    """
    db_path = Path(config.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _enable_wal)
    return engine


def init_db(engine: Engine) -> None:
    """Create missing tables."""
    Base.metadata.create_all(engine)


@contextmanager
def session_scope(sessions: sessionmaker) -> Generator[Session, None, None]:
    """
    Provide a transactional scope around a series of operations.

    Usage:
        with session_scope(store.sessions) as session:
            session.get(PersistentState, 1)
    """
    session = sessions()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
