"""
Persistent ledger storage.

The ledger is always read and written as one blob. There is no
per-account update: callers read, change in memory, and write the
whole thing back.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from sqlalchemy.orm import sessionmaker

from foxtagger.core.config import Config
from foxtagger.core.db import get_engine, init_db, session_scope
from foxtagger.core.models import PersistentState
from foxtagger.limits.ledger import Ledger

logger = logging.getLogger(__name__)

STATE_ROW_ID = 1


class LedgerStore(ABC):
    """
    Read/write/clear contract for the persisted ledger.

    ``read`` returns None when nothing has been written yet (or after a
    clear). Callers must treat that as "nothing to do", not as an error.
    """

    @abstractmethod
    def read_blob(self) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def write_blob(self, blob: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    def read(self) -> Optional[Ledger]:
        blob = self.read_blob()
        if blob is None:
            return None
        return Ledger.from_blob(blob)

    def write(self, ledger: Ledger) -> None:
        self.write_blob(ledger.to_blob())


class MemoryLedgerStore(LedgerStore):
    """
    In-process store.

    Keeps the serialized JSON so callers can't mutate stored state
    through objects they still hold.
    """

    def __init__(self, blob: Optional[Dict[str, Any]] = None):
        self._data: Optional[str] = json.dumps(blob) if blob is not None else None
        self.writes = 0

    def read_blob(self) -> Optional[Dict[str, Any]]:
        if self._data is None:
            return None
        return json.loads(self._data)

    def write_blob(self, blob: Dict[str, Any]) -> None:
        self._data = json.dumps(blob)
        self.writes += 1

    def clear(self) -> None:
        self._data = None


class SqlLedgerStore(LedgerStore):
    """
    SQLite-backed store.

    The blob lives in a single ``persistent_state`` row; each write is
    one transaction, so a reader sees either the old or the new ledger.
    """

    def __init__(self, config: Config):
        self.config = config
        self.engine = get_engine(config)
        init_db(self.engine)
        self.sessions = sessionmaker(bind=self.engine)

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    def read_blob(self) -> Optional[Dict[str, Any]]:
        with session_scope(self.sessions) as session:
            state = session.get(PersistentState, STATE_ROW_ID)
            if state is None:
                return None
            raw = state.blob

        blob = json.loads(raw)
        if not isinstance(blob, dict):
            logger.warning(f"Persisted state is not an object ({type(blob).__name__}), ignoring it")
            return None
        return blob

    def write_blob(self, blob: Dict[str, Any]) -> None:
        raw = json.dumps(blob)

        with session_scope(self.sessions) as session:
            state = session.get(PersistentState, STATE_ROW_ID)
            if state is None:
                session.add(PersistentState(id=STATE_ROW_ID, blob=raw))
            else:
                state.blob = raw

        logger.debug(f"Persisted ledger ({len(raw)} bytes)")

    def clear(self) -> None:
        with session_scope(self.sessions) as session:
            state = session.get(PersistentState, STATE_ROW_ID)
            if state is not None:
                session.delete(state)

        logger.info("Cleared persisted ledger")
