"""
Shared fixtures for FoxTagger tests.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from foxtagger.core.config import Config
from foxtagger.limits.store import MemoryLedgerStore

ACCOUNT_A = "0x" + "a" * 40
ACCOUNT_B = "0x" + "b" * 40
ACCOUNT_C = "0x" + "c" * 40

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeNotifier:
    """Records every message instead of sending it."""

    def __init__(self, result: bool = True):
        self.messages = []
        self.result = result

    def send_message(self, text: str) -> bool:
        self.messages.append(text)
        return self.result


class FakeSpendSource:
    """Spend source over a fixed list of (address, timestamp, amount)."""

    def __init__(self, transactions=None):
        self.transactions = list(transactions or [])
        self.calls = []

    def add(self, address: str, timestamp: datetime, amount: float) -> None:
        self.transactions.append((address, timestamp, amount))

    def outgoing_spend(self, address, since, until):
        self.calls.append((address, since, until))
        return sum(
            amount
            for tx_address, timestamp, amount in self.transactions
            if tx_address == address and since < timestamp <= until
        )


def record_blob(limit=1.0, current=0.0, exceeded=False, period="daily", start=T0, **extra):
    """Stored form of an account record with an open window at ``start``."""
    blob = {
        "limit": limit,
        "period": period,
        "period_start": start.isoformat() if start else None,
        "period_end": None,
        "current_amount": current,
        "exceeded": exceeded,
        "last_synced": start.isoformat() if start else None,
    }
    if start:
        lengths = {"daily": timedelta(days=1), "weekly": timedelta(weeks=1), "monthly": timedelta(days=30)}
        blob["period_end"] = (start + lengths[period]).isoformat()
    blob.update(extra)
    return blob


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def spend_source():
    return FakeSpendSource()


@pytest.fixture
def memory_store():
    return MemoryLedgerStore()


@pytest.fixture
def sql_config(tmp_path):
    return Config(database_path=str(tmp_path / "foxtagger.db"))
