"""
Spending limit tracking for FoxTagger.

Handles the account ledger, its storage, spend lookup and the limit engine.
"""

from foxtagger.limits.ledger import AccountRecord, Ledger, is_account_address
from foxtagger.limits.store import LedgerStore, MemoryLedgerStore, SqlLedgerStore
from foxtagger.limits.spend import ExplorerSpendSource, SpendSource, SpendSourceError
from foxtagger.limits.engine import check_limits, get_summary, mark_checked, update_amount

__all__ = [
    "AccountRecord",
    "Ledger",
    "is_account_address",
    "LedgerStore",
    "MemoryLedgerStore",
    "SqlLedgerStore",
    "ExplorerSpendSource",
    "SpendSource",
    "SpendSourceError",
    "check_limits",
    "get_summary",
    "mark_checked",
    "update_amount",
]
