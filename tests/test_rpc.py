"""
Tests for the frontend RPC handlers.
"""

import pytest

from foxtagger.handlers.rpc import InvalidParamsError, MethodNotFoundError, RpcDispatcher
from foxtagger.limits.messages import DEBUG_MESSAGE
from foxtagger.limits.store import MemoryLedgerStore, SqlLedgerStore

from conftest import ACCOUNT_A, FakeNotifier, record_blob


@pytest.fixture
def rpc(memory_store, notifier):
    return RpcDispatcher(memory_store, notifier)


class TestStorageMethods:
    """Test get/set/clear pass-through."""

    def test_get_with_nothing_stored(self, rpc):
        assert rpc.handle("getPersistentStorage") is None

    def test_set_then_get(self, rpc):
        assert rpc.handle("setPersistentStorage", {ACCOUNT_A: {"limit": 1.5, "period": "weekly"}}) is None

        stored = rpc.handle("getPersistentStorage")

        assert stored[ACCOUNT_A]["limit"] == 1.5
        assert stored[ACCOUNT_A]["period"] == "weekly"
        assert stored[ACCOUNT_A]["current_amount"] == 0.0

    def test_set_normalizes_address_case(self, rpc):
        rpc.handle("setPersistentStorage", {"0xABCDEF": {"limit": 1}})
        assert "0xabcdef" in rpc.handle("getPersistentStorage")

    def test_set_keeps_foreign_keys(self, rpc):
        rpc.handle("setPersistentStorage", {ACCOUNT_A: {"limit": 1}, "theme": "dark"})
        assert rpc.handle("getPersistentStorage")["theme"] == "dark"

    def test_set_none_stores_empty_ledger(self, rpc):
        rpc.handle("setPersistentStorage", None)
        assert rpc.handle("getPersistentStorage") == {}

    def test_set_rejects_non_object(self, rpc, memory_store):
        with pytest.raises(InvalidParamsError):
            rpc.handle("setPersistentStorage", [ACCOUNT_A])
        assert memory_store.writes == 0

    def test_set_rejects_bad_record(self, rpc, memory_store):
        with pytest.raises(InvalidParamsError, match="limit"):
            rpc.handle("setPersistentStorage", {ACCOUNT_A: {"limit": -2}})
        assert memory_store.writes == 0

    def test_set_rejects_string_flag(self, rpc, memory_store):
        with pytest.raises(InvalidParamsError, match="exceeded"):
            rpc.handle("setPersistentStorage", {ACCOUNT_A: {"limit": 1, "exceeded": "false"}})
        assert memory_store.writes == 0

    def test_clear_then_get(self, rpc):
        rpc.handle("setPersistentStorage", {ACCOUNT_A: record_blob()})

        assert rpc.handle("clearPersistentStorage") is None
        assert rpc.handle("getPersistentStorage") is None

    def test_clear_then_get_sql(self, sql_config):
        rpc = RpcDispatcher(SqlLedgerStore(sql_config), FakeNotifier())
        rpc.handle("setPersistentStorage", {ACCOUNT_A: record_blob()})

        rpc.handle("clearPersistentStorage")

        assert rpc.handle("getPersistentStorage") is None


class TestNotify:
    """Test the debug notification."""

    def test_sends_debug_message(self, rpc, notifier):
        assert rpc.handle("notify") is True
        assert notifier.messages == [DEBUG_MESSAGE]

    def test_reports_failed_delivery(self):
        rpc = RpcDispatcher(MemoryLedgerStore(), FakeNotifier(result=False))
        assert rpc.handle("notify") is False


class TestUnknownMethod:
    """Test method routing."""

    def test_unknown_method(self, rpc):
        with pytest.raises(MethodNotFoundError, match="Method not found."):
            rpc.handle("transferFunds")

    def test_cron_names_are_not_rpc_methods(self, rpc):
        with pytest.raises(MethodNotFoundError):
            rpc.handle("updateAmount")
