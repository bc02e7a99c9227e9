"""
Tests for the command-line scripts.

Runs the Typer apps against a temporary SQLite database.
"""

import json
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

import cronjob as cronjob_script
import rpc as rpc_script

from conftest import ACCOUNT_A

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.setenv("FOXTAGGER_DB_PATH", str(tmp_path / "cli.db"))
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    monkeypatch.delenv("TELEGRAM_CHAT_ID", raising=False)
    monkeypatch.delenv("ALERT_POLICY", raising=False)
    monkeypatch.chdir(tmp_path)


class TestRpcScript:
    """Test scripts/rpc.py."""

    def test_set_and_get(self):
        params = json.dumps({ACCOUNT_A: {"limit": 1.5, "period": "weekly"}})

        result = runner.invoke(rpc_script.app, ["call", "setPersistentStorage", "--params", params])
        assert result.exit_code == 0

        result = runner.invoke(rpc_script.app, ["call", "getPersistentStorage"])
        assert result.exit_code == 0
        assert ACCOUNT_A in result.output

    def test_get_empty(self):
        result = runner.invoke(rpc_script.app, ["call", "getPersistentStorage"])

        assert result.exit_code == 0
        assert "null" in result.output

    def test_unknown_method(self):
        result = runner.invoke(rpc_script.app, ["call", "transferFunds"])

        assert result.exit_code == 1
        assert "Method not found." in result.output

    def test_invalid_params_json(self):
        result = runner.invoke(rpc_script.app, ["call", "setPersistentStorage", "--params", "{nope"])
        assert result.exit_code == 1

    def test_transaction_insights(self):
        runner.invoke(rpc_script.app, [
            "call", "setPersistentStorage", "--params", json.dumps({ACCOUNT_A: {"limit": 2}}),
        ])
        tx = json.dumps({"from": ACCOUNT_A, "value": "0xde0b6b3a7640000"})

        result = runner.invoke(rpc_script.app, ["transaction", tx])

        assert result.exit_code == 0
        assert "Spending limit" in result.output


class TestCronjobScript:
    """Test scripts/cronjob.py."""

    def test_run_with_no_state(self):
        result = runner.invoke(cronjob_script.app, ["run", "walletSummary"])

        assert result.exit_code == 0
        assert "walletSummary finished" in result.output

    def test_run_opens_windows(self):
        runner.invoke(rpc_script.app, [
            "call", "setPersistentStorage", "--params", json.dumps({ACCOUNT_A: {"limit": 2}}),
        ])

        result = runner.invoke(cronjob_script.app, ["run", "updateAmount"])
        assert result.exit_code == 0

        result = runner.invoke(rpc_script.app, ["call", "getPersistentStorage"])
        stored = json.loads(result.output)
        assert stored[ACCOUNT_A]["period_start"] is not None

    def test_unknown_job(self):
        result = runner.invoke(cronjob_script.app, ["run", "dailyDigest"])

        assert result.exit_code == 1
        assert "dailyDigest" in result.output

    def test_show_config(self):
        result = runner.invoke(cronjob_script.app, ["config"])

        assert result.exit_code == 0
        assert "updateAmount" in result.output
