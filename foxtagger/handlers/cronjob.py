"""
Scheduled job handlers.

Each job reads the whole ledger, walks the tracked accounts in ledger
order, and either notifies or writes the ledger back once.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from foxtagger.core.config import Config
from foxtagger.core.utils import utc_now
from foxtagger.limits.engine import check_limits, get_summary, mark_checked, update_amount
from foxtagger.limits.ledger import Ledger
from foxtagger.limits.messages import format_summary
from foxtagger.limits.spend import ExplorerSpendSource, SpendSource
from foxtagger.limits.store import LedgerStore, SqlLedgerStore
from foxtagger.notify.telegram import NotificationSink, TelegramNotifier

logger = logging.getLogger(__name__)

JOB_NAMES = ("walletSummary", "checkLimits", "updateAmount")


class UnsupportedJobError(ValueError):
    """Raised for a cron job name this service doesn't know."""

    def __init__(self, method: str):
        super().__init__(f"Method not found: {method}")
        self.method = method


class CronjobDispatcher:
    """
    Runs the walletSummary, checkLimits and updateAmount jobs.

    The store, sink, spend source and clock are injected so a job can be
    run against any backend, including in-memory ones in tests.
    """

    def __init__(
        self,
        store: LedgerStore,
        notifier: NotificationSink,
        spend_source: SpendSource,
        clock: Callable[[], datetime] = utc_now,
        repeat_alerts: bool = False,
        symbol: str = "ETH",
    ):
        self.store = store
        self.notifier = notifier
        self.spend_source = spend_source
        self.clock = clock
        self.repeat_alerts = repeat_alerts
        self.symbol = symbol

    @classmethod
    def from_config(cls, config: Config) -> "CronjobDispatcher":
        """Wire the SQLite store, Telegram sink and explorer spend source."""
        return cls(
            store=SqlLedgerStore(config),
            notifier=TelegramNotifier(config),
            spend_source=ExplorerSpendSource.from_config(config),
            repeat_alerts=config.repeat_alerts,
            symbol=config.native_symbol,
        )

    def handle(self, method: str) -> None:
        """
        Run one job by name.

        Raises:
            UnsupportedJobError: If the job name is unknown
        """
        handlers = {
            "walletSummary": self.wallet_summary,
            "checkLimits": self.check_limits,
            "updateAmount": self.update_amount,
        }
        handler = handlers.get(method)
        if handler is None:
            raise UnsupportedJobError(method)

        handler()

    def _load(self, job: str) -> Optional[Ledger]:
        ledger = self.store.read()
        if ledger is None:
            logger.info(f"{job}: no stored state, nothing to do")
            return None
        if len(ledger) == 0:
            logger.info(f"{job}: no tracked accounts, nothing to do")
            return None
        return ledger

    def _notify(self, message: str) -> bool:
        sent = self.notifier.send_message(message)
        if not sent:
            logger.warning("Notification was not delivered")
        return sent

    def wallet_summary(self) -> None:
        """Send one digest listing every account over its limit."""
        ledger = self._load("walletSummary")
        if ledger is None:
            return

        exceeded = [address for address in ledger.addresses() if get_summary(address, ledger)]

        self._notify(format_summary(exceeded))
        logger.info(f"walletSummary: {len(exceeded)}/{len(ledger)} account(s) over limit")

    def check_limits(self) -> None:
        """
        Send one alert per account that needs one, then save the exceeded flags.

        An account whose alert wasn't delivered keeps its old flag.
        """
        ledger = self._load("checkLimits")
        if ledger is None:
            return

        alerts = 0
        changed = False
        for address in ledger.addresses():
            message = check_limits(address, ledger, repeat=self.repeat_alerts, symbol=self.symbol)
            if message is not None:
                if not self._notify(message):
                    # Leave the flag unset so the next run alerts again
                    continue
                alerts += 1

            updated = mark_checked(address, ledger)
            if updated is not None:
                ledger = updated
                changed = True

        if changed:
            self.store.write(ledger)

        logger.info(f"checkLimits: {alerts} alert(s) for {len(ledger)} account(s)")

    def update_amount(self) -> None:
        """Update every account's spend in order and save the result once."""
        ledger = self._load("updateAmount")
        if ledger is None:
            return

        now = self.clock()
        updates = 0
        for address in ledger.addresses():
            updated = update_amount(address, ledger, self.spend_source, now)
            if updated is not None:
                ledger = updated
                updates += 1

        if updates:
            self.store.write(ledger)

        logger.info(f"updateAmount: {updates}/{len(ledger)} account(s) changed")
