"""
JSON-RPC style handlers for the frontend.

Storage get/set/clear plus a debug notification. Pass-through to the
ledger store; no limit logic lives here.
"""

import logging
from typing import Any, Optional

from foxtagger.core.config import Config
from foxtagger.limits.ledger import Ledger
from foxtagger.limits.messages import DEBUG_MESSAGE
from foxtagger.limits.store import LedgerStore, SqlLedgerStore
from foxtagger.notify.telegram import NotificationSink, TelegramNotifier

logger = logging.getLogger(__name__)

RPC_METHODS = (
    "notify",
    "getPersistentStorage",
    "setPersistentStorage",
    "clearPersistentStorage",
)


class MethodNotFoundError(ValueError):
    """Raised for an RPC method this service doesn't expose."""

    def __init__(self, method: str):
        super().__init__("Method not found.")
        self.method = method


class InvalidParamsError(ValueError):
    """Raised when RPC params can't be used for the method."""


class RpcDispatcher:
    """Routes frontend RPC calls to storage and the notification sink."""

    def __init__(self, store: LedgerStore, notifier: NotificationSink):
        self.store = store
        self.notifier = notifier

    @classmethod
    def from_config(cls, config: Config) -> "RpcDispatcher":
        return cls(store=SqlLedgerStore(config), notifier=TelegramNotifier(config))

    def handle(self, method: str, params: Any = None) -> Any:
        """
        Handle one RPC request.

        Raises:
            MethodNotFoundError: If the method is unknown
            InvalidParamsError: If setPersistentStorage gets a bad payload
        """
        if method == "notify":
            return self.notifier.send_message(DEBUG_MESSAGE)

        if method == "getPersistentStorage":
            return self.store.read_blob()

        if method == "setPersistentStorage":
            self.set_persistent_storage(params)
            return None

        if method == "clearPersistentStorage":
            self.store.clear()
            return None

        logger.warning(f"Unknown RPC method: {method}")
        raise MethodNotFoundError(method)

    def set_persistent_storage(self, params: Optional[Any]) -> None:
        """
        Replace the stored ledger with ``params``.

        None stores an empty ledger. Every record under an address key
        must be valid; other keys are stored untouched.
        """
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise InvalidParamsError(
                f"setPersistentStorage expects an object, got {type(params).__name__}"
            )

        try:
            ledger = Ledger.from_blob(params, strict=True)
        except ValueError as e:
            raise InvalidParamsError(str(e)) from None

        self.store.write(ledger)
        logger.info(f"Stored ledger with {len(ledger)} tracked account(s)")
