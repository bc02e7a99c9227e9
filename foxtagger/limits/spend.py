"""
Outgoing spend lookup.

Reads an account's sent transactions from an Etherscan-compatible
block explorer. Read-only: nothing here touches keys or submits
anything.
"""

import logging
from datetime import datetime
from typing import Iterator, List, Optional, Protocol

import requests

from foxtagger.core.config import Config
from foxtagger.core.utils import wei_to_ether

logger = logging.getLogger(__name__)

NO_TRANSACTIONS_MESSAGE = "No transactions found"

# Explorers refuse page * offset beyond this
MAX_RESULTS = 10000
PAGE_SIZE = 1000


class SpendSourceError(RuntimeError):
    """The explorer answered, but with an error."""


class SpendSource(Protocol):
    """Anything that can total an account's outgoing spend over a time range."""

    def outgoing_spend(self, address: str, since: datetime, until: datetime) -> float:
        """Total value sent from ``address`` in ``(since, until]``, in native units."""
        ...


class ExplorerSpendSource:
    """
    Spend source backed by the explorer ``txlist`` endpoint.

    Only successful transactions sent from the account count; incoming
    transfers and reverted transactions are skipped.
    """

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str] = None,
        chain_id: int = 1,
        timeout: float = 10,
        page_size: int = PAGE_SIZE,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.chain_id = chain_id
        self.timeout = timeout
        self.page_size = page_size

    @classmethod
    def from_config(cls, config: Config) -> "ExplorerSpendSource":
        return cls(
            api_url=config.explorer_api_url,
            api_key=config.explorer_api_key,
            chain_id=config.chain_id,
        )

    def _fetch_page(self, address: str, page: int) -> List[dict]:
        params = {
            "chainid": self.chain_id,
            "module": "account",
            "action": "txlist",
            "address": address,
            "page": page,
            "offset": self.page_size,
            "sort": "desc",
        }
        if self.api_key:
            params["apikey"] = self.api_key

        response = requests.get(self.api_url, params=params, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()

        if str(data.get("status")) == "1":
            return data.get("result") or []

        message = data.get("message", "")
        if message.startswith(NO_TRANSACTIONS_MESSAGE):
            return []

        raise SpendSourceError(f"Explorer error for {address}: {message} ({data.get('result')})")

    def _transactions_since(self, address: str, since: datetime) -> Iterator[dict]:
        """
        Yield the account's transactions newer than ``since``, newest first.

        Pages are fetched only until a row at or before ``since`` shows up.
        """
        since_ts = since.timestamp()
        max_pages = max(1, MAX_RESULTS // self.page_size)

        for page in range(1, max_pages + 1):
            rows = self._fetch_page(address, page)
            for tx in rows:
                if int(tx.get("timeStamp", 0)) <= since_ts:
                    return
                yield tx
            if len(rows) < self.page_size:
                return

        logger.warning(
            f"{address}: more than {max_pages * self.page_size} transactions since "
            f"{since.isoformat()}, older ones were not counted"
        )

    def outgoing_spend(self, address: str, since: datetime, until: datetime) -> float:
        address = address.lower()
        until_ts = until.timestamp()

        total = 0.0
        counted = 0
        for tx in self._transactions_since(address, since):
            if str(tx.get("from", "")).lower() != address:
                continue
            if str(tx.get("isError", "0")) == "1":
                continue

            if int(tx.get("timeStamp", 0)) <= until_ts:
                total += wei_to_ether(tx.get("value"))
                counted += 1

        logger.debug(f"{address}: {counted} outgoing transaction(s) totalling {total} since {since.isoformat()}")
        return total
