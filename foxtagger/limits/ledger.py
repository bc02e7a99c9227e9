"""
Ledger data model.

The ledger maps account addresses to spending records. It is parsed
from, and serialized back to, one JSON-compatible blob. Keys that are
not account addresses are foreign data: they are carried through
untouched but never reach the limit engine.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any, Dict, Iterator, List, Optional

from foxtagger.core.utils import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

ADDRESS_PATTERN = re.compile(r"0x[0-9a-f]+", re.IGNORECASE)

PERIODS = {
    "daily": timedelta(days=1),
    "weekly": timedelta(weeks=1),
    "monthly": timedelta(days=30),
}
DEFAULT_PERIOD = "daily"

_RECORD_FIELDS = (
    "limit",
    "period",
    "period_start",
    "period_end",
    "current_amount",
    "exceeded",
    "last_synced",
)


def is_account_address(key: Any) -> bool:
    """Check whether a storage key is an account address (0x + hex)."""
    return isinstance(key, str) and ADDRESS_PATTERN.fullmatch(key) is not None


def _parse_float(data: Dict[str, Any], name: str, default: Optional[float] = None) -> float:
    value = data.get(name, default)
    if value is None or isinstance(value, bool):
        raise ValueError(f"'{name}' must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{name}' must be a number, got {value!r}") from None


def _parse_flag(data: Dict[str, Any], name: str) -> bool:
    value = data.get(name)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"'{name}' must be true or false, got {value!r}")
    return value


@dataclass(frozen=True)
class AccountRecord:
    """
    Spending state for one account.

    A record written by the frontend usually only carries ``limit`` and
    ``period``; the window opens on the first update pass.
    """

    limit: float
    period: str = DEFAULT_PERIOD
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    current_amount: float = 0.0
    exceeded: bool = False
    last_synced: Optional[datetime] = None

    # Fields we don't know about (labels, UI state), written back as-is
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def period_length(self) -> timedelta:
        return PERIODS[self.period]

    @property
    def is_over_limit(self) -> bool:
        return self.current_amount > self.limit

    @property
    def remaining(self) -> float:
        return max(0.0, self.limit - self.current_amount)

    def open_window(self, start: datetime) -> "AccountRecord":
        """Start a fresh tracking window at ``start``."""
        return replace(
            self,
            period_start=start,
            period_end=start + self.period_length,
            current_amount=0.0,
            exceeded=False,
            last_synced=start,
        )

    @classmethod
    def from_dict(cls, data: Any) -> "AccountRecord":
        """
        Parse a stored record.

        Raises:
            ValueError: If the record is not a mapping or its fields are invalid
        """
        if not isinstance(data, dict):
            raise ValueError(f"Account record must be an object, got {type(data).__name__}")

        limit = _parse_float(data, "limit")
        if limit <= 0:
            raise ValueError(f"'limit' must be positive, got {limit}")

        period = str(data.get("period") or DEFAULT_PERIOD).lower()
        if period not in PERIODS:
            raise ValueError(f"Unknown period: {period}")

        current_amount = _parse_float(data, "current_amount", 0.0)
        if current_amount < 0:
            raise ValueError(f"'current_amount' must not be negative, got {current_amount}")

        # Window length always follows the current period
        period_start = parse_timestamp(data.get("period_start"))
        period_end = None
        if period_start is not None:
            period_end = period_start + PERIODS[period]
            stored_end = parse_timestamp(data.get("period_end"))
            if stored_end is not None and stored_end != period_end:
                logger.info(
                    f"Stored window end {stored_end.isoformat()} doesn't fit a {period} "
                    f"period, using {period_end.isoformat()}"
                )

        return cls(
            limit=limit,
            period=period,
            period_start=period_start,
            period_end=period_end,
            current_amount=current_amount,
            exceeded=_parse_flag(data, "exceeded"),
            last_synced=parse_timestamp(data.get("last_synced")),
            extra={k: v for k, v in data.items() if k not in _RECORD_FIELDS},
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            "limit": self.limit,
            "period": self.period,
            "period_start": format_timestamp(self.period_start),
            "period_end": format_timestamp(self.period_end),
            "current_amount": self.current_amount,
            "exceeded": self.exceeded,
            "last_synced": format_timestamp(self.last_synced),
        })
        return data


class Ledger:
    """
    Ordered mapping of account address to AccountRecord.

    Treat instances as values: ``with_record`` returns a new ledger and
    leaves the original untouched.
    """

    def __init__(
        self,
        accounts: Optional[Dict[str, AccountRecord]] = None,
        foreign: Optional[Dict[str, Any]] = None,
    ):
        self._accounts: Dict[str, AccountRecord] = dict(accounts or {})
        self._foreign: Dict[str, Any] = dict(foreign or {})

    @classmethod
    def from_blob(cls, blob: Dict[str, Any], strict: bool = False) -> "Ledger":
        """
        Build a ledger from a stored blob.

        Address keys are lower-cased. Non-address keys are kept as
        foreign data. A record that fails to parse is kept as foreign
        data too, unless ``strict`` is set.

        Raises:
            ValueError: If ``strict`` and a record under an address key is invalid
        """
        accounts: Dict[str, AccountRecord] = {}
        foreign: Dict[str, Any] = {}

        for key, value in blob.items():
            if not is_account_address(key):
                logger.debug(f"Ignoring non-address storage key: {key!r}")
                foreign[key] = value
                continue

            try:
                record = AccountRecord.from_dict(value)
            except ValueError as e:
                if strict:
                    raise ValueError(f"Invalid record for {key}: {e}") from None
                logger.warning(f"Skipping malformed record for {key}: {e}")
                foreign[key] = value
                continue

            address = key.lower()
            if address in accounts:
                logger.warning(f"Duplicate address {address} in storage, keeping the later entry")
            accounts[address] = record

        return cls(accounts, foreign)

    def to_blob(self) -> Dict[str, Any]:
        blob: Dict[str, Any] = {
            address: record.to_dict() for address, record in self._accounts.items()
        }
        for key, value in self._foreign.items():
            blob.setdefault(key, value)
        return blob

    def addresses(self) -> List[str]:
        """Tracked account addresses in ledger order."""
        return list(self._accounts)

    def get(self, address: str) -> Optional[AccountRecord]:
        return self._accounts.get(address.lower())

    def with_record(self, address: str, record: AccountRecord) -> "Ledger":
        accounts = dict(self._accounts)
        accounts[address.lower()] = record
        return Ledger(accounts, self._foreign)

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and address.lower() in self._accounts

    def __iter__(self) -> Iterator[str]:
        return iter(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ledger):
            return NotImplemented
        return self.to_blob() == other.to_blob()

    def __repr__(self) -> str:
        return f"<Ledger {len(self._accounts)} account(s), {len(self._foreign)} foreign key(s)>"
