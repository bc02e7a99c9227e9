"""
Spending limit engine.

Pure functions over one account of a ledger. Each returns either a new
ledger with that account's record changed, or None when there is
nothing to persist. Callers thread the returned ledger into the next
call.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from foxtagger.limits.ledger import AccountRecord, Ledger
from foxtagger.limits.messages import format_limit_alert
from foxtagger.limits.spend import SpendSource

logger = logging.getLogger(__name__)


def _roll_over(record: AccountRecord, now: datetime) -> AccountRecord:
    """
    Advance the window by whole periods until it contains ``now``.

    Windows stay aligned to the original start, so a missed pass doesn't
    shift every later boundary.
    """
    length = record.period_length
    elapsed = now - record.period_start
    start = record.period_start + length * (elapsed // length)

    return replace(
        record,
        period_start=start,
        period_end=start + length,
        current_amount=0.0,
        exceeded=False,
        last_synced=start,
    )


def update_amount(
    address: str,
    ledger: Ledger,
    spend_source: SpendSource,
    now: datetime,
) -> Optional[Ledger]:
    """
    Bring one account's spend up to date.

    - No window yet: opens one at ``now``.
    - Window over: rolls it forward and resets the amount. Spend in the
      new window is picked up on the next pass.
    - Otherwise: adds spend seen since the last sync.

    Calling it again at the same ``now`` returns None, so a repeated
    pass never double-counts.

    Returns:
        Updated ledger, or None if the record didn't change
    """
    record = ledger.get(address)
    if record is None:
        return None

    if record.period_start is None or record.period_end is None:
        logger.info(f"Opening {record.period} window for {address} at {now.isoformat()}")
        return ledger.with_record(address, record.open_window(now))

    if now >= record.period_start + record.period_length:
        rolled = _roll_over(record, now)
        logger.info(
            f"Rolled over {record.period} window for {address}: "
            f"{record.current_amount} reset, new window ends {rolled.period_end.isoformat()}"
        )
        return ledger.with_record(address, rolled)

    since = record.last_synced or record.period_start
    if now <= since:
        return None

    spent = spend_source.outgoing_spend(address, since, now)
    if spent <= 0:
        return None

    updated = replace(
        record,
        current_amount=record.current_amount + spent,
        last_synced=now,
    )
    logger.info(f"{address}: +{spent} spent, {updated.current_amount}/{record.limit} this {record.period} window")
    return ledger.with_record(address, updated)


def check_limits(
    address: str,
    ledger: Ledger,
    repeat: bool = False,
    symbol: str = "ETH",
) -> Optional[str]:
    """
    Get the alert message for an account over its limit.

    Alerts are edge-triggered: once a check has flagged the account as
    exceeded (see ``mark_checked``), further checks stay quiet until the
    window rolls over. Pass ``repeat=True`` to alert on every check
    instead.

    Returns:
        Alert text, or None if no alert is due
    """
    record = ledger.get(address)
    if record is None or not record.is_over_limit:
        return None

    if record.exceeded and not repeat:
        return None

    return format_limit_alert(address, record, symbol)


def mark_checked(address: str, ledger: Ledger) -> Optional[Ledger]:
    """
    Record the outcome of a limit check on the account.

    Returns:
        Updated ledger, or None if the exceeded flag is already current
    """
    record = ledger.get(address)
    if record is None:
        return None

    exceeded = record.is_over_limit
    if record.exceeded == exceeded:
        return None

    return ledger.with_record(address, replace(record, exceeded=exceeded))


def get_summary(address: str, ledger: Ledger) -> bool:
    """Check whether an account is currently over its limit."""
    record = ledger.get(address)
    if record is None:
        return False
    return record.is_over_limit
