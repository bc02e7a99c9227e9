"""
Transaction insights.

Shows how an outgoing transaction sits against the sender's spending
limit before the user confirms it. Advisory only: this never changes
the ledger, and a failure here must never block the transaction.
"""

import logging
from typing import Any, Dict

from foxtagger.core.utils import compact, format_amount, parse_quantity, wei_to_ether
from foxtagger.limits.store import LedgerStore

logger = logging.getLogger(__name__)

UNAVAILABLE_INSIGHTS = {"Status": "Spending insights unavailable"}


def _max_fee(transaction: Dict[str, Any]) -> float:
    """Upper bound on the network fee: gas limit times the max fee per gas."""
    gas = parse_quantity(transaction.get("gas") or transaction.get("gasLimit"))
    fee_per_gas = parse_quantity(transaction.get("maxFeePerGas") or transaction.get("gasPrice"))
    return wei_to_ether(gas * fee_per_gas)


def get_details(
    transaction: Dict[str, Any],
    store: LedgerStore,
    symbol: str = "ETH",
) -> Dict[str, str]:
    """
    Build display insights for an outgoing transaction.

    Args:
        transaction: Wallet transaction descriptor (from, to, value, gas...)
        store: Ledger storage, read only
        symbol: Native currency symbol for display

    Returns:
        Ordered dict of label to display text

    Raises:
        ValueError: If the descriptor has no sender or bad quantities
    """
    sender = transaction.get("from")
    if not sender:
        raise ValueError("Transaction has no sender")
    sender = str(sender).lower()

    value = wei_to_ether(transaction.get("value"))
    insights = {
        "Account": compact(sender),
        "Transaction value": format_amount(value, symbol),
        "Max network fee": format_amount(_max_fee(transaction), symbol),
    }

    ledger = store.read()
    record = ledger.get(sender) if ledger is not None else None
    if record is None:
        insights["Status"] = "No spending limit configured for this account"
        return insights

    projected = record.current_amount + value
    insights["Spending limit"] = f"{format_amount(record.limit, symbol)} ({record.period})"
    insights["Spent this period"] = format_amount(record.current_amount, symbol)
    insights["After this transaction"] = format_amount(projected, symbol)

    if record.is_over_limit:
        insights["Status"] = "⛔ Limit already exceeded this period"
    elif projected > record.limit:
        insights["Status"] = f"⚠️ Would exceed limit by {format_amount(projected - record.limit, symbol)}"
    else:
        insights["Status"] = f"✅ Within limit ({format_amount(record.limit - projected, symbol)} left)"

    return insights


def on_transaction(
    transaction: Dict[str, Any],
    store: LedgerStore,
    symbol: str = "ETH",
) -> Dict[str, Dict[str, str]]:
    """
    Transaction hook entry point.

    Returns ``{"insights": ...}``. Errors are logged and replaced by an
    "unavailable" insight instead of being raised.
    """
    try:
        insights = get_details(transaction, store, symbol)
    except Exception as e:
        logger.error(f"Failed to build transaction insights: {e}", exc_info=True)
        insights = dict(UNAVAILABLE_INSIGHTS)

    return {"insights": insights}
