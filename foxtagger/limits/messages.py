"""
Notification texts.

Messages use the small HTML subset the notification sink renders
(<b>, <i>). Addresses are always shown compacted.
"""

from typing import List

from foxtagger.core.utils import compact, format_amount
from foxtagger.limits.ledger import AccountRecord

SUMMARY_HEADER = "<b>🦊 FoxTagger Spending Summary</b>\n\n"
SUMMARY_EXCEEDED = "Accounts over their spending limit: "
SUMMARY_EXCEEDED_FOOTER = "\n\nReview recent transactions on these accounts before spending more."
SUMMARY_SAFE_FOOTER = "All tracked accounts are within their spending limits."
SUMMARY_FOOTER = "\n\n<i>Limits and periods can be changed from the FoxTagger site.</i>"

DEBUG_MESSAGE = "<b>FoxTagger</b>\nHello, world!"


def format_limit_alert(address: str, record: AccountRecord, symbol: str = "ETH") -> str:
    """
    Format the alert for an account over its limit.
    """
    spent = format_amount(record.current_amount, symbol)
    limit = format_amount(record.limit, symbol)
    over = format_amount(record.current_amount - record.limit, symbol)

    return (
        f"<b>⚠️ Spending limit exceeded</b>\n\n"
        f"<b>Account:</b> {compact(address)}\n"
        f"<b>Spent:</b> {spent} of {limit} ({record.period})\n"
        f"<b>Over by:</b> {over}"
    )


def format_summary(exceeded_accounts: List[str]) -> str:
    """
    Format the digest for a walletSummary run.

    Args:
        exceeded_accounts: Addresses over their limit, in ledger order
    """
    message = SUMMARY_HEADER
    if exceeded_accounts:
        listed = ", ".join(compact(address) for address in exceeded_accounts)
        message += SUMMARY_EXCEEDED + listed + SUMMARY_EXCEEDED_FOOTER
    else:
        message += SUMMARY_SAFE_FOOTER
    message += SUMMARY_FOOTER
    return message
