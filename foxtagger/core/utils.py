"""
Utility functions for FoxTagger.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

WEI_PER_ETHER = Decimal(10) ** 18


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def compact(address: str) -> str:
    """
    Shorten an address for display.

    Examples:
        "0x52908400098527886e0f7030069857d2e4169ee7" -> "0x5290...9ee7"
        "0xabc" -> "0xabc"
    """
    if len(address) <= 12:
        return address
    return f"{address[:6]}...{address[-4:]}"


def parse_quantity(value: Any) -> int:
    """
    Parse a wei quantity as sent by wallets and explorers.

    Accepts hex strings ("0x1bc16d674ec80000"), decimal strings and ints.
    Missing values count as zero.

    Raises:
        ValueError: If the value is not a valid quantity
    """
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValueError(f"Invalid quantity: {value!r}")
    if isinstance(value, int):
        return value

    text = str(value).strip()
    try:
        if text.lower().startswith("0x"):
            return int(text, 16) if len(text) > 2 else 0
        return int(text)
    except ValueError:
        raise ValueError(f"Invalid quantity: {value!r}") from None


def wei_to_ether(wei: Any) -> float:
    """Convert a wei quantity to ether."""
    return float(Decimal(parse_quantity(wei)) / WEI_PER_ETHER)


def format_amount(amount: float, symbol: str = "ETH") -> str:
    """
    Format a native-currency amount.

    Small amounts keep more precision so they don't collapse to zero.

    Examples:
        1.5 -> "1.5000 ETH"
        0.00001234 -> "0.00001234 ETH"
    """
    if amount != 0 and abs(amount) < 0.0001:
        return f"{amount:.8f} {symbol}"
    return f"{amount:,.4f} {symbol}"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO-8601 timestamp; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime as ISO-8601 UTC."""
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat()
