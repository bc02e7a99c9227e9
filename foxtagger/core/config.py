"""
Configuration management for FoxTagger.

Loads settings from environment variables.
"""

import os
from dataclasses import dataclass
from typing import Optional

ALERT_POLICIES = ("edge", "repeat")


@dataclass
class Config:
    """Application configuration."""

    # Database
    database_path: str = "data/foxtagger.db"

    # Telegram
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None

    # Block explorer (Etherscan-compatible)
    explorer_api_url: str = "https://api.etherscan.io/v2/api"
    explorer_api_key: Optional[str] = None
    chain_id: int = 1
    native_symbol: str = "ETH"

    # "edge" alerts once per crossing, "repeat" alerts on every check
    alert_policy: str = "edge"

    # Timezone for the scheduler
    timezone: str = "UTC"

    # Cron schedules (crontab syntax)
    wallet_summary_cron: str = "0 9 * * *"
    check_limits_cron: str = "0 * * * *"
    update_amount_cron: str = "*/15 * * * *"

    def __post_init__(self):
        if self.alert_policy not in ALERT_POLICIES:
            raise ValueError(
                f"Invalid alert policy: {self.alert_policy} "
                f"(expected one of {', '.join(ALERT_POLICIES)})"
            )

    @property
    def repeat_alerts(self) -> bool:
        return self.alert_policy == "repeat"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            database_path=os.getenv("FOXTAGGER_DB_PATH", "data/foxtagger.db"),
            telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN"),
            telegram_chat_id=os.getenv("TELEGRAM_CHAT_ID"),

            explorer_api_url=os.getenv("EXPLORER_API_URL", "https://api.etherscan.io/v2/api"),
            explorer_api_key=os.getenv("EXPLORER_API_KEY"),
            chain_id=int(os.getenv("CHAIN_ID", "1")),
            native_symbol=os.getenv("NATIVE_SYMBOL", "ETH"),

            alert_policy=os.getenv("ALERT_POLICY", "edge").lower(),

            timezone=os.getenv("TIMEZONE", "UTC"),

            wallet_summary_cron=os.getenv("WALLET_SUMMARY_CRON", "0 9 * * *"),
            check_limits_cron=os.getenv("CHECK_LIMITS_CRON", "0 * * * *"),
            update_amount_cron=os.getenv("UPDATE_AMOUNT_CRON", "*/15 * * * *"),
        )

    def get_summary_text(self) -> str:
        """Get a summary of current settings."""
        telegram = "configured" if self.telegram_bot_token and self.telegram_chat_id else "not configured"
        explorer_key = "set" if self.explorer_api_key else "not set"

        return f"""Database: {self.database_path}
Telegram: {telegram}

Explorer:
  URL: {self.explorer_api_url}
  Chain ID: {self.chain_id}
  API Key: {explorer_key}
  Currency: {self.native_symbol}

Alerts:
  Policy: {self.alert_policy}

Schedule ({self.timezone}):
  walletSummary: {self.wallet_summary_cron}
  checkLimits: {self.check_limits_cron}
  updateAmount: {self.update_amount_cron}
"""
