"""
Telegram notification module.

Delivers spending alerts and digests to a Telegram chat.
"""

import logging
from typing import Protocol

import requests

from foxtagger.core.config import Config

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Anything that can show a short HTML message to the user."""

    def send_message(self, text: str) -> bool:
        ...


class TelegramNotifier:
    """
    Sends messages to a Telegram chat via the Bot API.

    Delivery is best effort: failures are logged and reported as False,
    never raised.
    """

    def __init__(self, config: Config):
        self.config = config
        self.bot_token = config.telegram_bot_token
        self.chat_id = config.telegram_chat_id

    @property
    def is_configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    def send_message(self, text: str) -> bool:
        """
        Send a message to Telegram. Supports HTML formatting.

        Returns True if successful, False otherwise.
        """
        if not self.is_configured:
            logger.warning("Telegram not configured, skipping notification")
            return False

        url = f"https://api.telegram.org/bot{self.bot_token}/sendMessage"

        try:
            response = requests.post(
                url,
                json={
                    "chat_id": self.chat_id,
                    "text": text,
                    "parse_mode": "HTML",
                    "disable_web_page_preview": True,
                },
                timeout=10,
            )
            response.raise_for_status()

            logger.info("Telegram message sent")
            return True

        except requests.RequestException as e:
            logger.error(f"Telegram message failed: {e}")
            return False
