"""
Delivery of notification cards to Microsoft Teams incoming webhooks.
"""

from typing import Any, Dict

import httpx
from loguru import logger

from src.config.users import PLACEHOLDER_WEBHOOK_URL


class TeamsNotifier:
    """Posts cards to Teams webhooks. Failures are logged, never retried or raised."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json"}

    async def send(self, card: Dict[str, Any], webhook_url: str) -> bool:
        """
        Post a card to a Teams webhook.

        Args:
            card: The message card to send
            webhook_url: The recipient's incoming webhook URL

        Returns:
            bool: True if Teams accepted the card
        """
        if not webhook_url or webhook_url == PLACEHOLDER_WEBHOOK_URL:
            logger.error("Teams webhook URL not configured")
            return False

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(webhook_url, json=card, headers=self.headers)
                response.raise_for_status()

            logger.info(f"Successfully sent notification to Teams: {response.status_code}")
            return True

        except httpx.TimeoutException:
            logger.error("Teams delivery timeout")
            return False
        except httpx.HTTPStatusError as e:
            logger.error(f"Failed to send to Teams: {e.response.status_code} {e.response.text}")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Error sending to Teams: {e}")
            return False
