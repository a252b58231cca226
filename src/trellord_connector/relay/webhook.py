"""Discord webhook channel implementations."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class DiscordWebhook:
    """Posts payloads to Discord webhooks.

    Each call is a single attempt. A failed message stays queued and the
    dispatcher tries again on its next tick.
    """

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        """Initialize the channel.

        Args:
            timeout: HTTP request timeout in seconds.
        """
        self.timeout = timeout
        self.name = "discord"

    async def send(self, webhook_url: str, payload: dict[str, Any]) -> bool:
        """Post a payload to a webhook.

        Args:
            webhook_url: Destination webhook URL.
            payload: JSON body.

        Returns:
            True on a 2xx response, False otherwise.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(webhook_url, json=payload)
        except httpx.TimeoutException:
            logger.warning("Discord webhook timeout")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Discord webhook error: {e}")
            return False

        if 200 <= response.status_code < 300:
            return True

        if response.status_code == 429:
            logger.warning("Discord rate limited the webhook, message stays queued")
        else:
            logger.error(f"Discord webhook failed: {response.status_code} {response.text}")
        return False


class DryRunWebhook:
    """Logs payloads instead of posting them. Every send succeeds."""

    def __init__(self) -> None:
        self.name = "dry-run"

    async def send(self, webhook_url: str, payload: dict[str, Any]) -> bool:
        """Log the payload and report success."""
        logger.info(f"[dry-run] would post to webhook: {json.dumps(payload, ensure_ascii=False)}")
        return True
