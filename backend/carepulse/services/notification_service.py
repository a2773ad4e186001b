"""
SMS notifications through Appwrite Messaging.
Delivery is best-effort: failures are logged and reported as ``None``.
"""
import logging
from typing import Optional

import httpx

from ..core.exceptions import AppwriteError
from .appwrite_client import UNIQUE_ID, AppwriteClient

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, client: AppwriteClient):
        self.client = client

    async def send_sms(self, user_id: str, content: str) -> Optional[dict]:
        """Text ``content`` to a single user. Returns the message record, or None on failure."""
        try:
            message = await self.client.create_sms(UNIQUE_ID, content, topics=[], users=[user_id])
        except (AppwriteError, httpx.HTTPError) as exc:
            logger.warning("SMS to user %s could not be sent: %s", user_id, exc)
            return None
        logger.info("SMS %s queued for user %s", message.get("$id"), user_id)
        return message
