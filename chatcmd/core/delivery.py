"""Message delivery contract and its hikari implementation."""

import logging
from typing import Protocol

import hikari

logger = logging.getLogger(__name__)


class MessageDelivery(Protocol):
    async def send(self, channel_id: int, content: str) -> None: ...


class HikariMessageDelivery:
    """Sends plain messages through the hikari REST client.

    Delivery is fire-and-forget: failures are logged and never reach the
    caller.
    """

    def __init__(self, rest: hikari.api.RESTClient) -> None:
        self.rest = rest

    async def send(self, channel_id: int, content: str) -> None:
        try:
            await self.rest.create_message(channel_id, content=content)
        except hikari.HikariError as e:
            logger.error(f"Failed to deliver message to channel {channel_id}: {e}")
