"""Tests for message delivery."""

from unittest.mock import AsyncMock, MagicMock

import hikari
import pytest

from chatcmd.core.delivery import HikariMessageDelivery


class TestHikariMessageDelivery:
    """Test HikariMessageDelivery."""

    @pytest.mark.asyncio
    async def test_send(self):
        """Test messages are created in the channel."""
        rest = MagicMock()
        rest.create_message = AsyncMock()

        await HikariMessageDelivery(rest).send(123, "hello")

        rest.create_message.assert_awaited_once_with(123, content="hello")

    @pytest.mark.asyncio
    async def test_failures_are_swallowed(self):
        """Test delivery errors do not reach the caller."""
        rest = MagicMock()
        rest.create_message = AsyncMock(
            side_effect=hikari.ForbiddenError("https://discord.com/api", {}, b"")
        )

        await HikariMessageDelivery(rest).send(123, "hello")

        rest.create_message.assert_awaited_once()
