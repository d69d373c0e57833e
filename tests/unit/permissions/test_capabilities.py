"""Tests for the hikari capability checker."""

from unittest.mock import AsyncMock, MagicMock

import hikari
import pytest

from chatcmd.permissions import HikariCapabilityChecker

GUILD_ID = 123456789012345678


def _guild(role_permissions):
    role = MagicMock(spec=hikari.Role)
    role.permissions = role_permissions
    guild = MagicMock(spec=hikari.Guild)
    guild.id = GUILD_ID
    guild.owner_id = 1
    guild.get_role = MagicMock(side_effect=lambda role_id: role if role_id == GUILD_ID else None)
    return guild


class TestHikariCapabilityChecker:
    """Test HikariCapabilityChecker."""

    @pytest.mark.asyncio
    async def test_no_guild(self, mock_hikari_bot):
        """Test nobody holds capabilities outside a guild."""
        checker = HikariCapabilityChecker(mock_hikari_bot)

        assert await checker.has_capability(5, None, hikari.Permissions.SEND_MESSAGES) is False
        mock_hikari_bot.cache.get_guild.assert_not_called()

    @pytest.mark.asyncio
    async def test_granted_and_denied(self, mock_hikari_bot, mock_member):
        """Test capabilities from the member's roles."""
        mock_hikari_bot.cache.get_guild.return_value = _guild(hikari.Permissions.SEND_MESSAGES)
        mock_hikari_bot.cache.get_member.return_value = mock_member
        checker = HikariCapabilityChecker(mock_hikari_bot)

        assert await checker.has_capability(mock_member.id, GUILD_ID, hikari.Permissions.SEND_MESSAGES) is True
        assert await checker.has_capability(mock_member.id, GUILD_ID, hikari.Permissions.BAN_MEMBERS) is False

    @pytest.mark.asyncio
    async def test_rest_fallback(self, mock_hikari_bot, mock_member):
        """Test uncached guilds and members are fetched."""
        mock_hikari_bot.rest.fetch_guild = AsyncMock(return_value=_guild(hikari.Permissions.KICK_MEMBERS))
        mock_hikari_bot.rest.fetch_member = AsyncMock(return_value=mock_member)
        checker = HikariCapabilityChecker(mock_hikari_bot)

        assert await checker.has_capability(mock_member.id, GUILD_ID, hikari.Permissions.KICK_MEMBERS) is True
        mock_hikari_bot.rest.fetch_member.assert_awaited_once_with(GUILD_ID, mock_member.id)

    @pytest.mark.asyncio
    async def test_lookup_failure(self, mock_hikari_bot):
        """Test REST failures deny the capability."""
        mock_hikari_bot.rest.fetch_guild = AsyncMock(side_effect=hikari.ForbiddenError("", {}, b""))
        checker = HikariCapabilityChecker(mock_hikari_bot)

        assert await checker.has_capability(5, GUILD_ID, hikari.Permissions.SEND_MESSAGES) is False
