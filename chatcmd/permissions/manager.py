import logging
from typing import Protocol

import hikari

from ..core.utils import calculate_member_permissions

logger = logging.getLogger(__name__)


class CapabilityChecker(Protocol):
    async def has_capability(
        self,
        principal_id: int,
        guild_id: int | None,
        capability: hikari.Permissions,
        channel_id: int | None = None,
    ) -> bool: ...


class HikariCapabilityChecker:
    """Checks guild permissions of users (and of the bot itself) via hikari.

    Outside a guild nobody holds any capability.
    """

    def __init__(self, app: hikari.GatewayBot) -> None:
        self.app = app

    async def has_capability(
        self,
        principal_id: int,
        guild_id: int | None,
        capability: hikari.Permissions,
        channel_id: int | None = None,
    ) -> bool:
        if guild_id is None:
            return False

        try:
            permissions = await self.get_permissions(principal_id, guild_id, channel_id)
        except hikari.HikariError as e:
            logger.warning(f"Could not compute permissions of {principal_id} in guild {guild_id}: {e}")
            return False

        has_capability = (permissions & capability) == capability
        logger.debug(
            f"Capability {capability.name} for {principal_id} in guild {guild_id}: "
            f"{'granted' if has_capability else 'denied'}"
        )
        return has_capability

    async def get_permissions(
        self, principal_id: int, guild_id: int, channel_id: int | None = None
    ) -> hikari.Permissions:
        cache = self.app.cache
        rest = self.app.rest

        guild = cache.get_guild(guild_id) or await rest.fetch_guild(guild_id)
        member = cache.get_member(guild_id, principal_id) or await rest.fetch_member(guild_id, principal_id)
        channel = cache.get_guild_channel(channel_id) if channel_id is not None else None

        return calculate_member_permissions(member, guild, channel)
