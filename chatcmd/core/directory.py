"""Directory lookup contract and its hikari implementation."""

from __future__ import annotations

import enum
import logging
from typing import Any, Protocol

import hikari

from .errors import DirectoryLookupError

logger = logging.getLogger(__name__)


class ResourceKind(str, enum.Enum):
    CATEGORY = "category"
    TEXT_CHANNEL = "textchannel"
    VOICE_CHANNEL = "voicechannel"
    EMOJI = "emoji"
    ROLE = "role"
    USER = "user"


CHANNEL_KINDS = frozenset({ResourceKind.CATEGORY, ResourceKind.TEXT_CHANNEL, ResourceKind.VOICE_CHANNEL})

_CHANNEL_TYPE_KINDS = {
    hikari.ChannelType.GUILD_CATEGORY: ResourceKind.CATEGORY,
    hikari.ChannelType.GUILD_TEXT: ResourceKind.TEXT_CHANNEL,
    hikari.ChannelType.GUILD_NEWS: ResourceKind.TEXT_CHANNEL,
    hikari.ChannelType.GUILD_VOICE: ResourceKind.VOICE_CHANNEL,
}


class DirectoryLookup(Protocol):
    """Resolves opaque identifiers to typed handles.

    Implementations raise :class:`DirectoryLookupError` when the backing
    service fails; "not found" during classification is ``None``.
    """

    async def classify(self, identifier: int, guild_id: int | None = None) -> ResourceKind | None: ...

    async def fetch_member(self, identifier: int, guild_id: int) -> Any: ...

    async def fetch_user(self, identifier: int) -> Any: ...

    async def get_channel(self, identifier: int, guild_id: int) -> Any: ...

    async def get_role(self, identifier: int, guild_id: int) -> Any: ...


class HikariDirectory:
    """Directory lookup backed by the hikari cache, falling back to REST."""

    def __init__(self, app: hikari.GatewayBot) -> None:
        self.app = app

    @property
    def cache(self) -> hikari.api.Cache:
        return self.app.cache

    @property
    def rest(self) -> hikari.api.RESTClient:
        return self.app.rest

    async def classify(self, identifier: int, guild_id: int | None = None) -> ResourceKind | None:
        channel = self.cache.get_guild_channel(identifier)
        if channel is not None:
            if guild_id is not None and channel.guild_id != guild_id:
                return None
            return _CHANNEL_TYPE_KINDS.get(channel.type)

        if self.cache.get_emoji(identifier) is not None:
            return ResourceKind.EMOJI

        if guild_id is not None:
            role = self.cache.get_role(identifier)
            if role is not None and role.guild_id == guild_id:
                return ResourceKind.ROLE

        try:
            await self.rest.fetch_user(identifier)
        except hikari.NotFoundError:
            logger.debug(f"Identifier {identifier} did not match any known resource")
            return None
        except hikari.HikariError as e:
            raise DirectoryLookupError(identifier, str(e)) from e
        return ResourceKind.USER

    async def fetch_member(self, identifier: int, guild_id: int) -> hikari.Member:
        member = self.cache.get_member(guild_id, identifier)
        if member is not None:
            return member
        try:
            return await self.rest.fetch_member(guild_id, identifier)
        except hikari.HikariError as e:
            raise DirectoryLookupError(identifier, str(e)) from e

    async def fetch_user(self, identifier: int) -> hikari.User:
        user = self.cache.get_user(identifier)
        if user is not None:
            return user
        try:
            return await self.rest.fetch_user(identifier)
        except hikari.HikariError as e:
            raise DirectoryLookupError(identifier, str(e)) from e

    async def get_channel(self, identifier: int, guild_id: int) -> hikari.GuildChannel:
        channel = self.cache.get_guild_channel(identifier)
        if channel is not None:
            return channel
        try:
            return await self.rest.fetch_channel(identifier)
        except hikari.HikariError as e:
            raise DirectoryLookupError(identifier, str(e)) from e

    async def get_role(self, identifier: int, guild_id: int) -> hikari.Role:
        role = self.cache.get_role(identifier)
        if role is not None:
            return role
        try:
            roles = await self.rest.fetch_roles(guild_id)
        except hikari.HikariError as e:
            raise DirectoryLookupError(identifier, str(e)) from e

        for role in roles:
            if role.id == identifier:
                return role
        raise DirectoryLookupError(identifier, f"role not found in guild {guild_id}")
