"""Pytest configuration and shared fixtures."""

import logging
from unittest.mock import AsyncMock, MagicMock

import hikari
import pytest

from chatcmd.commands import ArgumentResolver, CommandRegistry
from chatcmd.core.dispatcher import MessageDispatcher
from chatcmd.permissions import AdminRoster, GuardPipeline, MemoryCommandStore

# Disable logging during tests
logging.disable(logging.CRITICAL)

BOT_ID = 424242424242424242
OWNER_ID = 555555555555555555
ADMIN_ID = 666666666666666666


class AsyncContextManager:
    """Helper for mocking async context managers."""

    def __init__(self, return_value=None):
        self.return_value = return_value

    async def __aenter__(self):
        return self.return_value

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass


@pytest.fixture
def async_context_manager():
    """Factory for creating async context managers."""
    return AsyncContextManager


@pytest.fixture
def mock_hikari_bot():
    """Mock Hikari bot instance."""
    bot = MagicMock(spec=hikari.GatewayBot)
    bot.cache = MagicMock()
    bot.rest = MagicMock()
    bot.get_me = MagicMock(return_value=MagicMock(id=BOT_ID, username="TestBot"))

    # Mock cache methods
    bot.cache.get_guild = MagicMock(return_value=None)
    bot.cache.get_member = MagicMock(return_value=None)
    bot.cache.get_guild_channel = MagicMock(return_value=None)
    bot.cache.get_emoji = MagicMock(return_value=None)
    bot.cache.get_role = MagicMock(return_value=None)
    bot.cache.get_user = MagicMock(return_value=None)

    # Mock REST methods
    bot.rest.fetch_user = AsyncMock()
    bot.rest.fetch_member = AsyncMock()
    bot.rest.fetch_guild = AsyncMock()
    bot.rest.fetch_channel = AsyncMock()
    bot.rest.fetch_roles = AsyncMock(return_value=[])
    bot.rest.create_message = AsyncMock()

    return bot


@pytest.fixture
def mock_db_manager():
    """Mock database manager."""
    db = AsyncMock()
    db.health_check = AsyncMock(return_value=True)

    # Mock session context manager
    mock_session = AsyncMock()
    mock_session.add = MagicMock()
    db.session = MagicMock(return_value=AsyncContextManager(mock_session))
    db.mock_session = mock_session

    return db


@pytest.fixture
def mock_guild():
    """Mock Discord guild."""
    guild = MagicMock(spec=hikari.Guild)
    guild.id = 123456789012345678
    guild.name = "Test Guild"
    guild.owner_id = 987654321098765432
    return guild


@pytest.fixture
def mock_user():
    """Mock Discord user."""
    user = MagicMock(spec=hikari.User)
    user.id = 111111111111111111
    user.username = "testuser"
    user.is_bot = False
    user.mention = "<@111111111111111111>"
    return user


@pytest.fixture
def mock_member(mock_user, mock_guild):
    """Mock Discord member."""
    member = MagicMock(spec=hikari.Member)
    member.id = mock_user.id
    member.username = mock_user.username
    member.is_bot = mock_user.is_bot
    member.user = mock_user
    member.guild_id = mock_guild.id
    member.role_ids = [222222222222222222]
    return member


@pytest.fixture
def mock_channel(mock_guild):
    """Mock Discord channel."""
    channel = MagicMock(spec=hikari.GuildTextChannel)
    channel.id = 444444444444444444
    channel.name = "test-channel"
    channel.guild_id = mock_guild.id
    channel.type = hikari.ChannelType.GUILD_TEXT
    channel.permission_overwrites = {}
    return channel


@pytest.fixture
def mock_message_event(mock_user, mock_guild, mock_channel, mock_member):
    """Mock guild message create event."""
    event = MagicMock(spec=hikari.GuildMessageCreateEvent)
    event.author = mock_user
    event.member = mock_member
    event.guild_id = mock_guild.id
    event.channel_id = mock_channel.id
    event.message_id = 999999999999999999
    event.content = "!ping"
    event.message = MagicMock()
    return event


@pytest.fixture
def mock_dm_event(mock_user):
    """Mock direct message create event, without guild or member."""
    event = MagicMock(spec=hikari.DMMessageCreateEvent)
    event.author = mock_user
    event.channel_id = 777777777777777777
    event.message_id = 888888888888888888
    event.content = "!ping"
    event.message = MagicMock()
    return event


@pytest.fixture
def mock_delivery():
    """Mock message delivery."""
    delivery = MagicMock()
    delivery.send = AsyncMock()
    return delivery


@pytest.fixture
def mock_capabilities():
    """Mock capability checker granting everything."""
    capabilities = MagicMock()
    capabilities.has_capability = AsyncMock(return_value=True)
    return capabilities


@pytest.fixture
def mock_lookup():
    """Mock directory lookup."""
    lookup = MagicMock()
    lookup.classify = AsyncMock(return_value=None)
    lookup.fetch_member = AsyncMock()
    lookup.fetch_user = AsyncMock()
    lookup.get_channel = AsyncMock()
    lookup.get_role = AsyncMock()
    return lookup


@pytest.fixture
def admins():
    return AdminRoster.create(owner_id=OWNER_ID, admin_ids=[ADMIN_ID])


@pytest.fixture
def store():
    return MemoryCommandStore()


@pytest.fixture
def registry():
    return CommandRegistry()


@pytest.fixture
def guards(admins, mock_capabilities, mock_delivery, store):
    return GuardPipeline(admins, mock_capabilities, mock_delivery, store=store)


@pytest.fixture
def dispatcher(registry, guards, mock_delivery, mock_capabilities, mock_lookup):
    """Dispatcher with prefix ``!`` and a known bot id."""
    return MessageDispatcher(
        registry,
        guards,
        mock_delivery,
        mock_capabilities,
        resolver=ArgumentResolver(mock_lookup),
        app=MagicMock(),
        prefix="!",
        bot_id=BOT_ID,
    )


@pytest.fixture
def make_context(mock_message_event, mock_delivery, dispatcher):
    """Factory building an InvocationContext for a command."""
    from chatcmd.core.dispatcher import InvocationContext

    def factory(command, args=None, content="", event=None):
        return InvocationContext(
            event or mock_message_event,
            args or [],
            content,
            command,
            mock_delivery,
            app=dispatcher.app,
            dispatcher=dispatcher,
            bot_id=BOT_ID,
            prefix="!",
        )

    return factory
