import logging

import hikari
from sqlalchemy import select

from config.settings import settings

from ..builtins import BUILTIN_COMMANDS
from ..commands import ArgumentResolver, CommandRegistry
from ..database import db_manager
from ..database.models import Guild
from ..permissions import AdminRoster, DatabaseCommandStore, GuardPipeline, HikariCapabilityChecker
from .delivery import HikariMessageDelivery
from .directory import HikariDirectory
from .dispatcher import MessageDispatcher

logger = logging.getLogger(__name__)


class ChatBot:
    def __init__(self) -> None:
        intents = hikari.Intents.ALL_MESSAGES | hikari.Intents.GUILDS | hikari.Intents.MESSAGE_CONTENT
        self.hikari_bot = hikari.GatewayBot(token=settings.discord_token, intents=intents)

        self.db = db_manager
        self.directory = HikariDirectory(self.hikari_bot)
        self.delivery = HikariMessageDelivery(self.hikari_bot.rest)
        self.capabilities = HikariCapabilityChecker(self.hikari_bot)
        self.admins = AdminRoster.from_settings(settings)
        self.store = DatabaseCommandStore(self.db)

        self.registry = CommandRegistry()
        self.registry.register_all(BUILTIN_COMMANDS)

        self.guards = GuardPipeline(
            self.admins,
            self.capabilities,
            self.delivery,
            store=self.store,
            admin_bypasses_dm=settings.admin_bypasses_dm,
        )
        self.dispatcher = MessageDispatcher(
            self.registry,
            self.guards,
            self.delivery,
            self.capabilities,
            resolver=ArgumentResolver(self.directory),
            app=self,
            prefix=settings.bot_prefix,
            prefix_resolver=self.get_guild_prefix,
            test_mode=settings.test_mode,
            ignore_bots=settings.ignore_bots,
        )

        self._setup_event_listeners()

    def _setup_event_listeners(self) -> None:
        self.hikari_bot.subscribe(hikari.StartedEvent, self.on_started)
        self.hikari_bot.subscribe(hikari.StoppingEvent, self.on_stopping)
        self.hikari_bot.subscribe(hikari.MessageCreateEvent, self.on_message_create)

    @property
    def rest(self) -> hikari.api.RESTClient:
        return self.hikari_bot.rest

    @property
    def cache(self) -> hikari.api.Cache:
        return self.hikari_bot.cache

    async def on_started(self, event: hikari.StartedEvent) -> None:
        logger.info("Bot has started, initializing systems...")
        await self.db.create_tables()

        me = self.hikari_bot.get_me()
        if me is not None:
            self.dispatcher.bot_id = me.id
            logger.info(f"Logged in as {me.username} ({me.id})")

    async def on_stopping(self, event: hikari.StoppingEvent) -> None:
        logger.info("Bot is stopping...")
        await self.db.close()

    async def on_message_create(self, event: hikari.MessageCreateEvent) -> None:
        try:
            await self.dispatcher.handle_message(event)
        except Exception:
            logger.exception(f"Error handling message {event.message_id} from {event.author.id}")

    async def get_guild_prefix(self, guild_id: int) -> str:
        """Get the prefix for a specific guild, falling back to default if not found."""
        try:
            async with self.db.session() as session:
                result = await session.execute(select(Guild).where(Guild.id == guild_id))
                guild = result.scalar_one_or_none()

                if guild and guild.prefix:
                    return guild.prefix

        except Exception as e:
            logger.error(f"Error getting guild prefix for {guild_id}: {e}")

        return settings.bot_prefix

    async def set_guild_prefix(self, guild_id: int, prefix: str) -> None:
        async with self.db.session() as session:
            result = await session.execute(select(Guild).where(Guild.id == guild_id))
            guild = result.scalar_one_or_none()

            if guild is None:
                session.add(Guild(id=guild_id, prefix=prefix))
            else:
                guild.prefix = prefix

    def run(self) -> None:
        try:
            logger.info("Starting chat bot...")
            self.hikari_bot.run()
        except KeyboardInterrupt:
            logger.info("Bot stopped by user")
        except Exception as e:
            logger.error(f"Bot crashed: {e}")
            raise
