import logging
from collections.abc import Awaitable, Callable
from typing import Any

import hikari

from config.settings import settings

from ..commands.argument_types import CommandArgument
from ..commands.models import Command, Subcommand
from ..commands.parsers import ArgumentResolver
from ..commands.registry import CommandRegistry
from ..permissions.guards import GuardPipeline
from ..permissions.manager import CapabilityChecker
from .delivery import MessageDelivery

logger = logging.getLogger(__name__)

PrefixResolver = Callable[[int], Awaitable[str]]


class InvocationContext:
    """Everything a command handler gets to know about one invocation."""

    def __init__(
        self,
        event: hikari.MessageCreateEvent,
        args: list[str],
        content: str,
        command: Command,
        delivery: MessageDelivery,
        app: Any = None,
        dispatcher: "MessageDispatcher | None" = None,
        bot_id: int | None = None,
        prefix: str = settings.bot_prefix,
    ) -> None:
        self.event = event
        self.args = args
        self.content = content
        self.command = command
        self.delivery = delivery
        self.app = app
        self.dispatcher = dispatcher
        self.bot_id = bot_id
        self.prefix = prefix
        self.subcommand: Subcommand | None = None
        self.subcommand_args: list[str] = []

        self.author = event.author
        self.member = getattr(event, "member", None)
        self.guild_id = getattr(event, "guild_id", None)
        self.channel_id = event.channel_id
        self.message_content = event.content or ""

    @property
    def is_dm(self) -> bool:
        return self.guild_id is None

    async def respond(self, content: str) -> None:
        await self.delivery.send(self.channel_id, content)

    async def parse_arguments(
        self, args: list[str] | None = None, definitions: list[CommandArgument] | None = None
    ) -> dict[str, Any]:
        """Resolve ``args`` against ``definitions``.

        Both default to the invocation's own, or to the routed subcommand's
        arguments and the tokens after its identifier.
        """
        if args is None:
            args = self.subcommand_args if self.subcommand is not None else self.args
        if definitions is None:
            definitions = self.subcommand.arguments if self.subcommand is not None else self.command.arguments

        resolver = self.dispatcher.resolver if self.dispatcher else ArgumentResolver()
        return await resolver.parse_arguments(args, definitions, self.guild_id)


class MessageDispatcher:
    """Turns inbound messages into command invocations.

    A message is handled when it starts with the prefix or a mention of the
    bot, names a registered command (or alias), and passes the guard
    pipeline. Exceptions raised by command handlers propagate to the caller.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        guards: GuardPipeline,
        delivery: MessageDelivery,
        capabilities: CapabilityChecker,
        *,
        resolver: ArgumentResolver | None = None,
        app: Any = None,
        prefix: str = settings.bot_prefix,
        prefix_resolver: PrefixResolver | None = None,
        bot_id: int | None = None,
        test_mode: bool = False,
        ignore_bots: bool = True,
    ) -> None:
        self.registry = registry
        self.guards = guards
        self.delivery = delivery
        self.capabilities = capabilities
        self.resolver = resolver or ArgumentResolver()
        self.app = app
        self.prefix = prefix
        self.prefix_resolver = prefix_resolver
        self.bot_id = bot_id
        self.test_mode = test_mode
        self.ignore_bots = ignore_bots

    async def get_prefix(self, guild_id: int | None) -> str:
        if guild_id is not None and self.prefix_resolver is not None:
            return await self.prefix_resolver(guild_id)
        return self.prefix

    def strip_trigger(self, text: str, prefix: str) -> str | None:
        """Remove the prefix or bot mention from ``text``; None if neither is there."""
        if prefix and text[: len(prefix)].lower() == prefix.lower():
            return text[len(prefix) :]

        if self.bot_id is not None:
            for mention in (f"<@!{self.bot_id}>", f"<@{self.bot_id}>"):
                if text.startswith(mention):
                    return text[len(mention) :]

        return None

    @staticmethod
    def tokenize(text: str) -> list[str]:
        return text.split()

    def is_bot_mention(self, text: str) -> bool:
        return self.bot_id is not None and text.strip() in (f"<@{self.bot_id}>", f"<@!{self.bot_id}>")

    async def reply_prefix(self, event: hikari.MessageCreateEvent, prefix: str) -> None:
        guild_id = getattr(event, "guild_id", None)
        reply = f"**My prefix here is `{prefix}`**"
        if await self.capabilities.has_capability(
            event.author.id, guild_id, hikari.Permissions.MANAGE_GUILD, event.channel_id
        ):
            reply += f"\n> You can change it with `{prefix}set-prefix <your-prefix>`"
        await self.delivery.send(event.channel_id, reply)

    async def handle_message(self, event: hikari.MessageCreateEvent) -> bool:
        author = event.author

        # Ignore ourselves and, unless configured otherwise, other bots
        if self.bot_id is not None and author.id == self.bot_id:
            return False
        if self.ignore_bots and author.is_bot:
            return False

        if self.test_mode and not self.guards.admins.is_owner(author.id):
            return False

        text = event.content
        if not text:
            return False

        guild_id = getattr(event, "guild_id", None)
        prefix = await self.get_prefix(guild_id)

        if self.is_bot_mention(text):
            await self.reply_prefix(event, prefix)
            return True

        remainder = self.strip_trigger(text, prefix)
        if remainder is None or not remainder.strip():
            return False

        tokens = self.tokenize(remainder)
        command_name = tokens[0].lower()
        args = tokens[1:]
        content = remainder.lstrip()[len(tokens[0]) :].lstrip()

        command = self.registry.resolve(command_name)
        if command is None:
            logger.debug(f"Unknown command: {command_name}")
            return False

        ctx = InvocationContext(
            event,
            args,
            content,
            command,
            self.delivery,
            app=self.app,
            dispatcher=self,
            bot_id=self.bot_id,
            prefix=prefix,
        )

        if not await self.guards.check(ctx, command):
            return True

        logger.info(f"Command called: {prefix}{command.name} by {author.username} ({author.id})")
        await command.invoke(ctx, args, content)
        return True
