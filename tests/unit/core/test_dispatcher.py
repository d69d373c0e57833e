"""Tests for message dispatching."""

from unittest.mock import AsyncMock, MagicMock

import hikari
import pytest

from chatcmd.commands import Command
from chatcmd.core.dispatcher import InvocationContext, MessageDispatcher
from conftest import BOT_ID, OWNER_ID


@pytest.fixture
def ping(registry):
    command = Command("ping", AsyncMock(), aliases=["p"], dm=True)
    registry.register(command)
    return command


class TestStripTrigger:
    """Test prefix and mention stripping."""

    def test_prefix(self, dispatcher):
        """Test the prefix is removed."""
        assert dispatcher.strip_trigger("!ping", "!") == "ping"

    def test_prefix_is_case_insensitive(self, dispatcher):
        """Test letter prefixes match in any case."""
        assert dispatcher.strip_trigger("HEY ping", "hey") == " ping"

    def test_mentions(self, dispatcher):
        """Test both mention forms of the bot."""
        assert dispatcher.strip_trigger(f"<@!{BOT_ID}> ping", "!") == " ping"
        assert dispatcher.strip_trigger(f"<@{BOT_ID}> ping", "!") == " ping"

    def test_other_mention(self, dispatcher):
        """Test mentions of other users are not triggers."""
        assert dispatcher.strip_trigger("<@123456789012345678> ping", "!") is None

    def test_no_trigger(self, dispatcher):
        """Test plain text."""
        assert dispatcher.strip_trigger("ping", "!") is None

    def test_tokenize(self):
        """Test whitespace splitting."""
        assert MessageDispatcher.tokenize("  a  b\tc \n") == ["a", "b", "c"]


class TestHandleMessage:
    """Test MessageDispatcher.handle_message."""

    @pytest.mark.asyncio
    async def test_prefix_invocation(self, dispatcher, ping, mock_message_event):
        """Test arguments and leftover content of a prefixed message."""
        mock_message_event.content = "!ping extra args"

        assert await dispatcher.handle_message(mock_message_event) is True

        ctx, args, content = ping.callback.await_args.args
        assert isinstance(ctx, InvocationContext)
        assert args == ["extra", "args"]
        assert content == "extra args"
        assert ctx.command is ping
        assert ctx.guild_id == mock_message_event.guild_id

    @pytest.mark.asyncio
    async def test_mention_invocation(self, dispatcher, ping, mock_message_event):
        """Test a mention trigger behaves like the prefix."""
        mock_message_event.content = f"<@{BOT_ID}> ping extra args"

        assert await dispatcher.handle_message(mock_message_event) is True

        _, args, content = ping.callback.await_args.args
        assert args == ["extra", "args"]
        assert content == "extra args"

    @pytest.mark.asyncio
    async def test_content_keeps_spacing_and_case(self, dispatcher, ping, mock_message_event):
        """Test leftover content is not normalized."""
        mock_message_event.content = "!PING  Hello   World"

        await dispatcher.handle_message(mock_message_event)

        _, args, content = ping.callback.await_args.args
        assert args == ["Hello", "World"]
        assert content == "Hello   World"

    @pytest.mark.asyncio
    async def test_alias(self, dispatcher, ping, mock_message_event):
        """Test commands resolve through aliases."""
        mock_message_event.content = "!p"

        assert await dispatcher.handle_message(mock_message_event) is True
        ping.callback.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["!", "!   ", "", None, "hello", "!unknown"])
    async def test_dropped(self, dispatcher, ping, mock_message_event, content):
        """Test messages that do not invoke a command."""
        mock_message_event.content = content

        assert await dispatcher.handle_message(mock_message_event) is False
        ping.callback.assert_not_called()

    @pytest.mark.asyncio
    async def test_bot_authors_ignored(self, dispatcher, ping, mock_message_event):
        """Test messages from other bots are dropped."""
        mock_message_event.author.is_bot = True

        assert await dispatcher.handle_message(mock_message_event) is False

    @pytest.mark.asyncio
    async def test_bot_authors_allowed(self, dispatcher, ping, mock_message_event):
        """Test other bots can be let through."""
        dispatcher.ignore_bots = False
        mock_message_event.author.is_bot = True

        assert await dispatcher.handle_message(mock_message_event) is True

    @pytest.mark.asyncio
    async def test_own_messages_ignored(self, dispatcher, ping, mock_message_event):
        """Test the bot never answers itself."""
        dispatcher.ignore_bots = False
        mock_message_event.author.id = BOT_ID

        assert await dispatcher.handle_message(mock_message_event) is False

    @pytest.mark.asyncio
    async def test_test_mode(self, dispatcher, ping, mock_message_event):
        """Test only the owner is answered in test mode."""
        dispatcher.test_mode = True

        assert await dispatcher.handle_message(mock_message_event) is False

        mock_message_event.author.id = OWNER_ID
        assert await dispatcher.handle_message(mock_message_event) is True

    @pytest.mark.asyncio
    async def test_guild_prefix(self, dispatcher, ping, mock_message_event):
        """Test the per-guild prefix replaces the default one."""
        dispatcher.prefix_resolver = AsyncMock(return_value="?")

        mock_message_event.content = "!ping"
        assert await dispatcher.handle_message(mock_message_event) is False

        mock_message_event.content = "?ping"
        assert await dispatcher.handle_message(mock_message_event) is True
        dispatcher.prefix_resolver.assert_awaited_with(mock_message_event.guild_id)
        assert ping.callback.await_args.args[0].prefix == "?"

    @pytest.mark.asyncio
    async def test_dm_uses_default_prefix(self, dispatcher, ping, mock_dm_event):
        """Test DMs skip the prefix resolver."""
        dispatcher.prefix_resolver = AsyncMock(return_value="?")

        assert await dispatcher.handle_message(mock_dm_event) is True
        dispatcher.prefix_resolver.assert_not_called()

        ctx = ping.callback.await_args.args[0]
        assert ctx.is_dm
        assert ctx.member is None

    @pytest.mark.asyncio
    async def test_blocked_by_guards(self, dispatcher, registry, mock_message_event, mock_delivery):
        """Test blocked commands are consumed without running."""
        command = Command("secret", AsyncMock(), admin=True)
        registry.register(command)
        mock_message_event.content = "!secret"

        assert await dispatcher.handle_message(mock_message_event) is True
        command.callback.assert_not_called()
        mock_delivery.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_handler_errors_propagate(self, dispatcher, ping, mock_message_event):
        """Test handler exceptions reach the caller."""
        ping.callback.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await dispatcher.handle_message(mock_message_event)


class TestMentionReply:
    """Test replies to a bare mention of the bot."""

    @pytest.mark.asyncio
    async def test_reply_with_manage_server(self, dispatcher, mock_message_event, mock_delivery, mock_capabilities):
        """Test members with Manage Server learn how to change the prefix."""
        mock_message_event.content = f"<@{BOT_ID}>"

        assert await dispatcher.handle_message(mock_message_event) is True

        channel_id, reply = mock_delivery.send.await_args.args
        assert channel_id == mock_message_event.channel_id
        assert reply == "**My prefix here is `!`**\n> You can change it with `!set-prefix <your-prefix>`"
        mock_capabilities.has_capability.assert_awaited_once_with(
            mock_message_event.author.id,
            mock_message_event.guild_id,
            hikari.Permissions.MANAGE_GUILD,
            mock_message_event.channel_id,
        )

    @pytest.mark.asyncio
    async def test_reply_without_manage_server(
        self, dispatcher, mock_message_event, mock_delivery, mock_capabilities
    ):
        """Test other members only see the prefix."""
        mock_capabilities.has_capability.return_value = False
        mock_message_event.content = f"<@!{BOT_ID}>"

        assert await dispatcher.handle_message(mock_message_event) is True
        assert mock_delivery.send.await_args.args[1] == "**My prefix here is `!`**"

    @pytest.mark.asyncio
    async def test_no_reply_without_bot_id(self, dispatcher, mock_message_event, mock_delivery):
        """Test mentions are ignored until the bot knows its own id."""
        dispatcher.bot_id = None
        mock_message_event.content = f"<@{BOT_ID}>"

        assert await dispatcher.handle_message(mock_message_event) is False
        mock_delivery.send.assert_not_called()


class TestInvocationContext:
    """Test InvocationContext."""

    @pytest.mark.asyncio
    async def test_respond(self, make_context, mock_delivery, mock_message_event):
        """Test responses go to the originating channel."""
        ctx = make_context(Command("ping", AsyncMock()))

        await ctx.respond("hi")

        mock_delivery.send.assert_awaited_once_with(mock_message_event.channel_id, "hi")

    @pytest.mark.asyncio
    async def test_parse_arguments(self, make_context):
        """Test arguments are resolved against the command's definitions."""
        from chatcmd.commands import ArgumentType, CommandArgument

        command = Command(
            "roll",
            AsyncMock(),
            arguments=[CommandArgument("sides", ArgumentType.NUMBER, required=True), CommandArgument("note")],
        )
        ctx = make_context(command, args=["20", "Good", "Luck"])

        assert await ctx.parse_arguments() == {"sides": 20.0, "note": "good luck"}

    def test_dm_context(self, make_context, mock_dm_event):
        """Test DM contexts have no guild."""
        ctx = make_context(Command("ping", AsyncMock()), event=mock_dm_event)

        assert ctx.guild_id is None
        assert ctx.is_dm
        assert ctx.message_content == "!ping"
