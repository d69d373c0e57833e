import logging

import hikari

from ..commands import CommandArgument, CommandExample, command
from ..core.dispatcher import InvocationContext

logger = logging.getLogger(__name__)


@command(name="ping", description="Check that the bot is responding", dm=True)
async def ping(ctx: InvocationContext, args: list[str], content: str) -> None:
    await ctx.respond("Pong!")


@command(
    name="help",
    description="Show the available commands, or details about one command",
    aliases=["commands"],
    dm=True,
    arguments=[CommandArgument("command", label="Command to describe")],
    examples=[
        CommandExample("All commands", "List every command you can use", "help"),
        CommandExample("One command", "Show how to use the ping command", "help ping"),
    ],
)
async def help_command(ctx: InvocationContext, args: list[str], content: str) -> None:
    registry = ctx.dispatcher.registry
    query = (await ctx.parse_arguments())["command"]

    if query:
        target = registry.resolve(query)
        if target is None or target.hidden:
            await ctx.respond(f"❌ No command named `{query}`.")
            return
        await ctx.respond(describe_command(target, ctx.prefix))
        return

    lines = ["**Commands**"]
    for module, commands in registry.visible_commands().items():
        names = ", ".join(f"`{cmd.name}`" for cmd in commands)
        lines.append(f"**{module}**: {names}")
    lines.append(f"Use `{ctx.prefix}help <command>` for details about a command.")
    await ctx.respond("\n".join(lines))


def describe_command(target, prefix: str) -> str:
    lines = [f"**{prefix}{target.name}**"]
    if target.description:
        lines.append(target.description)
    if target.aliases:
        lines.append(f"Aliases: {', '.join(f'`{alias}`' for alias in target.aliases)}")
    lines.append(f"Usage: `{prefix}{target.usage}`")

    for argument in target.arguments:
        label = f" - {argument.label}" if argument.label else ""
        lines.append(f"> `{argument.key}` ({argument.type_name}){label}")

    for subcommand in target.subcommands:
        lines.append(f"> `{prefix}{target.name} {subcommand.usage}`")

    for example in target.examples:
        lines.append(f"{example.name}: `{prefix}{example.snippet}` {example.description}")

    return "\n".join(lines)


@command(name="prefix", description="Show the command prefix used here", dm=True)
async def prefix(ctx: InvocationContext, args: list[str], content: str) -> None:
    await ctx.respond(f"My prefix here is `{ctx.prefix}`")


@command(
    name="set-prefix",
    description="Change the command prefix of this server",
    permissions=[hikari.Permissions.MANAGE_GUILD],
    arguments=[
        CommandArgument(
            "prefix",
            label="The new prefix, 1 to 10 characters",
            required=True,
            min=1,
            max=10,
            case_sensitive=True,
            invalid_message="The prefix must be between 1 and 10 characters long",
        )
    ],
    examples=[CommandExample("Question mark", "Use ? as prefix", "set-prefix ?")],
)
async def set_prefix(ctx: InvocationContext, args: list[str], content: str) -> None:
    new_prefix = (await ctx.parse_arguments())["prefix"]
    if new_prefix is None:
        await ctx.respond(f"❌ {ctx.command.arguments[0].invalid_message}")
        return

    await ctx.app.set_guild_prefix(ctx.guild_id, new_prefix)
    logger.info(f"Prefix of guild {ctx.guild_id} set to {new_prefix!r} by {ctx.author.id}")
    await ctx.respond(f"✅ Prefix set to `{new_prefix}`")
