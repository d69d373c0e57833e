"""Bot administration commands, only visible to bot admins."""

import logging

from ..commands import Command, CommandArgument, command
from ..core.dispatcher import InvocationContext

logger = logging.getLogger(__name__)

TARGET = [CommandArgument("name", label="Name or alias of the command", required=True)]


@command(
    name="command",
    description="Enable, disable, block or unblock commands",
    module="Admin",
    admin=True,
    dm=True,
)
async def command_admin(ctx: InvocationContext, args: list[str], content: str) -> None:
    await ctx.respond(f"Usage: `{ctx.prefix}command <enable|disable|block|unblock> <name>`")


async def _resolve_target(ctx: InvocationContext) -> Command | None:
    name = (await ctx.parse_arguments())["name"]
    target = ctx.dispatcher.registry.resolve(name) if name else None
    if target is None:
        await ctx.respond(f"❌ No command named `{name or ''}`.")
        return None
    if target is ctx.command:
        await ctx.respond("❌ This command can't be disabled.")
        return None
    return target


@command_admin.subcommand("enable", "disable", arguments=TARGET)
async def toggle(parent: Command, ctx: InvocationContext, args: list[str], identifier: str) -> None:
    target = await _resolve_target(ctx)
    if target is None:
        return

    disabled = identifier.lower() == "disable"
    registry = ctx.dispatcher.registry
    if disabled:
        registry.disable(target.name)
    else:
        registry.enable(target.name)

    store = ctx.dispatcher.guards.store
    if store is not None:
        await store.set_disabled(target.name, None, disabled)

    await ctx.respond(f"✅ Command `{target.name}` {'disabled' if disabled else 'enabled'} everywhere.")


@command_admin.subcommand("block", "unblock", arguments=TARGET)
async def block(parent: Command, ctx: InvocationContext, args: list[str], identifier: str) -> None:
    if ctx.guild_id is None:
        await ctx.respond("❌ Blocking applies to one server, run it in a server.")
        return

    store = ctx.dispatcher.guards.store
    if store is None:
        await ctx.respond("❌ No command store is configured.")
        return

    target = await _resolve_target(ctx)
    if target is None:
        return

    blocked = identifier.lower() == "block"
    await store.set_disabled(target.name, ctx.guild_id, blocked)
    await ctx.respond(f"✅ Command `{target.name}` {'blocked' if blocked else 'unblocked'} in this server.")
