"""Command decorators for declarative command creation."""

from collections.abc import Callable

import hikari

from .argument_types import CommandArgument
from .models import Command, CommandCallback, CommandExample


def command(
    name: str,
    description: str = "",
    module: str = "General",
    aliases: list[str] | None = None,
    arguments: list[CommandArgument] | None = None,
    permissions: list[hikari.Permissions] | None = None,
    bot_permissions: list[hikari.Permissions] | None = None,
    cooldown: int = 0,
    admin: bool = False,
    dm: bool = False,
    hidden: bool | None = None,
    silent: bool | None = None,
    case_sensitive: bool = False,
    examples: list[CommandExample] | None = None,
) -> Callable[[CommandCallback], Command]:
    """
    Turn an async ``(ctx, args, content)`` function into a :class:`Command`.

    The decorated name is bound to the descriptor, so subcommands can be
    attached with ``@name.subcommand(...)``.
    """

    def decorator(func: CommandCallback) -> Command:
        return Command(
            name=name,
            callback=func,
            description=description or (func.__doc__ or "").strip(),
            module=module,
            aliases=aliases,
            arguments=arguments,
            permissions=permissions,
            bot_permissions=bot_permissions,
            cooldown=cooldown,
            admin=admin,
            dm=dm,
            hidden=hidden,
            silent=silent,
            case_sensitive=case_sensitive,
            examples=examples,
        )

    return decorator
