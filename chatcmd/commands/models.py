"""Command and subcommand descriptors."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import hikari

from ..core.errors import ConfigurationError
from .argument_types import CommandArgument

if TYPE_CHECKING:
    from ..core.dispatcher import InvocationContext

logger = logging.getLogger(__name__)

CommandCallback = Callable[["InvocationContext", list[str], str], Awaitable[Any]]
SubcommandCallback = Callable[["Command", "InvocationContext", list[str], str], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class CommandExample:
    name: str
    description: str
    snippet: str


class Subcommand:
    """A second-level handler selected by the first argument of a command.

    The callback receives the owning command, the context, the arguments
    left after the identifier, and the identifier the user typed, so one
    subcommand can serve e.g. both ``enable`` and ``disable``.
    """

    def __init__(
        self,
        identifiers: Iterable[str],
        callback: SubcommandCallback,
        arguments: list[CommandArgument] | None = None,
    ) -> None:
        self.identifiers = list(identifiers)
        if not self.identifiers:
            raise ConfigurationError("A subcommand needs at least one identifier")
        self.callback = callback
        self.arguments = arguments or []

    def match(self, token: str, case_sensitive: bool = False) -> str | None:
        """Return the identifier matching ``token``, if any."""
        for identifier in self.identifiers:
            if case_sensitive:
                if token == identifier:
                    return identifier
            elif token.lower() == identifier.lower():
                return identifier
        return None

    @property
    def usage(self) -> str:
        return " ".join(["|".join(self.identifiers), *(argument.usage for argument in self.arguments)])


class Command:
    """Declarative description of a prefix command.

    ``admin`` implies ``hidden`` and ``hidden`` implies ``silent`` unless
    they are passed explicitly. ``disabled`` is the only attribute changed
    after startup.
    """

    def __init__(
        self,
        name: str,
        callback: CommandCallback,
        description: str = "",
        module: str = "General",
        aliases: list[str] | None = None,
        arguments: list[CommandArgument] | None = None,
        subcommands: list[Subcommand] | None = None,
        permissions: list[hikari.Permissions] | None = None,
        bot_permissions: list[hikari.Permissions] | None = None,
        cooldown: int = 0,
        admin: bool = False,
        dm: bool = False,
        hidden: bool | None = None,
        silent: bool | None = None,
        case_sensitive: bool = False,
        examples: list[CommandExample] | None = None,
    ) -> None:
        self.name = name.lower()
        self.callback = callback
        self.description = description
        self.module = module
        self.aliases = [alias.lower() for alias in aliases or []]
        self.arguments = arguments or []
        self.subcommands = subcommands or []
        self.permissions = permissions or []
        self.bot_permissions = bot_permissions or []
        self.cooldown = cooldown if cooldown > 0 else 0
        self.admin = admin
        self.dm = dm
        self.hidden = admin if hidden is None else hidden
        self.silent = self.hidden if silent is None else silent
        self.case_sensitive = case_sensitive
        self.examples = examples or []
        self.disabled = False

        keys = [argument.key for argument in self.arguments]
        if len(keys) != len(set(keys)):
            raise ConfigurationError(f"Command '{self.name}' declares duplicate argument keys: {keys}")

    def __repr__(self) -> str:
        return f"Command(name={self.name!r}, aliases={self.aliases!r})"

    @property
    def usage(self) -> str:
        return " ".join([self.name, *(argument.usage for argument in self.arguments)])

    def subcommand(
        self, *identifiers: str, arguments: list[CommandArgument] | None = None
    ) -> Callable[[SubcommandCallback], SubcommandCallback]:
        """Decorator declaring a subcommand on this command."""

        def decorator(func: SubcommandCallback) -> SubcommandCallback:
            self.subcommands.append(Subcommand(identifiers, func, arguments))
            return func

        return decorator

    async def invoke(self, ctx: InvocationContext, args: list[str], content: str) -> None:
        """Run a matching subcommand, or the command's own callback."""
        from .subcommands import subcommand_router

        if self.subcommands and await subcommand_router.route(self, ctx, args):
            return
        await self.callback(ctx, args, content)
