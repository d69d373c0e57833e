"""Second-level dispatch inside a command."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.dispatcher import InvocationContext
    from .models import Command, Subcommand

logger = logging.getLogger(__name__)


class SubcommandRouter:
    def match(self, command: Command, token: str) -> tuple[Subcommand, str] | None:
        """Find the first subcommand, in declaration order, claiming ``token``."""
        for subcommand in command.subcommands:
            identifier = subcommand.match(token, command.case_sensitive)
            if identifier is not None:
                return subcommand, identifier
        return None

    async def route(self, command: Command, ctx: InvocationContext, args: list[str]) -> bool:
        """
        Invoke the subcommand selected by the first argument.

        Returns:
            True if a subcommand handled the invocation, False to fall
            through to the command's own handling
        """
        if not args:
            return False

        matched = self.match(command, args[0])
        if matched is None:
            return False

        subcommand, identifier = matched
        ctx.subcommand = subcommand
        ctx.subcommand_args = args[1:]
        logger.debug(f"Routing {command.name} to subcommand '{identifier}'")
        await subcommand.callback(command, ctx, args[1:], identifier)
        return True


# Global instance
subcommand_router = SubcommandRouter()
