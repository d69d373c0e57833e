"""Pre-execution checks run by the dispatcher before every command."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

import hikari

from ..core.time import format_duration
from ..core.utils import format_permissions

if TYPE_CHECKING:
    from ..commands.models import Command
    from ..core.delivery import MessageDelivery
    from ..core.dispatcher import InvocationContext
    from .admins import AdminRoster
    from .cooldowns import CommandStore
    from .manager import CapabilityChecker

logger = logging.getLogger(__name__)

DM_NOTICE = "This command can't be run in DMs. Please use it in a server."
DISABLED_NOTICE = "This command is currently disabled."


class GuardOutcome(enum.Enum):
    CONTINUE = "continue"
    BLOCK = "block"
    BYPASS = "bypass"


def _permission_notice(subject: str, missing: list[hikari.Permissions]) -> str:
    noun = "permission" if len(missing) == 1 else "permissions"
    return f"{subject} the {format_permissions(missing)} {noun} to run this command."


class GuardPipeline:
    """Runs the guard stages in order.

    1. DM restriction
    2. admin bypass (skips everything below)
    3. admin-only gate
    4. disabled gate
    5. cooldown
    6. caller permissions
    7. bot permissions

    With ``admin_bypasses_dm`` the DM restriction runs after the admin
    bypass, so admins may use guild-only commands in DMs.
    """

    def __init__(
        self,
        admins: AdminRoster,
        capabilities: CapabilityChecker,
        delivery: MessageDelivery,
        store: CommandStore | None = None,
        admin_bypasses_dm: bool = False,
    ) -> None:
        self.admins = admins
        self.capabilities = capabilities
        self.delivery = delivery
        self.store = store
        self.admin_bypasses_dm = admin_bypasses_dm

    @property
    def stages(self):
        head = [self.check_dm, self.check_admin_bypass]
        if self.admin_bypasses_dm:
            head.reverse()
        return [
            *head,
            self.check_admin_only,
            self.check_disabled,
            self.check_cooldown,
            self.check_caller_permissions,
            self.check_bot_permissions,
        ]

    async def check(self, ctx: InvocationContext, command: Command) -> bool:
        """Return True when ``command`` may run for ``ctx``."""
        for stage in self.stages:
            outcome = await stage(ctx, command)
            if outcome is GuardOutcome.BYPASS:
                logger.debug(f"Admin {ctx.author.id} bypassed guards for {command.name}")
                return True
            if outcome is GuardOutcome.BLOCK:
                logger.debug(f"Command {command.name} blocked by {stage.__name__} for {ctx.author.id}")
                return False
        return True

    async def notify(self, ctx: InvocationContext, message: str) -> None:
        await self.delivery.send(ctx.channel_id, f"❌ {message}")

    async def check_dm(self, ctx: InvocationContext, command: Command) -> GuardOutcome:
        if command.dm or not ctx.is_dm:
            return GuardOutcome.CONTINUE
        await self.notify(ctx, DM_NOTICE)
        return GuardOutcome.BLOCK

    async def check_admin_bypass(self, ctx: InvocationContext, command: Command) -> GuardOutcome:
        if self.admins.is_admin(ctx.author.id):
            return GuardOutcome.BYPASS
        return GuardOutcome.CONTINUE

    async def check_admin_only(self, ctx: InvocationContext, command: Command) -> GuardOutcome:
        # Admin commands stay invisible to everybody else
        return GuardOutcome.BLOCK if command.admin else GuardOutcome.CONTINUE

    async def check_disabled(self, ctx: InvocationContext, command: Command) -> GuardOutcome:
        disabled = command.disabled
        if not disabled and self.store is not None:
            disabled = await self.store.is_disabled(command.name, ctx.guild_id)
        if not disabled:
            return GuardOutcome.CONTINUE

        if not command.silent:
            await self.notify(ctx, DISABLED_NOTICE)
        return GuardOutcome.BLOCK

    async def check_cooldown(self, ctx: InvocationContext, command: Command) -> GuardOutcome:
        if command.cooldown <= 0 or self.store is None:
            return GuardOutcome.CONTINUE

        allowed, remaining = await self.store.check_and_record_use(ctx.author.id, command)
        if allowed:
            return GuardOutcome.CONTINUE

        if not command.silent:
            await self.notify(
                ctx, f"Please wait {format_duration(remaining, bold=True)} before using this command again."
            )
        return GuardOutcome.BLOCK

    async def missing_permissions(
        self, principal_id: int | None, ctx: InvocationContext, required: list[hikari.Permissions]
    ) -> list[hikari.Permissions]:
        missing = []
        for permission in required:
            if principal_id is None or not await self.capabilities.has_capability(
                principal_id, ctx.guild_id, permission, ctx.channel_id
            ):
                missing.append(permission)
        return missing

    async def check_caller_permissions(self, ctx: InvocationContext, command: Command) -> GuardOutcome:
        missing = await self.missing_permissions(ctx.author.id, ctx, command.permissions)
        if not missing:
            return GuardOutcome.CONTINUE

        if not command.silent:
            await self.notify(ctx, _permission_notice("You need", missing))
        return GuardOutcome.BLOCK

    async def check_bot_permissions(self, ctx: InvocationContext, command: Command) -> GuardOutcome:
        missing = await self.missing_permissions(ctx.bot_id, ctx, command.bot_permissions)
        if not missing:
            return GuardOutcome.CONTINUE

        if not command.silent:
            await self.notify(ctx, _permission_notice("I need", missing))
        return GuardOutcome.BLOCK
