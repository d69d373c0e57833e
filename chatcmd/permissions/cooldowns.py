"""Per-command usage state: cooldown timestamps and disabled scopes."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Protocol

from sqlalchemy import select

from ..database.models import CommandState

if TYPE_CHECKING:
    from ..commands.models import Command
    from ..database.manager import DatabaseManager

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _remaining(last_use: datetime | None, now: datetime, cooldown: int) -> int:
    """Milliseconds left before the cooldown expires, 0 when it has."""
    if last_use is None:
        return 0
    elapsed = int((now - last_use).total_seconds() * 1000)
    return max(cooldown - elapsed, 0)


class CommandStore(Protocol):
    async def check_and_record_use(self, principal_id: int, command: Command) -> tuple[bool, int]:
        """Return ``(allowed, remaining_ms)``; a use is only recorded when allowed."""
        ...

    async def is_disabled(self, name: str, guild_id: int | None) -> bool: ...

    async def set_disabled(self, name: str, guild_id: int | None, disabled: bool) -> None: ...


class MemoryCommandStore:
    """Process-local command store. State is lost on restart."""

    def __init__(self, clock: Clock = utcnow) -> None:
        self.clock = clock
        self.last_uses: dict[str, dict[int, datetime]] = {}
        self.globally_disabled: set[str] = set()
        self.disabled_guilds: dict[str, set[int]] = {}

    async def check_and_record_use(self, principal_id: int, command: Command) -> tuple[bool, int]:
        if command.cooldown <= 0:
            return True, 0

        now = self.clock()
        uses = self.last_uses.setdefault(command.name, {})
        remaining = _remaining(uses.get(principal_id), now, command.cooldown)
        if remaining > 0:
            return False, remaining

        expired = [pid for pid, last_use in uses.items() if _remaining(last_use, now, command.cooldown) == 0]
        for pid in expired:
            del uses[pid]
        uses[principal_id] = now
        return True, 0

    async def is_disabled(self, name: str, guild_id: int | None) -> bool:
        if name in self.globally_disabled:
            return True
        return guild_id is not None and guild_id in self.disabled_guilds.get(name, set())

    async def set_disabled(self, name: str, guild_id: int | None, disabled: bool) -> None:
        if guild_id is None:
            target = self.globally_disabled
            key = name
        else:
            target = self.disabled_guilds.setdefault(name, set())
            key = guild_id

        if disabled:
            target.add(key)
        else:
            target.discard(key)


class DatabaseCommandStore:
    """Command store persisted in the ``command_states`` table."""

    def __init__(self, db: DatabaseManager, clock: Clock = utcnow) -> None:
        self.db = db
        self.clock = clock

    async def _get_state(self, session, name: str, create: bool = False) -> CommandState | None:
        result = await session.execute(select(CommandState).where(CommandState.name == name))
        state = result.scalar_one_or_none()
        if state is None and create:
            state = CommandState(name=name, last_uses={}, globally_disabled=False, disabled_guilds=[])
            session.add(state)
        return state

    async def check_and_record_use(self, principal_id: int, command: Command) -> tuple[bool, int]:
        if command.cooldown <= 0:
            return True, 0

        now = self.clock()
        async with self.db.session() as session:
            state = await self._get_state(session, command.name, create=True)
            last_uses = dict(state.last_uses or {})

            stored = last_uses.get(str(principal_id))
            last_use = datetime.fromisoformat(stored) if stored else None
            remaining = _remaining(last_use, now, command.cooldown)
            if remaining > 0:
                return False, remaining

            # Expired entries are dropped; JSON columns only track reassignment
            last_uses = {
                pid: stored
                for pid, stored in last_uses.items()
                if _remaining(datetime.fromisoformat(stored), now, command.cooldown) > 0
            }
            last_uses[str(principal_id)] = now.isoformat()
            state.last_uses = last_uses

        return True, 0

    async def is_disabled(self, name: str, guild_id: int | None) -> bool:
        async with self.db.session() as session:
            state = await self._get_state(session, name)
            if state is None:
                return False
            if state.globally_disabled:
                return True
            return guild_id is not None and guild_id in (state.disabled_guilds or [])

    async def set_disabled(self, name: str, guild_id: int | None, disabled: bool) -> None:
        async with self.db.session() as session:
            state = await self._get_state(session, name, create=True)
            if guild_id is None:
                state.globally_disabled = disabled
            else:
                guilds = set(state.disabled_guilds or [])
                if disabled:
                    guilds.add(guild_id)
                else:
                    guilds.discard(guild_id)
                state.disabled_guilds = sorted(guilds)

        scope = "globally" if guild_id is None else f"in guild {guild_id}"
        logger.info(f"Command {name} {'disabled' if disabled else 'enabled'} {scope}")
