"""Command registration system."""

import logging
from collections.abc import Iterable, Iterator

from ..core.errors import ConfigurationError
from .models import Command

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Maps command names and aliases to command descriptors.

    Names are unique and lower-cased. Aliases are a separate table where the
    last registration wins, and a direct name always takes precedence over
    an alias during resolution.
    """

    def __init__(self) -> None:
        self.commands: dict[str, Command] = {}
        self.aliases: dict[str, str] = {}
        self.modules: dict[str, list[str]] = {}

    def __contains__(self, name: str) -> bool:
        return name.lower() in self.commands

    def __iter__(self) -> Iterator[Command]:
        return iter(self.commands.values())

    def __len__(self) -> int:
        return len(self.commands)

    def register(self, command: Command) -> None:
        name = command.name.lower()
        if name in self.commands:
            raise ConfigurationError(f"Command names must be unique, '{name}' is already registered")

        self.commands[name] = command

        for alias in command.aliases:
            previous = self.aliases.get(alias)
            if previous and previous != name:
                logger.warning(f"Alias '{alias}' rebound from {previous} to {name}")
            self.aliases[alias] = name

        self.modules.setdefault(command.module, []).append(name)
        logger.debug(f"Registered command: {name} (aliases: {command.aliases})")

    def register_all(self, commands: Iterable[Command]) -> None:
        for command in commands:
            self.register(command)
        logger.info(f"Registered {len(self.commands)} commands in {len(self.modules)} modules")

    def unregister(self, name: str) -> Command | None:
        command = self.commands.pop(name.lower(), None)
        if command is None:
            return None

        for alias in command.aliases:
            if self.aliases.get(alias) == command.name:
                del self.aliases[alias]

        module_commands = self.modules.get(command.module, [])
        if command.name in module_commands:
            module_commands.remove(command.name)
        if not module_commands:
            self.modules.pop(command.module, None)

        logger.debug(f"Removed command: {command.name}")
        return command

    def resolve(self, token: str) -> Command | None:
        """Find a command by name, then by alias."""
        name = token.lower()
        if name in self.commands:
            return self.commands[name]
        if name in self.aliases:
            return self.commands.get(self.aliases[name])
        return None

    def disable(self, name: str) -> Command | None:
        return self._set_disabled(name, True)

    def enable(self, name: str) -> Command | None:
        return self._set_disabled(name, False)

    def _set_disabled(self, name: str, disabled: bool) -> Command | None:
        command = self.resolve(name)
        if command is None:
            return None
        command.disabled = disabled
        logger.info(f"Command {command.name} {'disabled' if disabled else 'enabled'}")
        return command

    def visible_commands(self) -> dict[str, list[Command]]:
        """Non-hidden commands grouped by module, for help output."""
        grouped: dict[str, list[Command]] = {}
        for module, names in sorted(self.modules.items()):
            visible = [self.commands[name] for name in names if not self.commands[name].hidden]
            if visible:
                grouped[module] = visible
        return grouped
