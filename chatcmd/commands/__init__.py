"""Command system: argument declarations, descriptors and registry."""

from .argument_types import ArgumentType, CommandArgument
from .decorators import command
from .models import Command, CommandExample, Subcommand
from .parsers import ArgumentResolver
from .registry import CommandRegistry
from .subcommands import SubcommandRouter, subcommand_router

__all__ = [
    "ArgumentType",
    "CommandArgument",
    "command",
    "Command",
    "CommandExample",
    "Subcommand",
    "ArgumentResolver",
    "CommandRegistry",
    "SubcommandRouter",
    "subcommand_router",
]
