from .admin import command_admin
from .general import help_command, ping, prefix, set_prefix

# Registered in this order by ChatBot
BUILTIN_COMMANDS = [
    ping,
    help_command,
    prefix,
    set_prefix,
    command_admin,
]

__all__ = ["BUILTIN_COMMANDS"]
