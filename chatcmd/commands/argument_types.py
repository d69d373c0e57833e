"""Command argument types and definitions."""

import enum
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ..core.errors import ConfigurationError


class ArgumentType(str, enum.Enum):
    """The kinds of value a command argument accepts."""

    BOOLEAN = "boolean"
    CATEGORY = "category"
    CHANNEL = "channel"
    CUSTOM = "custom"
    DURATION = "duration"
    EMOJI = "emoji"
    JSON = "json"
    MEMBER = "member"
    NUMBER = "number"
    ROLE = "role"
    STRING = "string"
    TEXT_CHANNEL = "textchannel"
    USER = "user"
    VOICE_CHANNEL = "voicechannel"


# Types that can only be resolved inside a guild
GUILD_ONLY_TYPES = frozenset(
    {
        ArgumentType.CATEGORY,
        ArgumentType.CHANNEL,
        ArgumentType.TEXT_CHANNEL,
        ArgumentType.VOICE_CHANNEL,
        ArgumentType.MEMBER,
        ArgumentType.ROLE,
    }
)

Validator = Callable[[str, int | None], bool | Awaitable[bool]]


@dataclass
class CommandArgument:
    """Defines an argument for a command.

    ``min`` and ``max`` bound the value of ``number`` arguments, the
    milliseconds of ``duration`` arguments and the length of ``string``
    arguments. ``choices`` restricts the argument to literal values and
    takes precedence over the type rules. ``validator`` replaces every
    built-in rule.
    """

    key: str
    arg_type: ArgumentType = ArgumentType.STRING
    label: str = ""
    required: bool = False
    default: Any = None
    choices: list[Any] | None = None
    case_sensitive: bool = False
    min: float | None = None
    max: float | None = None
    custom_type_name: str | None = None
    invalid_message: str | None = None
    validator: Validator | None = None

    def __post_init__(self):
        self.arg_type = ArgumentType(self.arg_type)

        if not self.choices:
            self.choices = None

        if self.invalid_message is None:
            self.invalid_message = f"Wrong value provided for argument {self.key}"

        if self.arg_type is ArgumentType.CUSTOM and not self.custom_type_name:
            raise ConfigurationError(f"Argument '{self.key}' of type 'custom' needs a custom_type_name")

        if self.arg_type in (ArgumentType.NUMBER, ArgumentType.DURATION):
            if self.min is not None and self.max is not None and self.min >= self.max:
                raise ConfigurationError(
                    f"Argument '{self.key}': minimum value must be strictly lower than maximum value"
                )
            if self.arg_type is ArgumentType.DURATION and (
                (self.min is not None and self.min < 0) or (self.max is not None and self.max < 0)
            ):
                raise ConfigurationError(
                    f"Argument '{self.key}' of type 'duration' must have non-negative minimum and maximum"
                )

    @property
    def type_name(self) -> str:
        """The name shown to users, e.g. in help output."""
        if self.arg_type is ArgumentType.CUSTOM:
            return self.custom_type_name
        return self.arg_type.value

    @property
    def usage(self) -> str:
        """Usage token for help output: ``<key>`` or ``[key]``."""
        return f"<{self.key}>" if self.required else f"[{self.key}]"
