"""Argument validation and coercion using strategy pattern."""

import inspect
import json
import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Any

import emoji

from ..core.directory import CHANNEL_KINDS, DirectoryLookup, ResourceKind
from ..core.errors import DirectoryLookupError
from ..core.time import parse_duration
from .argument_types import GUILD_ONLY_TYPES, ArgumentType, CommandArgument

logger = logging.getLogger(__name__)

CHANNEL_MENTION = re.compile(r"^(?:<#)?(\d{17,19})>?$")
EMOJI_MENTION = re.compile(r"^<a?:(\w+):(\d{17,19})>$")
ROLE_MENTION = re.compile(r"^(?:<@&)?(\d{17,19})>?$")
USER_MENTION = re.compile(r"^(?:<@!?)?(\d{17,19})>?$")

BOOLEAN_TRUE = frozenset({"on", "true", "yes", "1"})
BOOLEAN_FALSE = frozenset({"off", "false", "no", "0"})

_NO_MATCH = object()


def _within_bounds(value: float, definition: CommandArgument) -> bool:
    if definition.min is not None and value < definition.min:
        return False
    if definition.max is not None and value > definition.max:
        return False
    return True


def _parse_number(text: str) -> float | None:
    # float() accepts digit-group underscores
    if "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _match_choice(text: str, definition: CommandArgument) -> Any:
    """Return the declared choice matching ``text``, or ``_NO_MATCH``."""
    for choice in definition.choices or ():
        literal = str(choice)
        if definition.case_sensitive:
            if text == literal:
                return choice
        elif text.lower() == literal.lower():
            return choice
    return _NO_MATCH


def _snowflake(pattern: re.Pattern, text: str) -> int | None:
    match = pattern.match(text)
    return int(match.group(1)) if match else None


class TypeResolver(ABC):
    """Validates and coerces text for one argument type."""

    @abstractmethod
    async def validate(
        self, text: str, definition: CommandArgument, lookup: DirectoryLookup | None, guild_id: int | None
    ) -> bool:
        """Check whether ``text`` is acceptable for the definition."""

    @abstractmethod
    async def coerce(
        self, text: str, definition: CommandArgument, lookup: DirectoryLookup | None, guild_id: int | None
    ) -> Any:
        """Convert already validated ``text``; ``None`` if it cannot be converted."""


class BooleanResolver(TypeResolver):
    async def validate(self, text, definition, lookup, guild_id):
        return text.lower() in BOOLEAN_TRUE | BOOLEAN_FALSE

    async def coerce(self, text, definition, lookup, guild_id):
        return text.lower() in BOOLEAN_TRUE


class NumberResolver(TypeResolver):
    async def validate(self, text, definition, lookup, guild_id):
        value = _parse_number(text)
        return value is not None and _within_bounds(value, definition)

    async def coerce(self, text, definition, lookup, guild_id):
        return _parse_number(text)


class DurationResolver(TypeResolver):
    async def validate(self, text, definition, lookup, guild_id):
        value = parse_duration(text)
        return value is not None and _within_bounds(value, definition)

    async def coerce(self, text, definition, lookup, guild_id):
        return parse_duration(text)


class StringResolver(TypeResolver):
    async def validate(self, text, definition, lookup, guild_id):
        return _within_bounds(len(text), definition)

    async def coerce(self, text, definition, lookup, guild_id):
        return text if definition.case_sensitive else text.lower()


class CustomResolver(StringResolver):
    """Custom types are validated by the command itself."""

    async def validate(self, text, definition, lookup, guild_id):
        return True


class JsonResolver(TypeResolver):
    async def validate(self, text, definition, lookup, guild_id):
        try:
            json.loads(text)
        except ValueError:
            return False
        return True

    async def coerce(self, text, definition, lookup, guild_id):
        try:
            return json.loads(text)
        except ValueError:
            return None


class EmojiResolver(TypeResolver):
    async def validate(self, text, definition, lookup, guild_id):
        if EMOJI_MENTION.match(text):
            return True
        # Text-presentation and unqualified forms such as a bare "©" are not emojis
        return emoji.is_emoji(text) and emoji.EMOJI_DATA[text]["status"] == emoji.STATUS["fully_qualified"]

    async def coerce(self, text, definition, lookup, guild_id):
        return text


class ChannelResolver(TypeResolver):
    """Resolves channel mentions or raw ids of the given kinds."""

    def __init__(self, kinds: frozenset[ResourceKind]) -> None:
        self.kinds = kinds

    async def validate(self, text, definition, lookup, guild_id):
        channel_id = _snowflake(CHANNEL_MENTION, text)
        if channel_id is None or lookup is None:
            return False
        return await lookup.classify(channel_id, guild_id) in self.kinds

    async def coerce(self, text, definition, lookup, guild_id):
        channel_id = _snowflake(CHANNEL_MENTION, text)
        if channel_id is None or lookup is None:
            return None
        return await lookup.get_channel(channel_id, guild_id)


class UserResolver(TypeResolver):
    """Resolves user mentions; members must also belong to the guild."""

    def __init__(self, member: bool = False) -> None:
        self.member = member

    async def validate(self, text, definition, lookup, guild_id):
        user_id = _snowflake(USER_MENTION, text)
        if user_id is None or lookup is None:
            return False
        if await lookup.classify(user_id, guild_id) is not ResourceKind.USER:
            return False
        if self.member:
            await lookup.fetch_member(user_id, guild_id)
        return True

    async def coerce(self, text, definition, lookup, guild_id):
        user_id = _snowflake(USER_MENTION, text)
        if user_id is None or lookup is None:
            return None
        if self.member:
            return await lookup.fetch_member(user_id, guild_id)
        return await lookup.fetch_user(user_id)


class RoleResolver(TypeResolver):
    async def validate(self, text, definition, lookup, guild_id):
        role_id = _snowflake(ROLE_MENTION, text)
        if role_id is None or lookup is None:
            return False
        return await lookup.classify(role_id, guild_id) is ResourceKind.ROLE

    async def coerce(self, text, definition, lookup, guild_id):
        role_id = _snowflake(ROLE_MENTION, text)
        if role_id is None or lookup is None:
            return None
        return await lookup.get_role(role_id, guild_id)


class ArgumentResolver:
    """Validates user text against argument definitions and coerces it.

    Invalid input never raises: :meth:`is_valid` returns ``False`` and
    :meth:`resolve` returns ``None``. Directory lookup failures count as
    invalid input.
    """

    _resolvers: dict[ArgumentType, TypeResolver] = {
        ArgumentType.BOOLEAN: BooleanResolver(),
        ArgumentType.CATEGORY: ChannelResolver(frozenset({ResourceKind.CATEGORY})),
        ArgumentType.CHANNEL: ChannelResolver(CHANNEL_KINDS),
        ArgumentType.CUSTOM: CustomResolver(),
        ArgumentType.DURATION: DurationResolver(),
        ArgumentType.EMOJI: EmojiResolver(),
        ArgumentType.JSON: JsonResolver(),
        ArgumentType.MEMBER: UserResolver(member=True),
        ArgumentType.NUMBER: NumberResolver(),
        ArgumentType.ROLE: RoleResolver(),
        ArgumentType.STRING: StringResolver(),
        ArgumentType.TEXT_CHANNEL: ChannelResolver(frozenset({ResourceKind.TEXT_CHANNEL})),
        ArgumentType.USER: UserResolver(),
        ArgumentType.VOICE_CHANNEL: ChannelResolver(frozenset({ResourceKind.VOICE_CHANNEL})),
    }

    def __init__(self, lookup: DirectoryLookup | None = None) -> None:
        self.lookup = lookup

    @classmethod
    def get_resolver(cls, arg_type: ArgumentType) -> TypeResolver:
        """Get the resolver for an argument type."""
        return cls._resolvers[arg_type]

    async def is_valid(self, definition: CommandArgument, text: str | None, guild_id: int | None = None) -> bool:
        """Check ``text`` against the definition without coercing it."""
        if definition.validator is not None:
            result = definition.validator(text, guild_id)
            if inspect.isawaitable(result):
                result = await result
            return bool(result)

        if text is None:
            return False
        if definition.required and not text.strip():
            return False

        if definition.choices is not None:
            return _match_choice(text, definition) is not _NO_MATCH

        if definition.arg_type in GUILD_ONLY_TYPES and guild_id is None:
            return False

        try:
            return await self.get_resolver(definition.arg_type).validate(text, definition, self.lookup, guild_id)
        except DirectoryLookupError as e:
            logger.warning(f"Lookup failed while validating argument {definition.key}: {e}")
            return False

    async def resolve(self, definition: CommandArgument, text: str | None, guild_id: int | None = None) -> Any:
        """Validate ``text`` and convert it to the argument's value type.

        Returns:
            The coerced value, or ``None`` when the text is invalid
        """
        if not await self.is_valid(definition, text, guild_id):
            return None

        if definition.choices is not None:
            choice = _match_choice(text, definition)
            if choice is not _NO_MATCH:
                return choice

        try:
            return await self.get_resolver(definition.arg_type).coerce(text, definition, self.lookup, guild_id)
        except DirectoryLookupError as e:
            logger.warning(f"Lookup failed while resolving argument {definition.key}: {e}")
            return None

    async def parse_arguments(
        self, args: list[str], definitions: list[CommandArgument], guild_id: int | None = None
    ) -> dict[str, Any]:
        """Map positional tokens to argument keys.

        The last ``string`` or ``custom`` argument receives every remaining
        token. Absent optional arguments take their default; invalid values
        are ``None``.
        """
        parsed: dict[str, Any] = {}

        for i, definition in enumerate(definitions):
            if i >= len(args):
                parsed[definition.key] = None if definition.required else definition.default
                continue

            greedy = (
                definition.arg_type in (ArgumentType.STRING, ArgumentType.CUSTOM)
                and definition.choices is None
                and i == len(definitions) - 1
            )
            text = " ".join(args[i:]) if greedy else args[i]
            parsed[definition.key] = await self.resolve(definition, text, guild_id)

        return parsed


_unhandled = set(ArgumentType) - set(ArgumentResolver._resolvers)
if _unhandled:
    raise RuntimeError(f"No resolver registered for argument types: {sorted(t.value for t in _unhandled)}")
