"""Permission helpers shared by the guard pipeline and the gateway adapters."""

import hikari

PERMISSION_NAMES: dict[hikari.Permissions, str] = {
    hikari.Permissions.CREATE_INSTANT_INVITE: "Create Instant Invite",
    hikari.Permissions.KICK_MEMBERS: "Kick Members",
    hikari.Permissions.BAN_MEMBERS: "Ban Members",
    hikari.Permissions.ADMINISTRATOR: "Administrator",
    hikari.Permissions.MANAGE_CHANNELS: "Manage Channels",
    hikari.Permissions.MANAGE_GUILD: "Manage Server",
    hikari.Permissions.ADD_REACTIONS: "Add Reactions",
    hikari.Permissions.VIEW_AUDIT_LOG: "View Audit Log",
    hikari.Permissions.VIEW_CHANNEL: "View Channels",
    hikari.Permissions.SEND_MESSAGES: "Send Messages",
    hikari.Permissions.MANAGE_MESSAGES: "Manage Messages",
    hikari.Permissions.EMBED_LINKS: "Embed Links",
    hikari.Permissions.ATTACH_FILES: "Attach Files",
    hikari.Permissions.READ_MESSAGE_HISTORY: "Read Message History",
    hikari.Permissions.MENTION_ROLES: "Mention @everyone, @here, and All Roles",
    hikari.Permissions.USE_EXTERNAL_EMOJIS: "Use External Emojis",
    hikari.Permissions.CONNECT: "Connect",
    hikari.Permissions.SPEAK: "Speak",
    hikari.Permissions.MUTE_MEMBERS: "Mute Members",
    hikari.Permissions.DEAFEN_MEMBERS: "Deafen Members",
    hikari.Permissions.MOVE_MEMBERS: "Move Members",
    hikari.Permissions.MANAGE_NICKNAMES: "Manage Nicknames",
    hikari.Permissions.MANAGE_ROLES: "Manage Roles",
    hikari.Permissions.MANAGE_WEBHOOKS: "Manage Webhooks",
    hikari.Permissions.MANAGE_THREADS: "Manage Threads",
    hikari.Permissions.MODERATE_MEMBERS: "Timeout Members",
}


def calculate_member_permissions(
    member: hikari.Member, guild: hikari.Guild, channel: hikari.GuildChannel | None = None
) -> hikari.Permissions:
    """
    Calculate the effective permissions for a member in a guild or channel.

    Args:
        member: The guild member to calculate permissions for
        guild: The guild the member belongs to
        channel: Optional channel to include channel overwrites

    Returns:
        The calculated permissions for the member
    """
    if member.id == guild.owner_id:
        return ~hikari.Permissions.NONE

    # @everyone role has same ID as guild
    everyone_role = guild.get_role(guild.id)
    permissions = everyone_role.permissions if everyone_role else hikari.Permissions.NONE

    for role_id in member.role_ids:
        role = guild.get_role(role_id)
        if role:
            permissions |= role.permissions

    if permissions & hikari.Permissions.ADMINISTRATOR:
        return ~hikari.Permissions.NONE

    if channel and hasattr(channel, "permission_overwrites"):
        everyone_overwrite = channel.permission_overwrites.get(guild.id)
        if everyone_overwrite:
            permissions &= ~everyone_overwrite.deny
            permissions |= everyone_overwrite.allow

        for role_id in member.role_ids:
            role_overwrite = channel.permission_overwrites.get(role_id)
            if role_overwrite:
                permissions &= ~role_overwrite.deny
                permissions |= role_overwrite.allow

        # Member-specific overwrites have the highest priority
        member_overwrite = channel.permission_overwrites.get(member.id)
        if member_overwrite:
            permissions &= ~member_overwrite.deny
            permissions |= member_overwrite.allow

    return permissions


def format_permission(permission: hikari.Permissions) -> str:
    """
    Return the human-readable name of a single permission flag.

    Flags missing from :data:`PERMISSION_NAMES` are derived from the flag
    name, e.g. ``MANAGE_GUILD_EXPRESSIONS`` becomes
    ``Manage Server Expressions``.
    """
    if permission in PERMISSION_NAMES:
        return PERMISSION_NAMES[permission]

    name = (permission.name or str(permission)).lower().replace("guild", "server")
    return " ".join(word.capitalize() for word in name.split("_") if word)


def format_permissions(permissions: list[hikari.Permissions]) -> str:
    """Format permissions as a comma separated list of backtick-quoted names."""
    return ", ".join(f"`{format_permission(permission)}`" for permission in permissions)


def format_number(n: int | float, sep: str = ",") -> str:
    """Group the integer digits of ``n`` by thousands with ``sep``."""
    return f"{n:,}".replace(",", sep)
