"""Moderator checks shared by the contest pipeline and slash commands."""
from __future__ import annotations

from typing import Iterable

import discord


def user_has_mod_permission(
    member: discord.Member | None, mod_roles: Iterable[str] = ()
) -> bool:
    """Return True if *member* can kick, is an administrator or holds a mod role.

    ``mod_roles`` may contain role ids or role names.
    """
    if member is None:
        return False
    perms = getattr(member, "guild_permissions", None)
    if perms is not None and (perms.kick_members or perms.administrator):
        return True
    wanted = {str(r) for r in mod_roles}
    if not wanted:
        return False
    for role in getattr(member, "roles", []) or []:
        if str(role.id) in wanted or role.name in wanted:
            return True
    return False


def merged_mod_roles(guild_roles: Iterable[str], default_roles: Iterable[str]) -> tuple[str, ...]:
    """Guild-configured moderator roles followed by the env defaults, deduplicated."""
    seen: dict[str, None] = {}
    for role in (*guild_roles, *default_roles):
        seen.setdefault(str(role), None)
    return tuple(seen)


async def ensure_moderator(interaction: discord.Interaction, mod_roles: Iterable[str]) -> bool:
    """Reject the interaction ephemerally unless the invoker is a moderator."""
    if user_has_mod_permission(interaction.user, mod_roles):
        return True
    await interaction.response.send_message("You must be admin or mod.", ephemeral=True)
    return False
