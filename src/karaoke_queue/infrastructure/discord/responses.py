"""Helpers for answering slash-command interactions."""

from __future__ import annotations

import discord

from karaoke_queue.utils.reply import chunk_message


async def send_reply(
    interaction: discord.Interaction, text: str, *, ephemeral: bool = False
) -> None:
    """Answer *interaction*, using the followup webhook once a response was sent or deferred.

    Text over Discord's message limit is split across several messages.
    """
    for chunk in chunk_message(text):
        if interaction.response.is_done():
            await interaction.followup.send(chunk, ephemeral=ephemeral)
        else:
            await interaction.response.send_message(chunk, ephemeral=ephemeral)


def caller_of(user: discord.abc.User) -> tuple[str, str | None]:
    """Caller id and display name for a Discord user."""
    return str(user.id), getattr(user, "display_name", None) or None
