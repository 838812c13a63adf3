"""Slash-command cog for choosing and controlling the session's cast device."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from karaoke_queue.application.commands.stop_casting import (
    StopCastingCommand,
    StopCastingStatus,
)
from karaoke_queue.domain.shared.exceptions import CastError
from karaoke_queue.domain.shared.messages import ChatMessages, ErrorMessages
from karaoke_queue.infrastructure.discord.responses import caller_of, send_reply

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


class CastCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @app_commands.command(name="devices", description="List cast devices on the network.")
    async def devices(self, interaction: discord.Interaction) -> None:
        sink = self.container.cast_sink
        if sink is None:
            await send_reply(interaction, ChatMessages.CAST_DISABLED, ephemeral=True)
            return

        # Discovery waits on mDNS answers for several seconds.
        await interaction.response.defer(ephemeral=True)
        try:
            names = await sink.list_devices()
        except CastError as e:
            logger.warning("Device discovery failed: %s", e.message)
            await send_reply(interaction, ChatMessages.CAST_ERROR.format(error=e.message), ephemeral=True)
            return

        if not names:
            await send_reply(interaction, ChatMessages.NO_DEVICES, ephemeral=True)
            return

        listing = "\n".join(f"- {name}" for name in names)
        await send_reply(interaction, f"{ChatMessages.DEVICES_HEADER}\n{listing}", ephemeral=True)

    @app_commands.command(name="device", description="Choose the cast device for your session.")
    @app_commands.describe(name="Friendly name of the cast device, as shown by /devices")
    async def device(self, interaction: discord.Interaction, name: str) -> None:
        caller_id, _ = caller_of(interaction.user)
        if await self.container.session_store.set_device(caller_id, name):
            await send_reply(interaction, ChatMessages.DEVICE_BOUND.format(device=name.strip()))
        else:
            await send_reply(interaction, ChatMessages.NOT_IN_SESSION, ephemeral=True)

    @app_commands.command(name="stop", description="Stop playback (session owner only).")
    async def stop(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer()

        caller_id, _ = caller_of(interaction.user)
        result = await self.container.stop_casting_handler.handle(
            StopCastingCommand(caller_id=caller_id)
        )

        if result.status == StopCastingStatus.NOT_IN_SESSION:
            await send_reply(interaction, ChatMessages.NOT_IN_SESSION, ephemeral=True)
        elif result.status == StopCastingStatus.NOT_OWNER:
            await send_reply(interaction, ChatMessages.NOT_OWNER, ephemeral=True)
        elif result.status == StopCastingStatus.CAST_ERROR:
            await send_reply(
                interaction,
                f"{ChatMessages.PLAYBACK_STOPPED}\n"
                + ChatMessages.CAST_ERROR.format(error=result.message),
            )
        else:
            await send_reply(interaction, ChatMessages.PLAYBACK_STOPPED)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(CastCog(bot, container))
