"""Slash-command cog for karaoke sessions and the shared queue."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from karaoke_queue.application.commands.add_video import (
    AddVideoCommand,
    AddVideoResult,
    AddVideoStatus,
)
from karaoke_queue.application.commands.advance_queue import (
    AdvanceQueueCommand,
    AdvanceQueueResult,
    AdvanceQueueStatus,
)
from karaoke_queue.domain.shared.messages import ChatMessages, ErrorMessages
from karaoke_queue.infrastructure.discord.responses import caller_of, send_reply
from karaoke_queue.infrastructure.youtube.youtube_resolver import split_link_and_note
from karaoke_queue.utils.reply import format_queue, truncate

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


def add_reply(result: AddVideoResult) -> str:
    if result.status == AddVideoStatus.ADDED:
        title = result.video.display_title if result.video else ""
        return ChatMessages.ADDED_TO_QUEUE.format(title=truncate(title))
    return {
        AddVideoStatus.DUPLICATE: ChatMessages.ALREADY_IN_QUEUE,
        AddVideoStatus.NOT_IN_SESSION: ChatMessages.NOT_IN_SESSION,
        AddVideoStatus.INVALID_URL: ChatMessages.INVALID_URL,
        AddVideoStatus.RESOLVER_TIMEOUT: ChatMessages.RESOLVER_TIMEOUT,
    }.get(result.status, ChatMessages.ADD_FAILED)


def advance_reply(result: AdvanceQueueResult) -> str:
    if result.status == AdvanceQueueStatus.NOT_IN_SESSION:
        return ChatMessages.NOT_IN_SESSION
    if result.status == AdvanceQueueStatus.NOT_OWNER:
        return ChatMessages.NOT_OWNER
    if result.status == AdvanceQueueStatus.QUEUE_EMPTY or result.item is None:
        return ChatMessages.NO_MORE_SONGS

    video = result.item.video
    if result.device and result.cast_error is None:
        text = ChatMessages.NOW_PLAYING_ON_DEVICE.format(
            title=truncate(video.display_title), device=result.device, url=video.url
        )
    else:
        text = ChatMessages.NOW_PLAYING.format(title=truncate(video.display_title), url=video.url)
    if result.cast_error:
        text += "\n" + ChatMessages.CAST_FAILED.format(error=result.cast_error)
    return text


class KaraokeCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    # ─────────────────────────────────────────────────────────────────
    # Sessions
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="help", description="Show the karaoke commands.")
    async def show_help(self, interaction: discord.Interaction) -> None:
        await send_reply(interaction, ChatMessages.HELP, ephemeral=True)

    @app_commands.command(name="start_session", description="Start a new karaoke session.")
    async def start_session(self, interaction: discord.Interaction) -> None:
        caller_id, display_name = caller_of(interaction.user)
        code = await self.container.session_store.create_session(caller_id, display_name)
        await send_reply(interaction, ChatMessages.SESSION_CREATED.format(code=code))

    @app_commands.command(name="join", description="Join an existing karaoke session.")
    @app_commands.describe(code="Session code shared by the session owner")
    async def join(self, interaction: discord.Interaction, code: str) -> None:
        caller_id, display_name = caller_of(interaction.user)
        store = self.container.session_store
        if await store.join_session(caller_id, code, display_name):
            joined = await store.get_session_code(caller_id)
            await send_reply(interaction, ChatMessages.SESSION_JOINED.format(code=joined))
        else:
            await send_reply(interaction, ChatMessages.INVALID_SESSION_CODE, ephemeral=True)

    @app_commands.command(name="leave", description="Leave your karaoke session.")
    async def leave(self, interaction: discord.Interaction) -> None:
        caller_id, _ = caller_of(interaction.user)
        if await self.container.session_store.leave_session(caller_id):
            await send_reply(interaction, ChatMessages.SESSION_LEFT, ephemeral=True)
        else:
            await send_reply(interaction, ChatMessages.NOT_IN_SESSION, ephemeral=True)

    @app_commands.command(name="info", description="Show details about your session.")
    async def info(self, interaction: discord.Interaction) -> None:
        caller_id, _ = caller_of(interaction.user)
        info = await self.container.session_store.get_session_info(caller_id)
        await send_reply(interaction, info or ChatMessages.NOT_IN_SESSION, ephemeral=True)

    # ─────────────────────────────────────────────────────────────────
    # Queue
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="add", description="Add a YouTube link to the queue.")
    @app_commands.describe(url="YouTube link", note="Optional note shown in the queue")
    async def add(
        self, interaction: discord.Interaction, url: str, note: str | None = None
    ) -> None:
        # Title lookups can exceed the 3-second interaction deadline.
        await interaction.response.defer()

        caller_id, display_name = caller_of(interaction.user)
        result = await self.container.add_video_handler.handle(
            AddVideoCommand(caller_id=caller_id, url=url, display_name=display_name, note=note)
        )
        await send_reply(interaction, add_reply(result), ephemeral=not result.is_success)

    @app_commands.command(name="queue", description="Show the upcoming songs.")
    async def queue(self, interaction: discord.Interaction) -> None:
        caller_id, _ = caller_of(interaction.user)
        items = await self.container.session_store.get_queue(caller_id)
        if items is None:
            await send_reply(interaction, ChatMessages.NOT_IN_SESSION, ephemeral=True)
        elif not items:
            await send_reply(interaction, ChatMessages.QUEUE_EMPTY)
        else:
            await send_reply(interaction, format_queue(ChatMessages.QUEUE_HEADER, items))

    @app_commands.command(name="history", description="Show the songs already played.")
    async def history(self, interaction: discord.Interaction) -> None:
        caller_id, _ = caller_of(interaction.user)
        items = await self.container.session_store.get_history(caller_id)
        if items is None:
            await send_reply(interaction, ChatMessages.NOT_IN_SESSION, ephemeral=True)
        elif not items:
            await send_reply(interaction, ChatMessages.HISTORY_EMPTY)
        else:
            await send_reply(interaction, format_queue(ChatMessages.HISTORY_HEADER, items))

    @app_commands.command(name="next", description="Play the next song (session owner only).")
    async def next_song(self, interaction: discord.Interaction) -> None:
        # Casting can exceed the 3-second interaction deadline.
        await interaction.response.defer()

        caller_id, _ = caller_of(interaction.user)
        result = await self.container.advance_queue_handler.handle(
            AdvanceQueueCommand(caller_id=caller_id)
        )
        await send_reply(interaction, advance_reply(result), ephemeral=not result.is_success)

    @app_commands.command(name="current", description="Show what is playing.")
    async def current(self, interaction: discord.Interaction) -> None:
        caller_id, _ = caller_of(interaction.user)
        store = self.container.session_store
        if not await store.is_in_session(caller_id):
            await send_reply(interaction, ChatMessages.NOT_IN_SESSION, ephemeral=True)
            return

        video = await store.get_current_video(caller_id)
        if video is None:
            await send_reply(interaction, ChatMessages.NOTHING_PLAYING)
            return
        await send_reply(
            interaction,
            ChatMessages.NOW_PLAYING.format(title=truncate(video.display_title), url=video.url),
        )

    # ─────────────────────────────────────────────────────────────────
    # Links pasted into the chat
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author is None or message.author.bot:
            return

        parsed = split_link_and_note(message.content or "")
        if parsed is None:
            return

        url, note = parsed
        caller_id, display_name = caller_of(message.author)
        result = await self.container.add_video_handler.handle(
            AddVideoCommand(caller_id=caller_id, url=url, display_name=display_name, note=note)
        )
        logger.debug("Link from %s handled: %s", caller_id, result.status.value)
        await message.channel.send(add_reply(result))


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(KaraokeCog(bot, container))
