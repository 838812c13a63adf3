"""
Unit Tests for Bot Lifecycle

Covers src/karaoke_queue/infrastructure/discord/bot.py:
- Initialization (intents, prefix, help command, container wiring)
- setup_hook (container init, cog loading, optional command sync)
- Cog loading with individual failures
- Command sync to guilds and globally
- Global slash-command error handler
- on_ready presence and close()
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import discord
import pytest

from karaoke_queue.infrastructure.discord.bot import COG_EXTENSIONS, KaraokeBot, create_bot


@pytest.fixture
def mock_settings():
    settings = MagicMock()
    settings.discord.command_prefix = "!"
    settings.discord.sync_on_startup = False
    settings.discord.guild_ids = ()
    return settings


@pytest.fixture
def mock_container():
    container = MagicMock()
    container.initialize = AsyncMock()
    container.shutdown = AsyncMock()
    return container


@pytest.fixture
def bot(mock_container, mock_settings):
    return KaraokeBot(container=mock_container, settings=mock_settings)


class TestBotInitialization:
    @pytest.mark.asyncio
    async def test_intents(self, bot):
        assert bot.intents.message_content is True
        assert bot.intents.guilds is True

    @pytest.mark.asyncio
    async def test_prefix_and_help(self, mock_container, mock_settings):
        mock_settings.discord.command_prefix = "?"
        bot = KaraokeBot(container=mock_container, settings=mock_settings)

        assert bot.command_prefix == "?"
        assert bot.help_command is None

    @pytest.mark.asyncio
    async def test_stores_container_and_settings(self, bot, mock_container, mock_settings):
        assert bot.container is mock_container
        assert bot.settings is mock_settings
        assert isinstance(bot._shutdown_event, asyncio.Event)

    @pytest.mark.asyncio
    async def test_create_bot(self, mock_container, mock_settings):
        bot = create_bot(mock_container, mock_settings)
        assert isinstance(bot, KaraokeBot)


class TestSetupHook:
    @pytest.mark.asyncio
    async def test_initializes_container_and_loads_cogs(self, bot, mock_container):
        with patch.object(bot, "_load_cogs", new_callable=AsyncMock) as mock_load:
            await bot.setup_hook()

        mock_container.initialize.assert_awaited_once()
        mock_load.assert_awaited_once()
        assert bot.tree.on_error == bot._on_app_command_error

    @pytest.mark.asyncio
    async def test_container_failure_propagates(self, bot, mock_container):
        mock_container.initialize.side_effect = RuntimeError("boom")

        with patch.object(bot, "_load_cogs", new_callable=AsyncMock) as mock_load:
            with pytest.raises(RuntimeError):
                await bot.setup_hook()

        mock_load.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sync_only_when_enabled(self, bot, mock_settings):
        with (
            patch.object(bot, "_load_cogs", new_callable=AsyncMock),
            patch.object(bot, "_sync_commands", new_callable=AsyncMock) as mock_sync,
        ):
            await bot.setup_hook()
            mock_sync.assert_not_awaited()

            mock_settings.discord.sync_on_startup = True
            await bot.setup_hook()
            mock_sync.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_sync_failure_does_not_abort_setup(self, bot, mock_settings):
        mock_settings.discord.sync_on_startup = True

        with (
            patch.object(bot, "_load_cogs", new_callable=AsyncMock),
            patch.object(bot, "_sync_commands", new_callable=AsyncMock, side_effect=Exception("x")),
        ):
            await bot.setup_hook()


class TestLoadCogs:
    @pytest.mark.asyncio
    async def test_loads_every_extension(self, bot):
        with patch.object(bot, "load_extension", new_callable=AsyncMock) as mock_load:
            await bot._load_cogs()

        assert [c.args[0] for c in mock_load.await_args_list] == list(COG_EXTENSIONS)

    @pytest.mark.asyncio
    async def test_continues_after_failure(self, bot):
        with patch.object(
            bot, "load_extension", new_callable=AsyncMock, side_effect=[Exception("bad"), None]
        ) as mock_load:
            await bot._load_cogs()

        assert mock_load.await_count == 2

    @pytest.mark.asyncio
    async def test_real_extensions_register_commands(self, bot):
        await bot._load_cogs()

        names = {command.name for command in bot.tree.get_commands()}
        assert {"start_session", "join", "add", "next", "queue", "devices", "stop"} <= names
        assert set(bot.cogs) == {"KaraokeCog", "CastCog"}


class TestSyncCommands:
    @pytest.mark.asyncio
    async def test_global_sync(self, bot):
        with patch.object(bot.tree, "sync", new_callable=AsyncMock, return_value=[]) as mock_sync:
            await bot._sync_commands()

        mock_sync.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_guild_sync(self, bot, mock_settings):
        mock_settings.discord.guild_ids = (111111, 222222)

        with (
            patch.object(bot.tree, "copy_global_to") as mock_copy,
            patch.object(bot.tree, "sync", new_callable=AsyncMock, return_value=[]) as mock_sync,
        ):
            await bot._sync_commands()

        assert mock_copy.call_count == 2
        assert mock_sync.await_count == 3

    @pytest.mark.asyncio
    async def test_guild_error_still_syncs_globally(self, bot, mock_settings):
        mock_settings.discord.guild_ids = (111111,)

        async def sync_side_effect(guild=None):
            if guild is not None:
                raise Exception("Guild sync failed")
            return []

        with (
            patch.object(bot.tree, "copy_global_to"),
            patch.object(bot.tree, "sync", new_callable=AsyncMock, side_effect=sync_side_effect) as mock_sync,
        ):
            await bot._sync_commands()

        mock_sync.assert_any_await()

    @pytest.mark.asyncio
    async def test_global_error_is_swallowed(self, bot):
        with patch.object(bot.tree, "sync", new_callable=AsyncMock, side_effect=Exception("down")):
            await bot._sync_commands()


class TestAppCommandErrorHandler:
    @pytest.mark.asyncio
    async def test_sends_ephemeral_response(self, bot):
        interaction = MagicMock()
        interaction.response.is_done.return_value = False
        interaction.response.send_message = AsyncMock()

        await bot._on_app_command_error(interaction, Exception("Test error"))

        interaction.response.send_message.assert_awaited_once()
        assert interaction.response.send_message.await_args.kwargs["ephemeral"] is True

    @pytest.mark.asyncio
    async def test_uses_followup_when_deferred(self, bot):
        interaction = MagicMock()
        interaction.response.is_done.return_value = True
        interaction.followup.send = AsyncMock()

        await bot._on_app_command_error(interaction, Exception("Test error"))

        interaction.followup.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unwraps_original_error(self, bot):
        interaction = MagicMock()
        interaction.response.is_done.return_value = False
        interaction.response.send_message = AsyncMock()
        wrapper = MagicMock()
        wrapper.original = ValueError("inner problem")

        await bot._on_app_command_error(interaction, wrapper)

        assert "inner problem" in interaction.response.send_message.await_args.args[0]

    @pytest.mark.asyncio
    async def test_send_failure_is_logged(self, bot):
        interaction = MagicMock()
        interaction.response.is_done.return_value = False
        interaction.response.send_message = AsyncMock(
            side_effect=discord.HTTPException(MagicMock(status=500), "fail")
        )

        await bot._on_app_command_error(interaction, Exception("Test error"))


class TestOnReadyAndClose:
    @pytest.mark.asyncio
    async def test_on_ready_sets_presence(self, bot):
        user = MagicMock()
        user.id = 42

        with (
            patch.object(type(bot), "user", PropertyMock(return_value=user)),
            patch.object(type(bot), "guilds", PropertyMock(return_value=[MagicMock()])),
            patch.object(bot, "change_presence", new_callable=AsyncMock) as mock_change,
        ):
            await bot.on_ready()

        activity = mock_change.await_args.kwargs["activity"]
        assert activity.name == "/start_session"

    @pytest.mark.asyncio
    async def test_close_shuts_down_container(self, bot, mock_container):
        await bot.close()

        mock_container.shutdown.assert_awaited_once()
        assert bot._shutdown_event.is_set()

    @pytest.mark.asyncio
    async def test_close_survives_container_error(self, bot, mock_container):
        mock_container.shutdown.side_effect = RuntimeError("db locked")

        await bot.close()

        assert bot._shutdown_event.is_set()
