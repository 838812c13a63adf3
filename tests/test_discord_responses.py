"""Tests for the interaction reply helpers."""

from unittest.mock import MagicMock

import pytest
from conftest import make_interaction, sent_texts

from karaoke_queue.infrastructure.discord.responses import caller_of, send_reply


class TestSendReply:
    @pytest.mark.asyncio
    async def test_first_reply_uses_response(self, interaction):
        await send_reply(interaction, "hello", ephemeral=True)

        interaction.response.send_message.assert_awaited_once_with("hello", ephemeral=True)
        interaction.followup.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_after_defer_uses_followup(self, interaction):
        await interaction.response.defer()

        await send_reply(interaction, "hello")

        interaction.followup.send.assert_awaited_once_with("hello", ephemeral=False)

    @pytest.mark.asyncio
    async def test_long_text_is_split(self):
        interaction = make_interaction()
        text = "\n".join("x" * 150 for _ in range(30))

        await send_reply(interaction, text)

        texts = sent_texts(interaction)
        assert len(texts) == 3
        assert interaction.response.send_message.await_count == 1
        assert interaction.followup.send.await_count == 2


class TestCallerOf:
    def test_id_and_display_name(self):
        user = MagicMock()
        user.id = 1234
        user.display_name = "Alice"

        assert caller_of(user) == ("1234", "Alice")

    def test_blank_display_name(self):
        user = MagicMock()
        user.id = 1
        user.display_name = ""

        assert caller_of(user) == ("1", None)
