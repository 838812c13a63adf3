"""Discord cogs - command handlers."""

from karaoke_queue.infrastructure.discord.cogs.cast_cog import CastCog
from karaoke_queue.infrastructure.discord.cogs.karaoke_cog import KaraokeCog

__all__ = [
    "KaraokeCog",
    "CastCog",
]
