"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (SQLite snapshot repository)
- Discord (bot, cogs)
- YouTube (link validation, title lookup)
- Cast (Chromecast discovery and playback)
"""

from karaoke_queue.infrastructure.discord.bot import create_bot
from karaoke_queue.infrastructure.persistence.database import Database

__all__ = [
    "create_bot",
    "Database",
]
