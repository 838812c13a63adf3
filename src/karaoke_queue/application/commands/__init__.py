"""
Application Commands

Command objects and their handlers for write operations that span the
session store and an external collaborator (resolver or cast device).
"""

from karaoke_queue.application.commands.add_video import (
    AddVideoCommand,
    AddVideoHandler,
    AddVideoResult,
    AddVideoStatus,
)
from karaoke_queue.application.commands.advance_queue import (
    AdvanceQueueCommand,
    AdvanceQueueHandler,
    AdvanceQueueResult,
    AdvanceQueueStatus,
)
from karaoke_queue.application.commands.stop_casting import (
    StopCastingCommand,
    StopCastingHandler,
    StopCastingResult,
    StopCastingStatus,
)

__all__ = [
    # Add
    "AddVideoCommand",
    "AddVideoResult",
    "AddVideoStatus",
    "AddVideoHandler",
    # Advance
    "AdvanceQueueCommand",
    "AdvanceQueueResult",
    "AdvanceQueueStatus",
    "AdvanceQueueHandler",
    # Stop
    "StopCastingCommand",
    "StopCastingResult",
    "StopCastingStatus",
    "StopCastingHandler",
]
