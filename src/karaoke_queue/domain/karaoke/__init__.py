"""
Karaoke Bounded Context

Domain logic for karaoke sessions, membership, the shared queue and
now-playing state.
"""

from karaoke_queue.domain.karaoke.entities import (
    CastStatus,
    KaraokeSession,
    Member,
    QueueItem,
    StoreSnapshot,
    VideoRef,
)
from karaoke_queue.domain.karaoke.repository import SnapshotRepository
from karaoke_queue.domain.karaoke.value_objects import CodeAlphabet, VideoId

__all__ = [
    # Entities
    "KaraokeSession",
    "Member",
    "QueueItem",
    "CastStatus",
    "VideoRef",
    "StoreSnapshot",
    # Value Objects
    "VideoId",
    "CodeAlphabet",
    # Repository
    "SnapshotRepository",
]
