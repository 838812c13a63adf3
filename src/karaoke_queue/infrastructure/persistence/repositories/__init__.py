"""SQLite repository implementations."""

from karaoke_queue.infrastructure.persistence.repositories.snapshot_repository import (
    SQLiteSnapshotRepository,
)

__all__ = [
    "SQLiteSnapshotRepository",
]
