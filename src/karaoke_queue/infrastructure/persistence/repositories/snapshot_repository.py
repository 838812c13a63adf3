"""SQLite implementation of the snapshot repository."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any

from karaoke_queue.domain.karaoke.entities import (
    CastStatus,
    KaraokeSession,
    Member,
    QueueItem,
    StoreSnapshot,
    VideoRef,
)
from karaoke_queue.domain.karaoke.repository import SnapshotRepository
from karaoke_queue.domain.karaoke.value_objects import VideoId
from karaoke_queue.domain.shared.datetime_utils import UtcDateTime
from karaoke_queue.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


class SQLiteSnapshotRepository(SnapshotRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def load(self) -> StoreSnapshot:
        session_rows = await self._db.fetch_all("SELECT * FROM karaoke_sessions")
        member_rows = await self._db.fetch_all(
            "SELECT * FROM session_members ORDER BY session_code, position ASC"
        )
        item_rows = await self._db.fetch_all(
            "SELECT * FROM queue_items ORDER BY session_code, position ASC"
        )
        membership_rows = await self._db.fetch_all("SELECT * FROM memberships")

        members: dict[str, list[Member]] = defaultdict(list)
        for row in member_rows:
            members[row["session_code"]].append(
                Member(caller_id=row["caller_id"], display_name=row["display_name"])
            )

        queues: dict[str, list[QueueItem]] = defaultdict(list)
        for row in item_rows:
            queues[row["session_code"]].append(self._row_to_item(row))

        sessions: dict[str, KaraokeSession] = {}
        for row in session_rows:
            code = row["code"]
            sessions[code] = KaraokeSession(
                code=code,
                owner_id=row["owner_id"],
                members=members.get(code, []),
                queue=queues.get(code, []),
                cast_status=self._row_to_cast_status(row),
                created_at=UtcDateTime.from_iso(row["created_at"]).dt,
            )

        memberships = {row["caller_id"]: row["session_code"] for row in membership_rows}
        return StoreSnapshot(sessions=sessions, memberships=memberships)

    async def save(self, snapshot: StoreSnapshot) -> None:
        async with self._db.transaction() as conn:
            await conn.execute("DELETE FROM memberships")
            await conn.execute("DELETE FROM queue_items")
            await conn.execute("DELETE FROM session_members")
            await conn.execute("DELETE FROM karaoke_sessions")

            for session in snapshot.sessions.values():
                await conn.execute(
                    """
                    INSERT INTO karaoke_sessions (
                        code, owner_id, created_at, current_video_id, current_video_title,
                        current_video_url, cast_device, is_playing
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    self._session_to_params(session),
                )
                await conn.executemany(
                    """
                    INSERT INTO session_members (session_code, caller_id, display_name, position)
                    VALUES (?, ?, ?, ?)
                    """,
                    [
                        (session.code, m.caller_id, m.display_name, position)
                        for position, m in enumerate(session.members)
                    ],
                )
                await conn.executemany(
                    """
                    INSERT INTO queue_items (
                        session_code, position, video_id, video_title, video_url,
                        added_by, added_by_name, note, added_at, played, played_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        self._item_to_params(item, session.code, position)
                        for position, item in enumerate(session.queue)
                    ],
                )

            await conn.executemany(
                "INSERT INTO memberships (caller_id, session_code) VALUES (?, ?)",
                list(snapshot.memberships.items()),
            )

        logger.debug(LogTemplates.SNAPSHOT_SAVED, len(snapshot.sessions), len(snapshot.memberships))

    @staticmethod
    def _session_to_params(session: KaraokeSession) -> tuple[Any, ...]:
        current = session.cast_status.current_video
        return (
            session.code,
            session.owner_id,
            UtcDateTime(session.created_at).iso,
            current.id.value if current else None,
            current.title if current else None,
            current.url if current else None,
            session.cast_status.device,
            1 if session.cast_status.is_playing else 0,
        )

    @staticmethod
    def _item_to_params(item: QueueItem, session_code: str, position: int) -> tuple[Any, ...]:
        return (
            session_code,
            position,
            item.video.id.value,
            item.video.title,
            item.video.url,
            item.added_by,
            item.added_by_name,
            item.note,
            UtcDateTime(item.added_at).iso,
            1 if item.played else 0,
            UtcDateTime(item.played_at).iso if item.played_at else None,
        )

    @staticmethod
    def _row_to_cast_status(row: dict[str, Any]) -> CastStatus:
        current_video = None
        if row["current_video_id"]:
            current_video = VideoRef(
                id=VideoId(row["current_video_id"]),
                title=row["current_video_title"],
                url=row["current_video_url"],
            )
        return CastStatus(
            current_video=current_video,
            device=row["cast_device"],
            is_playing=bool(row["is_playing"]),
        )

    @staticmethod
    def _row_to_item(row: dict[str, Any]) -> QueueItem:
        return QueueItem(
            video=VideoRef(
                id=VideoId(row["video_id"]),
                title=row["video_title"],
                url=row["video_url"],
            ),
            added_by=row["added_by"],
            added_by_name=row["added_by_name"],
            note=row["note"],
            added_at=UtcDateTime.from_iso(row["added_at"]).dt,
            played=bool(row["played"]),
            played_at=UtcDateTime.from_iso(row["played_at"]).dt if row["played_at"] else None,
        )
