"""Session Store - the single authority over sessions, membership and queues."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING

from ...config.settings import SessionSettings
from ...domain.karaoke.entities import (
    CastStatus,
    KaraokeSession,
    QueueItem,
    StoreSnapshot,
    VideoRef,
)
from ...domain.karaoke.value_objects import generate_session_code, normalize_session_code
from ...domain.shared.datetime_utils import elapsed_hours_minutes
from ...domain.shared.exceptions import (
    InvalidVideoUrlError,
    NotInSessionError,
    ResolverTimeoutError,
    SessionCodeExhaustedError,
)
from ...domain.shared.messages import ChatMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.karaoke.repository import SnapshotRepository
    from ..interfaces.video_resolver import VideoResolver

logger = logging.getLogger(__name__)

MAX_NOTE_LENGTH = 500


def _clean_name(display_name: str | None) -> str | None:
    return (display_name or "").strip() or None


class SessionStore:
    """Owns every karaoke session and the caller -> session membership index.

    All public operations run under one ``asyncio.Lock`` so no caller can
    observe a half-applied mutation. The video resolver is called with the
    lock released; the caller's membership is re-checked before the resolved
    item is appended. Each mutation ends with a best-effort snapshot save.
    """

    def __init__(
        self,
        *,
        video_resolver: VideoResolver,
        snapshot_repository: SnapshotRepository | None = None,
        settings: SessionSettings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._resolver = video_resolver
        self._snapshot_repo = snapshot_repository
        self._settings = settings or SessionSettings()
        self._rng = rng or random.Random()
        self._sessions: dict[str, KaraokeSession] = {}
        self._memberships: dict[str, str] = {}
        self._lock = asyncio.Lock()

    # === Lifecycle ===

    async def load(self) -> None:
        """Replace in-memory state with the persisted snapshot, or start empty."""
        snapshot = StoreSnapshot()
        if self._snapshot_repo is not None:
            try:
                snapshot = await self._snapshot_repo.load()
            except Exception as e:
                logger.warning(LogTemplates.SNAPSHOT_LOAD_FAILED, e)
                snapshot = StoreSnapshot()

        async with self._lock:
            self._sessions = dict(snapshot.sessions)
            # Index entries pointing at sessions that no longer exist are dropped.
            self._memberships = {
                caller: code
                for caller, code in snapshot.memberships.items()
                if code in self._sessions
            }

        logger.info(LogTemplates.SNAPSHOT_LOADED, len(self._sessions), len(self._memberships))

    async def snapshot(self) -> StoreSnapshot:
        async with self._lock:
            return self._snapshot_locked()

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    # === Session lifecycle ===

    async def create_session(self, caller_id: str, display_name: str | None = None) -> str:
        """Start a new session owned by *caller_id* and return its code."""
        async with self._lock:
            if self._settings.detach_on_create:
                previous = self._memberships.pop(caller_id, None)
                if previous is not None:
                    self._remove_member_locked(caller_id, previous)

            code = self._new_code_locked()
            session = KaraokeSession(code=code, owner_id=caller_id, cast_status=CastStatus())
            session.add_member(caller_id, _clean_name(display_name))
            self._sessions[code] = session
            # Overwrites any previous mapping; see detach_on_create for the old member list.
            self._memberships[caller_id] = code

            logger.info(LogTemplates.SESSION_CREATED, code, caller_id)
            await self._persist_locked()
            return code

    async def join_session(
        self, caller_id: str, code: str, display_name: str | None = None
    ) -> bool:
        code = normalize_session_code(code)
        async with self._lock:
            session = self._sessions.get(code)
            if session is None:
                logger.debug(LogTemplates.SESSION_JOIN_UNKNOWN, caller_id, code)
                return False

            previous = self._memberships.get(caller_id)
            if previous is not None and previous != code:
                self._remove_member_locked(caller_id, previous)
                logger.info(LogTemplates.SESSION_DETACHED, caller_id, previous)

            session.add_member(caller_id, _clean_name(display_name))
            self._memberships[caller_id] = code

            logger.info(LogTemplates.SESSION_JOINED, caller_id, code)
            await self._persist_locked()
            return True

    async def leave_session(self, caller_id: str) -> bool:
        async with self._lock:
            code = self._memberships.pop(caller_id, None)
            if code is None:
                return False

            self._remove_member_locked(caller_id, code)
            await self._persist_locked()
            return True

    # === Lookups ===

    async def is_in_session(self, caller_id: str) -> bool:
        async with self._lock:
            return self._session_of_locked(caller_id) is not None

    async def is_session_owner(self, caller_id: str) -> bool:
        async with self._lock:
            session = self._session_of_locked(caller_id)
            return session is not None and session.is_owner(caller_id)

    async def get_session_code(self, caller_id: str) -> str | None:
        async with self._lock:
            session = self._session_of_locked(caller_id)
            return session.code if session else None

    async def get_queue(self, caller_id: str) -> list[QueueItem] | None:
        """Unplayed items of the caller's session, oldest first."""
        async with self._lock:
            session = self._session_of_locked(caller_id)
            if session is None:
                return None
            return [item.model_copy(deep=True) for item in session.pending_items]

    async def get_history(self, caller_id: str) -> list[QueueItem] | None:
        """Played items of the caller's session, in the order they were played."""
        async with self._lock:
            session = self._session_of_locked(caller_id)
            if session is None:
                return None
            return [item.model_copy(deep=True) for item in session.played_items]

    async def get_current_video(self, caller_id: str) -> VideoRef | None:
        async with self._lock:
            session = self._session_of_locked(caller_id)
            return session.cast_status.current_video if session else None

    async def get_cast_status(self, caller_id: str) -> CastStatus | None:
        async with self._lock:
            session = self._session_of_locked(caller_id)
            return session.cast_status.model_copy(deep=True) if session else None

    async def get_device(self, caller_id: str) -> str | None:
        async with self._lock:
            session = self._session_of_locked(caller_id)
            return session.cast_status.device if session else None

    async def get_session_info(self, caller_id: str) -> str | None:
        """Human-readable summary; the member list is only shown to the owner."""
        async with self._lock:
            session = self._session_of_locked(caller_id)
            if session is None:
                return None

            hours, minutes = elapsed_hours_minutes(session.created_at)
            info = ChatMessages.SESSION_INFO.format(
                code=session.code, hours=hours, minutes=minutes, count=session.member_count
            )
            if session.is_owner(caller_id):
                info += ChatMessages.SESSION_INFO_MEMBERS_HEADER
                for member in session.members:
                    info += ChatMessages.SESSION_INFO_MEMBER_LINE.format(name=member.label)
            return info

    # === Queue ===

    async def add_to_queue(
        self,
        caller_id: str,
        url: str,
        display_name: str | None = None,
        note: str | None = None,
    ) -> bool:
        """Resolve *url* and append it to the caller's queue.

        Returns True when the item was appended, False on a rejected duplicate.
        See :meth:`enqueue_video` for the errors raised.
        """
        item = await self.enqueue_video(caller_id, url, display_name=display_name, note=note)
        return item is not None

    async def enqueue_video(
        self,
        caller_id: str,
        url: str,
        display_name: str | None = None,
        note: str | None = None,
    ) -> QueueItem | None:
        """Resolve *url*, append it to the caller's queue and return a copy of the item.

        Returns None, without touching the queue, when duplicate rejection is
        on and the video is already in the session (played or not).

        Raises:
            NotInSessionError: the caller has no session, before or after resolving.
            InvalidVideoUrlError: *url* is not a supported video link.
            ResolverTimeoutError: resolution took longer than the configured timeout.
        """
        async with self._lock:
            session = self._session_of_locked(caller_id)
            if session is None:
                raise NotInSessionError(caller_id)
            code = session.code

        video = await self._resolve(url)

        async with self._lock:
            session = self._session_of_locked(caller_id)
            if session is None or session.code != code:
                logger.info(LogTemplates.QUEUE_SESSION_GONE, caller_id, url)
                raise NotInSessionError(caller_id)

            if self._settings.reject_duplicate_videos and session.has_video(video.id):
                logger.info(LogTemplates.QUEUE_DUPLICATE, video.id, code)
                return None

            note = note.strip()[:MAX_NOTE_LENGTH] if note else None
            item = QueueItem(
                video=video,
                added_by=caller_id,
                added_by_name=_clean_name(display_name),
                note=note or None,
            )
            position = session.enqueue(item)

            logger.info(LogTemplates.QUEUE_ENQUEUED, video.id, code, position)
            await self._persist_locked()
            return item.model_copy(deep=True)

    async def next_in_queue(self, caller_id: str) -> QueueItem | None:
        """Owner-only: play the oldest unplayed item and return a copy of it."""
        async with self._lock:
            session = self._session_of_locked(caller_id)
            if session is None or not session.is_owner(caller_id):
                return None

            item = session.advance()
            if item is None:
                return None

            logger.info(LogTemplates.QUEUE_ADVANCED, session.code, item.video.id)
            await self._persist_locked()
            return item.model_copy(deep=True)

    # === Cast status ===

    async def set_device(self, caller_id: str, device_name: str) -> bool:
        device_name = device_name.strip()
        if not device_name:
            return False

        async with self._lock:
            session = self._session_of_locked(caller_id)
            if session is None:
                return False

            session.bind_device(device_name)
            logger.info(LogTemplates.DEVICE_BOUND, device_name, session.code)
            await self._persist_locked()
            return True

    async def stop_playback(self, caller_id: str) -> bool:
        """Owner-only: clear the playing flag. The last video stays current."""
        async with self._lock:
            session = self._session_of_locked(caller_id)
            if session is None or not session.is_owner(caller_id):
                return False

            session.stop_playback()
            logger.info(LogTemplates.PLAYBACK_STOPPED, session.code)
            await self._persist_locked()
            return True

    # === Internals (lock must be held) ===

    def _session_of_locked(self, caller_id: str) -> KaraokeSession | None:
        code = self._memberships.get(caller_id)
        if code is None:
            return None
        return self._sessions.get(code)

    def _remove_member_locked(self, caller_id: str, code: str) -> None:
        session = self._sessions.get(code)
        if session is None:
            return

        session.remove_member(caller_id)
        logger.info(LogTemplates.SESSION_LEFT, caller_id, code)
        if session.is_empty:
            del self._sessions[code]
            logger.info(LogTemplates.SESSION_DELETED, code)

    def _new_code_locked(self) -> str:
        for _ in range(self._settings.max_code_attempts):
            code = generate_session_code(
                self._settings.code_length, self._settings.code_alphabet, self._rng
            )
            if code not in self._sessions:
                return code
            logger.debug(LogTemplates.SESSION_CODE_COLLISION, code)
        raise SessionCodeExhaustedError(self._settings.max_code_attempts)

    def _snapshot_locked(self) -> StoreSnapshot:
        return StoreSnapshot(
            sessions={code: s.model_copy(deep=True) for code, s in self._sessions.items()},
            memberships=dict(self._memberships),
        )

    async def _persist_locked(self) -> None:
        if self._snapshot_repo is None:
            return

        snapshot = self._snapshot_locked()
        try:
            await self._snapshot_repo.save(snapshot)
        except Exception as e:
            # In-memory state stays authoritative; durability is best-effort.
            logger.warning(LogTemplates.SNAPSHOT_SAVE_FAILED, e)

    async def _resolve(self, url: str) -> VideoRef:
        if not self._resolver.is_supported_url(url):
            raise InvalidVideoUrlError(url)

        timeout = self._settings.resolve_timeout_s
        try:
            return await asyncio.wait_for(self._resolver.resolve(url), timeout=timeout)
        except TimeoutError:
            raise ResolverTimeoutError(url, timeout) from None
