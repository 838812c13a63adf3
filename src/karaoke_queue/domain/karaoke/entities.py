"""Core domain entities for the karaoke bounded context."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from karaoke_queue.domain.karaoke.value_objects import VideoId, VideoIdField
from karaoke_queue.domain.shared.datetime_utils import utcnow
from karaoke_queue.domain.shared.exceptions import InvalidOperationError
from karaoke_queue.domain.shared.messages import ChatMessages, ErrorMessages
from karaoke_queue.domain.shared.types import (
    CallerId,
    HttpUrlStr,
    NonEmptyStr,
    NoteStr,
    SessionCodeStr,
    UtcDatetimeField,
    VideoTitleStr,
)


class VideoRef(BaseModel):
    """Immutable reference to a resolved, playable video."""

    model_config = ConfigDict(frozen=True, strict=True)

    id: VideoIdField
    title: VideoTitleStr | None = None
    url: HttpUrlStr

    @property
    def display_title(self) -> str:
        return self.title or self.url

    @property
    def embed_url(self) -> str:
        return f"https://www.youtube.com/embed/{self.id.value}"


class Member(BaseModel):
    """A caller taking part in a session."""

    model_config = ConfigDict(frozen=True, strict=True)

    caller_id: CallerId
    display_name: NonEmptyStr | None = None

    @property
    def label(self) -> str:
        return self.display_name or ChatMessages.ANONYMOUS


class QueueItem(BaseModel):
    """One submitted video, waiting to be played or already played."""

    model_config = ConfigDict(strict=True)

    video: VideoRef
    added_by: CallerId
    added_by_name: NonEmptyStr | None = None
    note: NoteStr | None = None
    added_at: UtcDatetimeField = Field(default_factory=utcnow)
    played: bool = False
    played_at: UtcDatetimeField | None = None

    @property
    def requester_label(self) -> str:
        return self.added_by_name or f"User {self.added_by}"

    def mark_played(self, at: datetime | None = None) -> None:
        """Transition unplayed -> played. Played items never change again."""
        if self.played:
            raise InvalidOperationError(
                operation="mark played",
                current_state="played",
                message=ErrorMessages.ALREADY_PLAYED,
            )
        self.played = True
        self.played_at = at or utcnow()


class CastStatus(BaseModel):
    """Now-playing reference and device binding of a session."""

    model_config = ConfigDict(strict=True)

    current_video: VideoRef | None = None
    device: NonEmptyStr | None = None
    is_playing: bool = False


class KaraokeSession(BaseModel):
    """Aggregate root holding the members, queue and cast status of one session."""

    model_config = ConfigDict(strict=True)

    code: SessionCodeStr
    owner_id: CallerId
    members: list[Member] = Field(default_factory=list)
    queue: list[QueueItem] = Field(default_factory=list)
    cast_status: CastStatus = Field(default_factory=CastStatus)
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def is_empty(self) -> bool:
        return not self.members

    @property
    def pending_items(self) -> list[QueueItem]:
        """Unplayed items in insertion order."""
        return [item for item in self.queue if not item.played]

    @property
    def played_items(self) -> list[QueueItem]:
        """Played items in play order.

        Advancing always takes the earliest unplayed item, so queue order
        among played items is play order.
        """
        return [item for item in self.queue if item.played]

    def is_owner(self, caller_id: str) -> bool:
        return self.owner_id == caller_id

    def has_member(self, caller_id: str) -> bool:
        return any(m.caller_id == caller_id for m in self.members)

    def add_member(self, caller_id: str, display_name: str | None = None) -> bool:
        """Add a member if absent. Returns True when the member list changed."""
        if self.has_member(caller_id):
            return False
        self.members.append(Member(caller_id=caller_id, display_name=display_name))
        return True

    def remove_member(self, caller_id: str) -> bool:
        """Remove a member if present. Returns True when the member list changed."""
        before = len(self.members)
        self.members = [m for m in self.members if m.caller_id != caller_id]
        return len(self.members) != before

    def has_video(self, video_id: VideoId) -> bool:
        """Whether any item, played or not, refers to *video_id*."""
        return any(item.video.id == video_id for item in self.queue)

    def enqueue(self, item: QueueItem) -> int:
        """Append an unplayed item and return its zero-based pending position."""
        if item.played:
            raise InvalidOperationError(operation="enqueue", current_state="played")
        self.queue.append(item)
        return len(self.pending_items) - 1

    def advance(self) -> QueueItem | None:
        """Play the earliest unplayed item and make it the current video."""
        next_item = next((item for item in self.queue if not item.played), None)
        if next_item is None:
            return None

        next_item.mark_played()
        self.cast_status.current_video = next_item.video
        self.cast_status.is_playing = True
        return next_item

    def stop_playback(self) -> None:
        self.cast_status.is_playing = False

    def bind_device(self, device_name: str) -> None:
        self.cast_status.device = device_name


class StoreSnapshot(BaseModel):
    """The whole store: every live session plus the membership index."""

    model_config = ConfigDict(strict=True)

    sessions: dict[str, KaraokeSession] = Field(default_factory=dict)
    memberships: dict[str, str] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.sessions and not self.memberships
