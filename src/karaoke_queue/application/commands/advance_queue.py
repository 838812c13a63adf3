"""Command and handler for advancing a session to its next video and casting it."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from karaoke_queue.domain.karaoke.entities import QueueItem
from karaoke_queue.domain.shared.exceptions import CastError
from karaoke_queue.domain.shared.messages import LogTemplates
from karaoke_queue.domain.shared.types import CallerId

if TYPE_CHECKING:
    from ..interfaces.cast_sink import CastSink
    from ..services.session_store import SessionStore

logger = logging.getLogger(__name__)


class AdvanceQueueStatus(Enum):
    """Status codes for advance results."""

    ADVANCED = "advanced"
    QUEUE_EMPTY = "queue_empty"
    NOT_IN_SESSION = "not_in_session"
    NOT_OWNER = "not_owner"


class AdvanceQueueCommand(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    caller_id: CallerId
    cast: bool = True


class AdvanceQueueResult(BaseModel):
    """Result of an advance command.

    ``cast_error`` is set when the item was advanced but the cast device
    refused or could not be reached; the advance itself stands.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    status: AdvanceQueueStatus
    item: QueueItem | None = None
    device: str | None = None
    cast_error: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == AdvanceQueueStatus.ADVANCED

    @property
    def was_cast(self) -> bool:
        return self.is_success and self.device is not None and self.cast_error is None

    @classmethod
    def error(cls, status: AdvanceQueueStatus) -> AdvanceQueueResult:
        return cls(status=status)


class AdvanceQueueHandler:
    """Advances the caller's session, then mirrors the new video to its cast device."""

    def __init__(
        self,
        *,
        session_store: SessionStore,
        cast_sink: CastSink | None = None,
    ) -> None:
        self._store = session_store
        self._cast_sink = cast_sink

    async def handle(self, command: AdvanceQueueCommand) -> AdvanceQueueResult:
        if not await self._store.is_in_session(command.caller_id):
            return AdvanceQueueResult.error(AdvanceQueueStatus.NOT_IN_SESSION)
        if not await self._store.is_session_owner(command.caller_id):
            return AdvanceQueueResult.error(AdvanceQueueStatus.NOT_OWNER)

        item = await self._store.next_in_queue(command.caller_id)
        if item is None:
            return AdvanceQueueResult.error(AdvanceQueueStatus.QUEUE_EMPTY)

        if self._cast_sink is None or not command.cast:
            return AdvanceQueueResult(status=AdvanceQueueStatus.ADVANCED, item=item)

        device = await self._store.get_device(command.caller_id)
        try:
            played_on = await self._cast_sink.play(item.video, device)
        except CastError as e:
            session_code = await self._store.get_session_code(command.caller_id)
            logger.warning(LogTemplates.CAST_FAILED, device or "<first>", session_code, e.message)
            return AdvanceQueueResult(
                status=AdvanceQueueStatus.ADVANCED,
                item=item,
                device=device,
                cast_error=e.message,
            )

        return AdvanceQueueResult(
            status=AdvanceQueueStatus.ADVANCED,
            item=item,
            device=played_on,
        )
