"""Command and handler for stopping playback of a session and its cast device."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from karaoke_queue.domain.shared.exceptions import CastError
from karaoke_queue.domain.shared.types import CallerId

if TYPE_CHECKING:
    from ..interfaces.cast_sink import CastSink
    from ..services.session_store import SessionStore


class StopCastingStatus(Enum):
    """Status codes for stop results."""

    STOPPED = "stopped"
    NOT_IN_SESSION = "not_in_session"
    NOT_OWNER = "not_owner"
    CAST_ERROR = "cast_error"


class StopCastingCommand(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    caller_id: CallerId


class StopCastingResult(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    status: StopCastingStatus
    device: str | None = None
    message: str = ""

    @property
    def is_success(self) -> bool:
        return self.status == StopCastingStatus.STOPPED

    @classmethod
    def error(cls, status: StopCastingStatus, message: str = "") -> StopCastingResult:
        return cls(status=status, message=message)


class StopCastingHandler:
    """Clears the session's playing flag, then tells the cast device to stop.

    The playing flag stays cleared even when the device cannot be reached.
    """

    def __init__(
        self,
        *,
        session_store: SessionStore,
        cast_sink: CastSink | None = None,
    ) -> None:
        self._store = session_store
        self._cast_sink = cast_sink

    async def handle(self, command: StopCastingCommand) -> StopCastingResult:
        if not await self._store.is_in_session(command.caller_id):
            return StopCastingResult.error(StopCastingStatus.NOT_IN_SESSION)
        if not await self._store.stop_playback(command.caller_id):
            return StopCastingResult.error(StopCastingStatus.NOT_OWNER)

        device = await self._store.get_device(command.caller_id)
        if self._cast_sink is None:
            return StopCastingResult(status=StopCastingStatus.STOPPED, device=device)

        try:
            await self._cast_sink.stop(device)
        except CastError as e:
            return StopCastingResult(
                status=StopCastingStatus.CAST_ERROR, device=device, message=e.message
            )

        return StopCastingResult(status=StopCastingStatus.STOPPED, device=device)
