"""Command and handler for adding a video link to the caller's session queue."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from karaoke_queue.domain.karaoke.entities import VideoRef
from karaoke_queue.domain.shared.exceptions import (
    InvalidVideoUrlError,
    NotInSessionError,
    ResolverError,
    ResolverTimeoutError,
)
from karaoke_queue.domain.shared.types import CallerId, NonEmptyStr

if TYPE_CHECKING:
    from ..services.session_store import SessionStore

logger = logging.getLogger(__name__)


class AddVideoStatus(Enum):
    """Status codes for add video results."""

    ADDED = "added"
    DUPLICATE = "duplicate"
    NOT_IN_SESSION = "not_in_session"
    INVALID_URL = "invalid_url"
    RESOLVER_TIMEOUT = "resolver_timeout"
    RESOLVER_ERROR = "resolver_error"


class AddVideoCommand(BaseModel):
    """Request to resolve a link and append it to the caller's queue."""

    model_config = ConfigDict(frozen=True, strict=True)

    caller_id: CallerId
    url: NonEmptyStr
    display_name: str | None = None
    note: str | None = None

    @field_validator("url", mode="before")
    @classmethod
    def _strip_url(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v


class AddVideoResult(BaseModel):
    """Result of an add video command."""

    model_config = ConfigDict(frozen=True, strict=True)

    status: AddVideoStatus
    message: str = ""
    video: VideoRef | None = None

    @property
    def is_success(self) -> bool:
        return self.status == AddVideoStatus.ADDED

    @classmethod
    def error(cls, status: AddVideoStatus, message: str) -> AddVideoResult:
        return cls(status=status, message=message)


class AddVideoHandler:
    """Adds a video through the session store and maps failures to statuses."""

    def __init__(self, *, session_store: SessionStore) -> None:
        self._store = session_store

    async def handle(self, command: AddVideoCommand) -> AddVideoResult:
        try:
            item = await self._store.enqueue_video(
                command.caller_id,
                command.url,
                display_name=command.display_name,
                note=command.note,
            )
        except NotInSessionError as e:
            return AddVideoResult.error(AddVideoStatus.NOT_IN_SESSION, e.message)
        except InvalidVideoUrlError as e:
            return AddVideoResult.error(AddVideoStatus.INVALID_URL, e.message)
        except ResolverTimeoutError as e:
            logger.warning("Resolver timed out for %s: %s", command.url, e.message)
            return AddVideoResult.error(AddVideoStatus.RESOLVER_TIMEOUT, e.message)
        except ResolverError as e:
            return AddVideoResult.error(AddVideoStatus.RESOLVER_ERROR, e.message)
        except Exception as e:
            logger.exception("Unexpected error adding %s", command.url)
            return AddVideoResult.error(
                AddVideoStatus.RESOLVER_ERROR, f"Error resolving video: {e}"
            )

        if item is None:
            return AddVideoResult.error(
                AddVideoStatus.DUPLICATE, "This video is already in the session"
            )

        return AddVideoResult(
            status=AddVideoStatus.ADDED,
            message=f"Added to queue: {item.video.display_title}",
            video=item.video,
        )
