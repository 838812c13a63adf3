"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the code base is defined here once,
so models can simply annotate their fields::

    from karaoke_queue.domain.shared.types import CallerId, NonEmptyStr

    class MyModel(BaseModel):
        caller_id: CallerId
        name: NonEmptyStr
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

CallerId = Annotated[str, Field(min_length=1, max_length=64)]
"""Opaque caller identity supplied by the chat transport."""

SessionCodeStr = Annotated[str, Field(min_length=4, max_length=12, pattern=r"^[0-9A-Z]+$")]
"""Short human-shareable session code."""

VideoTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Video title: 1-500 characters."""

HttpUrlStr = Annotated[str, Field(pattern=r"^https?://")]
"""String that starts with http:// or https://."""

NoteStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Free-text note attached to a queue item."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if not isinstance(v, datetime):
        return v
    if v.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return v.astimezone(UTC)


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""
