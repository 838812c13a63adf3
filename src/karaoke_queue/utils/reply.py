"""Utility functions for formatting Discord messages."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from karaoke_queue.domain.shared.messages import ChatMessages

if TYPE_CHECKING:
    from ..domain.karaoke.entities import QueueItem

DISCORD_MESSAGE_LIMIT = 2000


def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def format_queue_line(index: int, item: QueueItem) -> str:
    note = ChatMessages.NOTE_SUFFIX.format(note=truncate(item.note, 120)) if item.note else ""
    return ChatMessages.QUEUE_LINE.format(
        index=index,
        title=truncate(item.video.display_title),
        added_by=item.requester_label,
        note=note,
    )


def format_queue(header: str, items: Sequence[QueueItem]) -> str:
    """Numbered listing of *items* under *header*, starting at 1."""
    lines = [header]
    lines.extend(format_queue_line(i, item) for i, item in enumerate(items, start=1))
    return "\n".join(lines)


def chunk_message(text: str, limit: int = DISCORD_MESSAGE_LIMIT) -> list[str]:
    """Split *text* on line boundaries into chunks Discord will accept."""
    return list(_chunks(text.splitlines(), limit)) or [""]


def _chunks(lines: Iterable[str], limit: int) -> Iterable[str]:
    current = ""
    for line in lines:
        line = truncate(line, limit)
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            yield current
            current = line
        else:
            current = candidate
    if current:
        yield current
