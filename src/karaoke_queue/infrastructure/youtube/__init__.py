"""YouTube link handling and title lookup."""

from karaoke_queue.infrastructure.youtube.youtube_resolver import (
    YouTubeResolver,
    find_video_link,
    split_link_and_note,
)

__all__ = [
    "YouTubeResolver",
    "find_video_link",
    "split_link_and_note",
]
