"""VideoResolver implementation for YouTube links, titled via the YouTube Data API."""

from __future__ import annotations

import logging
import re
from typing import Final

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from karaoke_queue.application.interfaces.video_resolver import VideoResolver
from karaoke_queue.config.settings import YouTubeSettings
from karaoke_queue.domain.karaoke.entities import VideoRef
from karaoke_queue.domain.karaoke.value_objects import VideoId
from karaoke_queue.domain.shared.exceptions import InvalidVideoUrlError
from karaoke_queue.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

YOUTUBE_URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^((?:https?:)?//)?((?:www|m)\.)?((?:youtube(-nocookie)?\.com|youtu\.be))"
    r"(/(?:[\w\-]+\?v=|embed/|v/|shorts/|live/)?)([\w\-]{11})(?![\w\-])(\S+)?$"
)
VIDEO_ID_GROUP: Final[int] = 6
MAX_TITLE_LENGTH: Final[int] = 500


# ── Pydantic models for Data API responses ──────────────────────────


class _Snippet(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str


class _VideoItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    snippet: _Snippet


class _VideoListResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: list[_VideoItem] = Field(default_factory=list)


# ── Link helpers ────────────────────────────────────────────────────


def extract_video_id(url: str) -> str | None:
    match = YOUTUBE_URL_PATTERN.match(url.strip())
    return match.group(VIDEO_ID_GROUP) if match else None


def canonical_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def placeholder_title(video_id: str) -> str:
    return f"YouTube Video: {video_id}"


def find_video_link(text: str) -> str | None:
    """Return the first whitespace-delimited word of *text* that is a YouTube link."""
    for word in text.split():
        if YOUTUBE_URL_PATTERN.match(word):
            return word
    return None


def split_link_and_note(text: str) -> tuple[str, str | None] | None:
    """Split free text into its first YouTube link and a note.

    The note is every other word, before and after the link, joined by a
    single space. Returns None when the text holds no link.
    """
    link = find_video_link(text)
    if link is None:
        return None

    words = text.split()
    words.remove(link)
    return link, " ".join(words) or None


class YouTubeResolver(VideoResolver):
    """Validates YouTube links and looks up their titles.

    Title lookups never fail a resolve: a missing API key, an HTTP error,
    a timeout or an unexpected payload all fall back to a placeholder title.
    """

    def __init__(
        self,
        settings: YouTubeSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or YouTubeSettings()
        self._client = client
        self._owns_client = client is None

    def is_supported_url(self, url: str) -> bool:
        return extract_video_id(url) is not None

    async def resolve(self, url: str) -> VideoRef:
        video_id = extract_video_id(url)
        if video_id is None:
            raise InvalidVideoUrlError(url)

        title = await self._fetch_title(video_id) or placeholder_title(video_id)
        video = VideoRef(
            id=VideoId(video_id),
            title=title[:MAX_TITLE_LENGTH],
            url=canonical_url(video_id),
        )
        logger.debug(LogTemplates.RESOLVER_RESOLVED, url, video.display_title)
        return video

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.request_timeout_s)
            self._owns_client = True
        return self._client

    async def _fetch_title(self, video_id: str) -> str | None:
        api_key = self._settings.api_key.get_secret_value()
        if not api_key:
            logger.debug(
                LogTemplates.RESOLVER_TITLE_FALLBACK, video_id, ErrorMessages.YOUTUBE_API_KEY_NOT_SET
            )
            return None

        params = {"id": video_id, "key": api_key, "part": "snippet"}
        try:
            response = await self._get_client().get(
                self._settings.api_url,
                params=params,
                timeout=self._settings.request_timeout_s,
            )
            response.raise_for_status()
            data = _VideoListResponse.model_validate(response.json())
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            logger.warning(LogTemplates.RESOLVER_TITLE_FALLBACK, video_id, e)
            return None

        if not data.items:
            return None
        return data.items[0].snippet.title.strip() or None
