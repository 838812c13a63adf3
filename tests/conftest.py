import asyncio
import random
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
import pytest_asyncio

from karaoke_queue.application.interfaces.video_resolver import VideoResolver
from karaoke_queue.domain.karaoke.entities import VideoRef
from karaoke_queue.domain.karaoke.value_objects import VideoId
from karaoke_queue.domain.shared.exceptions import InvalidVideoUrlError

# ============================================================================
# Fakes
# ============================================================================


class FakeResolver(VideoResolver):
    """Resolver stand-in: the video id is the last path/query segment of the URL.

    ``gate`` lets a test hold a resolution open until it chooses to release it.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None
        self.started = asyncio.Event()

    def is_supported_url(self, url: str) -> bool:
        return url.startswith("https://youtu.be/") or "youtube.com/watch?v=" in url

    async def resolve(self, url: str) -> VideoRef:
        self.calls.append(url)
        if not self.is_supported_url(url):
            raise InvalidVideoUrlError(url)

        self.started.set()
        if self.gate is not None:
            await self.gate.wait()

        video_id = url.rsplit("=", 1)[-1] if "v=" in url else url.rsplit("/", 1)[-1]
        return VideoRef(
            id=VideoId(video_id),
            title=f"Song {video_id}",
            url=f"https://www.youtube.com/watch?v={video_id}",
        )


@pytest.fixture
def fake_resolver():
    return FakeResolver()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from karaoke_queue.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def snapshot_repository(in_memory_database):
    from karaoke_queue.infrastructure.persistence.repositories.snapshot_repository import (
        SQLiteSnapshotRepository,
    )

    return SQLiteSnapshotRepository(in_memory_database)


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def session_settings():
    from karaoke_queue.config.settings import SessionSettings

    return SessionSettings()


@pytest.fixture
def store(fake_resolver, session_settings):
    """Store without persistence, seeded RNG for predictable codes."""
    from karaoke_queue.application.services.session_store import SessionStore

    return SessionStore(
        video_resolver=fake_resolver,
        settings=session_settings,
        rng=random.Random(1234),
    )


@pytest_asyncio.fixture
async def persistent_store(fake_resolver, session_settings, snapshot_repository):
    from karaoke_queue.application.services.session_store import SessionStore

    store = SessionStore(
        video_resolver=fake_resolver,
        snapshot_repository=snapshot_repository,
        settings=session_settings,
        rng=random.Random(99),
    )
    await store.load()
    return store


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def sample_video():
    return VideoRef(
        id=VideoId("dQw4w9WgXcQ"),
        title="Never Gonna Give You Up",
        url="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    )


# ============================================================================
# Discord Fixtures
# ============================================================================


def make_interaction(user_id: int = 111, display_name: str = "Alice"):
    """Interaction mock whose ``is_done`` flips once a response is sent or deferred."""
    state = {"done": False}

    async def _respond(*args, **kwargs):
        state["done"] = True

    i = MagicMock(spec=discord.Interaction)
    i.user = MagicMock()
    i.user.id = user_id
    i.user.display_name = display_name
    i.response = MagicMock()
    i.response.is_done = MagicMock(side_effect=lambda: state["done"])
    i.response.send_message = AsyncMock(side_effect=_respond)
    i.response.defer = AsyncMock(side_effect=_respond)
    i.followup = MagicMock()
    i.followup.send = AsyncMock()
    return i


def sent_texts(interaction) -> list[str]:
    """Every text sent on *interaction*, through the initial response or followups."""
    calls = interaction.response.send_message.call_args_list + interaction.followup.send.call_args_list
    return [c.args[0] if c.args else c.kwargs.get("content", "") for c in calls]


@pytest.fixture
def interaction():
    return make_interaction()
