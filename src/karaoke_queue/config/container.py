"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the store, its adapters and the command handlers.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.commands.add_video import AddVideoHandler
    from ..application.commands.advance_queue import AdvanceQueueHandler
    from ..application.commands.stop_casting import StopCastingHandler
    from ..application.interfaces.cast_sink import CastSink
    from ..application.interfaces.video_resolver import VideoResolver
    from ..application.services.session_store import SessionStore
    from ..domain.karaoke.repository import SnapshotRepository
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. Tests may pass
    ready-made collaborators (e.g. a fake resolver) through the private
    fields to short-circuit construction.
    """

    settings: Settings

    # Persistence layer
    _database: Database | None = None
    _snapshot_repository: SnapshotRepository | None = None

    # Infrastructure adapters
    _video_resolver: VideoResolver | None = None
    _cast_sink: CastSink | None = None

    # Application services
    _session_store: SessionStore | None = None

    # Command handlers
    _add_video_handler: AddVideoHandler | None = None
    _advance_queue_handler: AdvanceQueueHandler | None = None
    _stop_casting_handler: StopCastingHandler | None = None

    # === Database ===

    @property
    def database(self) -> Database:
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.storage.url, settings=self.settings.storage)
        return self._database

    @property
    def snapshot_repository(self) -> SnapshotRepository:
        if self._snapshot_repository is None:
            from ..infrastructure.persistence.repositories.snapshot_repository import (
                SQLiteSnapshotRepository,
            )

            self._snapshot_repository = SQLiteSnapshotRepository(self.database)
        return self._snapshot_repository

    # === Infrastructure Adapters ===

    @property
    def video_resolver(self) -> VideoResolver:
        if self._video_resolver is None:
            from ..infrastructure.youtube.youtube_resolver import YouTubeResolver

            self._video_resolver = YouTubeResolver(self.settings.youtube)
        return self._video_resolver

    @property
    def cast_enabled(self) -> bool:
        return self.settings.cast.enabled

    @property
    def cast_sink(self) -> CastSink | None:
        """The cast sink, or None when casting is disabled."""
        if not self.cast_enabled:
            return None
        if self._cast_sink is None:
            from ..infrastructure.cast.chromecast_sink import ChromecastSink

            self._cast_sink = ChromecastSink(self.settings.cast)
        return self._cast_sink

    # === Application Services ===

    @property
    def session_store(self) -> SessionStore:
        if self._session_store is None:
            from ..application.services.session_store import SessionStore

            self._session_store = SessionStore(
                video_resolver=self.video_resolver,
                snapshot_repository=self.snapshot_repository,
                settings=self.settings.session,
            )
        return self._session_store

    # === Command Handlers ===

    @property
    def add_video_handler(self) -> AddVideoHandler:
        if self._add_video_handler is None:
            from ..application.commands.add_video import AddVideoHandler

            self._add_video_handler = AddVideoHandler(session_store=self.session_store)
        return self._add_video_handler

    @property
    def advance_queue_handler(self) -> AdvanceQueueHandler:
        if self._advance_queue_handler is None:
            from ..application.commands.advance_queue import AdvanceQueueHandler

            self._advance_queue_handler = AdvanceQueueHandler(
                session_store=self.session_store,
                cast_sink=self.cast_sink,
            )
        return self._advance_queue_handler

    @property
    def stop_casting_handler(self) -> StopCastingHandler:
        if self._stop_casting_handler is None:
            from ..application.commands.stop_casting import StopCastingHandler

            self._stop_casting_handler = StopCastingHandler(
                session_store=self.session_store,
                cast_sink=self.cast_sink,
            )
        return self._stop_casting_handler

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Prepare storage and restore the last saved snapshot."""
        try:
            await self.database.initialize()
        except Exception as exc:
            # The store still loads (empty) and keeps running in memory.
            logger.warning("Database initialization failed: %r", exc)

        await self.session_store.load()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._cast_sink is not None:
            try:
                await self._cast_sink.close()
            except Exception as exc:
                logger.warning("Failed closing cast sink: %r", exc)

        if self._video_resolver is not None:
            try:
                await self._video_resolver.aclose()
            except Exception as exc:
                logger.warning("Failed closing video resolver: %r", exc)

        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
