"""CastSink implementation driving Chromecast devices through pychromecast."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import pychromecast
from pychromecast.controllers.youtube import YouTubeController

from karaoke_queue.application.interfaces.cast_sink import CastSink
from karaoke_queue.config.settings import CastSettings
from karaoke_queue.domain.karaoke.entities import VideoRef
from karaoke_queue.domain.shared.exceptions import (
    CastDeviceNotFoundError,
    CastError,
    CastTimeoutError,
)
from karaoke_queue.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _retrieve(future: asyncio.Future[Any]) -> None:
    if not future.cancelled():
        future.exception()


@dataclass
class CastConnection:
    """A connected device plus the YouTube receiver controller registered on it."""

    name: str
    cast: Any
    youtube: YouTubeController
    browser: Any = None

    @property
    def is_connected(self) -> bool:
        socket_client = getattr(self.cast, "socket_client", None)
        return bool(socket_client is not None and socket_client.is_connected)

    def disconnect(self, timeout: float) -> None:
        try:
            self.cast.disconnect(timeout=timeout)
        finally:
            if self.browser is not None:
                self.browser.stop_discovery()


class ChromecastSink(CastSink):
    """Discovers Chromecasts over mDNS and casts YouTube videos to them.

    Connections are cached by device friendly name and reused until they are
    found disconnected or a command on them fails. Every blocking pychromecast
    call runs in a worker thread bounded by ``asyncio.wait_for``. Connecting
    holds a per-device lock, so a hung device never delays another one.
    """

    def __init__(self, settings: CastSettings | None = None) -> None:
        self._settings = settings or CastSettings()
        self._connections: dict[str, CastConnection] = {}
        self._device_locks: dict[str, asyncio.Lock] = {}
        self._lock = asyncio.Lock()
        self._cleanups: set[asyncio.Task[None]] = set()

    @property
    def connected_devices(self) -> list[str]:
        return list(self._connections)

    # === CastSink ===

    async def list_devices(self) -> list[str]:
        timeout = self._settings.discovery_timeout_s
        names = await self._in_thread(
            "discovery", timeout + self._settings.command_timeout_s, None, self._discover, timeout
        )
        logger.info(LogTemplates.CAST_DISCOVERED, len(names))
        return names

    async def play(self, video: VideoRef, device: str | None = None) -> str:
        name = device or await self._first_device()
        connection = await self._connection_for(name)

        logger.info(LogTemplates.CAST_PLAYING, video.id, name)
        await self._command(connection, "play", connection.youtube.play_video, video.id.value)
        return name

    async def stop(self, device: str | None = None) -> None:
        if device is None:
            async with self._lock:
                if not self._connections:
                    raise CastError(ErrorMessages.NO_CONNECTED_CAST_DEVICES)
                device = next(iter(self._connections))

        connection = await self._connection_for(device)
        logger.info(LogTemplates.CAST_STOPPING, device)
        await self._command(connection, "stop", connection.cast.media_controller.stop)

    async def close(self) -> None:
        async with self._lock:
            connections = list(self._connections.values())
            self._connections.clear()

        for connection in connections:
            await self._disconnect(connection)

        if self._cleanups:
            await asyncio.gather(*self._cleanups)

    # === Internals ===

    async def _first_device(self) -> str:
        names = await self.list_devices()
        if not names:
            raise CastDeviceNotFoundError()
        return names[0]

    async def _device_lock(self, name: str) -> asyncio.Lock:
        async with self._lock:
            return self._device_locks.setdefault(name, asyncio.Lock())

    async def _connection_for(self, name: str) -> CastConnection:
        # The sink-wide lock only guards the dicts; connecting holds the device lock.
        async with await self._device_lock(name):
            async with self._lock:
                cached = self._connections.get(name)
                if cached is not None and cached.is_connected:
                    return cached
                self._connections.pop(name, None)

            if cached is not None:
                logger.info(LogTemplates.CAST_CONNECTION_DROPPED, name, "socket disconnected")
                await self._disconnect(cached)

            logger.info(LogTemplates.CAST_CONNECTING, name)
            timeout = self._settings.discovery_timeout_s + self._settings.command_timeout_s
            connection = await self._in_thread(
                "connect", timeout, name, self._connect, name, on_late_result=self._discard_late
            )
            async with self._lock:
                self._connections[name] = connection
            return connection

    async def _command(
        self, connection: CastConnection, operation: str, func: Callable[..., Any], *args: Any
    ) -> None:
        try:
            await self._in_thread(
                operation, self._settings.command_timeout_s, connection.name, func, *args
            )
        except CastError as e:
            await self._evict(connection, e)
            raise

    async def _evict(self, connection: CastConnection, error: Exception) -> None:
        async with self._lock:
            if self._connections.get(connection.name) is connection:
                del self._connections[connection.name]
        logger.info(LogTemplates.CAST_CONNECTION_DROPPED, connection.name, error)
        await self._disconnect(connection)

    async def _disconnect(self, connection: CastConnection) -> None:
        try:
            await self._in_thread(
                "disconnect",
                self._settings.command_timeout_s,
                connection.name,
                connection.disconnect,
                self._settings.command_timeout_s,
            )
        except CastError as e:
            logger.warning(LogTemplates.CAST_DISCONNECT_FAILED, connection.name, e)

    async def _in_thread(
        self,
        operation: str,
        timeout: float,
        device: str | None,
        func: Callable[..., T],
        *args: Any,
        on_late_result: Callable[[asyncio.Future[T]], None] | None = None,
    ) -> T:
        """Run *func* in a worker thread, mapping every failure to CastError.

        A timed-out thread keeps running; *on_late_result* is attached to it
        so whatever it eventually returns can be released.
        """
        future = asyncio.ensure_future(asyncio.to_thread(func, *args))
        try:
            return await asyncio.wait_for(asyncio.shield(future), timeout=timeout)
        except TimeoutError:
            future.add_done_callback(on_late_result or _retrieve)
            raise CastTimeoutError(operation, timeout, device) from None
        except CastError:
            raise
        except Exception as e:
            raise CastError(f"Cast {operation} failed: {e}", device=device) from e

    def _discard_late(self, future: asyncio.Future[CastConnection]) -> None:
        if future.cancelled() or future.exception() is not None:
            return
        connection = future.result()
        logger.info(LogTemplates.CAST_CONNECTION_DROPPED, connection.name, "connect timed out")
        task = asyncio.ensure_future(self._disconnect(connection))
        self._cleanups.add(task)
        task.add_done_callback(self._cleanups.discard)

    # === Blocking pychromecast calls (worker thread) ===

    @staticmethod
    def _discover(timeout: float) -> list[str]:
        services, browser = pychromecast.discovery.discover_chromecasts(timeout=timeout)
        try:
            names: list[str] = []
            for info in services:
                if info.friendly_name and info.friendly_name not in names:
                    names.append(info.friendly_name)
            return names
        finally:
            pychromecast.discovery.stop_discovery(browser)

    def _connect(self, name: str) -> CastConnection:
        casts, browser = pychromecast.get_listed_chromecasts(
            friendly_names=[name], discovery_timeout=self._settings.discovery_timeout_s
        )
        if not casts:
            browser.stop_discovery()
            raise CastDeviceNotFoundError(name)

        cast = casts[0]
        try:
            cast.wait(timeout=self._settings.command_timeout_s)
            youtube = YouTubeController()
            cast.register_handler(youtube)
        except Exception:
            browser.stop_discovery()
            raise
        return CastConnection(name=name, cast=cast, youtube=youtube, browser=browser)
