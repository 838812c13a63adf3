"""
Unit Tests for ChromecastSink

pychromecast is patched out entirely; these tests cover discovery,
connection caching, eviction after failures and timeout handling.
"""

from __future__ import annotations

import asyncio
import threading
from unittest.mock import MagicMock, patch

import pytest
from pychromecast.error import PyChromecastError

from karaoke_queue.config.settings import CastSettings
from karaoke_queue.domain.shared.exceptions import (
    CastDeviceNotFoundError,
    CastError,
    CastTimeoutError,
)
from karaoke_queue.infrastructure.cast.chromecast_sink import ChromecastSink

MODULE = "karaoke_queue.infrastructure.cast.chromecast_sink"


def _service(name: str | None) -> MagicMock:
    info = MagicMock()
    info.friendly_name = name
    return info


def _cast() -> MagicMock:
    cast = MagicMock()
    cast.socket_client.is_connected = True
    return cast


@pytest.fixture
def pychromecast_mock():
    with patch(f"{MODULE}.pychromecast") as mocked:
        mocked.discovery.discover_chromecasts.return_value = (
            [_service("Living Room TV"), _service("Kitchen"), _service("Living Room TV")],
            MagicMock(),
        )
        mocked.get_listed_chromecasts.side_effect = lambda friendly_names, discovery_timeout: (
            [_cast()],
            MagicMock(),
        )
        yield mocked


@pytest.fixture
def youtube_controller():
    with patch(f"{MODULE}.YouTubeController") as controller_cls:
        yield controller_cls


@pytest.fixture
def sink(pychromecast_mock, youtube_controller):
    return ChromecastSink(CastSettings(discovery_timeout_s=1.0, command_timeout_s=1.0))


class TestDiscovery:
    @pytest.mark.asyncio
    async def test_list_devices_deduplicates_names(self, sink, pychromecast_mock):
        assert await sink.list_devices() == ["Living Room TV", "Kitchen"]
        pychromecast_mock.discovery.stop_discovery.assert_called_once()

    @pytest.mark.asyncio
    async def test_list_devices_skips_nameless_services(self, sink, pychromecast_mock):
        pychromecast_mock.discovery.discover_chromecasts.return_value = (
            [_service(None), _service("Den")],
            MagicMock(),
        )
        assert await sink.list_devices() == ["Den"]

    @pytest.mark.asyncio
    async def test_discovery_os_error_becomes_cast_error(self, sink, pychromecast_mock):
        pychromecast_mock.discovery.discover_chromecasts.side_effect = OSError("no multicast")
        with pytest.raises(CastError):
            await sink.list_devices()


class TestPlay:
    @pytest.mark.asyncio
    async def test_play_on_named_device(self, sink, sample_video, pychromecast_mock, youtube_controller):
        device = await sink.play(sample_video, "Kitchen")

        assert device == "Kitchen"
        youtube_controller.return_value.play_video.assert_called_once_with("dQw4w9WgXcQ")
        pychromecast_mock.get_listed_chromecasts.assert_called_once()
        assert sink.connected_devices == ["Kitchen"]

    @pytest.mark.asyncio
    async def test_play_without_device_uses_first_discovered(self, sink, sample_video):
        assert await sink.play(sample_video) == "Living Room TV"

    @pytest.mark.asyncio
    async def test_play_without_any_device(self, sink, sample_video, pychromecast_mock):
        pychromecast_mock.discovery.discover_chromecasts.return_value = ([], MagicMock())
        with pytest.raises(CastDeviceNotFoundError):
            await sink.play(sample_video)

    @pytest.mark.asyncio
    async def test_unknown_device(self, sink, sample_video, pychromecast_mock):
        browser = MagicMock()
        pychromecast_mock.get_listed_chromecasts.side_effect = None
        pychromecast_mock.get_listed_chromecasts.return_value = ([], browser)

        with pytest.raises(CastDeviceNotFoundError) as exc_info:
            await sink.play(sample_video, "Garage")

        assert exc_info.value.device == "Garage"
        browser.stop_discovery.assert_called_once()
        assert sink.connected_devices == []

    @pytest.mark.asyncio
    async def test_connection_is_reused(self, sink, sample_video, pychromecast_mock):
        await sink.play(sample_video, "Kitchen")
        await sink.play(sample_video, "Kitchen")

        assert pychromecast_mock.get_listed_chromecasts.call_count == 1

    @pytest.mark.asyncio
    async def test_disconnected_connection_is_replaced(self, sink, sample_video, pychromecast_mock):
        await sink.play(sample_video, "Kitchen")
        sink._connections["Kitchen"].cast.socket_client.is_connected = False

        await sink.play(sample_video, "Kitchen")

        assert pychromecast_mock.get_listed_chromecasts.call_count == 2

    @pytest.mark.asyncio
    async def test_failed_command_evicts_connection(self, sink, sample_video, youtube_controller):
        youtube_controller.return_value.play_video.side_effect = PyChromecastError("refused")

        with pytest.raises(CastError):
            await sink.play(sample_video, "Kitchen")

        assert sink.connected_devices == []

    @pytest.mark.asyncio
    async def test_slow_command_times_out(self, pychromecast_mock, youtube_controller, sample_video):
        sink = ChromecastSink(CastSettings(discovery_timeout_s=1.0, command_timeout_s=0.05))
        release = threading.Event()
        youtube_controller.return_value.play_video.side_effect = lambda *_: release.wait(5)

        try:
            with pytest.raises(CastTimeoutError) as exc_info:
                await sink.play(sample_video, "Kitchen")
        finally:
            release.set()

        assert exc_info.value.device == "Kitchen"
        assert sink.connected_devices == []

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_cast_error(self, sink, sample_video, youtube_controller):
        youtube_controller.return_value.play_video.side_effect = RuntimeError("receiver crashed")

        with pytest.raises(CastError) as exc_info:
            await sink.play(sample_video, "Kitchen")

        assert "receiver crashed" in exc_info.value.message
        assert sink.connected_devices == []


class TestStop:
    @pytest.mark.asyncio
    async def test_stop_named_device(self, sink, sample_video):
        await sink.play(sample_video, "Kitchen")
        cast = sink._connections["Kitchen"].cast

        await sink.stop("Kitchen")

        cast.media_controller.stop.assert_called_once()

    @pytest.mark.asyncio
    async def test_stop_falls_back_to_connected_device(self, sink, sample_video):
        await sink.play(sample_video, "Kitchen")
        cast = sink._connections["Kitchen"].cast

        await sink.stop()

        cast.media_controller.stop.assert_called_once()

    @pytest.mark.asyncio
    async def test_stop_without_connections(self, sink):
        with pytest.raises(CastError):
            await sink.stop()


class TestClose:
    @pytest.mark.asyncio
    async def test_close_disconnects_everything(self, sink, sample_video):
        await sink.play(sample_video, "Kitchen")
        connection = sink._connections["Kitchen"]

        await sink.close()

        connection.cast.disconnect.assert_called_once()
        connection.browser.stop_discovery.assert_called_once()
        assert sink.connected_devices == []


class TestSlowDevices:
    @pytest.mark.asyncio
    async def test_hung_connect_does_not_block_cached_device(
        self, pychromecast_mock, youtube_controller, sample_video
    ):
        sink = ChromecastSink(CastSettings(discovery_timeout_s=5.0, command_timeout_s=5.0))
        await sink.play(sample_video, "Kitchen")
        kitchen = sink._connections["Kitchen"].cast

        entered = threading.Event()
        release = threading.Event()

        def slow_lookup(friendly_names, discovery_timeout):
            entered.set()
            release.wait(5)
            return [_cast()], MagicMock()

        pychromecast_mock.get_listed_chromecasts.side_effect = slow_lookup
        garage = asyncio.create_task(sink.play(sample_video, "Garage"))
        try:
            assert await asyncio.to_thread(entered.wait, 2)
            await asyncio.wait_for(sink.stop("Kitchen"), timeout=1.0)
        finally:
            release.set()

        assert await garage == "Garage"
        kitchen.media_controller.stop.assert_called_once()
        assert sorted(sink.connected_devices) == ["Garage", "Kitchen"]

    @pytest.mark.asyncio
    async def test_connection_finishing_after_timeout_is_released(
        self, pychromecast_mock, youtube_controller, sample_video
    ):
        sink = ChromecastSink(CastSettings(discovery_timeout_s=0.05, command_timeout_s=0.05))
        release = threading.Event()
        cast = _cast()
        browser = MagicMock()

        def slow_lookup(friendly_names, discovery_timeout):
            release.wait(5)
            return [cast], browser

        pychromecast_mock.get_listed_chromecasts.side_effect = slow_lookup
        try:
            with pytest.raises(CastTimeoutError):
                await sink.play(sample_video, "Garage")
        finally:
            release.set()

        for _ in range(200):
            if browser.stop_discovery.called:
                break
            await asyncio.sleep(0.01)

        cast.disconnect.assert_called_once()
        browser.stop_discovery.assert_called_once()
        assert sink.connected_devices == []
        await sink.close()
