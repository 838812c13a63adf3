"""Port interface for mirroring playback to a networked display device."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.karaoke.entities import VideoRef


class CastSink(ABC):
    """Interface for discovering cast devices and asking them to play or stop.

    Every failure is raised as a ``CastError`` subclass; implementations must
    bound discovery and device commands with a timeout.
    """

    @abstractmethod
    async def list_devices(self) -> list[str]:
        """Discover the names of cast devices on the network."""
        ...

    @abstractmethod
    async def play(self, video: "VideoRef", device: str | None = None) -> str:
        """Play *video* on *device*, or on the first discovered device.

        Returns the name of the device that accepted the video.
        """
        ...

    @abstractmethod
    async def stop(self, device: str | None = None) -> None:
        """Stop playback on *device*, or on the first connected device."""
        ...

    async def close(self) -> None:
        """Disconnect cached device connections."""
