"""Port interface for resolving video links into video references."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.karaoke.entities import VideoRef


class VideoResolver(ABC):
    """Interface turning a raw link into a canonical video reference."""

    @abstractmethod
    async def resolve(self, url: str) -> "VideoRef":
        """Resolve *url* to a video reference.

        Raises:
            InvalidVideoUrlError: if *url* is not a supported video link.
        """
        ...

    @abstractmethod
    def is_supported_url(self, url: str) -> bool:
        ...

    async def aclose(self) -> None:
        """Release network resources held by the resolver."""
