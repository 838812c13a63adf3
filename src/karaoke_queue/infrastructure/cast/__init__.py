"""Cast device adapters."""

from karaoke_queue.infrastructure.cast.chromecast_sink import ChromecastSink

__all__ = [
    "ChromecastSink",
]
