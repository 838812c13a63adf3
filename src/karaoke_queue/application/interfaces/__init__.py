"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from karaoke_queue.application.interfaces.cast_sink import CastSink
from karaoke_queue.application.interfaces.video_resolver import VideoResolver

__all__ = [
    "VideoResolver",
    "CastSink",
]
