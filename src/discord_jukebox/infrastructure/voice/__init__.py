"""Voice engine over discord.py voice clients - calls, queues, tracks and events."""

from discord_jukebox.infrastructure.voice.call import Call
from discord_jukebox.infrastructure.voice.events import EventRegistration, EventStore
from discord_jukebox.infrastructure.voice.manager import CallManager
from discord_jukebox.infrastructure.voice.queue import TrackQueue
from discord_jukebox.infrastructure.voice.track import (
    FFmpegSourceFactory,
    TrackAudio,
    TrackHandle,
)

__all__ = [
    "Call",
    "CallManager",
    "EventRegistration",
    "EventStore",
    "FFmpegSourceFactory",
    "TrackAudio",
    "TrackHandle",
    "TrackQueue",
]
