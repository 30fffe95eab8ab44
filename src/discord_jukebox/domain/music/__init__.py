"""
Music Bounded Context

Track metadata, playback state and the voice event kinds handlers react to.
"""

from discord_jukebox.domain.music.entities import CommandRequest, TrackMetadata, TrackState
from discord_jukebox.domain.music.events import Delayed, Periodic, TrackEnd, VoiceEvent
from discord_jukebox.domain.music.value_objects import EventSignal, LoopState, PlayMode

__all__ = [
    # Entities
    "TrackMetadata",
    "TrackState",
    "CommandRequest",
    # Value Objects
    "LoopState",
    "PlayMode",
    "EventSignal",
    # Events
    "TrackEnd",
    "Periodic",
    "Delayed",
    "VoiceEvent",
]
