"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from discord_jukebox.application.interfaces.media_resolver import MediaResolver
from discord_jukebox.application.interfaces.messenger import Messenger
from discord_jukebox.application.interfaces.voice_engine import (
    CallRegistry,
    EventContext,
    TrackControl,
    TrackQueueControl,
    VoiceCall,
    VoiceEventHandler,
)

__all__ = [
    "MediaResolver",
    "Messenger",
    "CallRegistry",
    "EventContext",
    "TrackControl",
    "TrackQueueControl",
    "VoiceCall",
    "VoiceEventHandler",
]
