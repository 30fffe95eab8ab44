"""
Shared Domain Kernel

Contains message constants, constrained types and exceptions shared across the package.
"""

from discord_jukebox.domain.shared.exceptions import (
    DomainError,
    MediaResolutionError,
    NotAPlaylistError,
    TrackError,
    TrackFinishedError,
    VoiceConnectionError,
)
from discord_jukebox.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates

__all__ = [
    "DomainError",
    "TrackError",
    "TrackFinishedError",
    "MediaResolutionError",
    "NotAPlaylistError",
    "VoiceConnectionError",
    "ErrorMessages",
    "LogTemplates",
    "DiscordUIMessages",
]
