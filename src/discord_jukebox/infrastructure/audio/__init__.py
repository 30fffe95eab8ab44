"""Audio infrastructure - yt-dlp media resolution."""

from discord_jukebox.infrastructure.audio.models import (
    AudioFormatInfo,
    CacheEntry,
    YtDlpOpts,
    YtDlpPlaylist,
    YtDlpPlaylistEntry,
    YtDlpTrackInfo,
)
from discord_jukebox.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "AudioFormatInfo",
    "CacheEntry",
    "YtDlpOpts",
    "YtDlpPlaylist",
    "YtDlpPlaylistEntry",
    "YtDlpResolver",
    "YtDlpTrackInfo",
]
