"""Base exception classes for domain-level errors."""

from __future__ import annotations

from discord_jukebox.domain.shared.messages import ErrorMessages


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class TrackError(DomainError):
    """Raised when a track control operation is rejected by the voice engine."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message, code=code or "TRACK_ERROR")


class TrackFinishedError(TrackError):
    """Raised when a control operation targets a track that has already ended."""

    def __init__(self, title: str) -> None:
        super().__init__(ErrorMessages.TRACK_FINISHED.format(title=title), code="TRACK_FINISHED")
        self.title = title


class MediaResolutionError(DomainError):
    """Raised when a URL or search term cannot be turned into a playable source."""

    def __init__(self, query: str, message: str | None = None) -> None:
        msg = message or ErrorMessages.NO_MEDIA_FOUND.format(query=query)
        super().__init__(msg, code="MEDIA_RESOLUTION_FAILED")
        self.query = query


class NotAPlaylistError(MediaResolutionError):
    """Raised when a playlist URL resolves to something other than a playlist."""

    def __init__(self, url: str) -> None:
        super().__init__(url, ErrorMessages.NOT_A_PLAYLIST.format(url=url))


class VoiceConnectionError(DomainError):
    """Raised when the bot cannot join or move to a voice channel."""

    def __init__(self, message: str, guild_id: int | None = None) -> None:
        super().__init__(message, code="VOICE_CONNECTION_ERROR")
        self.guild_id = guild_id
