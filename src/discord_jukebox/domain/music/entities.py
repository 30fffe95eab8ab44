"""Core domain entities for the music bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from discord_jukebox.domain.music.value_objects import LoopState, PlayMode
from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.domain.shared.types import (
    ChannelIdField,
    DurationSeconds,
    GuildIdField,
    HttpUrlStr,
    MessageIdField,
    NonEmptyStr,
    NonNegativeFloat,
    UserIdField,
)


class TrackMetadata(BaseModel):
    """Read-only description of a playable source, attached when the track is created."""

    model_config = ConfigDict(frozen=True)

    title: NonEmptyStr | None = None
    thumbnail_url: HttpUrlStr | None = None
    duration_seconds: DurationSeconds | None = None
    source_url: HttpUrlStr | None = None
    stream_url: HttpUrlStr

    @property
    def display_title(self) -> str:
        return self.title or DiscordUIMessages.NO_TITLE


class TrackState(BaseModel):
    """Snapshot of a track's mutable playback state."""

    model_config = ConfigDict(frozen=True)

    volume: NonNegativeFloat = 1.0
    loops: LoopState = LoopState.FINITE
    position: NonNegativeFloat = 0.0
    mode: PlayMode = PlayMode.PLAY

    @property
    def is_looping(self) -> bool:
        return self.loops == LoopState.INFINITE


class CommandRequest(BaseModel):
    """Request-scoped identifiers for one text command invocation."""

    model_config = ConfigDict(frozen=True)

    guild_id: GuildIdField
    channel_id: ChannelIdField
    message_id: MessageIdField
    author_id: UserIdField
    author_voice_channel_id: ChannelIdField | None = None
