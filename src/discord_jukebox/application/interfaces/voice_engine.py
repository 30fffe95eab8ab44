"""Port interfaces for the per-guild voice engine and its event handlers."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from discord_jukebox.domain.shared.types import ChannelIdField, DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import TrackMetadata, TrackState
    from ...domain.music.events import VoiceEvent
    from ...domain.music.value_objects import EventSignal


@dataclass(frozen=True)
class EventContext:
    """What a handler receives when its event fires.

    ``tracks`` holds the tracks the event concerns: the track itself for
    track-scoped events, every ended track for a global end event, and
    nothing for global timers.
    """

    guild_id: DiscordSnowflake
    tracks: tuple[TrackControl, ...] = ()


class VoiceEventHandler(ABC):
    """A reactor registered against a voice event."""

    @abstractmethod
    async def act(self, ctx: EventContext) -> EventSignal | None:
        """Handle one firing; return ``EventSignal.CANCEL`` to deregister."""
        ...


class TrackControl(ABC):
    """Handle to one track. Every control raises ``TrackFinishedError`` once the track is done."""

    @property
    @abstractmethod
    def metadata(self) -> TrackMetadata: ...

    @abstractmethod
    async def get_info(self) -> TrackState:
        """Snapshot of volume, loop state, position and play mode."""
        ...

    @abstractmethod
    def set_volume(self, volume: float) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def enable_loop(self) -> None: ...

    @abstractmethod
    def disable_loop(self) -> None: ...

    @abstractmethod
    def add_event(self, event: VoiceEvent, handler: VoiceEventHandler) -> None: ...


class TrackQueueControl(ABC):
    """FIFO of tracks where index 0 is the current one."""

    @abstractmethod
    def enqueue(self, source: TrackMetadata) -> TrackControl:
        """Append a track; the first track in an idle queue starts immediately."""
        ...

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def current(self) -> TrackControl | None: ...

    @abstractmethod
    def pause(self) -> None: ...

    @abstractmethod
    def resume(self) -> None: ...

    @abstractmethod
    def skip(self) -> None:
        """Stop the current track; the next one starts automatically."""
        ...

    @abstractmethod
    def stop(self) -> None:
        """Stop the current track and drop every queued one."""
        ...


class VoiceCall(ABC):
    """A guild's voice connection together with its queue and global events."""

    guild_id: DiscordSnowflake
    channel_id: ChannelIdField
    lock: asyncio.Lock

    @property
    @abstractmethod
    def queue(self) -> TrackQueueControl: ...

    @abstractmethod
    def play_source(self, source: TrackMetadata) -> TrackControl:
        """Play ``source`` right away, outside the queue."""
        ...

    @abstractmethod
    def add_global_event(self, event: VoiceEvent, handler: VoiceEventHandler) -> None: ...

    @abstractmethod
    async def deafen(self, deaf: bool) -> None:
        """Raises ``VoiceConnectionError`` when the voice state update fails."""
        ...


class CallRegistry(ABC):
    """Process-wide registry of per-guild calls."""

    @abstractmethod
    def get(self, guild_id: DiscordSnowflake) -> VoiceCall | None: ...

    @abstractmethod
    async def join(
        self, guild_id: DiscordSnowflake, channel_id: ChannelIdField
    ) -> tuple[VoiceCall, bool]:
        """Connect (or move) to a voice channel.

        Returns:
            The call and whether it was newly created.

        Raises:
            VoiceConnectionError: If the connection could not be established.
        """
        ...

    @abstractmethod
    async def remove(self, guild_id: DiscordSnowflake) -> bool:
        """Disconnect and forget the guild's call; ``False`` when there was none.

        Raises:
            VoiceConnectionError: If the disconnect failed.
        """
        ...
