"""Track handles and the FFmpeg audio sources behind them."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Final

import discord

from discord_jukebox.application.interfaces.voice_engine import TrackControl
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.music.entities import TrackState
from discord_jukebox.domain.music.value_objects import LoopState, PlayMode
from discord_jukebox.domain.shared.exceptions import TrackFinishedError
from discord_jukebox.domain.shared.messages import LogTemplates
from discord_jukebox.infrastructure.voice.events import EventStore

if TYPE_CHECKING:
    from ...application.interfaces.voice_engine import VoiceEventHandler
    from ...domain.music.entities import TrackMetadata
    from ...domain.music.events import VoiceEvent
    from .call import Call

logger = logging.getLogger(__name__)

# discord.py reads one 20 ms PCM frame per AudioSource.read()
FRAME_SECONDS: Final[float] = 0.02


class TrackAudio(discord.PCMVolumeTransformer):
    """Volume-controlled PCM source that counts the frames it has delivered."""

    def __init__(
        self,
        original: discord.AudioSource,
        *,
        volume: float = 1.0,
        start_seconds: float = 0.0,
    ) -> None:
        super().__init__(original, volume=volume)
        self.start_seconds = start_seconds
        self.frames = 0

    @property
    def position(self) -> float:
        return self.start_seconds + self.frames * FRAME_SECONDS

    def read(self) -> bytes:
        data = super().read()
        if data:
            self.frames += 1
        return data


SourceFactory = Callable[["TrackMetadata", float, float], TrackAudio]
"""``(metadata, start_seconds, volume) -> TrackAudio``"""


class FFmpegSourceFactory:
    """Builds FFmpeg-backed sources, seeking with ``-ss`` when resuming mid-track."""

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._before_options = self._settings.ffmpeg_options.get("before_options", "")
        self._options = self._settings.ffmpeg_options.get("options", "")

    def before_options(self, start_seconds: float) -> str:
        if start_seconds > 0:
            return f"-ss {start_seconds:.2f} {self._before_options}".strip()
        return self._before_options

    def __call__(self, metadata: TrackMetadata, start_seconds: float, volume: float) -> TrackAudio:
        source = discord.FFmpegPCMAudio(
            metadata.stream_url,
            before_options=self.before_options(start_seconds),
            options=self._options,
        )
        return TrackAudio(source, volume=volume, start_seconds=start_seconds)


class TrackHandle(TrackControl):
    """Controls one track owned by a :class:`Call`.

    The handle survives the track; once the track has stopped or ended every
    control raises :class:`TrackFinishedError`.
    """

    def __init__(self, call: Call, metadata: TrackMetadata, *, volume: float = 1.0) -> None:
        self._call = call
        self._metadata = metadata
        self._volume = volume
        self._loops = LoopState.FINITE
        self._mode = PlayMode.PLAY
        self._position = 0.0
        self._audio: TrackAudio | None = None
        self.events = EventStore(call.guild_id, context=lambda: (self,))

    def __repr__(self) -> str:
        return f"TrackHandle(title={self._metadata.display_title!r}, mode={self._mode.value})"

    @property
    def metadata(self) -> TrackMetadata:
        return self._metadata

    @property
    def mode(self) -> PlayMode:
        return self._mode

    @property
    def volume(self) -> float:
        return self._volume

    @property
    def position(self) -> float:
        if self._audio is not None:
            return self._audio.position
        return self._position

    @property
    def is_done(self) -> bool:
        return self._mode.is_done

    @property
    def is_audible(self) -> bool:
        return self._audio is not None

    @property
    def is_looping(self) -> bool:
        return self._loops == LoopState.INFINITE

    def _ensure_live(self) -> None:
        if self._mode.is_done:
            raise TrackFinishedError(self._metadata.display_title)

    # === TrackControl ===

    async def get_info(self) -> TrackState:
        self._ensure_live()
        return TrackState(
            volume=self._volume,
            loops=self._loops,
            position=self.position,
            mode=self._mode,
        )

    def set_volume(self, volume: float) -> None:
        self._ensure_live()
        self._volume = max(volume, 0.0)
        if self._audio is not None:
            self._audio.volume = self._volume
        logger.debug(LogTemplates.TRACK_VOLUME_SET, self._metadata.display_title, self._volume)

    def stop(self) -> None:
        self._ensure_live()
        self._call.stop_track(self)

    def enable_loop(self) -> None:
        self._ensure_live()
        self._loops = LoopState.INFINITE

    def disable_loop(self) -> None:
        self._ensure_live()
        self._loops = LoopState.FINITE

    def add_event(self, event: VoiceEvent, handler: VoiceEventHandler) -> None:
        self._ensure_live()
        self.events.add(event, handler)

    # === Engine-facing state changes ===

    def set_mode(self, mode: PlayMode) -> None:
        self._mode = mode

    def attach_audio(self, audio: TrackAudio) -> None:
        self._audio = audio
        self.events.start()

    def detach_audio(self, *, rewind: bool = False) -> None:
        if self._audio is not None:
            self._position = self._audio.position
            self._audio = None
        if rewind:
            self._position = 0.0

    def finish(self, mode: PlayMode, *, notify: bool = True) -> None:
        """Mark the track done, fire its end handlers and cancel its timers."""
        self.detach_audio()
        self._mode = mode
        if notify:
            self.events.fire_end()
        self.events.close()
