"""Per-guild call: one discord.py voice client, its queue and its global events."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord

from discord_jukebox.application.interfaces.voice_engine import VoiceCall
from discord_jukebox.domain.music.value_objects import PlayMode
from discord_jukebox.domain.shared.exceptions import VoiceConnectionError
from discord_jukebox.domain.shared.messages import LogTemplates
from discord_jukebox.infrastructure.voice.events import EventStore
from discord_jukebox.infrastructure.voice.queue import TrackQueue
from discord_jukebox.infrastructure.voice.track import TrackHandle

if TYPE_CHECKING:
    from ...application.interfaces.voice_engine import VoiceEventHandler
    from ...domain.music.entities import TrackMetadata
    from ...domain.music.events import VoiceEvent
    from .track import SourceFactory

logger = logging.getLogger(__name__)


class Call(VoiceCall):
    """Voice session for one guild.

    A voice client plays a single source at a time, so exactly one track is
    audible: the queue head, or a track started with :meth:`play_source`.
    A direct track preempts the queue head, which picks up again from its
    saved position when the direct track ends.
    """

    def __init__(
        self,
        guild_id: int,
        voice_client: discord.VoiceClient,
        source_factory: SourceFactory,
        *,
        default_volume: float = 1.0,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.guild_id = guild_id
        self.lock = asyncio.Lock()
        self._voice = voice_client
        self._source_factory = source_factory
        self._default_volume = default_volume
        self._loop = loop or asyncio.get_running_loop()
        self._queue = TrackQueue(self)
        self._direct: TrackHandle | None = None
        self._audible: TrackHandle | None = None
        self._play_id = 0
        self.global_events = EventStore(guild_id)
        self.global_events.start()

    @property
    def channel_id(self) -> int:
        return self._voice.channel.id

    @property
    def voice_client(self) -> discord.VoiceClient:
        return self._voice

    @property
    def queue(self) -> TrackQueue:
        return self._queue

    @property
    def has_direct_track(self) -> bool:
        return self._direct is not None

    @property
    def audible_track(self) -> TrackHandle | None:
        return self._audible

    # === VoiceCall ===

    def play_source(self, source: TrackMetadata) -> TrackHandle:
        previous = self._direct
        track = self.create_track(source)
        self._direct = track
        if previous is not None and not previous.is_done:
            self._halt(previous)
            self._end_track(previous, PlayMode.STOP)
        self.start_track(track)
        return track

    def add_global_event(self, event: VoiceEvent, handler: VoiceEventHandler) -> None:
        self.global_events.add(event, handler)

    async def deafen(self, deaf: bool) -> None:
        guild = self._voice.guild
        try:
            await guild.change_voice_state(channel=self._voice.channel, self_deaf=deaf)
        except discord.DiscordException as exc:
            logger.warning(LogTemplates.VOICE_SELF_DEAFEN_FAILED, self.guild_id, exc)
            raise VoiceConnectionError(str(exc), guild_id=self.guild_id) from exc

    # === Engine ===

    def create_track(self, source: TrackMetadata) -> TrackHandle:
        return TrackHandle(self, source, volume=self._default_volume)

    def start_track(self, track: TrackHandle, start_seconds: float = 0.0) -> None:
        """Make ``track`` the audible track, halting whatever played before."""
        if self._audible is not None and self._audible is not track:
            logger.info(LogTemplates.PLAYBACK_PREEMPTED, track.metadata.display_title, self.guild_id)
            self._halt(self._audible)

        try:
            audio = self._source_factory(track.metadata, start_seconds, track.volume)
            self._play_id += 1
            play_id = self._play_id
            self._voice.play(
                audio,
                after=lambda error: self._loop.call_soon_threadsafe(
                    self._on_source_done, track, play_id, error
                ),
            )
        except (discord.ClientException, OSError) as exc:
            logger.error(LogTemplates.PLAYBACK_FAILED_START, track.metadata.display_title, exc)
            self._end_track(track, PlayMode.END)
            return

        track.attach_audio(audio)
        self._audible = track
        logger.info(LogTemplates.PLAYBACK_STARTED, track.metadata.display_title, self.guild_id)

    def stop_track(self, track: TrackHandle) -> None:
        if track is self._audible:
            self._halt(track)
        self._end_track(track, PlayMode.STOP)
        logger.info(LogTemplates.PLAYBACK_STOPPED, track.metadata.display_title, self.guild_id)

    def _halt(self, track: TrackHandle) -> None:
        # Bumping the play id turns the pending ``after`` callback into a no-op.
        self._play_id += 1
        if self._audible is track:
            self._audible = None
        track.detach_audio()
        self._voice.stop()

    def _on_source_done(self, track: TrackHandle, play_id: int, error: Exception | None) -> None:
        if play_id != self._play_id:
            return
        self._audible = None

        if error is not None:
            logger.warning(LogTemplates.PLAYBACK_ERROR, self.guild_id, error)
        elif track.is_looping and not track.is_done:
            logger.info(LogTemplates.PLAYBACK_LOOPED, track.metadata.display_title, self.guild_id)
            track.detach_audio(rewind=True)
            self.start_track(track)
            return

        self._end_track(track, PlayMode.END)

    def _end_track(self, track: TrackHandle, mode: PlayMode) -> None:
        track.finish(mode)
        self.global_events.fire_end((track,))
        logger.info(LogTemplates.TRACK_ENDED, track.metadata.display_title, self.guild_id, mode.value)

        if track is self._direct:
            self._direct = None
            self._queue.play_head()
        else:
            self._queue.on_track_end(track)

    async def close(self) -> None:
        """Silence every track and disconnect without firing end handlers."""
        if self._audible is not None:
            self._halt(self._audible)
        tracks = self._queue.clear()
        if self._direct is not None:
            tracks.append(self._direct)
            self._direct = None
        for track in tracks:
            if not track.is_done:
                track.finish(PlayMode.STOP, notify=False)
        self.global_events.close()

        await self._voice.disconnect(force=True)
        logger.info(LogTemplates.VOICE_DISCONNECTED, self.guild_id)
