"""Voice event reactors.

Each reactor is a small frozen dataclass carrying only the identifiers and
collaborators it needs, registered against one event kind:

- ``TrackEndNotifier``: global ``TrackEnd``, reports how many tracks ended.
- ``SongResumer``: global ``Delayed``, resumes the queue after the prebuffer window.
- ``SongFader``: track ``Periodic``, halves the volume each tick until inaudible.
- ``SongEndNotifier``: track ``TrackEnd``, reports the fade-out finished.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from discord_jukebox.application.interfaces.voice_engine import VoiceEventHandler
from discord_jukebox.domain.music.value_objects import EventSignal
from discord_jukebox.domain.shared.exceptions import TrackError
from discord_jukebox.domain.shared.messages import DiscordUIMessages, LogTemplates

if TYPE_CHECKING:
    from .interfaces.messenger import Messenger
    from .interfaces.voice_engine import CallRegistry, EventContext

logger = logging.getLogger(__name__)

FADE_DECAY: Final[float] = 0.5
FADE_EPSILON: Final[float] = 0.01


@dataclass(frozen=True)
class TrackEndNotifier(VoiceEventHandler):
    channel_id: int
    messenger: Messenger

    async def act(self, ctx: EventContext) -> EventSignal | None:
        await self.messenger.send_text(
            self.channel_id, DiscordUIMessages.TRACKS_ENDED.format(count=len(ctx.tracks))
        )
        return None


@dataclass(frozen=True)
class SongResumer(VoiceEventHandler):
    """Ends the prebuffer window by resuming the guild's queue."""

    guild_id: int
    channel_id: int
    calls: CallRegistry
    messenger: Messenger

    async def act(self, ctx: EventContext) -> EventSignal | None:
        call = self.calls.get(self.guild_id)
        if call is None:
            logger.warning(LogTemplates.REACTOR_NO_CALL, type(self).__name__, self.guild_id)
            await self.messenger.send_text(self.channel_id, DiscordUIMessages.STATE_NO_CALL)
            return None

        async with call.lock:
            call.queue.resume()
        logger.info(LogTemplates.REACTOR_RESUMED, self.guild_id)
        return EventSignal.CANCEL


@dataclass(frozen=True)
class SongFader(VoiceEventHandler):
    """Halves the track's volume every tick and stops it once it drops below ``FADE_EPSILON``.

    The volume change and the stop run under ``call.lock``.
    """

    guild_id: int
    channel_id: int
    calls: CallRegistry
    messenger: Messenger

    async def act(self, ctx: EventContext) -> EventSignal | None:
        if len(ctx.tracks) != 1:
            return None
        track = ctx.tracks[0]

        call = self.calls.get(self.guild_id)
        if call is None:
            logger.warning(LogTemplates.REACTOR_NO_CALL, type(self).__name__, self.guild_id)
            return EventSignal.CANCEL

        async with call.lock:
            try:
                state = await track.get_info()
                volume = state.volume * FADE_DECAY
                track.set_volume(volume)
                faded_out = volume < FADE_EPSILON
                if faded_out:
                    track.stop()
            except TrackError:
                # The track ended between ticks; nothing left to fade.
                return EventSignal.CANCEL

        logger.debug(LogTemplates.REACTOR_FADE_TICK, track.metadata.display_title, volume)
        if faded_out:
            await self.messenger.send_text(self.channel_id, DiscordUIMessages.STOPPING_SONG)
            return EventSignal.CANCEL

        await self.messenger.send_text(self.channel_id, DiscordUIMessages.VOLUME_REDUCED)
        return None


@dataclass(frozen=True)
class SongEndNotifier(VoiceEventHandler):
    channel_id: int
    messenger: Messenger

    async def act(self, ctx: EventContext) -> EventSignal | None:
        await self.messenger.send_text(self.channel_id, DiscordUIMessages.SONG_FADED_OUT)
        return None
