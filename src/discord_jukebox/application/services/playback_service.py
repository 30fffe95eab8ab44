"""Playback request handlers behind the text commands.

Every handler validates its argument text first, then checks the caller's
voice channel and the guild's call, performs one queue or track mutation
under ``call.lock`` and posts its confirmation. Media resolution and message
sends stay outside the lock.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from discord_jukebox.application.reactors import (
    SongEndNotifier,
    SongFader,
    SongResumer,
    TrackEndNotifier,
)
from discord_jukebox.config.settings import PlaybackSettings
from discord_jukebox.domain.music.events import Delayed, Periodic, TrackEnd
from discord_jukebox.domain.shared.exceptions import (
    MediaResolutionError,
    NotAPlaylistError,
    TrackError,
    TrackFinishedError,
    VoiceConnectionError,
)
from discord_jukebox.domain.shared.messages import DiscordUIMessages, LogTemplates
from discord_jukebox.utils.reply import format_padded_duration, render_progress_bar

if TYPE_CHECKING:
    from ...domain.music.entities import CommandRequest, TrackMetadata, TrackState
    from ..interfaces.media_resolver import MediaResolver
    from ..interfaces.messenger import Messenger
    from ..interfaces.voice_engine import CallRegistry, TrackControl, VoiceCall

logger = logging.getLogger(__name__)

URL_SCHEME_PREFIX = "http"
PLAYLIST_MARKER = "playlist"


def channel_mention(channel_id: int) -> str:
    return f"<#{channel_id}>"


class PlaybackService:
    """Implements join, leave, play, play_fade, play_playlist, skip, stop, loop and now-playing."""

    def __init__(
        self,
        calls: CallRegistry,
        resolver: MediaResolver,
        messenger: Messenger,
        settings: PlaybackSettings | None = None,
    ) -> None:
        self._calls = calls
        self._resolver = resolver
        self._messenger = messenger
        self._settings = settings or PlaybackSettings()

    # === Preconditions ===

    async def _say(self, request: CommandRequest, text: str) -> None:
        await self._messenger.send_text(request.channel_id, text)

    async def _reply(self, request: CommandRequest, text: str) -> None:
        await self._messenger.send_text(request.channel_id, text, reply_to=request.message_id)

    async def _require_caller_voice(self, request: CommandRequest) -> bool:
        if request.author_voice_channel_id is None:
            await self._reply(request, DiscordUIMessages.STATE_CALLER_NOT_IN_VOICE)
            return False
        return True

    async def _require_call(self, request: CommandRequest) -> VoiceCall | None:
        call = self._calls.get(request.guild_id)
        if call is None:
            await self._say(request, DiscordUIMessages.STATE_NO_CALL)
        return call

    async def _call_replaced(self, request: CommandRequest, call: VoiceCall) -> bool:
        """Whether ``call`` was left or replaced while media was being resolved."""
        if self._calls.get(request.guild_id) is call:
            return False
        await self._say(request, DiscordUIMessages.STATE_NO_CALL)
        return True

    async def _resolve(self, request: CommandRequest, query: str) -> TrackMetadata | None:
        """Resolve a URL (first token only) or a search term; reports failures to the channel."""
        try:
            if query.startswith(URL_SCHEME_PREFIX):
                return await self._resolver.resolve(query.split()[0])
            return await self._resolver.search(query)
        except MediaResolutionError as exc:
            logger.error(LogTemplates.SOURCE_FAILED, query, exc)
            await self._say(request, DiscordUIMessages.ERROR_SOURCING)
            return None

    def _enqueue_with_prebuffer(
        self, call: VoiceCall, request: CommandRequest, source: TrackMetadata
    ) -> tuple[int, bool]:
        """Enqueue ``source``; pause and arm the resume timer when the queue reaches two tracks.

        Must be called with ``call.lock`` held. Returns the queue length and
        whether the prebuffer window was armed.
        """
        call.queue.enqueue(source)
        length = len(call.queue)
        if length != 2:
            return length, False

        call.queue.pause()
        call.add_global_event(
            Delayed(delay=self._settings.prebuffer_seconds),
            SongResumer(
                guild_id=request.guild_id,
                channel_id=request.channel_id,
                calls=self._calls,
                messenger=self._messenger,
            ),
        )
        logger.info(
            LogTemplates.QUEUE_PREBUFFER_ARMED, self._settings.prebuffer_seconds, request.guild_id
        )
        return length, True

    # === Voice channel ===

    async def join(self, request: CommandRequest) -> None:
        voice_channel_id = request.author_voice_channel_id
        if voice_channel_id is None:
            await self._reply(request, DiscordUIMessages.STATE_NOT_IN_VOICE)
            return

        try:
            call, created = await self._calls.join(request.guild_id, voice_channel_id)
        except VoiceConnectionError as exc:
            logger.error(LogTemplates.PLAYBACK_ERROR, request.guild_id, exc)
            await self._say(request, DiscordUIMessages.JOIN_FAILED)
            return

        await self._say(
            request, DiscordUIMessages.JOINED.format(channel_mention=channel_mention(voice_channel_id))
        )

        try:
            await call.deafen(True)
        except VoiceConnectionError:
            await self._say(request, DiscordUIMessages.DEAFEN_FAILED)

        if created:
            async with call.lock:
                call.add_global_event(
                    TrackEnd(),
                    TrackEndNotifier(channel_id=request.channel_id, messenger=self._messenger),
                )

    async def leave(self, request: CommandRequest) -> None:
        if not await self._require_caller_voice(request):
            return

        if self._calls.get(request.guild_id) is None:
            await self._reply(request, DiscordUIMessages.STATE_NOT_IN_VOICE)
            return

        try:
            await self._calls.remove(request.guild_id)
        except VoiceConnectionError as exc:
            logger.error(LogTemplates.PLAYBACK_ERROR, request.guild_id, exc)
            await self._say(request, DiscordUIMessages.LEAVE_FAILED.format(error=exc.message))

        await self._say(request, DiscordUIMessages.LEFT)

    # === Queue ===

    async def play(self, request: CommandRequest, query: str) -> None:
        query = query.strip()
        if not query:
            await self._say(request, DiscordUIMessages.ERROR_QUERY_REQUIRED)
            return
        if not await self._require_caller_voice(request):
            return
        call = await self._require_call(request)
        if call is None:
            return

        source = await self._resolve(request, query)
        if source is None or await self._call_replaced(request, call):
            return

        async with call.lock:
            position, prebuffering = self._enqueue_with_prebuffer(call, request, source)

        if prebuffering:
            await self._say(request, DiscordUIMessages.PREBUFFERING)

        await self._messenger.send_rich(
            request.channel_id,
            title=source.display_title,
            description=DiscordUIMessages.ADDED_TO_QUEUE.format(position=position),
            thumbnail_url=source.thumbnail_url,
            footer=DiscordUIMessages.FOOTER_DURATION.format(
                duration=format_padded_duration(source.duration_seconds)
            ),
        )

    async def play_playlist(self, request: CommandRequest, query: str) -> None:
        query = query.strip()
        if PLAYLIST_MARKER not in query and not query.startswith(URL_SCHEME_PREFIX):
            await self._say(request, DiscordUIMessages.ERROR_PLAYLIST_URL_REQUIRED)
            return
        if not await self._require_caller_voice(request):
            return
        call = await self._require_call(request)
        if call is None:
            return

        await self._say(request, DiscordUIMessages.PLAYLIST_POLLING)
        try:
            urls = await self._resolver.expand_playlist(query)
        except NotAPlaylistError:
            await self._say(request, DiscordUIMessages.PLAYLIST_POLLED)
            await self._say(request, DiscordUIMessages.PLAYLIST_NOT_A_PLAYLIST)
            return
        except MediaResolutionError as exc:
            logger.error(LogTemplates.SOURCE_FAILED, query, exc)
            await self._say(request, DiscordUIMessages.ERROR_SOURCING)
            return
        await self._say(request, DiscordUIMessages.PLAYLIST_POLLED)

        if not urls:
            await self._say(request, DiscordUIMessages.PLAYLIST_EMPTY)
            return

        for url in urls:
            source = await self._resolve(request, url)
            if source is None:
                continue

            if await self._call_replaced(request, call):
                return

            async with call.lock:
                _, prebuffering = self._enqueue_with_prebuffer(call, request, source)
            if prebuffering:
                await self._say(request, DiscordUIMessages.PREBUFFERING)

    async def skip(self, request: CommandRequest) -> None:
        if not await self._require_caller_voice(request):
            return
        call = await self._require_call(request)
        if call is None:
            return

        async with call.lock:
            call.queue.skip()
            remaining = len(call.queue)

        await self._say(request, DiscordUIMessages.SKIPPED.format(remaining=remaining))

    async def stop(self, request: CommandRequest) -> None:
        if not await self._require_caller_voice(request):
            return
        call = await self._require_call(request)
        if call is None:
            return

        async with call.lock:
            call.queue.stop()

        await self._say(request, DiscordUIMessages.QUEUE_CLEARED)

    # === Direct playback ===

    async def play_fade(self, request: CommandRequest, query: str) -> None:
        tokens = query.split()
        if not tokens:
            await self._say(request, DiscordUIMessages.ERROR_URL_REQUIRED)
            return
        url = tokens[0]
        if not url.startswith(URL_SCHEME_PREFIX):
            await self._say(request, DiscordUIMessages.ERROR_URL_INVALID)
            return
        if not await self._require_caller_voice(request):
            return
        call = await self._require_call(request)
        if call is None:
            return

        source = await self._resolve(request, url)
        if source is None or await self._call_replaced(request, call):
            return

        try:
            async with call.lock:
                track = call.play_source(source)
                track.add_event(
                    Periodic(
                        interval=self._settings.fade_interval_seconds,
                        phase=self._settings.fade_delay_seconds,
                    ),
                    SongFader(
                        guild_id=request.guild_id,
                        channel_id=request.channel_id,
                        calls=self._calls,
                        messenger=self._messenger,
                    ),
                )
                track.add_event(
                    TrackEnd(),
                    SongEndNotifier(channel_id=request.channel_id, messenger=self._messenger),
                )
        except TrackError as exc:
            logger.error(LogTemplates.PLAYBACK_FAILED_START, source.display_title, exc)
            await self._say(request, DiscordUIMessages.ERROR_SOURCING)
            return

        await self._say(request, DiscordUIMessages.PLAYING_SONG)

    # === Track state ===

    async def toggle_loop(self, request: CommandRequest) -> None:
        if not await self._require_caller_voice(request):
            return
        call = await self._require_call(request)
        if call is None:
            return

        async with call.lock:
            current = call.queue.current()
            if current is None:
                message = DiscordUIMessages.STATE_NO_SONG_FOR_LOOP
            else:
                message = await self._toggle_loop(current)

        await self._say(request, message)

    @staticmethod
    async def _toggle_loop(track: TrackControl) -> str:
        try:
            state = await track.get_info()
        except TrackFinishedError:
            return DiscordUIMessages.LOOP_ALREADY_FINISHED
        except TrackError as exc:
            logger.error(LogTemplates.TRACK_CONTROL_FAILED, exc)
            return DiscordUIMessages.LOOP_INTERNAL_ERROR.format(code=1)

        try:
            if state.is_looping:
                track.disable_loop()
                return DiscordUIMessages.LOOP_DISABLED
            track.enable_loop()
            return DiscordUIMessages.LOOP_ENABLED
        except TrackFinishedError:
            return DiscordUIMessages.LOOP_ALREADY_FINISHED
        except TrackError as exc:
            logger.error(LogTemplates.TRACK_CONTROL_FAILED, exc)
            return DiscordUIMessages.LOOP_INTERNAL_ERROR.format(code=2)

    async def now_playing(self, request: CommandRequest) -> None:
        if not await self._require_caller_voice(request):
            return
        call = await self._require_call(request)
        if call is None:
            return

        async with call.lock:
            voice_channel_id = call.channel_id
            current = call.queue.current()
            if current is None:
                problem: str | None = DiscordUIMessages.STATE_NOTHING_PLAYING
            else:
                metadata = current.metadata
                problem, state = await self._read_state(current)

        if problem is not None:
            await self._say(request, problem)
            return

        duration = metadata.duration_seconds
        elapsed = f"[{format_padded_duration(state.position)}/{format_padded_duration(duration)}]"
        await self._messenger.send_rich(
            request.channel_id,
            content=DiscordUIMessages.NOW_PLAYING.format(
                channel_mention=channel_mention(voice_channel_id)
            ),
            title=metadata.display_title,
            description=render_progress_bar(state.position, duration),
            thumbnail_url=metadata.thumbnail_url,
            footer=DiscordUIMessages.FOOTER_DURATION.format(duration=elapsed),
        )

    @staticmethod
    async def _read_state(track: TrackControl) -> tuple[str | None, TrackState | None]:
        try:
            return None, await track.get_info()
        except TrackFinishedError:
            return DiscordUIMessages.NOW_PLAYING_FINISHED, None
        except TrackError as exc:
            logger.error(LogTemplates.TRACK_CONTROL_FAILED, exc)
            return DiscordUIMessages.NOW_PLAYING_INTERNAL_ERROR.format(code=1), None

    # === Misc ===

    async def ping(self, channel_id: int) -> None:
        await self._messenger.send_text(channel_id, DiscordUIMessages.PONG)
