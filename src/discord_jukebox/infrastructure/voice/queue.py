"""FIFO track queue driving a call's voice client."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from typing import TYPE_CHECKING

from discord_jukebox.application.interfaces.voice_engine import TrackQueueControl
from discord_jukebox.domain.music.value_objects import PlayMode
from discord_jukebox.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.music.entities import TrackMetadata
    from .call import Call
    from .track import TrackHandle

logger = logging.getLogger(__name__)


class TrackQueue(TrackQueueControl):
    """Tracks waiting to play in one call; index 0 is the current track.

    The head starts as soon as it reaches the front, unless it is paused or
    a directly played track holds the voice client. When the head ends it is
    dropped and the next track starts.
    """

    def __init__(self, call: Call) -> None:
        self._call = call
        self._tracks: deque[TrackHandle] = deque()

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[TrackHandle]:
        return iter(list(self._tracks))

    def enqueue(self, source: TrackMetadata) -> TrackHandle:
        track = self._call.create_track(source)
        self._tracks.append(track)
        logger.info(
            LogTemplates.QUEUE_ENQUEUED,
            source.display_title,
            len(self._tracks),
            self._call.guild_id,
        )
        if len(self._tracks) == 1:
            self.play_head()
        return track

    def current(self) -> TrackHandle | None:
        return self._tracks[0] if self._tracks else None

    def pause(self) -> None:
        head = self.current()
        if head is None:
            return
        head.set_mode(PlayMode.PAUSE)
        if head.is_audible:
            self._call.voice_client.pause()
        logger.info(LogTemplates.PLAYBACK_PAUSED, self._call.guild_id)

    def resume(self) -> None:
        head = self.current()
        if head is None:
            return
        head.set_mode(PlayMode.PLAY)
        if head.is_audible:
            if self._call.voice_client.is_paused():
                self._call.voice_client.resume()
        else:
            self.play_head()
        logger.info(LogTemplates.PLAYBACK_RESUMED, self._call.guild_id)

    def skip(self) -> None:
        head = self.current()
        if head is None:
            return
        logger.info(LogTemplates.QUEUE_SKIPPED, head.metadata.display_title, self._call.guild_id)
        self._call.stop_track(head)

    def stop(self) -> None:
        tracks = list(self._tracks)
        self._tracks.clear()
        for track in tracks:
            if not track.is_done:
                self._call.stop_track(track)
        logger.info(LogTemplates.QUEUE_CLEARED, len(tracks), self._call.guild_id)

    # === Engine-facing ===

    def play_head(self) -> None:
        """Start the head track if nothing else holds the voice client."""
        head = self.current()
        if head is None or head.is_audible or head.mode != PlayMode.PLAY:
            return
        if self._call.has_direct_track:
            return
        self._call.start_track(head, head.position)

    def on_track_end(self, track: TrackHandle) -> None:
        try:
            self._tracks.remove(track)
        except ValueError:
            return
        self.play_head()

    def clear(self) -> list[TrackHandle]:
        tracks = list(self._tracks)
        self._tracks.clear()
        return tracks
