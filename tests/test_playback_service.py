"""
Unit Tests for PlaybackService

Tests for every text-command handler:
- join / leave voice channel handling
- play with URL vs search, prebuffer pause on the second track
- play_playlist validation, expansion and ordered enqueue
- skip / stop
- play_fade registering the fade ticker and end notifier
- songloop toggling and its error messages
- nowplaying embed and error messages
- ping
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import GUILD_ID, MESSAGE_ID, TEXT_CHANNEL_ID, VOICE_CHANNEL_ID, sent_texts
from discord_jukebox.application.reactors import (
    SongEndNotifier,
    SongFader,
    SongResumer,
    TrackEndNotifier,
)
from discord_jukebox.application.services.playback_service import PlaybackService
from discord_jukebox.config.settings import PlaybackSettings
from discord_jukebox.domain.music.entities import TrackState
from discord_jukebox.domain.music.events import Delayed, Periodic, TrackEnd
from discord_jukebox.domain.music.value_objects import LoopState
from discord_jukebox.domain.shared.exceptions import (
    MediaResolutionError,
    NotAPlaylistError,
    TrackError,
    TrackFinishedError,
    VoiceConnectionError,
)

# =============================================================================
# Fakes
# =============================================================================


class FakeQueue:
    def __init__(self) -> None:
        self.items: list = []
        self.paused = False
        self.resumed = 0
        self.stopped = False
        self.head = None

    def enqueue(self, source):
        self.items.append(source)
        return MagicMock(metadata=source)

    def __len__(self) -> int:
        return len(self.items)

    def current(self):
        return self.head

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False
        self.resumed += 1

    def skip(self) -> None:
        if self.items:
            self.items.pop(0)

    def stop(self) -> None:
        self.items.clear()
        self.stopped = True


class FakeCall:
    def __init__(self) -> None:
        self.guild_id = GUILD_ID
        self.channel_id = VOICE_CHANNEL_ID
        self.lock = asyncio.Lock()
        self.queue = FakeQueue()
        self.global_events: list = []
        self.direct_tracks: list = []
        self.deafen = AsyncMock()
        self.play_source_error: Exception | None = None

    def play_source(self, source):
        if self.play_source_error is not None:
            raise self.play_source_error
        track = MagicMock(metadata=source)
        track.events = []
        track.add_event = MagicMock(side_effect=lambda e, h: track.events.append((e, h)))
        self.direct_tracks.append(track)
        return track

    def add_global_event(self, event, handler) -> None:
        self.global_events.append((event, handler))


class FakeCurrentTrack:
    def __init__(self, metadata, state=None, error=None, control_error=None) -> None:
        self.metadata = metadata
        self.state = state or TrackState(position=30.0)
        self.error = error
        self.control_error = control_error
        self.loop_calls: list[str] = []

    async def get_info(self):
        if self.error is not None:
            raise self.error
        return self.state

    def enable_loop(self) -> None:
        if self.control_error is not None:
            raise self.control_error
        self.loop_calls.append("enable")

    def disable_loop(self) -> None:
        if self.control_error is not None:
            raise self.control_error
        self.loop_calls.append("disable")


def _leave_during_resolve(mock_calls, mock_resolver, metadata, replacement=None):
    """Make the resolver drop (or replace) the guild's call before returning."""

    async def resolve(url):
        mock_calls.get.return_value = replacement
        return metadata

    mock_resolver.resolve.side_effect = resolve


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_call():
    return FakeCall()


@pytest.fixture
def mock_calls(fake_call):
    calls = MagicMock()
    calls.get = MagicMock(return_value=fake_call)
    calls.join = AsyncMock(return_value=(fake_call, True))
    calls.remove = AsyncMock(return_value=True)
    return calls


@pytest.fixture
def service(mock_calls, mock_resolver, mock_messenger):
    return PlaybackService(
        calls=mock_calls,
        resolver=mock_resolver,
        messenger=mock_messenger,
        settings=PlaybackSettings(),
    )


@pytest.fixture
def request_(make_request):
    return make_request()


@pytest.fixture
def outsider(make_request):
    return make_request(in_voice=False)


# =============================================================================
# join
# =============================================================================


class TestJoin:
    async def test_join_success(self, service, mock_calls, mock_messenger, fake_call, request_):
        await service.join(request_)

        mock_calls.join.assert_awaited_once_with(GUILD_ID, VOICE_CHANNEL_ID)
        fake_call.deafen.assert_awaited_once_with(True)
        assert sent_texts(mock_messenger) == [f"Joined <#{VOICE_CHANNEL_ID}>"]

    async def test_new_call_registers_track_end_notifier(self, service, fake_call, request_):
        await service.join(request_)

        assert len(fake_call.global_events) == 1
        event, handler = fake_call.global_events[0]
        assert event == TrackEnd()
        assert isinstance(handler, TrackEndNotifier)
        assert handler.channel_id == TEXT_CHANNEL_ID

    async def test_rejoin_does_not_register_twice(self, service, mock_calls, fake_call, request_):
        mock_calls.join.return_value = (fake_call, False)

        await service.join(request_)

        assert fake_call.global_events == []

    async def test_caller_not_in_voice(self, service, mock_calls, mock_messenger, outsider):
        await service.join(outsider)

        mock_calls.join.assert_not_awaited()
        mock_messenger.send_text.assert_awaited_once_with(
            TEXT_CHANNEL_ID, "Not in a voice channel", reply_to=MESSAGE_ID
        )

    async def test_connection_failure(self, service, mock_calls, mock_messenger, fake_call, request_):
        mock_calls.join.side_effect = VoiceConnectionError("timeout", guild_id=GUILD_ID)

        await service.join(request_)

        assert sent_texts(mock_messenger) == ["Error joining the channel"]
        fake_call.deafen.assert_not_awaited()

    async def test_deafen_failure_warns(self, service, mock_messenger, fake_call, request_):
        fake_call.deafen.side_effect = VoiceConnectionError("nope")

        await service.join(request_)

        texts = sent_texts(mock_messenger)
        assert texts[0] == f"Joined <#{VOICE_CHANNEL_ID}>"
        assert "error while trying to deafen" in texts[1]
        assert len(fake_call.global_events) == 1


# =============================================================================
# leave
# =============================================================================


class TestLeave:
    async def test_leave(self, service, mock_calls, mock_messenger, request_):
        await service.leave(request_)

        mock_calls.remove.assert_awaited_once_with(GUILD_ID)
        assert sent_texts(mock_messenger) == ["Left voice channel"]

    async def test_no_call(self, service, mock_calls, mock_messenger, request_):
        mock_calls.get.return_value = None

        await service.leave(request_)

        mock_calls.remove.assert_not_awaited()
        assert sent_texts(mock_messenger) == ["Not in a voice channel"]

    async def test_removal_failure_still_reports_left(self, service, mock_calls, mock_messenger, request_):
        mock_calls.remove.side_effect = VoiceConnectionError("socket closed")

        await service.leave(request_)

        assert sent_texts(mock_messenger) == ["Failed: socket closed", "Left voice channel"]

    async def test_caller_not_in_voice(self, service, mock_calls, mock_messenger, outsider):
        await service.leave(outsider)

        mock_calls.remove.assert_not_awaited()
        assert sent_texts(mock_messenger) == ["You are not in a vc."]


# =============================================================================
# play
# =============================================================================


class TestPlay:
    @pytest.mark.parametrize("query", ["", "   "])
    async def test_empty_query_rejected(self, service, mock_resolver, mock_messenger, request_, query):
        await service.play(request_, query)

        mock_resolver.resolve.assert_not_awaited()
        mock_resolver.search.assert_not_awaited()
        assert sent_texts(mock_messenger) == ["Must provide a URL or a search query"]

    async def test_url_on_empty_queue(self, service, mock_resolver, mock_messenger, fake_call, request_, sample_metadata):
        await service.play(request_, "https://example.com/video")

        mock_resolver.resolve.assert_awaited_once_with("https://example.com/video")
        mock_resolver.search.assert_not_awaited()
        assert fake_call.queue.items == [sample_metadata]
        assert fake_call.queue.paused is False
        assert fake_call.global_events == []
        assert sent_texts(mock_messenger) == []

        kwargs = mock_messenger.send_rich.call_args.kwargs
        assert kwargs["title"] == "Test Track"
        assert kwargs["description"] == "Added song to queue, position `1`"
        assert kwargs["thumbnail_url"] == sample_metadata.thumbnail_url
        assert kwargs["footer"] == "Duration: 00:03:00"

    async def test_url_uses_first_token_only(self, service, mock_resolver, request_):
        await service.play(request_, "https://example.com/video extra words")

        mock_resolver.resolve.assert_awaited_once_with("https://example.com/video")

    async def test_search_term(self, service, mock_resolver, request_):
        await service.play(request_, "never gonna give you up")

        mock_resolver.search.assert_awaited_once_with("never gonna give you up")
        mock_resolver.resolve.assert_not_awaited()

    async def test_second_track_pauses_and_arms_resumer(self, service, mock_messenger, fake_call, request_):
        await service.play(request_, "https://example.com/one")
        await service.play(request_, "https://example.com/two")

        assert fake_call.queue.paused is True
        assert len(fake_call.global_events) == 1
        event, handler = fake_call.global_events[0]
        assert event == Delayed(delay=15.0)
        assert isinstance(handler, SongResumer)
        assert handler.guild_id == GUILD_ID
        assert sent_texts(mock_messenger) == ["Prebuffering..."]
        assert (
            mock_messenger.send_rich.call_args.kwargs["description"]
            == "Added song to queue, position `2`"
        )

    async def test_third_track_does_not_arm_again(self, service, fake_call, request_):
        for n in range(3):
            await service.play(request_, f"https://example.com/{n}")

        assert len(fake_call.global_events) == 1

    async def test_prebuffer_window_from_settings(self, mock_calls, mock_resolver, mock_messenger, fake_call, request_):
        service = PlaybackService(
            mock_calls, mock_resolver, mock_messenger, PlaybackSettings(prebuffer_seconds=2.5)
        )

        await service.play(request_, "https://example.com/one")
        await service.play(request_, "https://example.com/two")

        assert fake_call.global_events[0][0] == Delayed(delay=2.5)

    async def test_unknown_duration_footer(self, service, mock_resolver, mock_messenger, request_, make_metadata):
        mock_resolver.resolve.return_value = make_metadata(duration_seconds=None)

        await service.play(request_, "https://example.com/live")

        assert mock_messenger.send_rich.call_args.kwargs["footer"] == "Duration: 00:00:00"

    async def test_resolution_failure(self, service, mock_resolver, mock_messenger, fake_call, request_):
        mock_resolver.resolve.side_effect = MediaResolutionError("https://example.com/x")

        await service.play(request_, "https://example.com/x")

        assert fake_call.queue.items == []
        assert sent_texts(mock_messenger) == ["Error sourcing ffmpeg (see console)"]
        mock_messenger.send_rich.assert_not_awaited()

    async def test_caller_not_in_voice(self, service, mock_resolver, mock_messenger, outsider):
        await service.play(outsider, "https://example.com/video")

        mock_resolver.resolve.assert_not_awaited()
        assert sent_texts(mock_messenger) == ["You are not in a vc."]

    async def test_no_call(self, service, mock_calls, mock_resolver, mock_messenger, request_):
        mock_calls.get.return_value = None

        await service.play(request_, "https://example.com/video")

        mock_resolver.resolve.assert_not_awaited()
        assert sent_texts(mock_messenger) == ["Not in a voice channel to play in"]

    async def test_call_left_during_resolution(self, service, mock_calls, mock_resolver, mock_messenger, fake_call, request_, sample_metadata):
        _leave_during_resolve(mock_calls, mock_resolver, sample_metadata)

        await service.play(request_, "https://example.com/video")

        assert fake_call.queue.items == []
        assert fake_call.global_events == []
        assert sent_texts(mock_messenger) == ["Not in a voice channel to play in"]
        mock_messenger.send_rich.assert_not_awaited()

    async def test_call_replaced_during_resolution(self, service, mock_calls, mock_resolver, mock_messenger, fake_call, request_, sample_metadata):
        replacement = FakeCall()
        _leave_during_resolve(mock_calls, mock_resolver, sample_metadata, replacement=replacement)

        await service.play(request_, "https://example.com/video")

        assert fake_call.queue.items == []
        assert replacement.queue.items == []
        assert sent_texts(mock_messenger) == ["Not in a voice channel to play in"]


# =============================================================================
# play_playlist
# =============================================================================


PLAYLIST_URL = "https://example.com/playlist?list=1"


class TestPlayPlaylist:
    @pytest.mark.parametrize("query", ["", "some words"])
    async def test_rejects_non_playlist_text(self, service, mock_resolver, mock_messenger, request_, query):
        await service.play_playlist(request_, query)

        mock_resolver.expand_playlist.assert_not_awaited()
        assert sent_texts(mock_messenger) == ["Must provide a playlist URL"]

    async def test_enqueues_in_resolved_order(self, service, mock_resolver, mock_messenger, fake_call, request_, make_metadata):
        urls = [f"https://youtube.com/watch?v={n}" for n in "abc"]
        mock_resolver.expand_playlist.return_value = urls
        mock_resolver.resolve.side_effect = lambda url: make_metadata(title=url[-1])

        await service.play_playlist(request_, PLAYLIST_URL)

        mock_resolver.expand_playlist.assert_awaited_once_with(PLAYLIST_URL)
        assert [c.args[0] for c in mock_resolver.resolve.await_args_list] == urls
        assert [m.title for m in fake_call.queue.items] == ["a", "b", "c"]
        assert sent_texts(mock_messenger) == ["Polling...", "Polled!", "Prebuffering..."]

    async def test_text_containing_playlist_is_accepted(self, service, mock_resolver, request_):
        await service.play_playlist(request_, "my playlist")

        mock_resolver.expand_playlist.assert_awaited_once_with("my playlist")

    async def test_empty_playlist(self, service, mock_resolver, mock_messenger, request_):
        mock_resolver.expand_playlist.return_value = []

        await service.play_playlist(request_, PLAYLIST_URL)

        assert sent_texts(mock_messenger) == ["Polling...", "Polled!", "This playlist has no videos!"]

    async def test_not_a_playlist(self, service, mock_resolver, mock_messenger, request_):
        mock_resolver.expand_playlist.side_effect = NotAPlaylistError(PLAYLIST_URL)

        await service.play_playlist(request_, PLAYLIST_URL)

        assert sent_texts(mock_messenger) == [
            "Polling...",
            "Polled!",
            "That link did not resolve to a playlist.",
        ]

    async def test_extraction_failure(self, service, mock_resolver, mock_messenger, request_):
        mock_resolver.expand_playlist.side_effect = MediaResolutionError(PLAYLIST_URL)

        await service.play_playlist(request_, PLAYLIST_URL)

        assert sent_texts(mock_messenger) == ["Polling...", "Error sourcing ffmpeg (see console)"]

    async def test_failed_item_is_skipped(self, service, mock_resolver, fake_call, request_, make_metadata):
        mock_resolver.expand_playlist.return_value = ["https://a", "https://b"]
        mock_resolver.resolve.side_effect = [MediaResolutionError("https://a"), make_metadata("B")]

        await service.play_playlist(request_, PLAYLIST_URL)

        assert [m.title for m in fake_call.queue.items] == ["B"]

    async def test_stops_when_call_goes_away(self, service, mock_calls, mock_resolver, mock_messenger, fake_call, request_, make_metadata):
        mock_resolver.expand_playlist.return_value = ["https://a", "https://b"]

        def resolve(url):
            if url == "https://b":
                mock_calls.get.return_value = None
            return make_metadata(url)

        mock_resolver.resolve.side_effect = resolve

        await service.play_playlist(request_, PLAYLIST_URL)

        assert [m.title for m in fake_call.queue.items] == ["https://a"]
        assert sent_texts(mock_messenger)[-1] == "Not in a voice channel to play in"

    async def test_no_call(self, service, mock_calls, mock_resolver, mock_messenger, request_):
        mock_calls.get.return_value = None

        await service.play_playlist(request_, PLAYLIST_URL)

        mock_resolver.expand_playlist.assert_not_awaited()
        assert sent_texts(mock_messenger) == ["Not in a voice channel to play in"]


# =============================================================================
# skip / stop
# =============================================================================


class TestSkipAndStop:
    async def test_skip_reports_remaining(self, service, mock_messenger, fake_call, request_, make_metadata):
        fake_call.queue.items = [make_metadata(t) for t in "ABC"]

        await service.skip(request_)

        assert len(fake_call.queue) == 2
        assert sent_texts(mock_messenger) == ["Song skipped: 2 in queue."]

    async def test_skip_empty_queue(self, service, mock_messenger, request_):
        await service.skip(request_)

        assert sent_texts(mock_messenger) == ["Song skipped: 0 in queue."]

    async def test_stop(self, service, mock_messenger, fake_call, request_, make_metadata):
        fake_call.queue.items = [make_metadata(t) for t in "AB"]

        await service.stop(request_)

        assert fake_call.queue.stopped
        assert len(fake_call.queue) == 0
        assert sent_texts(mock_messenger) == ["Queue cleared."]

    async def test_skip_without_call(self, service, mock_calls, mock_messenger, request_):
        mock_calls.get.return_value = None

        await service.skip(request_)

        assert sent_texts(mock_messenger) == ["Not in a voice channel to play in"]

    async def test_stop_caller_not_in_voice(self, service, mock_messenger, fake_call, outsider):
        await service.stop(outsider)

        assert not fake_call.queue.stopped
        assert sent_texts(mock_messenger) == ["You are not in a vc."]


# =============================================================================
# play_fade
# =============================================================================


class TestPlayFade:
    async def test_missing_url(self, service, mock_resolver, mock_messenger, request_):
        await service.play_fade(request_, "")

        mock_resolver.resolve.assert_not_awaited()
        assert sent_texts(mock_messenger) == ["Must provide a URL to a video or audio"]

    async def test_invalid_url(self, service, mock_resolver, mock_messenger, request_):
        await service.play_fade(request_, "not-a-url")

        mock_resolver.resolve.assert_not_awaited()
        assert sent_texts(mock_messenger) == ["Must provide a valid URL"]

    async def test_registers_fader_and_end_notifier(self, service, mock_calls, mock_messenger, fake_call, request_, sample_metadata):
        await service.play_fade(request_, "https://example.com/song")

        assert len(fake_call.direct_tracks) == 1
        track = fake_call.direct_tracks[0]
        (periodic, fader), (end, notifier) = track.events
        assert periodic == Periodic(interval=5.0, phase=7.0)
        assert isinstance(fader, SongFader)
        assert fader.guild_id == GUILD_ID
        assert fader.calls is mock_calls
        assert end == TrackEnd()
        assert isinstance(notifier, SongEndNotifier)
        assert fake_call.queue.items == []
        assert sent_texts(mock_messenger) == ["Playing song"]

    async def test_fade_timings_from_settings(self, mock_calls, mock_resolver, mock_messenger, fake_call, request_):
        service = PlaybackService(
            mock_calls,
            mock_resolver,
            mock_messenger,
            PlaybackSettings(fade_interval_seconds=1.0, fade_delay_seconds=2.0),
        )

        await service.play_fade(request_, "https://example.com/song")

        assert fake_call.direct_tracks[0].events[0][0] == Periodic(interval=1.0, phase=2.0)

    async def test_play_failure(self, service, mock_messenger, fake_call, request_):
        fake_call.play_source_error = TrackError("no ffmpeg")

        await service.play_fade(request_, "https://example.com/song")

        assert sent_texts(mock_messenger) == ["Error sourcing ffmpeg (see console)"]

    async def test_resolution_failure(self, service, mock_resolver, mock_messenger, fake_call, request_):
        mock_resolver.resolve.side_effect = MediaResolutionError("https://example.com/song")

        await service.play_fade(request_, "https://example.com/song")

        assert fake_call.direct_tracks == []
        assert sent_texts(mock_messenger) == ["Error sourcing ffmpeg (see console)"]

    async def test_call_left_during_resolution(self, service, mock_calls, mock_resolver, mock_messenger, fake_call, request_, sample_metadata):
        _leave_during_resolve(mock_calls, mock_resolver, sample_metadata)

        await service.play_fade(request_, "https://example.com/song")


        assert fake_call.direct_tracks == []
        assert sent_texts(mock_messenger) == ["Not in a voice channel to play in"]

# =============================================================================
# songloop
# =============================================================================


class TestToggleLoop:
    async def test_enable(self, service, mock_messenger, fake_call, request_, sample_metadata):
        track = FakeCurrentTrack(sample_metadata)
        fake_call.queue.head = track

        await service.toggle_loop(request_)

        assert track.loop_calls == ["enable"]
        assert sent_texts(mock_messenger) == ["Enabled infinite loop for the current song!"]

    async def test_disable(self, service, mock_messenger, fake_call, request_, sample_metadata):
        track = FakeCurrentTrack(sample_metadata, state=TrackState(loops=LoopState.INFINITE))
        fake_call.queue.head = track

        await service.toggle_loop(request_)

        assert track.loop_calls == ["disable"]
        assert sent_texts(mock_messenger) == ["Disabled infinite loop for the current song!"]

    async def test_nothing_playing(self, service, mock_messenger, request_):
        await service.toggle_loop(request_)

        assert sent_texts(mock_messenger) == ["No song is playing, please play a song first"]

    async def test_finished_track(self, service, mock_messenger, fake_call, request_, sample_metadata):
        fake_call.queue.head = FakeCurrentTrack(sample_metadata, error=TrackFinishedError("Song"))

        await service.toggle_loop(request_)

        assert sent_texts(mock_messenger) == ["The song is already finished, please queue another one"]

    async def test_finished_between_read_and_toggle(self, service, mock_messenger, fake_call, request_, sample_metadata):
        fake_call.queue.head = FakeCurrentTrack(
            sample_metadata, control_error=TrackFinishedError("Song")
        )

        await service.toggle_loop(request_)

        assert sent_texts(mock_messenger) == ["The song is already finished, please queue another one"]

    async def test_other_track_error_on_read(self, service, mock_messenger, fake_call, request_, sample_metadata):
        fake_call.queue.head = FakeCurrentTrack(sample_metadata, error=TrackError("bad"))

        await service.toggle_loop(request_)

        assert sent_texts(mock_messenger)[0].endswith("(1)")

    async def test_other_track_error_on_toggle(self, service, mock_messenger, fake_call, request_, sample_metadata):
        fake_call.queue.head = FakeCurrentTrack(sample_metadata, control_error=TrackError("bad"))

        await service.toggle_loop(request_)

        assert sent_texts(mock_messenger)[0].endswith("(2)")

    async def test_no_call(self, service, mock_calls, mock_messenger, request_):
        mock_calls.get.return_value = None

        await service.toggle_loop(request_)

        assert sent_texts(mock_messenger) == ["Not in a voice channel to play in"]


# =============================================================================
# nowplaying
# =============================================================================


class TestNowPlaying:
    async def test_embed(self, service, mock_messenger, fake_call, request_, sample_metadata):
        fake_call.queue.head = FakeCurrentTrack(sample_metadata, state=TrackState(position=90.0))

        await service.now_playing(request_)

        kwargs = mock_messenger.send_rich.call_args.kwargs
        assert kwargs["content"] == f"Now playing (in <#{VOICE_CHANNEL_ID}>): "
        assert kwargs["title"] == "Test Track"
        assert kwargs["thumbnail_url"] == sample_metadata.thumbnail_url
        assert kwargs["footer"] == "Duration: [00:01:30/00:03:00]"
        assert kwargs["description"].startswith(":arrow_forward: ")
        assert ":radio_button:" in kwargs["description"]
        assert sent_texts(mock_messenger) == []

    async def test_nothing_playing(self, service, mock_messenger, request_):
        await service.now_playing(request_)

        assert sent_texts(mock_messenger) == [":x: there is no song playing right now"]
        mock_messenger.send_rich.assert_not_awaited()

    async def test_finished_track(self, service, mock_messenger, fake_call, request_, sample_metadata):
        fake_call.queue.head = FakeCurrentTrack(sample_metadata, error=TrackFinishedError("Song"))

        await service.now_playing(request_)

        assert sent_texts(mock_messenger) == ["The song is finished and there are no more songs"]

    async def test_other_track_error(self, service, mock_messenger, fake_call, request_, sample_metadata):
        fake_call.queue.head = FakeCurrentTrack(sample_metadata, error=TrackError("bad"))

        await service.now_playing(request_)

        assert "contact the developer" in sent_texts(mock_messenger)[0]

    async def test_messages_sent_outside_lock(self, service, mock_messenger, fake_call, request_, sample_metadata):
        fake_call.queue.head = FakeCurrentTrack(sample_metadata)
        lock_states = []
        mock_messenger.send_rich.side_effect = lambda *a, **k: lock_states.append(fake_call.lock.locked())

        await service.now_playing(request_)

        assert lock_states == [False]


# =============================================================================
# ping
# =============================================================================


class TestPing:
    async def test_ping(self, service, mock_messenger):
        await service.ping(TEXT_CHANNEL_ID)

        mock_messenger.send_text.assert_awaited_once_with(TEXT_CHANNEL_ID, "Pong!")
