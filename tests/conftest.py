import asyncio
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
import pytest_asyncio

GUILD_ID = 987654321
TEXT_CHANNEL_ID = 111111111
VOICE_CHANNEL_ID = 222222222
MESSAGE_ID = 333333333
AUTHOR_ID = 444444444


async def drain(rounds: int = 5) -> None:
    """Let callbacks scheduled with call_soon_threadsafe and spawned tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# ============================================================================
# Voice Engine Fakes
# ============================================================================


class SilentSource(discord.AudioSource):
    """PCM source yielding one silent 20 ms frame per read."""

    def read(self) -> bytes:
        return b"\x00" * 3840

    def is_opus(self) -> bool:
        return False


class RecordingSourceFactory:
    """Source factory that records every ``(metadata, start_seconds, volume)`` request."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.fail_with: Exception | None = None

    def __call__(self, metadata, start_seconds, volume):
        from discord_jukebox.infrastructure.voice.track import TrackAudio

        self.calls.append((metadata, start_seconds, volume))
        if self.fail_with is not None:
            raise self.fail_with
        return TrackAudio(SilentSource(), volume=volume, start_seconds=start_seconds)


class FakeVoiceClient:
    """Stand-in for ``discord.VoiceClient`` that plays one source at a time."""

    def __init__(self, guild_id: int = GUILD_ID, channel_id: int = VOICE_CHANNEL_ID) -> None:
        self.channel = MagicMock(spec=discord.VoiceChannel)
        self.channel.id = channel_id
        self.channel.name = "General"
        self.guild = MagicMock()
        self.guild.id = guild_id
        self.guild.change_voice_state = AsyncMock()
        self.source = None
        self.after = None
        self.paused = False
        self.connected = True
        self.stop_count = 0
        self.played: list = []
        self.disconnect = AsyncMock()
        self.move_to = AsyncMock()

    def play(self, source, *, after=None) -> None:
        self.source = source
        self.after = after
        self.paused = False
        self.played.append(source)

    def stop(self) -> None:
        self.stop_count += 1
        self.source = None

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def is_paused(self) -> bool:
        return self.paused

    def is_connected(self) -> bool:
        return self.connected

    def finish(self, error: Exception | None = None) -> None:
        """Simulate the audio thread reaching the end of the current source."""
        after = self.after
        self.source = None
        if after is not None:
            after(error)


@pytest.fixture
def source_factory():
    return RecordingSourceFactory()


@pytest.fixture
def voice_client():
    return FakeVoiceClient()


@pytest_asyncio.fixture
async def call(voice_client, source_factory):
    from discord_jukebox.infrastructure.voice.call import Call

    return Call(GUILD_ID, voice_client, source_factory)


# ============================================================================
# Domain Fixtures
# ============================================================================


@pytest.fixture
def make_metadata():
    """Factory for track metadata with sensible defaults."""
    from discord_jukebox.domain.music.entities import TrackMetadata

    def _make(title: str = "Test Track", **overrides):
        fields = {
            "title": title,
            "thumbnail_url": "https://i.ytimg.com/vi/test123/hqdefault.jpg",
            "duration_seconds": 180,
            "source_url": "https://youtube.com/watch?v=test123",
            "stream_url": "https://stream.example.com/test123",
        }
        fields.update(overrides)
        return TrackMetadata(**fields)

    return _make


@pytest.fixture
def sample_metadata(make_metadata):
    return make_metadata()


@pytest.fixture
def make_request():
    """Factory for command requests; the author is in voice unless told otherwise."""
    from discord_jukebox.domain.music.entities import CommandRequest

    def _make(*, in_voice: bool = True, **overrides):
        fields = {
            "guild_id": GUILD_ID,
            "channel_id": TEXT_CHANNEL_ID,
            "message_id": MESSAGE_ID,
            "author_id": AUTHOR_ID,
            "author_voice_channel_id": VOICE_CHANNEL_ID if in_voice else None,
        }
        fields.update(overrides)
        return CommandRequest(**fields)

    return _make


# ============================================================================
# Port Mocks
# ============================================================================


@pytest.fixture
def mock_messenger():
    messenger = MagicMock()
    messenger.send_text = AsyncMock()
    messenger.send_rich = AsyncMock()
    return messenger


@pytest.fixture
def mock_resolver(sample_metadata):
    resolver = MagicMock()
    resolver.resolve = AsyncMock(return_value=sample_metadata)
    resolver.search = AsyncMock(return_value=sample_metadata)
    resolver.expand_playlist = AsyncMock(return_value=[])
    return resolver


def sent_texts(messenger) -> list[str]:
    """Plain-text messages posted through a mocked messenger, in order."""
    return [c.args[1] for c in messenger.send_text.call_args_list]
