"""Voice event kinds a handler can be registered against."""

from __future__ import annotations

from pydantic import BaseModel

from discord_jukebox.domain.shared.types import NonNegativeFloat, PositiveFloat


class VoiceEventKind(BaseModel):
    """Base class for the event kinds a voice handler can listen for."""

    model_config = {"frozen": True}


class TrackEnd(VoiceEventKind):
    """Fires once when a track stops, either at the end of its stream or by request."""


class Periodic(VoiceEventKind):
    """Fires every ``interval`` seconds, first after ``phase`` seconds (defaults to ``interval``)."""

    interval: PositiveFloat
    phase: NonNegativeFloat | None = None

    @property
    def first_delay(self) -> float:
        return self.interval if self.phase is None else self.phase


class Delayed(VoiceEventKind):
    """Fires once after ``delay`` seconds."""

    delay: NonNegativeFloat


VoiceEvent = TrackEnd | Periodic | Delayed
