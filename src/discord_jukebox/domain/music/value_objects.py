"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum, StrEnum


class LoopState(StrEnum):
    """Whether a track restarts when it reaches the end of its stream."""

    FINITE = "finite"
    INFINITE = "infinite"


class PlayMode(StrEnum):
    """Playback mode of a single track."""

    PLAY = "play"
    PAUSE = "pause"
    STOP = "stop"
    END = "end"

    @property
    def is_done(self) -> bool:
        return self in (PlayMode.STOP, PlayMode.END)


class EventSignal(Enum):
    """Value an event handler returns to remove its own registration."""

    CANCEL = "cancel"
