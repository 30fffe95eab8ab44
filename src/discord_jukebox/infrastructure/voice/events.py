"""Event store that runs handlers for track-end, periodic and delayed events."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from itertools import count
from typing import TYPE_CHECKING

from discord_jukebox.application.interfaces.voice_engine import EventContext
from discord_jukebox.domain.music.events import Delayed, Periodic, TrackEnd
from discord_jukebox.domain.music.value_objects import EventSignal
from discord_jukebox.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...application.interfaces.voice_engine import TrackControl, VoiceEventHandler
    from ...domain.music.events import VoiceEvent

logger = logging.getLogger(__name__)

_registration_ids = count(1)


@dataclass(eq=False)
class EventRegistration:
    event: VoiceEvent
    handler: VoiceEventHandler
    id: int = field(default_factory=lambda: next(_registration_ids))


class EventStore:
    """Holds ``(event, handler)`` registrations for one track or one call.

    Timed registrations (``Periodic``/``Delayed``) run on their own asyncio
    tasks once the store is started. ``TrackEnd`` registrations run each time
    :meth:`fire_end` is called. A handler returning ``EventSignal.CANCEL`` is
    removed; a handler that raises is logged and kept.
    """

    def __init__(
        self,
        guild_id: int,
        context: Callable[[], tuple[TrackControl, ...]] = tuple,
    ) -> None:
        self._guild_id = guild_id
        self._context = context
        self._registrations: dict[int, EventRegistration] = {}
        self._timers: dict[int, asyncio.Task[None]] = {}
        self._dispatches: set[asyncio.Task[EventSignal | None]] = set()
        self._started = False
        self._closed = False

    def __len__(self) -> int:
        return len(self._registrations)

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def is_closed(self) -> bool:
        return self._closed

    def add(self, event: VoiceEvent, handler: VoiceEventHandler) -> EventRegistration:
        registration = EventRegistration(event=event, handler=handler)
        self._registrations[registration.id] = registration
        if self._started and isinstance(event, Periodic | Delayed):
            self._start_timer(registration)
        return registration

    def start(self) -> None:
        """Arm every timed registration. Calling it again is a no-op."""
        if self._started or self._closed:
            return
        self._started = True
        for registration in list(self._registrations.values()):
            if isinstance(registration.event, Periodic | Delayed):
                self._start_timer(registration)

    def fire_end(self, tracks: tuple[TrackControl, ...] | None = None) -> None:
        """Schedule every ``TrackEnd`` handler with the given ended tracks."""
        ctx = EventContext(
            guild_id=self._guild_id,
            tracks=self._context() if tracks is None else tracks,
        )
        for registration in list(self._registrations.values()):
            if isinstance(registration.event, TrackEnd):
                task = asyncio.get_running_loop().create_task(self._dispatch(registration, ctx))
                self._dispatches.add(task)
                task.add_done_callback(self._dispatches.discard)

    def close(self) -> None:
        """Cancel the timers. End handlers already scheduled still run to completion."""
        self._closed = True
        current = asyncio.current_task()
        for task in self._timers.values():
            if task is not current:
                task.cancel()
        self._timers.clear()

    def _start_timer(self, registration: EventRegistration) -> None:
        task = asyncio.get_running_loop().create_task(self._run_timer(registration))
        self._timers[registration.id] = task
        task.add_done_callback(lambda _t, reg_id=registration.id: self._timers.pop(reg_id, None))

    async def _run_timer(self, registration: EventRegistration) -> None:
        match registration.event:
            case Delayed(delay=delay):
                await asyncio.sleep(delay)
                await self._dispatch(registration, self._timer_context())
                self._registrations.pop(registration.id, None)
            case Periodic() as periodic:
                await asyncio.sleep(periodic.first_delay)
                while not self._closed and registration.id in self._registrations:
                    signal = await self._dispatch(registration, self._timer_context())
                    if signal is EventSignal.CANCEL or self._closed:
                        return
                    await asyncio.sleep(periodic.interval)

    def _timer_context(self) -> EventContext:
        return EventContext(guild_id=self._guild_id, tracks=self._context())

    async def _dispatch(
        self, registration: EventRegistration, ctx: EventContext
    ) -> EventSignal | None:
        handler = registration.handler
        try:
            signal = await handler.act(ctx)
        except Exception:
            logger.exception(
                LogTemplates.EVENT_HANDLER_ERROR,
                type(registration.event).__name__,
                type(handler).__name__,
            )
            return None

        if signal is EventSignal.CANCEL:
            self._registrations.pop(registration.id, None)
            logger.debug(
                LogTemplates.EVENT_HANDLER_CANCELLED,
                type(handler).__name__,
                type(registration.event).__name__,
            )
        return signal
