"""Utility functions for formatting Discord messages."""

from __future__ import annotations

import math
from functools import cache

PROGRESS_SLOTS = 13
PROGRESS_FILL = "▬"
PROGRESS_POINTER = ":radio_button:"


def format_padded_duration(seconds: int | float | None) -> str:
    """Format as zero-padded ``HH:MM:SS``; unknown durations render as zero."""
    total_seconds = max(int(seconds or 0), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def render_progress_bar(
    position: float, duration: float | None, width: int = PROGRESS_SLOTS
) -> str:
    """Render a fixed-width bar with the pointer in slot ``ceil(position / duration * width)``.

    The pointer is clamped to the first and last slot, so a track at 0s or past
    its reported duration still renders a bar of ``width`` slots.
    """
    if duration:
        pointer = math.ceil(position / duration * width)
    else:
        pointer = 1
    pointer = min(max(pointer, 1), width)

    before = PROGRESS_FILL * (pointer - 1)
    after = PROGRESS_FILL * (width - pointer)
    return f":arrow_forward: {before}{PROGRESS_POINTER}{after} :loud_sound:"


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"
