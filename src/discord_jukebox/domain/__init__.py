# ruff: noqa: N999
"""
Domain Layer

Contains pure playback logic:
- shared/: Message constants, constrained types and exceptions
- music/: Track metadata, playback state and voice event kinds
"""

from discord_jukebox.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
