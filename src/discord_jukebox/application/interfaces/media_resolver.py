"""Port interface for turning URLs and search terms into playable sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.music.entities import TrackMetadata


class MediaResolver(ABC):
    """Interface for media extraction backends."""

    @abstractmethod
    async def resolve(self, url: str) -> TrackMetadata:
        """Resolve a single URL into a playable source.

        Raises:
            MediaResolutionError: If nothing playable was found.
        """
        ...

    @abstractmethod
    async def search(self, term: str) -> TrackMetadata:
        """Resolve the first search hit for ``term``.

        Raises:
            MediaResolutionError: If the search returned nothing playable.
        """
        ...

    @abstractmethod
    async def expand_playlist(self, url: str) -> list[str]:
        """Return the playlist's item URLs in playlist order.

        Raises:
            NotAPlaylistError: If ``url`` resolved to something other than a playlist.
            MediaResolutionError: If the playlist could not be fetched at all.
        """
        ...
