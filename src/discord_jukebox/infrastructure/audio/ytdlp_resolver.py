"""MediaResolver implementation using yt-dlp for URL resolution, search and playlists."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Final, cast

from pydantic import ValidationError
from yt_dlp import YoutubeDL
from yt_dlp.utils import YoutubeDLError

from discord_jukebox.application.interfaces.media_resolver import MediaResolver
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.music.entities import TrackMetadata
from discord_jukebox.domain.shared.exceptions import MediaResolutionError, NotAPlaylistError
from discord_jukebox.domain.shared.messages import LogTemplates
from discord_jukebox.infrastructure.audio.models import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    CacheEntry,
    YtDlpOpts,
    YtDlpPlaylist,
    YtDlpTrackInfo,
)

logger = logging.getLogger(__name__)

LOG_URL_TRUNCATE: Final[int] = 60
WATCH_URL_TEMPLATE: Final[str] = "https://youtube.com/watch?v={video_id}"


class YtDlpResolver(MediaResolver):
    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._base_opts = YtDlpOpts(
            format=self._settings.ytdlp_format,
            socket_timeout=self._settings.socket_timeout,
        )
        self._cache: dict[str, CacheEntry] = {}

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def _get_playlist_opts(self) -> YtDlpOpts:
        return self._get_opts(noplaylist=False, extract_flat="in_playlist", format=None)

    @staticmethod
    def _info_to_metadata(info: YtDlpTrackInfo, query: str) -> TrackMetadata:
        stream_url = info.stream_url
        if not stream_url:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, info.title or query)
            raise MediaResolutionError(query)

        try:
            return TrackMetadata(
                title=info.title,
                thumbnail_url=info.thumbnail,
                duration_seconds=info.duration,
                source_url=info.webpage_url,
                stream_url=stream_url,
            )
        except ValidationError as exc:
            raise MediaResolutionError(query) from exc

    # === Blocking yt-dlp calls (run on worker threads) ===

    def _extract_info_sync(self, url: str) -> YtDlpTrackInfo | None:
        now = time.time()
        cached = self._cache.get(url)
        if cached is not None:
            if now - cached.cached_at < CACHE_TTL:
                logger.debug(LogTemplates.CACHE_HIT_URL, url[:LOG_URL_TRUNCATE])
                return cached.info
            self._cache.pop(url, None)

        try:
            with YoutubeDL(params=cast(Any, self._get_opts().model_dump())) as ydl:
                data = ydl.extract_info(url, download=False)
        except YoutubeDLError:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url)
            return None

        result = YtDlpTrackInfo.model_validate(dict(data)) if isinstance(data, dict) else None
        if result is not None:
            self._remember(url, result, now)
        return result

    def _remember(self, url: str, info: YtDlpTrackInfo, now: float) -> None:
        self._cache[url] = CacheEntry(info=info, cached_at=now)
        if len(self._cache) > CACHE_MAX_SIZE:
            expired = [k for k, entry in self._cache.items() if now - entry.cached_at >= CACHE_TTL]
            for k in expired:
                self._cache.pop(k, None)
            if expired:
                logger.debug(LogTemplates.CACHE_EXPIRED_CLEANED, len(expired))

    def _search_sync(self, term: str) -> YtDlpTrackInfo | None:
        try:
            with YoutubeDL(params=cast(Any, self._get_opts().model_dump())) as ydl:
                data = ydl.extract_info(f"ytsearch1:{term}", download=False)
        except YoutubeDLError:
            logger.exception(LogTemplates.YTDLP_FAILED_SEARCH, term)
            return None

        if not isinstance(data, dict):
            return None
        entries = [e for e in data.get("entries") or [] if isinstance(e, dict)]
        if not entries:
            return None
        return YtDlpTrackInfo.model_validate(entries[0])

    def _extract_playlist_sync(self, url: str) -> YtDlpPlaylist | None:
        try:
            with YoutubeDL(params=cast(Any, self._get_playlist_opts().model_dump())) as ydl:
                data = ydl.extract_info(url, download=False)
        except YoutubeDLError:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_PLAYLIST, url)
            return None

        if not isinstance(data, dict):
            return None
        return YtDlpPlaylist.model_validate(data)

    # === MediaResolver ===

    async def resolve(self, url: str) -> TrackMetadata:
        info = await asyncio.to_thread(self._extract_info_sync, url)
        if info is None:
            raise MediaResolutionError(url)
        return self._info_to_metadata(info, url)

    async def search(self, term: str) -> TrackMetadata:
        info = await asyncio.to_thread(self._search_sync, term)
        if info is None:
            raise MediaResolutionError(term)
        return self._info_to_metadata(info, term)

    async def expand_playlist(self, url: str) -> list[str]:
        playlist = await asyncio.to_thread(self._extract_playlist_sync, url)
        if playlist is None:
            raise MediaResolutionError(url)
        if not playlist.is_playlist:
            raise NotAPlaylistError(url)

        urls: list[str] = []
        for entry in playlist.entries or []:
            if entry.id:
                urls.append(WATCH_URL_TEMPLATE.format(video_id=entry.id))
            elif entry.url:
                urls.append(entry.url)

        logger.info(LogTemplates.YTDLP_PLAYLIST_EXPANDED, url[:LOG_URL_TRUNCATE], len(urls))
        return urls
