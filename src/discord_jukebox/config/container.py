"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the call registry, adapters and the playback
service. Components are created on-demand and cached for reuse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from discord_jukebox.domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.media_resolver import MediaResolver
    from ..application.interfaces.messenger import Messenger
    from ..application.services.playback_service import PlaybackService
    from ..infrastructure.voice.manager import CallManager
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. Everything that
    talks to Discord needs the bot, so :meth:`set_bot` must run first.
    """

    settings: Settings
    _bot: Bot | None = None

    # Infrastructure adapters
    _call_manager: CallManager | None = None
    _media_resolver: MediaResolver | None = None
    _messenger: Messenger | None = None

    # Application services
    _playback_service: PlaybackService | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Infrastructure Adapters ===

    @property
    def call_manager(self) -> CallManager:
        """Get the per-guild call registry."""
        if self._call_manager is None:
            from ..infrastructure.voice.manager import CallManager

            self._call_manager = CallManager(self.bot, self.settings.audio)
        return self._call_manager

    @property
    def media_resolver(self) -> MediaResolver:
        """Get the media resolver."""
        if self._media_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._media_resolver = YtDlpResolver(self.settings.audio)
        return self._media_resolver

    @property
    def messenger(self) -> Messenger:
        if self._messenger is None:
            from ..infrastructure.discord.adapters.messenger import DiscordMessenger

            self._messenger = DiscordMessenger(self.bot, self.settings.discord)
        return self._messenger

    # === Application Services ===

    @property
    def playback_service(self) -> PlaybackService:
        """Get the playback request handlers."""
        if self._playback_service is None:
            from ..application.services.playback_service import PlaybackService

            self._playback_service = PlaybackService(
                calls=self.call_manager,
                resolver=self.media_resolver,
                messenger=self.messenger,
                settings=self.settings.playback,
            )
        return self._playback_service

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Build the eagerly needed components once the bot is attached."""
        _ = self.call_manager
        _ = self.playback_service

    async def shutdown(self) -> None:
        """Disconnect every voice call and drop cached components."""
        if self._call_manager is not None:
            await self._call_manager.remove_all()

        self._playback_service = None
        self._messenger = None
        self._media_resolver = None
        self._call_manager = None


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
