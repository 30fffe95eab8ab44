"""Registry of per-guild calls backed by discord.py voice connections."""

from __future__ import annotations

import asyncio
import logging
from typing import Final

import discord

from discord_jukebox.application.interfaces.voice_engine import CallRegistry
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.shared.exceptions import VoiceConnectionError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.voice.call import Call
from discord_jukebox.infrastructure.voice.track import FFmpegSourceFactory, SourceFactory

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT: Final[float] = 10.0


class CallManager(CallRegistry):
    """Owns every guild's :class:`Call`. Only :meth:`join` creates one."""

    def __init__(
        self,
        bot: discord.Client,
        settings: AudioSettings | None = None,
        *,
        source_factory: SourceFactory | None = None,
    ) -> None:
        self._bot = bot
        self._settings = settings or AudioSettings()
        self._source_factory = source_factory or FFmpegSourceFactory(self._settings)
        self._calls: dict[int, Call] = {}

    def __len__(self) -> int:
        return len(self._calls)

    def get(self, guild_id: int) -> Call | None:
        return self._calls.get(guild_id)

    def _get_voice_channel(
        self, guild_id: int, channel_id: int
    ) -> discord.VoiceChannel | discord.StageChannel:
        guild = self._bot.get_guild(guild_id)
        if guild is None:
            raise VoiceConnectionError(
                ErrorMessages.GUILD_NOT_FOUND.format(guild_id=guild_id), guild_id=guild_id
            )

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            raise VoiceConnectionError(
                ErrorMessages.CHANNEL_NOT_VOICE.format(channel_id=channel_id), guild_id=guild_id
            )
        return channel

    async def join(self, guild_id: int, channel_id: int) -> tuple[Call, bool]:
        channel = self._get_voice_channel(guild_id, channel_id)

        existing = self._calls.get(guild_id)
        if existing is not None and existing.voice_client.is_connected():
            if existing.channel_id != channel_id:
                await self._move(existing, channel)
            return existing, False
        if existing is not None:
            # Stale handle left behind by a dropped connection.
            await self.remove(guild_id)

        try:
            async with asyncio.timeout(CONNECT_TIMEOUT):
                voice_client = await channel.connect(self_deaf=True)
        except TimeoutError as exc:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            raise VoiceConnectionError(
                ErrorMessages.VOICE_CONNECT_TIMEOUT.format(channel_id=channel_id), guild_id=guild_id
            ) from exc
        except discord.Forbidden as exc:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            raise VoiceConnectionError(str(exc), guild_id=guild_id) from exc
        except discord.ClientException as exc:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, exc)
            raise VoiceConnectionError(str(exc), guild_id=guild_id) from exc

        call = Call(
            guild_id,
            voice_client,
            self._source_factory,
            default_volume=self._settings.default_volume,
        )
        self._calls[guild_id] = call
        logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild_id)
        logger.debug(LogTemplates.VOICE_CALL_CREATED, guild_id)
        return call, True

    async def _move(self, call: Call, channel: discord.VoiceChannel | discord.StageChannel) -> None:
        try:
            async with asyncio.timeout(CONNECT_TIMEOUT):
                await call.voice_client.move_to(channel)
        except TimeoutError as exc:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel.id)
            raise VoiceConnectionError(
                ErrorMessages.VOICE_CONNECT_TIMEOUT.format(channel_id=channel.id),
                guild_id=call.guild_id,
            ) from exc
        except discord.ClientException as exc:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, exc)
            raise VoiceConnectionError(str(exc), guild_id=call.guild_id) from exc
        logger.info(LogTemplates.VOICE_MOVED, channel.name, call.guild_id)

    async def remove(self, guild_id: int) -> bool:
        call = self._calls.pop(guild_id, None)
        if call is None:
            return False

        try:
            await call.close()
        except (discord.DiscordException, TimeoutError) as exc:
            raise VoiceConnectionError(str(exc), guild_id=guild_id) from exc
        logger.debug(LogTemplates.VOICE_CALL_REMOVED, guild_id)
        return True

    async def remove_all(self) -> None:
        """Disconnect every call; failures are logged so shutdown can continue."""
        for guild_id in list(self._calls):
            try:
                await self.remove(guild_id)
            except VoiceConnectionError as exc:
                logger.warning(LogTemplates.VOICE_DISCONNECT_FAILED, guild_id, exc)
