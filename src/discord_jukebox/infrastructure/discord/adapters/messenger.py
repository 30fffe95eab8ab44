"""Discord messenger adapter that posts plain text and embeds to text channels."""

from __future__ import annotations

import logging
from typing import Final

import discord

from discord_jukebox.application.interfaces.messenger import Messenger
from discord_jukebox.config.settings import DiscordSettings
from discord_jukebox.domain.shared.messages import LogTemplates
from discord_jukebox.utils.reply import truncate

logger = logging.getLogger(__name__)

EMBED_TITLE_LIMIT: Final[int] = 256
EMBED_FOOTER_LIMIT: Final[int] = 2048


class DiscordMessenger(Messenger):
    """Sends messages through the bot's HTTP client.

    Delivery failures are logged and dropped, mirroring how a single lost
    confirmation should never abort the command or reactor that produced it.
    """

    def __init__(self, bot: discord.Client, settings: DiscordSettings | None = None) -> None:
        self._bot = bot
        self._settings = settings or DiscordSettings()
        self._colour = discord.Colour.from_rgb(*self._settings.embed_colour)

    async def _get_channel(self, channel_id: int) -> discord.abc.Messageable | None:
        channel = self._bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self._bot.fetch_channel(channel_id)
            except discord.HTTPException as exc:
                logger.warning(LogTemplates.MESSAGE_SEND_FAILED, channel_id, exc)
                return None

        if not isinstance(channel, discord.abc.Messageable):
            logger.warning(LogTemplates.MESSAGE_CHANNEL_NOT_FOUND, channel_id)
            return None
        return channel

    async def send_text(
        self,
        channel_id: int,
        text: str,
        *,
        reply_to: int | None = None,
    ) -> None:
        channel = await self._get_channel(channel_id)
        if channel is None:
            return

        reference = None
        if reply_to is not None:
            reference = discord.MessageReference(
                message_id=reply_to, channel_id=channel_id, fail_if_not_exists=False
            )

        try:
            if reference is not None:
                await channel.send(text, reference=reference)
            else:
                await channel.send(text)
        except discord.HTTPException as exc:
            logger.warning(LogTemplates.MESSAGE_SEND_FAILED, channel_id, exc)

    def build_embed(
        self,
        *,
        title: str,
        description: str,
        thumbnail_url: str | None = None,
        footer: str | None = None,
    ) -> discord.Embed:
        embed = discord.Embed(
            title=truncate(title, EMBED_TITLE_LIMIT),
            description=description,
            colour=self._colour,
        )
        embed.set_thumbnail(url=thumbnail_url or self._settings.icon_url)
        if footer:
            embed.set_footer(
                text=truncate(footer, EMBED_FOOTER_LIMIT), icon_url=self._settings.icon_url
            )
        return embed

    async def send_rich(
        self,
        channel_id: int,
        *,
        title: str,
        description: str,
        thumbnail_url: str | None = None,
        footer: str | None = None,
        content: str | None = None,
    ) -> None:
        channel = await self._get_channel(channel_id)
        if channel is None:
            return

        embed = self.build_embed(
            title=title, description=description, thumbnail_url=thumbnail_url, footer=footer
        )
        try:
            await channel.send(content=content, embed=embed)
        except discord.HTTPException as exc:
            logger.warning(LogTemplates.MESSAGE_SEND_FAILED, channel_id, exc)
