"""Prefix-command music cog delegating to the playback service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from discord.ext import commands

from discord_jukebox.domain.music.entities import CommandRequest
from discord_jukebox.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....application.services.playback_service import PlaybackService
    from ....config.container import Container

logger = logging.getLogger(__name__)


def build_request(ctx: commands.Context) -> CommandRequest:
    """Capture the identifiers a handler needs from one command invocation."""
    voice = getattr(ctx.author, "voice", None)
    voice_channel = voice.channel if voice is not None else None

    return CommandRequest(
        guild_id=ctx.guild.id,  # type: ignore[union-attr]
        channel_id=ctx.channel.id,
        message_id=ctx.message.id,
        author_id=ctx.author.id,
        author_voice_channel_id=voice_channel.id if voice_channel is not None else None,
    )


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @property
    def playback(self) -> PlaybackService:
        return self.container.playback_service

    async def cog_before_invoke(self, ctx: commands.Context) -> None:
        logger.debug(
            LogTemplates.COMMAND_INVOKED,
            ctx.command.qualified_name if ctx.command else "<unknown>",
            ctx.author,
            ctx.guild.id if ctx.guild else None,
        )

    async def cog_command_error(self, ctx: commands.Context, error: Exception) -> None:
        if isinstance(error, commands.NoPrivateMessage):
            await ctx.send(DiscordUIMessages.STATE_SERVER_ONLY)
            return

        original = getattr(error, "original", error)
        logger.error(
            LogTemplates.COMMAND_ERROR,
            ctx.command.qualified_name if ctx.command else "<unknown>",
            exc_info=original,
        )

    # === Voice channel ===

    @commands.command(name="join", description="Join your voice channel.")
    @commands.guild_only()
    async def join(self, ctx: commands.Context) -> None:
        await self.playback.join(build_request(ctx))

    @commands.command(name="leave", description="Leave the voice channel.")
    @commands.guild_only()
    async def leave(self, ctx: commands.Context) -> None:
        await self.playback.leave(build_request(ctx))

    # === Queue ===

    @commands.command(name="play", description="Queue a URL or the first search result.")
    @commands.guild_only()
    async def play(self, ctx: commands.Context, *, query: str = "") -> None:
        await self.playback.play(build_request(ctx), query)

    @commands.command(name="play_playlist", description="Queue every video of a playlist.")
    @commands.guild_only()
    async def play_playlist(self, ctx: commands.Context, *, query: str = "") -> None:
        await self.playback.play_playlist(build_request(ctx), query)

    @commands.command(name="skip", description="Skip the current song.")
    @commands.guild_only()
    async def skip(self, ctx: commands.Context) -> None:
        await self.playback.skip(build_request(ctx))

    @commands.command(name="stop", description="Stop playback and clear the queue.")
    @commands.guild_only()
    async def stop(self, ctx: commands.Context) -> None:
        await self.playback.stop(build_request(ctx))

    # === Direct playback ===

    @commands.command(name="play_fade", description="Play a URL now and fade it out.")
    @commands.guild_only()
    async def play_fade(self, ctx: commands.Context, *, query: str = "") -> None:
        await self.playback.play_fade(build_request(ctx), query)

    # === Track state ===

    @commands.command(name="songloop", aliases=["loop"], description="Toggle looping the song.")
    @commands.guild_only()
    async def songloop(self, ctx: commands.Context) -> None:
        await self.playback.toggle_loop(build_request(ctx))

    @commands.command(name="nowplaying", aliases=["np"], description="Show the current song.")
    @commands.guild_only()
    async def nowplaying(self, ctx: commands.Context) -> None:
        await self.playback.now_playing(build_request(ctx))

    @commands.command(name="ping", description="Check the bot is responsive.")
    async def ping(self, ctx: commands.Context) -> None:
        await self.playback.ping(ctx.channel.id)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(MusicCog(bot, container))
