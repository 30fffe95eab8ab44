"""Discord cogs - command handlers."""

from discord_jukebox.infrastructure.discord.cogs.music_cog import MusicCog, build_request

__all__ = [
    "MusicCog",
    "build_request",
]
