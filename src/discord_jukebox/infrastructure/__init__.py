"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, cogs, messenger adapter)
- Voice (calls, track queue, event timers over discord.py voice clients)
- Audio (yt-dlp media resolution)
"""
