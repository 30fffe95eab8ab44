#!/usr/bin/env python3
"""Main entry point for Discord Jukebox.

Startup order: settings, logging, a preflight for the token and the ffmpeg
binary, then the DI container and the bot.
"""

from __future__ import annotations

import json
import logging
import logging.config
import shutil
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from discord_jukebox.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"

FFMPEG_EXECUTABLE = "ffmpeg"
VOICE_LOGGERS = ("discord.voice_state", "discord.gateway", "discord.player")

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO", *, voice_debug: bool = False) -> None:
    """Load ``logging_config.json`` and apply ``log_level`` to the jukebox loggers.

    ``voice_debug`` lowers discord.py's voice loggers to DEBUG; the config
    file otherwise keeps the ``discord`` tree at WARNING.
    """
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.warning("Could not load %s, falling back to basic config", _LOGGING_CONFIG_PATH)

    logging.getLogger().setLevel(resolved_level)
    logging.getLogger("discord_jukebox").setLevel(resolved_level)

    if voice_debug:
        for name in VOICE_LOGGERS:
            logging.getLogger(name).setLevel(logging.DEBUG)
        logger.info(LogTemplates.BOT_VOICE_DEBUG)


def preflight(settings: Settings) -> str | None:
    """Return the bot token if the process can start, else log why and return None."""
    token = settings.discord_token.get_secret_value().strip()
    if not token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return None

    ffmpeg_path = shutil.which(FFMPEG_EXECUTABLE)
    if ffmpeg_path is None:
        logger.error(ErrorMessages.FFMPEG_NOT_FOUND)
        return None
    logger.debug(LogTemplates.BOT_FFMPEG_FOUND, ffmpeg_path)

    return token


def main() -> int:
    from discord_jukebox.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level, voice_debug=settings.debug)

    token = preflight(settings)
    if token is None:
        return 1

    logger.info(LogTemplates.BOT_STARTING.format(environment=settings.environment))

    from discord_jukebox.config.container import create_container
    from discord_jukebox.infrastructure.discord.bot import create_bot

    bot = create_bot(create_container(settings), settings)

    try:
        logger.info(LogTemplates.BOT_STARTING_RUN)
        bot.run_with_graceful_shutdown(token)
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1
    else:
        logger.info(LogTemplates.BOT_STOPPED)
    return 0


def cli() -> None:
    """Console script entry point (``discord-jukebox``)."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
