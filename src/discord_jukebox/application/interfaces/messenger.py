"""Port interface for posting messages back to a text channel."""

from __future__ import annotations

from abc import ABC, abstractmethod

from discord_jukebox.domain.shared.types import ChannelIdField, MessageIdField


class Messenger(ABC):
    """Interface for sending plain and rich messages.

    Implementations log delivery failures instead of raising them, so a lost
    confirmation never aborts the command that produced it.
    """

    @abstractmethod
    async def send_text(
        self,
        channel_id: ChannelIdField,
        text: str,
        *,
        reply_to: MessageIdField | None = None,
    ) -> None:
        """Send a plain text message, optionally as a reply to ``reply_to``."""
        ...

    @abstractmethod
    async def send_rich(
        self,
        channel_id: ChannelIdField,
        *,
        title: str,
        description: str,
        thumbnail_url: str | None = None,
        footer: str | None = None,
        content: str | None = None,
    ) -> None:
        """Send an embed with the configured colour and icon."""
        ...
