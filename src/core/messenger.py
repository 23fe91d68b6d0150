"""Outbound messaging helpers shared by all handlers.

Sends are fire-and-forget: a failed post is logged here and never retried.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.config import BotConfig
from core.errors import ChatClientError
from core.models import Post
from core.ports import MessagePort

LOGGER = logging.getLogger(__name__)


class Messenger:
    """Wraps the message port with the bot's identity and debug channel."""

    def __init__(self, messages: MessagePort, config: BotConfig) -> None:
        self._messages = messages
        self._config = config

    @property
    def config(self) -> BotConfig:
        return self._config

    async def send(self, channel_id: str, message: str, root_id: str = "") -> Optional[Post]:
        try:
            return await self._messages.create_post(channel_id, message, root_id)
        except ChatClientError as exc:
            LOGGER.warning("Failed to send a message to channel %s: %s", channel_id, exc)
            return None

    async def reply(self, post: Post, message: str) -> Optional[Post]:
        """Answer in the thread the post belongs to."""

        return await self.send(post.channel_id, message, post.thread_id)

    async def send_direct(self, user_id: str, message: str) -> Optional[Post]:
        # The server happily creates a self-DM; route it to the debug channel instead.
        if user_id == self._config.bot_user_id:
            await self.send_debug(
                f"**Prevented {self._config.bot_username} from DMing itself this message:**"
                f"\n\n```\n\n{message}\n\n```"
            )
            return None
        try:
            channel = await self._messages.create_direct_channel(user_id, self._config.bot_user_id)
        except ChatClientError as exc:
            LOGGER.warning("Failed to open a direct channel with %s: %s", user_id, exc)
            return None
        return await self.send(channel.id, message)

    async def send_debug(self, message: str, root_id: str = "") -> Optional[Post]:
        """Post to the debugging channel, only when debugging is enabled."""

        if not self._config.debugging or not self._config.debugging_channel_id:
            return None
        return await self.send(self._config.debugging_channel_id, message, root_id)

    async def delete_post(self, post_id: str) -> bool:
        try:
            await self._messages.delete_post(post_id)
        except ChatClientError as exc:
            LOGGER.warning("Failed to delete post %s: %s", post_id, exc)
            return False
        return True
