"""Conversational actions: direct-message help and debugging echoes."""

from __future__ import annotations

import logging
import re
from typing import Callable

from core.messages import TIPS_MESSAGE
from core.messenger import Messenger
from core.models import Event, EventKind

LOGGER = logging.getLogger(__name__)

HELP_PATTERN = re.compile(r"(?:^|\W)(?:help|halp|who are you|commands)(?:$|\W)", re.IGNORECASE)
TIPS_PATTERN = re.compile(r"(?:^|\W)(?:mattermost\s+)?tips(?:$|\W)", re.IGNORECASE)
LIVENESS_PATTERN = re.compile(r"(?:^|\W)(?:alive|up|running|hello)(?:$|\W)")

# Too frequent to forward to the debugging channel.
NOISY_KINDS = frozenset({EventKind.POSTED, EventKind.CHANNEL_VIEWED, EventKind.TYPING})


class DirectMessageHelper:
    """Answers help and tips requests sent to the bot in a direct channel."""

    def __init__(self, messenger: Messenger, help_text: Callable[[], str]) -> None:
        self._messenger = messenger
        self._config = messenger.config
        self._help_text = help_text
        bot_id = re.escape(self._config.bot_user_id)
        # Direct channel names are "<user_id>__<user_id>".
        self._direct_channel = re.compile(rf"(^{bot_id}__)|(__{bot_id}$)")

    def is_direct_with_bot(self, channel_name: str) -> bool:
        return self._direct_channel.search(channel_name) is not None

    async def handle(self, event: Event) -> None:
        if not self.is_direct_with_bot(event.get_str("channel_name")):
            return
        post = event.post
        if post is None or post.user_id == self._config.bot_user_id:
            return
        if HELP_PATTERN.search(post.message):
            await self._messenger.send_direct(post.user_id, self._help_text())
        if TIPS_PATTERN.search(post.message):
            await self._messenger.send_direct(post.user_id, TIPS_MESSAGE)


class DebugActions:
    """Actions registered only when debugging is enabled."""

    def __init__(self, messenger: Messenger) -> None:
        self._messenger = messenger
        self._config = messenger.config

    async def handle_liveness(self, event: Event) -> None:
        """Answer "alive", "up", "running" or "hello" in the debugging channel."""

        if not self._config.debugging or event.channel_id != self._config.debugging_channel_id:
            return
        post = event.post
        if post is None or post.user_id == self._config.bot_user_id:
            return
        if LIVENESS_PATTERN.search(post.message):
            await self._messenger.send_debug("Yes I'm running", post.id)

    async def echo_event(self, event: Event) -> None:
        if event.kind in NOISY_KINDS:
            LOGGER.debug("I just got this event: %r with data: %r", event.kind, dict(event.data))
            return
        await self._messenger.send_debug(
            f"**I just got this event:** \"{event.kind}\" **with data:** \"{dict(event.data)}\""
        )
