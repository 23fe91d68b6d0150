"""Mention-driven command routing (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Awaitable, Callable, Iterable, List, Optional, Tuple

from core.dispatcher import unique_by_name
from core.models import Event, Post

LOGGER = logging.getLogger(__name__)

CommandHandler = Callable[[Event, Post], Awaitable[None]]

# Characters that may continue a username or command word. A trailing "."
# only counts when another word character follows it ("@bot.dev").
_WORD_TAIL = r"(?![\w-]|\.\w)"
_WORD_HEAD = r"(?<![\w.@-])"


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    handler: CommandHandler


def mention_pattern(username: str) -> re.Pattern:
    return re.compile(_WORD_HEAD + "@" + re.escape(username) + _WORD_TAIL, re.IGNORECASE)


def word_pattern(word: str) -> re.Pattern:
    return re.compile(_WORD_HEAD + re.escape(word) + _WORD_TAIL, re.IGNORECASE)


class CommandRouter:
    """Fires every command named after a mention of the bot.

    ``hey @holobot time now`` fires ``time``; ``@holobot-extra time`` does
    not, since ``@holobot-extra`` is another user.
    """

    def __init__(self, commands: Iterable[Command], bot_user_id: str, bot_username: str) -> None:
        self._commands: Tuple[Command, ...] = unique_by_name(commands, "command")
        self._bot_user_id = bot_user_id
        self._mention = mention_pattern(bot_username)
        self._patterns = [(command, word_pattern(command.name)) for command in self._commands]

    @property
    def commands(self) -> Tuple[Command, ...]:
        return self._commands

    def command_text(self, message: str) -> Optional[str]:
        """Return the text after the first mention of the bot, if any."""

        found = self._mention.search(message)
        if found is None:
            return None
        return message[found.end():]

    def match(self, message: str) -> List[Command]:
        """Return the commands addressed in the message, in registry order."""

        text = self.command_text(message)
        if text is None:
            return []
        return [command for command, pattern in self._patterns if pattern.search(text)]

    async def handle(self, event: Event) -> None:
        """Action handler for ``posted`` events."""

        post = event.post
        if post is None:
            return
        # Never react to our own posts.
        if post.user_id == self._bot_user_id:
            return

        for command in self.match(post.message):
            LOGGER.info("Running command %s for post %s", command.name, post.id)
            try:
                await command.handler(event, post)
            except Exception:
                LOGGER.exception("Error running command %s", command.name)
