"""Moderation actions: announcements policing and reaction triggers."""

from __future__ import annotations

import logging
import re

from core.errors import ChatClientError
from core.messages import announcement_removed_message, source_request_message
from core.messenger import Messenger
from core.models import Event
from core.ports import DirectoryPort, MessagePort

LOGGER = logging.getLogger(__name__)

ANNOUNCEMENT_PATTERN = re.compile(r"@channel|@all|@here|#announcement")

DELETE_EMOJI = "x"
SOURCE_REQUEST_EMOJI = "u55b6"


def is_announcement(message: str) -> bool:
    return ANNOUNCEMENT_PATTERN.search(message) is not None


def is_join_leave(sender: str, message: str, bot_username: str) -> bool:
    """Recognize the system messages posted when members join or leave."""

    name = re.escape(sender.lstrip("@"))
    bot = re.escape(bot_username)
    pattern = (
        rf"(?:^|\W)((@?{name} has (joined|left) the channel\.)"
        rf"|(.+ (added to|removed from) the channel( by @?({bot}|{name}))?(\.)?))$"
    )
    return re.search(pattern, message) is not None


class AnnouncementModerator:
    """Keeps the announcements channel for announcements only.

    Non-announcements from members are deleted and the author gets a DM
    with the text of their post. The bot's own posts are only deleted when
    they are join/leave notices.
    """

    def __init__(self, messenger: Messenger) -> None:
        self._messenger = messenger
        self._config = messenger.config

    async def handle(self, event: Event) -> None:
        if event.channel_id != self._config.announcements_channel_id:
            return
        post = event.post
        if post is None:
            return

        sender = event.get_str("sender_name")
        join_leave = is_join_leave(sender, post.message, self._config.bot_username)
        await self._messenger.send_debug(
            f"**Running tests on a new post in Announcements.**\n**Post:** {post.message}\n**Sender:** {sender}"
        )
        if is_announcement(post.message):
            await self._messenger.send_debug("* **It's an announcement!**")
            return

        from_bot = post.user_id == self._config.bot_user_id
        if not from_bot or join_leave:
            await self._messenger.delete_post(post.id)
            LOGGER.info("Deleted post %s from announcements", post.id)
            await self._messenger.send_debug("* **Not an announcement. Deleted!**")

        if join_leave:
            await self._messenger.send_debug("* **That post was a join/leave message. No DM sent!**")
            return
        # send_direct refuses to DM the bot itself.
        await self._messenger.send_direct(post.user_id, announcement_removed_message(post.message))


class ReactionModerator:
    """Reaction-triggered actions on existing posts."""

    def __init__(self, directory: DirectoryPort, messages: MessagePort, messenger: Messenger) -> None:
        self._directory = directory
        self._messages = messages
        self._messenger = messenger
        self._config = messenger.config

    async def handle_delete_request(self, event: Event) -> None:
        """An ``:x:`` reaction on one of the bot's posts deletes that post."""

        reaction = event.reaction
        if reaction is None or reaction.emoji_name != DELETE_EMOJI:
            return
        post = await self._directory.get_post(reaction.post_id)
        if post.user_id != self._config.bot_user_id:
            return
        await self._messenger.send_debug("**Reaction to my post detected!**")
        if await self._messenger.delete_post(post.id):
            LOGGER.info("Deleted post %s due to x reaction", post.id)

    async def handle_source_request(self, event: Event) -> None:
        """DM the reacting user the raw Markdown source of a post."""

        reaction = event.reaction
        if reaction is None or reaction.emoji_name != SOURCE_REQUEST_EMOJI:
            return
        post = await self._directory.get_post(reaction.post_id)
        author = await self._directory.get_user(post.user_id)
        permalink = await self._permalink(post.channel_id, post.id)

        await self._messenger.send_debug(f"**Source request reaction detected!**\n**Post:** {post.id}")
        await self._messenger.send_direct(
            reaction.user_id, source_request_message(author.username, permalink, post.message)
        )
        try:
            await self._messages.delete_reaction(reaction)
        except ChatClientError as exc:
            LOGGER.warning("Failed to remove source request reaction on %s: %s", post.id, exc)

    async def _permalink(self, channel_id: str, post_id: str) -> str:
        try:
            channel = await self._directory.get_channel(channel_id)
            if not channel.team_id:
                return "message"
            team = await self._directory.get_team(channel.team_id)
        except ChatClientError as exc:
            LOGGER.debug("No permalink for %s: %s", post_id, exc)
            return "message"
        return f"[message](https://{self._config.domain}/{team.name}/pl/{post_id})"
