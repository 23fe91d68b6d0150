"""Commands available through ``@<bot> <command>``."""

from __future__ import annotations

from datetime import date
import logging
import random
from typing import Callable, List, Optional, Sequence

from core.commands import Command
from core.messages import help_message
from core.messenger import Messenger
from core.models import Event, Post
from core.ports import DirectoryPort
from core.time_extractor import TimeOutcome, convert_times
from core.time_table import format_failure, format_time_table

LOGGER = logging.getLogger(__name__)


def format_debug_info(outcome: TimeOutcome, post: Post) -> str:
    return (
        "➚ **Debugging Info:**\n"
        f"({outcome.instant})\n"
        f"Time zone I heard was: {outcome.zone_token}\n"
        f"Location: {outcome.zone_id}\n"
        f"Post.Id: {post.id}\n"
        f"Post.RootId: {post.root_id}"
    )


class TimeCommand:
    """Replies with a conversion table for every time mentioned in the post."""

    name = "time"
    description = "Displays times mentioned in the message in various relevant time zones."

    def __init__(self, messenger: Messenger, today: Optional[Callable[[], date]] = None) -> None:
        self._messenger = messenger
        self._today = today

    async def __call__(self, event: Event, post: Post) -> None:
        today = self._today() if self._today else None
        for outcome in convert_times(post.message, today):
            if outcome.ok:
                await self._messenger.reply(post, format_time_table(outcome.instant, outcome.raw))
                if self._messenger.config.debugging:
                    await self._messenger.reply(post, format_debug_info(outcome, post))
            else:
                await self._messenger.reply(post, format_failure(outcome.raw))


class RandomBuddyCommand:
    """Invites a random member of the private team into the channel."""

    name = "randombuddy"
    description = "Invites a random member of the private team to chat with you."

    def __init__(
        self,
        directory: DirectoryPort,
        messenger: Messenger,
        choose: Callable[[Sequence], object] = random.choice,
    ) -> None:
        self._directory = directory
        self._messenger = messenger
        self._choose = choose

    async def __call__(self, event: Event, post: Post) -> None:
        team_id = self._messenger.config.private_team_id
        members = [
            user
            for user in await self._directory.get_users_in_team(team_id)
            if user.id not in (post.user_id, self._messenger.config.bot_user_id)
        ]
        if not members:
            await self._messenger.reply(post, "I couldn't find anyone to buddy up with.")
            return
        buddy = self._choose(members)
        await self._directory.add_channel_member(event.channel_id or post.channel_id, buddy.id)
        await self._messenger.reply(post, "Have a happy buddy chat!")


def help_text_for(bot_username: str, commands: Sequence[Command]) -> Callable[[], str]:
    """Return a callable rendering the help table for a command registry."""

    def help_text() -> str:
        return help_message(bot_username, [(command.name, command.description) for command in commands])

    return help_text


def build_commands(
    directory: DirectoryPort,
    messenger: Messenger,
    today: Optional[Callable[[], date]] = None,
) -> List[Command]:
    """Return the command registry in the order commands are matched."""

    commands: List[Command] = []
    help_text = help_text_for(messenger.config.bot_username, commands)

    async def show_help(event: Event, post: Post) -> None:
        await messenger.reply(post, help_text())

    time_command = TimeCommand(messenger, today)
    buddy_command = RandomBuddyCommand(directory, messenger)
    commands.extend(
        [
            Command(time_command.name, time_command.description, time_command),
            Command(buddy_command.name, buddy_command.description, buddy_command),
            Command("help", "Print out this help text.", show_help),
        ]
    )
    return commands
