"""Static message text sent by the bot."""

from __future__ import annotations

from typing import Iterable


def welcome_message(bot_username: str) -> str:
    return "\n".join(
        [
            "# Welcome!",
            f"I'm **{bot_username}**! I'll help you get started around here.",
            "##### The Announcements Channel",
            "I've automatically added you to the **~announcements** channel. It is a low-volume channel "
            "for brief, relevant announcements. Posts there that aren't announcements get deleted.",
            "##### Other Channels",
            "See those **Public Channels** in the menu on the left? That's where most everything happens.",
            "You can direct message me `tips` to see a few handy tips, or `help` to see what I can do.",
            "***",
            "It's good to have you here! See you around :)",
        ]
    )


def help_message(bot_username: str, commands: Iterable[tuple[str, str]]) -> str:
    lines = [
        f"Hi, I'm {bot_username}! I perform various actions to help things run smoother around the team.",
        "",
        f"Use a command by typing `@{bot_username}` followed by the command's name.",
        "",
        "| Command | Description | Usage |",
        "|---------|-------------|-------|",
    ]
    for name, description in commands:
        lines.append(f"| `{name}` | {description} | `@{bot_username} {name}` |")
    return "\n".join(lines)


TIPS_MESSAGE = "\n".join(
    [
        "##### Tips",
        "* Click the reply arrow on a post to **reply** directly to it in a thread.",
        "* Click the star next to a channel's title to **favorite** it.",
        "* Press Ctrl-K/Cmd-K to quickly **jump** to a channel.",
        "* Use emoji **reactions** to respond without notifying everyone.",
        "* `@channel` and `@all` notify everyone in the channel. Use them sparingly.",
    ]
)


def quote_block(text: str) -> str:
    """Indent text as a Markdown code block so it is shown verbatim."""

    return "    " + text.replace("\n", "\n    ")


def announcement_removed_message(original: str) -> str:
    return "\n".join(
        [
            "Hi there!",
            "",
            "**I see you've posted a message in the ~announcements channel that's not an announcement.** "
            "I deleted it. To keep that channel low-volume, **only announcements are allowed there.**",
            "",
            "If you were replying to an announcement, please post your reply in another channel.",
            "",
            "Here's the text of your message:",
            "",
            quote_block(original),
        ]
    )


def source_request_message(author: str, permalink: str, original: str) -> str:
    return f"Here's plaintext of @{author}'s {permalink}:\n\n{quote_block(original)}"
