from __future__ import annotations

import asyncio

from core.assistant import DebugActions, DirectMessageHelper
from core.messages import TIPS_MESSAGE
from core.messenger import Messenger
from core.models import Event, EventKind
from fakes import BOT_ID, FakeChatClient, posted_event

DM_CHANNEL = f"user-1__{BOT_ID}"


def _helper(messenger: Messenger) -> DirectMessageHelper:
    return DirectMessageHelper(messenger, lambda: "HELP TEXT")


def test_direct_channel_detection(messenger: Messenger) -> None:
    helper = _helper(messenger)
    assert helper.is_direct_with_bot(DM_CHANNEL)
    assert helper.is_direct_with_bot(f"{BOT_ID}__user-1")
    assert not helper.is_direct_with_bot("user-1__user-2")
    assert not helper.is_direct_with_bot("general")


def test_help_and_tips_in_direct_message(chat: FakeChatClient, messenger: Messenger) -> None:
    event = posted_event("who are you? any tips?", channel_name=DM_CHANNEL)

    asyncio.run(_helper(messenger).handle(event))

    assert chat.messages_to("dm-user-1") == ["HELP TEXT", TIPS_MESSAGE]


def test_help_outside_direct_message_is_ignored(chat: FakeChatClient, messenger: Messenger) -> None:
    asyncio.run(_helper(messenger).handle(posted_event("help")))
    assert chat.posts == []


def test_own_direct_messages_are_ignored(chat: FakeChatClient, messenger: Messenger) -> None:
    event = posted_event("help", user_id=BOT_ID, channel_name=DM_CHANNEL)
    asyncio.run(_helper(messenger).handle(event))
    assert chat.posts == []


def test_liveness_reply_in_debug_channel(chat: FakeChatClient, debug_messenger: Messenger) -> None:
    event = posted_event("are you alive?", channel_id="chan-debug", post_id="p-4")

    asyncio.run(DebugActions(debug_messenger).handle_liveness(event))

    assert chat.posts == [("chan-debug", "Yes I'm running", "p-4")]


def test_liveness_ignored_elsewhere(chat: FakeChatClient, debug_messenger: Messenger) -> None:
    asyncio.run(DebugActions(debug_messenger).handle_liveness(posted_event("hello")))
    assert chat.posts == []


def test_echo_skips_noisy_events(chat: FakeChatClient, debug_messenger: Messenger) -> None:
    actions = DebugActions(debug_messenger)

    asyncio.run(actions.echo_event(Event(kind=EventKind.TYPING, data={"user_id": "u1"})))
    asyncio.run(actions.echo_event(Event(kind=EventKind.USER_ADDED, data={"user_id": "u1"})))

    assert len(chat.posts) == 1
    assert '"user_added"' in chat.posts[0][1]
