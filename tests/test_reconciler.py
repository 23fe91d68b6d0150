from __future__ import annotations

import asyncio

from core.config import ReconcilerConfig
from core.errors import ChatClientError
from core.messenger import Messenger
from core.models import Event, EventKind
from core.reconciler import MembershipReconciler, ReconcileOutcome
from fakes import OTHER_TEAM, PUBLIC_TEAM, FakeChatClient


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def _reconciler(chat: FakeChatClient, messenger: Messenger, sleep: RecordingSleep, attempts: int = 360):
    return MembershipReconciler(chat, messenger, ReconcilerConfig(interval_seconds=5.0, max_attempts=attempts), sleep)


async def _drain(reconciler: MembershipReconciler) -> None:
    for _ in range(100):
        if not reconciler.pending:
            return
        await asyncio.sleep(0)


def test_welcomes_once_when_membership_settles(chat: FakeChatClient, messenger: Messenger) -> None:
    chat.team_answers["new-user"] = [[], [PUBLIC_TEAM, OTHER_TEAM], [PUBLIC_TEAM]]
    sleep = RecordingSleep()

    outcome = asyncio.run(_reconciler(chat, messenger, sleep).reconcile("new-user"))

    assert outcome is ReconcileOutcome.RESOLVED
    assert chat.team_lookups["new-user"] == 3
    assert sleep.calls == [5.0, 5.0]
    assert chat.direct_channels == [("new-user", "bot-id")]
    assert len(chat.messages_to("dm-new-user")) == 1
    assert chat.channel_members == [("chan-announcements", "new-user")]


def test_single_team_that_is_not_public_does_not_resolve(chat: FakeChatClient, messenger: Messenger) -> None:
    chat.team_answers["new-user"] = [[OTHER_TEAM]]
    sleep = RecordingSleep()

    outcome = asyncio.run(_reconciler(chat, messenger, sleep, attempts=4).reconcile("new-user"))

    assert outcome is ReconcileOutcome.EXHAUSTED
    assert chat.team_lookups["new-user"] == 4
    assert len(sleep.calls) == 3
    assert chat.posts == []
    assert chat.channel_members == []


def test_lookup_errors_count_as_not_yet(chat: FakeChatClient, messenger: Messenger) -> None:
    chat.team_answers["new-user"] = [ChatClientError("timeout"), [PUBLIC_TEAM]]

    outcome = asyncio.run(_reconciler(chat, messenger, RecordingSleep()).reconcile("new-user"))

    assert outcome is ReconcileOutcome.RESOLVED
    assert chat.channel_members == [("chan-announcements", "new-user")]


def test_join_events_spawn_independent_tasks(chat: FakeChatClient, messenger: Messenger) -> None:
    chat.team_answers["u1"] = [[PUBLIC_TEAM]]
    chat.team_answers["u2"] = [[OTHER_TEAM]]
    reconciler = _reconciler(chat, messenger, RecordingSleep(), attempts=3)

    async def scenario() -> None:
        await reconciler.handle_join(Event(kind=EventKind.NEW_USER, data={"user_id": "u1"}))
        await reconciler.handle_join(Event(kind=EventKind.NEW_USER, data={"user_id": "u2"}))
        assert reconciler.pending == 2
        await _drain(reconciler)

    asyncio.run(scenario())

    assert reconciler.pending == 0
    assert chat.team_lookups == {"u1": 1, "u2": 3}
    assert chat.channel_members == [("chan-announcements", "u1")]


def test_join_without_user_id_is_ignored(chat: FakeChatClient, messenger: Messenger) -> None:
    reconciler = _reconciler(chat, messenger, RecordingSleep())
    asyncio.run(reconciler.handle_join(Event(kind=EventKind.NEW_USER, data={})))
    assert reconciler.pending == 0


def test_unexpected_task_failure_is_logged_with_user(chat: FakeChatClient, messenger: Messenger, caplog) -> None:
    chat.team_answers["u1"] = [KeyError("id")]
    reconciler = _reconciler(chat, messenger, RecordingSleep())

    async def scenario() -> None:
        await reconciler.handle_join(Event(kind=EventKind.NEW_USER, data={"user_id": "u1"}))
        await _drain(reconciler)

    asyncio.run(scenario())

    records = [r for r in caplog.records if r.name == "core.reconciler" and r.levelname == "ERROR"]
    assert len(records) == 1
    assert "reconcile-u1" in records[0].getMessage()
    assert isinstance(records[0].exc_info[1], KeyError)
    assert chat.channel_members == []
