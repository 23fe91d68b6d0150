"""Deferred onboarding for newly joined users.

New users show up before their team membership settles, so each join
spawns a background task that polls the user's teams until they belong to
exactly the public team, then welcomes them once. Tasks are never
cancelled; on shutdown they are simply abandoned.
"""

from __future__ import annotations

import asyncio
from enum import Enum
import logging
from typing import Awaitable, Callable, Set

from core.config import ReconcilerConfig
from core.errors import ChatClientError
from core.messages import welcome_message
from core.messenger import Messenger
from core.models import Event
from core.ports import DirectoryPort

LOGGER = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class ReconcileOutcome(str, Enum):
    RESOLVED = "resolved"
    EXHAUSTED = "exhausted"


class MembershipReconciler:
    """Spawns and runs one independent polling task per join event."""

    def __init__(
        self,
        directory: DirectoryPort,
        messenger: Messenger,
        settings: ReconcilerConfig = ReconcilerConfig(),
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._directory = directory
        self._messenger = messenger
        self._config = messenger.config
        self._interval = settings.interval_seconds
        self._max_attempts = settings.max_attempts
        self._sleep = sleep
        # Only held so the event loop does not garbage-collect running tasks.
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def handle_join(self, event: Event) -> None:
        """Action handler for ``new_user`` events. Returns immediately."""

        user_id = event.get_str("user_id")
        if not user_id:
            LOGGER.warning("Join event without a user_id: %s", dict(event.data))
            return
        await self._messenger.send_debug(f"NEW USER! `{user_id}`")
        task = asyncio.create_task(self.reconcile(user_id), name=f"reconcile-{user_id}")
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("Welcome task %s failed", task.get_name(), exc_info=exc)

    async def _is_settled(self, user_id: str) -> bool:
        try:
            teams = await self._directory.get_teams_for_user(user_id)
        except ChatClientError as exc:
            LOGGER.warning("Team lookup for %s failed: %s", user_id, exc)
            return False
        return len(teams) == 1 and teams[0].id == self._config.public_team_id

    async def reconcile(self, user_id: str) -> ReconcileOutcome:
        """Poll until the user settles in the public team or attempts run out."""

        for attempt in range(1, self._max_attempts + 1):
            if await self._is_settled(user_id):
                await self._welcome(user_id)
                return ReconcileOutcome.RESOLVED
            remaining = (self._max_attempts - attempt) * self._interval
            LOGGER.debug("User %s not settled (attempt %s, %ss left)", user_id, attempt, remaining)
            if attempt < self._max_attempts:
                await self._sleep(self._interval)

        LOGGER.info("Gave up waiting for %s to join the public team", user_id)
        return ReconcileOutcome.EXHAUSTED

    async def _welcome(self, user_id: str) -> None:
        LOGGER.info("User %s is in the public team, sending welcome", user_id)
        await self._messenger.send_debug("USER IS IN PUBLIC TEAM, SENDING MESSAGE")
        await self._messenger.send_direct(user_id, welcome_message(self._config.bot_username))
        try:
            await self._directory.add_channel_member(self._config.announcements_channel_id, user_id)
        except ChatClientError as exc:
            LOGGER.warning("Failed to add %s to announcements: %s", user_id, exc)
