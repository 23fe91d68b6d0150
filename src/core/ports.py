"""Ports (interfaces) used by the core.

Ports define the minimal contracts for the transport and the Mattermost
client so that the core can be exercised with fakes and reused with other
backends.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from core.models import Channel, Event, Post, Reaction, Team, User


class TransportPort(Protocol):
    """Inbound event stream."""

    async def receive(self) -> Optional[Event]:
        """Return the next event, or None once the stream closed cleanly."""
        ...

    async def close(self) -> None:
        ...


class DirectoryPort(Protocol):
    """Team, channel and user lookups required by the handlers."""

    async def get_teams_for_user(self, user_id: str) -> Sequence[Team]:
        ...

    async def add_channel_member(self, channel_id: str, user_id: str) -> None:
        ...

    async def get_users_in_team(self, team_id: str) -> Sequence[User]:
        ...

    async def get_post(self, post_id: str) -> Post:
        ...

    async def get_user(self, user_id: str) -> User:
        ...

    async def get_channel(self, channel_id: str) -> Channel:
        ...

    async def get_team(self, team_id: str) -> Team:
        ...


class MessagePort(Protocol):
    """Outbound message operations. Must be safe for concurrent use."""

    async def create_post(self, channel_id: str, message: str, root_id: str = "") -> Post:
        ...

    async def create_direct_channel(self, user_id: str, other_user_id: str) -> Channel:
        ...

    async def delete_post(self, post_id: str) -> None:
        ...

    async def delete_reaction(self, reaction: Reaction) -> None:
        ...
