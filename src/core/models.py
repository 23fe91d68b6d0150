"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


class EventKind:
    """Event kind strings as delivered by the websocket stream."""

    POSTED = "posted"
    REACTION_ADDED = "reaction_added"
    REACTION_REMOVED = "reaction_removed"
    NEW_USER = "new_user"
    USER_ADDED = "user_added"
    USER_REMOVED = "user_removed"
    CHANNEL_VIEWED = "channel_viewed"
    TYPING = "typing"
    HELLO = "hello"
    STATUS_CHANGE = "status_change"


@dataclass(frozen=True)
class Post:
    """A single chat post."""

    id: str
    channel_id: str
    user_id: str
    message: str
    root_id: str = ""

    @property
    def thread_id(self) -> str:
        """Id to reply under so answers land in the post's thread."""

        return self.root_id or self.id


@dataclass(frozen=True)
class Reaction:
    user_id: str
    post_id: str
    emoji_name: str


@dataclass(frozen=True)
class Team:
    id: str
    name: str
    display_name: str = ""


@dataclass(frozen=True)
class Channel:
    id: str
    name: str
    team_id: str = ""
    display_name: str = ""


@dataclass(frozen=True)
class User:
    id: str
    username: str
    first_name: str = ""
    last_name: str = ""


@dataclass(frozen=True)
class Event:
    """One inbound notification from the chat transport.

    ``data`` is exposed read-only. Adapters decode embedded JSON documents
    (``post``, ``reaction``) into the model types above before building it.
    """

    kind: str
    data: Mapping[str, Any] = field(default_factory=dict)
    channel_id: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    @property
    def post(self) -> Optional[Post]:
        value = self.data.get("post")
        return value if isinstance(value, Post) else None

    @property
    def reaction(self) -> Optional[Reaction]:
        value = self.data.get("reaction")
        return value if isinstance(value, Reaction) else None

    def get_str(self, key: str) -> str:
        value = self.data.get(key)
        return value if isinstance(value, str) else ""
