"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BotConfig:
    """Identity and team/channel ids resolved once at startup."""

    bot_user_id: str
    bot_username: str
    long_name: str
    domain: str
    public_team_id: str
    private_team_id: str
    announcements_channel_id: str
    debugging_channel_id: Optional[str] = None
    debugging: bool = False


@dataclass(frozen=True)
class ReconcilerConfig:
    """Polling bounds for the membership reconciler."""

    interval_seconds: float = 5.0
    max_attempts: int = 360
