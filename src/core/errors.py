"""Error taxonomy shared by the core and adapters."""

from __future__ import annotations


class HolobotError(Exception):
    """Base class for all holobot errors."""


class ChatClientError(HolobotError):
    """A collaborator call (post, lookup, membership change) failed."""


class TransportError(HolobotError):
    """The event stream failed. Fatal to the consumer loop."""


class ResolutionError(HolobotError):
    """A time zone token or offset combination could not be resolved."""
