"""Time zone token resolution (core domain)."""

from __future__ import annotations

from typing import Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.errors import ResolutionError

UTC_ZONE = "UTC"

_ALIAS_GROUPS = {
    "America/Los_Angeles": ("PST", "PT", "PACIFIC"),
    "America/Denver": ("MST", "MT", "MOUNTAIN"),
    "America/Chicago": ("CST", "CT", "CENTRAL"),
    "America/New_York": ("EST", "EDT", "ET", "EASTERN", "EAST"),
    UTC_ZONE: ("GMT", "UTC", "GREENWICH", "WET"),
    "Asia/Shanghai": ("CHINA", "CHINESE", "SHANGHAI", "BEIJING"),
    "America/Guayaquil": ("ECT", "QUITO", "ECUADOR", "ECUADORIAN"),
    "Asia/Kolkata": ("IST", "INDIAN", "INDIA"),
    "Australia/Melbourne": ("ADT", "AEDT", "ASDT", "AUSTRALIA", "MELBOURNE"),
    "America/Sao_Paulo": ("BRT", "BRST", "BRASIL", "BRAZIL", "BRAZILIAN", "BRAZILLIAN"),
}

ZONE_ALIASES: Dict[str, str] = {
    alias: zone_id for zone_id, aliases in _ALIAS_GROUPS.items() for alias in aliases
}


def lookup_alias(token: str) -> Optional[str]:
    """Return the canonical zone for a known alias, case-insensitively."""

    return ZONE_ALIASES.get(token.upper())


def load_zone(zone_id: str) -> ZoneInfo:
    """Load a zone, mapping every lookup failure to ResolutionError."""

    try:
        return ZoneInfo(zone_id)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ResolutionError(f"unknown time zone {zone_id!r}") from exc


def resolve_zone(
    token: str,
    offset_sign: Optional[str] = None,
    offset_digits: Optional[str] = None,
) -> str:
    """Resolve a zone token (plus optional UTC offset) to a zone identifier.

    Unknown tokens pass through verbatim so direct names such as ``Japan`` or
    ``CET`` work. Offsets are only accepted on GMT/UTC tokens; the POSIX
    ``Etc/GMT`` names invert the sign, so ``GMT+5`` becomes ``Etc/GMT-5``.
    The returned identifier is guaranteed to load.
    """

    zone_id = lookup_alias(token) or token

    if offset_sign:
        if zone_id != UTC_ZONE:
            raise ResolutionError(f"offsets are only supported on GMT/UTC, got {token!r}")
        if offset_sign not in ("+", "-") or not offset_digits or not offset_digits.isdigit():
            raise ResolutionError(f"invalid offset {offset_sign}{offset_digits or ''}")
        inverted = "-" if offset_sign == "+" else "+"
        zone_id = f"Etc/GMT{inverted}{int(offset_digits)}"

    load_zone(zone_id)
    return zone_id
