"""Multi-zone rendering of a converted time.

The column set and cell formats are part of what users see, so they are
kept here in one fixed, ordered table.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

from core.timezones import load_zone


@dataclass(frozen=True)
class DisplayZone:
    label: str
    zone_id: str
    twenty_four_hour: bool = False


DISPLAY_ZONES: Tuple[DisplayZone, ...] = (
    DisplayZone("PT", "America/Los_Angeles"),
    DisplayZone("MT", "America/Denver"),
    DisplayZone("CT", "America/Chicago"),
    DisplayZone("ET", "America/New_York"),
    DisplayZone("GMT", "UTC", twenty_four_hour=True),
    DisplayZone("CET", "Europe/Paris", twenty_four_hour=True),
    DisplayZone("IST", "Asia/Kolkata"),
    DisplayZone("ADT", "Australia/Melbourne"),
    DisplayZone("BRT", "America/Sao_Paulo"),
)


def format_clock(moment: datetime, twenty_four_hour: bool) -> str:
    """Render ``15:04`` or ``3:04 PM`` (no leading zero on the hour)."""

    if twenty_four_hour:
        return moment.strftime("%H:%M")
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {meridiem}"


def convert_instant(instant: datetime) -> Tuple[Tuple[str, str], ...]:
    """Return (label, clock) pairs for every display zone, in order."""

    return tuple(
        (zone.label, format_clock(instant.astimezone(load_zone(zone.zone_id)), zone.twenty_four_hour))
        for zone in DISPLAY_ZONES
    )


def format_time_table(instant: datetime, raw: str) -> str:
    """Render the instant as a Markdown table captioned with the raw text."""

    cells = convert_instant(instant)
    header = "| " + " | ".join(label for label, _ in cells) + " |"
    divider = "|" + "|".join(":---:" for _ in cells) + "|"
    row = "| " + " | ".join(clock for _, clock in cells) + " |"
    return "\n".join([f"\"{raw}\" is:", "", header, divider, row])


def format_failure(raw: str) -> str:
    return f"I couldn't understand the time \"{raw}\"."
