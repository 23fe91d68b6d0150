"""Free-text time expression extraction (core domain).

A single pattern finds "time + zone" expressions such as ``2:30pm EST``,
``15:00 PT`` or ``9 GMT+2``. Each match is parsed independently: one
expression that fails to resolve never prevents the others in the same
message from being converted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
import logging
import re
from typing import Iterator, Optional, Tuple

from core.errors import ResolutionError
from core.timezones import load_zone, resolve_zone

LOGGER = logging.getLogger(__name__)

TIME_PATTERN = re.compile(
    r"(?P<hour>[0-9]{1,2})"
    r"(?::(?P<minute>[0-9]{1,2}))?"
    r" *(?P<meridiem>[paPA]\.?[mM]?\.?)?"
    r" +(?P<zone>[A-Za-z][a-zA-Z]+)"
    r"(?:(?P<sign>[+-])(?P<offset>[0-9]{1,2})(?!\w))?"
)

DATE_LAYOUT = "%m/%d/%Y"


@dataclass(frozen=True)
class TimeMatch:
    """One time expression found in a message."""

    raw: str
    hour: str
    minute: Optional[str]
    meridiem: Optional[str]
    zone: str
    offset_sign: Optional[str] = None
    offset_digits: Optional[str] = None


@dataclass(frozen=True)
class TimeOutcome:
    """Result of parsing one TimeMatch: an instant or an error."""

    raw: str
    zone_token: str
    zone_id: Optional[str] = None
    instant: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.instant is not None


def extract(message: str) -> Iterator[TimeMatch]:
    """Yield every time expression in the message, in order of appearance."""

    for found in TIME_PATTERN.finditer(message):
        yield TimeMatch(
            raw=found.group(0),
            hour=found.group("hour"),
            minute=found.group("minute"),
            meridiem=found.group("meridiem"),
            zone=found.group("zone"),
            offset_sign=found.group("sign"),
            offset_digits=found.group("offset"),
        )


def build_layout(match: TimeMatch) -> Tuple[str, str]:
    """Return the strptime layout and the normalized input for a match.

    Both strings are built in the same order so they always line up: hour,
    then minutes when present, then the AM/PM marker when present. strptime
    only honours ``%p`` together with ``%I``, so the hour directive switches
    to the 12-hour form when a marker was given.
    """

    layout = "%H"
    text = match.hour
    if match.minute is not None:
        layout += ":%M"
        text += f":{match.minute}"
    if match.meridiem:
        layout = "%I" + layout[2:] + "%p"
        text += match.meridiem[0].upper() + "M"
    return layout, text


def parse_match(match: TimeMatch, today: date) -> TimeOutcome:
    """Interpret a match as a wall-clock time on ``today`` in its zone."""

    try:
        zone_id = resolve_zone(match.zone, match.offset_sign, match.offset_digits)
        layout, text = build_layout(match)
        clock = datetime.strptime(
            f"{today.strftime(DATE_LAYOUT)} {text}",
            f"{DATE_LAYOUT} {layout}",
        )
    except (ResolutionError, ValueError) as exc:
        LOGGER.debug("Could not parse time %r: %s", match.raw, exc)
        return TimeOutcome(raw=match.raw, zone_token=match.zone, error=str(exc))

    return TimeOutcome(
        raw=match.raw,
        zone_token=match.zone,
        zone_id=zone_id,
        instant=clock.replace(tzinfo=load_zone(zone_id)),
    )


def convert_times(message: str, today: Optional[date] = None) -> Iterator[TimeOutcome]:
    """Parse every time expression in the message.

    Dates are not disambiguated: every expression is taken to happen on the
    current local date.
    """

    if today is None:
        today = datetime.now().date()
    for match in extract(message):
        yield parse_match(match, today)
