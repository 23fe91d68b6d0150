from __future__ import annotations

from datetime import datetime, timezone

from core.time_table import DISPLAY_ZONES, convert_instant, format_clock, format_failure, format_time_table
from core.timezones import load_zone


def test_format_clock_twelve_and_twenty_four_hour() -> None:
    assert format_clock(datetime(2024, 1, 15, 0, 5), False) == "12:05 AM"
    assert format_clock(datetime(2024, 1, 15, 12, 0), False) == "12:00 PM"
    assert format_clock(datetime(2024, 1, 15, 15, 4), False) == "3:04 PM"
    assert format_clock(datetime(2024, 1, 15, 9, 4), True) == "09:04"


def test_convert_instant_covers_every_display_zone_in_order() -> None:
    instant = datetime(2024, 1, 15, 19, 30, tzinfo=timezone.utc)
    cells = convert_instant(instant)
    assert [label for label, _ in cells] == [zone.label for zone in DISPLAY_ZONES]
    assert [label for label, _ in cells][:5] == ["PT", "MT", "CT", "ET", "GMT"]


def test_time_table_for_eastern_afternoon() -> None:
    instant = datetime(2024, 1, 15, 14, 30, tzinfo=load_zone("America/New_York"))
    expected = "\n".join(
        [
            '"2:30pm EST" is:',
            "",
            "| PT | MT | CT | ET | GMT | CET | IST | ADT | BRT |",
            "|:---:|:---:|:---:|:---:|:---:|:---:|:---:|:---:|:---:|",
            "| 11:30 AM | 12:30 PM | 1:30 PM | 2:30 PM | 19:30 | 20:30 | 1:00 AM | 6:30 AM | 4:30 PM |",
        ]
    )
    assert format_time_table(instant, "2:30pm EST") == expected


def test_failure_caption_uses_raw_text() -> None:
    assert format_failure("10 people") == 'I couldn\'t understand the time "10 people".'
