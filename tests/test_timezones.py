from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from core.errors import ResolutionError
from core.timezones import load_zone, lookup_alias, resolve_zone


def test_pacific_aliases_resolve_to_los_angeles() -> None:
    resolved = {resolve_zone(token) for token in ("PT", "PST", "PACIFIC", "pt", "Pacific")}
    assert resolved == {"America/Los_Angeles"}


def test_gmt_family_resolves_to_utc() -> None:
    assert resolve_zone("gmt") == resolve_zone("UTC") == resolve_zone("Greenwich") == "UTC"


def test_supported_regional_aliases() -> None:
    assert resolve_zone("EST") == "America/New_York"
    assert resolve_zone("ct") == "America/Chicago"
    assert resolve_zone("MT") == "America/Denver"
    assert resolve_zone("China") == "Asia/Shanghai"
    assert resolve_zone("Ecuador") == "America/Guayaquil"
    assert resolve_zone("India") == "Asia/Kolkata"
    assert resolve_zone("Australia") == "Australia/Melbourne"
    assert resolve_zone("BRT") == "America/Sao_Paulo"


def test_unknown_token_passes_through_when_it_is_a_zone_name() -> None:
    assert lookup_alias("Japan") is None
    assert resolve_zone("Japan") == "Japan"


def test_unknown_token_that_is_not_a_zone_is_an_error() -> None:
    with pytest.raises(ResolutionError):
        resolve_zone("people")


def test_gmt_offset_inverts_sign_for_posix_name() -> None:
    assert resolve_zone("GMT", "+", "5") == "Etc/GMT-5"
    assert resolve_zone("GMT", "-", "3") == "Etc/GMT+3"
    moment = datetime(2024, 1, 15, 12, 0, tzinfo=load_zone("Etc/GMT-5"))
    assert moment.utcoffset() == timedelta(hours=5)


def test_offset_on_non_gmt_token_is_rejected() -> None:
    with pytest.raises(ResolutionError):
        resolve_zone("EST", "+", "5")


def test_out_of_range_offset_is_rejected() -> None:
    with pytest.raises(ResolutionError):
        resolve_zone("UTC", "+", "15")
