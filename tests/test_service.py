"""Tests for the time zone service."""

import datetime
import json

import pytest
from freezegun import freeze_time

from worldtime.compat import timezone_compat
from worldtime.exceptions import ZoneNotFoundError
from worldtime.provider import StaticRulesProvider
from worldtime.service import TimeZoneResponse, get_time_zone, get_time_zones


@freeze_time("2025-07-01 12:00:00")
def test_northern_hemisphere_summer() -> None:
    """Test a zone in DST during the summer."""
    response = get_time_zone("Europe/Berlin")
    assert response.time_zone == "Europe/Berlin"
    assert response.current_time.isoformat() == "2025-07-01T14:00:00+02:00"
    assert response.is_dst
    assert response.dst_start == datetime.datetime(2025, 3, 30, 2, 0, 0)
    assert response.dst_end == datetime.datetime(2025, 10, 26, 3, 0, 0)


@freeze_time("2025-01-15 12:00:00")
def test_northern_hemisphere_winter() -> None:
    """Test a zone in standard time during the winter."""
    response = get_time_zone("America/New_York")
    assert response.current_time.isoformat() == "2025-01-15T07:00:00-05:00"
    assert not response.is_dst
    assert response.dst_start == datetime.datetime(2025, 3, 9, 2, 0, 0)
    assert response.dst_end == datetime.datetime(2025, 11, 2, 2, 0, 0)


@pytest.mark.parametrize(
    "now,is_dst",
    [
        ("2025-01-15 00:00:00", True),
        ("2025-07-01 00:00:00", False),
        ("2025-12-01 00:00:00", True),
    ],
)
def test_southern_hemisphere(now: str, is_dst: bool) -> None:
    """Test a zone where DST spans the end of the year."""
    with freeze_time(now):
        response = get_time_zone("Australia/Sydney")
    assert response.is_dst == is_dst
    assert response.dst_start == datetime.datetime(2025, 10, 5, 2, 0, 0)
    assert response.dst_end == datetime.datetime(2025, 4, 6, 3, 0, 0)


@freeze_time("2025-07-01 12:00:00")
def test_no_dst() -> None:
    """Test a zone that does not observe DST."""
    response = get_time_zone("Asia/Tokyo")
    assert response.current_time.isoformat() == "2025-07-01T21:00:00+09:00"
    assert not response.is_dst
    assert response.dst_start is None
    assert response.dst_end is None


@freeze_time("2025-12-31 23:30:00")
def test_local_year() -> None:
    """Test the window is for the year in the zone, not in UTC."""
    response = get_time_zone("Europe/Berlin")
    assert response.current_time.year == 2026
    assert response.dst_start == datetime.datetime(2026, 3, 29, 2, 0, 0)
    assert response.dst_end == datetime.datetime(2026, 10, 25, 3, 0, 0)


@freeze_time("2025-07-01 12:00:00")
def test_windows_timezone() -> None:
    """Test a Windows time zone id is equivalent to the IANA key."""
    response = get_time_zone("W. Europe Standard Time")
    assert response.time_zone == "W. Europe Standard Time"
    assert response.current_time.isoformat() == "2025-07-01T14:00:00+02:00"
    assert response.is_dst
    assert response.dst_start == datetime.datetime(2025, 3, 30, 2, 0, 0)
    assert response.dst_end == datetime.datetime(2025, 10, 26, 3, 0, 0)


def test_windows_timezone_disabled() -> None:
    """Test Windows time zone ids are rejected when disabled."""
    with timezone_compat.disable_windows_timezones(), pytest.raises(
        ZoneNotFoundError
    ):
        get_time_zone("W. Europe Standard Time")


@pytest.mark.parametrize("key", ["Europe/Dublin", "GMT Standard Time"])
@pytest.mark.parametrize(
    "now,is_dst",
    [
        ("2025-01-15 12:00:00", False),
        ("2025-07-01 12:00:00", True),
    ],
)
def test_negative_dst_zone(key: str, now: str, is_dst: bool) -> None:
    """Test Irish and British clocks agree on when summer time is DST."""
    with freeze_time(now):
        response = get_time_zone(key)
    assert response.is_dst == is_dst
    assert response.dst_start == datetime.datetime(2025, 3, 30, 1, 0, 0)
    assert response.dst_end == datetime.datetime(2025, 10, 26, 2, 0, 0)


@pytest.mark.parametrize(
    "now,local_time,is_dst",
    [
        ("2025-10-26 00:30:00", "2025-10-26T02:30:00+02:00", True),
        ("2025-10-26 01:30:00", "2025-10-26T02:30:00+01:00", False),
        ("2025-10-26 02:30:00", "2025-10-26T03:30:00+01:00", False),
    ],
)
def test_repeated_hour(now: str, local_time: str, is_dst: bool) -> None:
    """Test the repeated hour after DST ends is only DST the first time."""
    with freeze_time(now):
        response = get_time_zone("Europe/Berlin")
    assert response.current_time.isoformat() == local_time
    assert response.is_dst == is_dst


@pytest.mark.parametrize("key", ["Invalid/Zone", "Europe"])
def test_unknown_zone(key: str) -> None:
    """Test an unknown time zone id."""
    with pytest.raises(ZoneNotFoundError):
        get_time_zone(key)


@freeze_time("2025-07-01 12:00:00")
def test_static_provider(static_provider: StaticRulesProvider) -> None:
    """Test the service with an injected provider."""
    response = get_time_zone("Test/Standard", static_provider)
    assert response.current_time.isoformat() == "2025-07-01T13:00:00+01:00"
    assert response.is_dst
    assert response.dst_start == datetime.datetime(2025, 3, 30, 2, 0, 0)

    response = get_time_zone("Test/NoDst", static_provider)
    assert not response.is_dst
    assert response.dst_start is None


@freeze_time("2025-07-01 12:00:00")
def test_get_time_zones() -> None:
    """Test a request for multiple time zones."""
    responses = get_time_zones(["Europe/Berlin", "Asia/Tokyo"])
    assert [response.time_zone for response in responses] == [
        "Europe/Berlin",
        "Asia/Tokyo",
    ]
    assert [response.is_dst for response in responses] == [True, False]


def test_get_time_zones_unknown_zone() -> None:
    """Test a request for multiple time zones fails if one is unknown."""
    with pytest.raises(ZoneNotFoundError):
        get_time_zones(["Europe/Berlin", "Invalid/Zone"])


@freeze_time("2025-07-01 12:00:00")
def test_json_payload() -> None:
    """Test the JSON payload of a response."""
    assert json.loads(get_time_zone("Europe/Berlin").as_json()) == {
        "timeZone": "Europe/Berlin",
        "currentTime": "2025-07-01T14:00:00+02:00",
        "isDst": True,
        "dstStart": "2025-03-30T02:00:00",
        "dstEnd": "2025-10-26T03:00:00",
    }
    assert json.loads(get_time_zone("Asia/Tokyo").as_json()) == {
        "timeZone": "Asia/Tokyo",
        "currentTime": "2025-07-01T21:00:00+09:00",
        "isDst": False,
        "dstStart": None,
        "dstEnd": None,
    }


def test_response_from_json() -> None:
    """Test a response can be read back from its camel case payload."""
    response = TimeZoneResponse.model_validate_json(
        '{"timeZone": "Asia/Tokyo", "currentTime": "2025-07-01T21:00:00+09:00",'
        ' "isDst": false, "dstStart": null, "dstEnd": null}'
    )
    assert response.time_zone == "Asia/Tokyo"
    assert response.current_time.utcoffset() == datetime.timedelta(hours=9)
    assert response.dst_start is None
