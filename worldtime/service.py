"""Current time and daylight saving time details for a time zone.

The service answers, for a time zone identifier, what the current local time
is, whether daylight saving time is in effect, and when DST starts and ends
in the current year. The response is a pydantic model that serializes to the
JSON payload returned to API clients.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .adjustment import DstWindow, find_window
from .provider import RulesProvider, TzdataRulesProvider

__all__ = [
    "TimeZoneResponse",
    "get_time_zone",
    "get_time_zones",
    "utcnow",
]

_LOGGER = logging.getLogger(__name__)


class TimeZoneResponse(BaseModel):
    """Details about the current time in a time zone."""

    time_zone: str
    """The time zone identifier from the request."""

    current_time: datetime.datetime
    """The current time in the time zone, with its UTC offset."""

    is_dst: bool
    """True when daylight saving time is in effect now."""

    dst_start: datetime.datetime | None = None
    """Local wall clock time DST starts this year, if observed."""

    dst_end: datetime.datetime | None = None
    """Local wall clock time DST ends this year, if observed."""

    def as_json(self) -> str:
        """Return the JSON payload for the response."""
        return self.model_dump_json(by_alias=True)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


def utcnow() -> datetime.datetime:
    """Factory method for the current time to facilitate mocking."""
    return datetime.datetime.now(tz=datetime.timezone.utc)


def _is_dst(window: DstWindow, current_time: datetime.datetime) -> bool:
    """Return true if DST is in effect at the current local time.

    Wall clock times repeat after DST ends. The second occurrence has fold
    set and is only DST when the time one repeat later is still in DST.
    """
    local = current_time.replace(tzinfo=None)
    if not window.contains(local):
        return False
    if not current_time.fold:
        return True
    earlier = current_time.replace(fold=0).utcoffset()
    later = current_time.utcoffset()
    if earlier is None or later is None:
        return True
    return window.contains(local + (earlier - later))


def get_time_zone(
    key: str, provider: RulesProvider | None = None
) -> TimeZoneResponse:
    """Return the current time and DST details for the time zone."""
    if provider is None:
        provider = TzdataRulesProvider()
    current_time = utcnow().astimezone(provider.tzinfo(key))
    window = find_window(current_time.year, provider.adjustment_rules(key))
    _LOGGER.debug("DST window for %s in %s: %s", key, current_time.year, window)
    if window is None:
        return TimeZoneResponse(
            time_zone=key, current_time=current_time, is_dst=False
        )
    return TimeZoneResponse(
        time_zone=key,
        current_time=current_time,
        is_dst=_is_dst(window, current_time),
        dst_start=window.start,
        dst_end=window.end,
    )


def get_time_zones(
    keys: Iterable[str], provider: RulesProvider | None = None
) -> list[TimeZoneResponse]:
    """Return responses for each time zone.

    The whole request fails with ZoneNotFoundError if any key is unknown.
    """
    if provider is None:
        provider = TzdataRulesProvider()
    return [get_time_zone(key, provider) for key in keys]
