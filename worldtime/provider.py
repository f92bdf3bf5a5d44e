"""Sources of daylight saving time adjustment rules for time zones.

A provider supplies the ordered adjustment rules for a time zone along with
a tzinfo used to find the current local time. Providers are passed to the
service so that any source of rules can be used, including in memory rules
in tests.

The tzdata provider derives rules from the IANA time zone database:

  - Each year of the explicit transition history with both a DST start and
    a DST end becomes a rule for that year alone, with fixed date
    transitions at the local wall clock time in effect before each change.
  - The POSIX TZ rule in the TZif footer, which describes all transitions
    after the history, becomes an open ended rule with floating date
    transitions.
"""

from __future__ import annotations

import datetime
import logging
import zoneinfo
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from functools import cache
from typing import Protocol

from .adjustment import AdjustmentRule
from .exceptions import ZoneNotFoundError
from .transition import FixedDateRule
from .tzif import timezoneinfo
from .tzif.model import TimezoneInfo, Transition

__all__ = [
    "RulesProvider",
    "StaticZone",
    "StaticRulesProvider",
    "TzdataRulesProvider",
    "adjustment_rules_from_tzif",
]

_LOGGER = logging.getLogger(__name__)

_EPOCH = datetime.datetime(1970, 1, 1)
_MIDNIGHT = datetime.time()


class RulesProvider(Protocol):
    """A read-only source of time zone information."""

    def adjustment_rules(self, key: str) -> Sequence[AdjustmentRule]:
        """Return the ordered adjustment rules for the time zone."""

    def tzinfo(self, key: str) -> datetime.tzinfo:
        """Return a tzinfo for converting to the zone's local time."""


@dataclass(frozen=True)
class StaticZone:
    """A time zone defined in memory."""

    tzinfo: datetime.tzinfo
    rules: Sequence[AdjustmentRule] = field(default_factory=tuple)


class StaticRulesProvider:
    """A provider for a fixed set of in memory time zones."""

    def __init__(self, zones: Mapping[str, StaticZone]) -> None:
        """Initialize StaticRulesProvider."""
        self._zones = dict(zones)

    def _zone(self, key: str) -> StaticZone:
        if (zone := self._zones.get(key)) is None:
            raise ZoneNotFoundError(f"Unable to find timezone: {key}")
        return zone

    def adjustment_rules(self, key: str) -> Sequence[AdjustmentRule]:
        """Return the ordered adjustment rules for the time zone."""
        return self._zone(key).rules

    def tzinfo(self, key: str) -> datetime.tzinfo:
        """Return a tzinfo for converting to the zone's local time."""
        return self._zone(key).tzinfo


def _fixed_date_rule(value: datetime.datetime) -> FixedDateRule:
    """Return a rule for the date and wall clock time of a transition."""
    return FixedDateRule(
        month=value.month,
        day=value.day,
        time_of_day=value - datetime.datetime.combine(value.date(), _MIDNIGHT),
    )


def _is_dst_start(prev: Transition, transition: Transition) -> bool:
    """Return true if the change from prev moves into daylight saving time.

    The side with the larger UTC offset is daylight saving time, whatever the
    dst flag says. Europe/Dublin flags winter time as DST.
    """
    if transition.utoff != prev.utoff:
        return transition.utoff > prev.utoff
    return transition.dst


def _dst_changes(info: TimezoneInfo) -> dict[int, dict[bool, datetime.datetime]]:
    """Return the local time of the first DST start and end in each year."""
    changes: dict[int, dict[bool, datetime.datetime]] = {}
    prev: Transition | None = None
    for transition in info.transitions:
        if prev is not None and transition.dst != prev.dst:
            try:
                local = _EPOCH + datetime.timedelta(
                    seconds=transition.transition_time + prev.utoff
                )
            except OverflowError:
                _LOGGER.debug("Skipping out of range transition: %s", transition)
            else:
                changes.setdefault(local.year, {}).setdefault(
                    _is_dst_start(prev, transition), local
                )
        prev = transition
    return changes


def adjustment_rules_from_tzif(info: TimezoneInfo) -> list[AdjustmentRule]:
    """Return the ordered adjustment rules described by TZif data."""
    rules: list[AdjustmentRule] = []
    changes = _dst_changes(info)
    for year in sorted(changes):
        year_changes = changes[year]
        if True not in year_changes or False not in year_changes:
            _LOGGER.debug("Year %s does not have both DST start and end", year)
            continue
        rules.append(
            AdjustmentRule(
                date_start=datetime.date(year, 1, 1),
                date_end=datetime.date(year, 12, 31),
                daylight_transition_start=_fixed_date_rule(year_changes[True]),
                daylight_transition_end=_fixed_date_rule(year_changes[False]),
            )
        )

    rule = info.rule
    if rule is None or rule.dst is None or not rule.dst_start or not rule.dst_end:
        return rules

    date_start = datetime.date.min
    if changes:
        last_year = max(changes)
        if rules and rules[-1].date_end.year == last_year:
            last_year += 1
        date_start = datetime.date(min(last_year, datetime.MAXYEAR), 1, 1)
    dst_start, dst_end = rule.dst_start, rule.dst_end
    if rule.negative_dst:
        dst_start, dst_end = dst_end, dst_start
    rules.append(
        AdjustmentRule(
            date_start=date_start,
            date_end=datetime.date.max,
            daylight_transition_start=dst_start.as_transition_rule(),
            daylight_transition_end=dst_end.as_transition_rule(),
        )
    )
    return rules


@cache
def _tzdata_rules(key: str) -> tuple[AdjustmentRule, ...]:
    return tuple(adjustment_rules_from_tzif(timezoneinfo.read(key)))


class TzdataRulesProvider:
    """A provider for the IANA time zone database.

    Accepts IANA keys and, when enabled, Windows time zone ids.
    """

    def adjustment_rules(self, key: str) -> Sequence[AdjustmentRule]:
        """Return the ordered adjustment rules for the time zone."""
        return _tzdata_rules(timezoneinfo.resolve_key(key))

    def tzinfo(self, key: str) -> datetime.tzinfo:
        """Return a tzinfo for converting to the zone's local time."""
        iana_key = timezoneinfo.resolve_key(key)
        if not timezoneinfo.exists(iana_key):
            raise ZoneNotFoundError(f"Unable to find timezone: {key}")
        try:
            return zoneinfo.ZoneInfo(iana_key)
        except (zoneinfo.ZoneInfoNotFoundError, ValueError, OSError) as err:
            raise ZoneNotFoundError(f"Unable to find timezone: {key}") from err
