"""Parser for the POSIX TZ strings found in TZif footers.

A TZ string has one of two forms:

No DST: std offset
  - std: Abbreviation for standard time
  - offset: Time added to local time to get UTC
  Example: EST+5

DST: std offset dst [offset],start[/time],end[/time]
  - dst: Abbreviation for daylight saving time
  - offset: One hour ahead of standard time when omitted. It may also be
    behind standard time, as in IST-1GMT0 for Europe/Dublin
  - start & end: Time period when DST is in effect. The start/end have
    the following formats:
      Jn: A julian day between 1 and 365 (Feb 29th never counted)
      n: A julian day between 0 and 364 (Feb 29th is counted in leap years)
      Mm.w.d:
          m: Month between 1 and 12
          d: Between 0 (Sunday) and 6 (Saturday)
          w: Between 1 and 5. Week 1 is first week d occurs
      The time field is in hh:mm:ss. The hour can be 167 to -167.

The zero based julian day format is not used by the tz database and is not
supported.
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from worldtime.transition import FixedDateRule, FloatingDateRule

_ZERO = datetime.timedelta(seconds=0)
_DEFAULT_TIME_DELTA = datetime.timedelta(hours=2)

# Julian days never count Feb 29th so they map onto a non-leap year
_JULIAN_REFERENCE = datetime.date(2001, 1, 1)


def _parse_time(values: dict[str, Any]) -> datetime.timedelta | None:
    """Convert an offset from [+/-]hh[:mm[:ss]] to a timedelta.

    The dict expects fields of hour, minutes, seconds from the regex match.
    """
    if (hour := values["hour"]) is None:
        return None
    sign = 1
    if hour.startswith("+"):
        hour = hour[1:]
    elif hour.startswith("-"):
        sign = -1
        hour = hour[1:]
    minutes = values.get("minutes") or "0"
    seconds = values.get("seconds") or "0"
    return datetime.timedelta(
        seconds=sign * (int(hour) * 60 * 60 + int(minutes) * 60 + int(seconds))
    )


@dataclass
class RuleDay:
    """A julian day of the year in a TZ string, Jn."""

    day_of_year: int
    """Between 1 and 365, Feb 29th is never counted."""

    time: datetime.timedelta
    """Local wall clock time of the transition, 02:00 when omitted."""

    def as_transition_rule(self) -> FixedDateRule:
        """Return the fixed calendar date this julian day always falls on."""
        if not 1 <= self.day_of_year <= 365:
            raise ValueError(f"Julian day must be between 1 and 365: {self.day_of_year}")
        date = _JULIAN_REFERENCE + datetime.timedelta(days=self.day_of_year - 1)
        return FixedDateRule(month=date.month, day=date.day, time_of_day=self.time)


@dataclass
class RuleDate:
    """A weekday of a month in a TZ string, Mm.w.d."""

    month: int
    day_of_week: int
    """0 (Sunday) to 6 (Saturday)."""

    week_of_month: int
    """Occurrence of day_of_week in the month, where 5 is the last."""

    time: datetime.timedelta
    """Local wall clock time of the transition, 02:00 when omitted."""

    def as_transition_rule(self) -> FloatingDateRule:
        """Return the floating date rule for this weekday of the month."""
        return FloatingDateRule(
            month=self.month,
            day_of_week=self.day_of_week,
            occurrence=self.week_of_month,
            time_of_day=self.time,
        )


@dataclass
class RuleOccurrence:
    """An abbreviation and UTC offset for standard or daylight saving time."""

    name: str
    offset: datetime.timedelta
    """UTC offset, the negation of the offset written in the TZ string."""


@dataclass
class Rule:
    """Transitions after the end of the explicit history of a time zone."""

    std: RuleOccurrence
    dst: Optional[RuleOccurrence] = None

    dst_start: Union[RuleDate, RuleDay, None] = None
    """When the dst occurrence goes into effect."""

    dst_end: Union[RuleDate, RuleDay, None] = None
    """When the std occurrence goes back into effect."""

    @property
    def negative_dst(self) -> bool:
        """Return true when the dst occurrence is behind standard time.

        The tz database describes Europe/Dublin this way, with winter time
        as the dst occurrence.
        """
        return self.dst is not None and self.dst.offset < self.std.offset


# Regexp for parsing the TZ string
_OFFSET_RE_PATTERN: re.Pattern[str] = re.compile(
    r"(?P<name>(\<[+\-]?\d+\>|[a-zA-Z]+))"  # name
    r"((?P<hour>[+-]?\d+)(?::(?P<minutes>\d{1,2})(?::(?P<seconds>\d{1,2}))?)?)?"  # offset
)
_START_END_RE_PATTERN = re.compile(
    # days in either julian (J prefix) or month.week.day (M prefix) format
    r",(J(?P<day_of_year>\d+)|M(?P<month>\d{1,2})\.(?P<week_of_month>\d)\.(?P<day_of_week>\d))"
    # time
    r"(\/(?P<hour>[+-]?\d+)(?::(?P<minutes>\d{1,2})(?::(?P<seconds>\d{1,2}))?)?)?"
)


def _rule_occurrence_from_match(
    match: re.Match[str], default: datetime.timedelta = _ZERO
) -> RuleOccurrence:
    """Create a rule occurrence from a regex match."""
    if (offset := _parse_time(match.groupdict())) is None:
        return RuleOccurrence(name=match.group("name"), offset=default)
    return RuleOccurrence(name=match.group("name"), offset=_ZERO - offset)


def _rule_date_from_match(match: re.Match[str]) -> Union[RuleDay, RuleDate]:
    """Create a rule date from a regex match."""
    if (time := _parse_time(match.groupdict())) is None:
        time = _DEFAULT_TIME_DELTA
    if match["day_of_year"] is not None:
        return RuleDay(day_of_year=int(match.group("day_of_year")), time=time)
    return RuleDate(
        month=int(match.group("month")),
        week_of_month=int(match.group("week_of_month")),
        day_of_week=int(match.group("day_of_week")),
        time=time,
    )


def parse_tz_rule(tz_str: str) -> Rule:
    """Parse the TZ string into a Rule object."""
    buffer = tz_str
    if (std_match := _OFFSET_RE_PATTERN.match(buffer)) is None:
        raise ValueError(f"Unable to parse TZ string: {tz_str}")
    buffer = buffer[std_match.end() :]
    if (dst_match := _OFFSET_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[dst_match.end() :]
    if (std_start := _START_END_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[std_start.end() :]
    if (std_end := _START_END_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[std_end.end() :]
    if (std_start is None) != (std_end is None):
        raise ValueError(
            f"Unable to parse TZ string, should have both or neither start and end dates: {tz_str}"
        )
    if buffer:
        raise ValueError(
            f"Unable to parse TZ string, unexpected trailing data: {tz_str}"
        )
    std = _rule_occurrence_from_match(std_match)
    dst = None
    if dst_match:
        dst = _rule_occurrence_from_match(
            dst_match, default=std.offset + datetime.timedelta(hours=1)
        )
    return Rule(
        std=std,
        dst=dst,
        dst_start=_rule_date_from_match(std_start) if std_start else None,
        dst_end=_rule_date_from_match(std_end) if std_end else None,
    )
