"""Library for resolving daylight saving time transition rules.

A transition rule describes when, within any year, daylight saving time
begins or ends. There are two kinds of rules:

  - A fixed date rule names an absolute month and day, e.g. March 15th.
  - A floating date rule names the Nth occurrence of a weekday within a
    month, e.g. the second Sunday in March or the last Sunday in October.

Both carry a time of day, which is the local wall clock time at which the
transition happens. The time of day is added to the resolved date as an
offset so values such as -01:00 or 26:00 (permitted in POSIX TZ strings)
land on the adjacent day.
"""

from __future__ import annotations

import calendar
import datetime
from dataclasses import dataclass
from typing import Union

from dateutil import rrule

from .exceptions import InvalidDateError

__all__ = [
    "FixedDateRule",
    "FloatingDateRule",
    "TransitionRule",
    "LAST_OCCURRENCE",
    "resolve",
]

LAST_OCCURRENCE = 5
"""Occurrence value meaning the last occurrence of a weekday in the month."""

_ZERO = datetime.timedelta(0)
_MIDNIGHT = datetime.time()


def _validate_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12: {month}")


@dataclass(frozen=True)
class FixedDateRule:
    """A transition on the same calendar date every year."""

    month: int
    """A month between 1 and 12."""

    day: int
    """A day of the month between 1 and 31."""

    time_of_day: datetime.timedelta = _ZERO
    """Local wall clock time when the transition takes effect."""

    def __post_init__(self) -> None:
        """Verify the month and day are in range."""
        _validate_month(self.month)
        if not 1 <= self.day <= 31:
            raise ValueError(f"Day must be between 1 and 31: {self.day}")

    def as_rrule(self, dtstart: datetime.datetime) -> rrule.rrule:
        """Return a yearly recurrence for the date of this transition.

        Occurrences are at midnight, the caller applies the time of day. A
        rule for February 29th only recurs in leap years.
        """
        return rrule.rrule(
            freq=rrule.YEARLY,
            bymonth=self.month,
            bymonthday=self.day,
            dtstart=dtstart,
        )

    @property
    def rrule_str(self) -> str:
        """Return a recurrence rule string for this transition."""
        return f"FREQ=YEARLY;BYMONTH={self.month};BYMONTHDAY={self.day}"


@dataclass(frozen=True)
class FloatingDateRule:
    """A transition on the Nth occurrence of a weekday within a month."""

    month: int
    """A month between 1 and 12."""

    day_of_week: int
    """A day of the week between 0 (Sunday) and 6 (Saturday)."""

    occurrence: int
    """The occurrence of day_of_week in the month (1 to 4), or 5 for the last."""

    time_of_day: datetime.timedelta = _ZERO
    """Local wall clock time when the transition takes effect."""

    def __post_init__(self) -> None:
        """Verify the month, weekday, and occurrence are in range."""
        _validate_month(self.month)
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(
                f"Day of week must be between 0 and 6: {self.day_of_week}"
            )
        if not 1 <= self.occurrence <= LAST_OCCURRENCE:
            raise ValueError(
                f"Occurrence must be between 1 and {LAST_OCCURRENCE}: {self.occurrence}"
            )

    def as_rrule(self, dtstart: datetime.datetime) -> rrule.rrule:
        """Return a yearly recurrence for the date of this transition.

        Occurrences are at midnight, the caller applies the time of day.
        """
        return rrule.rrule(
            freq=rrule.YEARLY,
            bymonth=self.month,
            byweekday=self._rrule_byday(self._rrule_occurrence),
            dtstart=dtstart,
        )

    @property
    def rrule_str(self) -> str:
        """Return a recurrence rule string for this transition."""
        return ";".join(
            [
                "FREQ=YEARLY",
                f"BYMONTH={self.month}",
                f"BYDAY={self._rrule_occurrence}{self._rrule_byday}",
            ]
        )

    @property
    def _rrule_byday(self) -> rrule.weekday:
        """Return the dateutil weekday for this rule based on day_of_week."""
        return rrule.weekdays[(self.day_of_week - 1) % 7]

    @property
    def _rrule_occurrence(self) -> int:
        """Return the byday modifier for the occurrence in the month."""
        if self.occurrence == LAST_OCCURRENCE:
            return -1
        return self.occurrence


TransitionRule = Union[FixedDateRule, FloatingDateRule]


def _sunday_based_weekday(value: datetime.date) -> int:
    """Return the day of the week where Sunday is 0 and Saturday is 6."""
    return value.isoweekday() % 7


def _day_of_week_in_month(
    year: int, month: int, day_of_week: int, occurrence: int
) -> datetime.date:
    """Return the date of the Nth (or last) occurrence of a weekday."""
    first_of_month = datetime.date(year, month, 1)
    day = 1 + (day_of_week - _sunday_based_weekday(first_of_month) + 7) % 7
    if occurrence == LAST_OCCURRENCE:
        # A weekday occurs either 4 or 5 times depending on the month length
        days_in_month = calendar.monthrange(year, month)[1]
        while day + 7 <= days_in_month:
            day += 7
    else:
        day += 7 * (occurrence - 1)
    return first_of_month.replace(day=day)


def resolve(year: int, rule: TransitionRule) -> datetime.datetime:
    """Return the local wall clock time of the transition in the given year."""
    if not datetime.MINYEAR <= year <= datetime.MAXYEAR:
        raise ValueError(f"Year out of range: {year}")
    if isinstance(rule, FixedDateRule):
        try:
            date = datetime.date(year, rule.month, rule.day)
        except ValueError as err:
            raise InvalidDateError(year, rule.month, rule.day) from err
    else:
        date = _day_of_week_in_month(
            year, rule.month, rule.day_of_week, rule.occurrence
        )
    return datetime.datetime.combine(date, _MIDNIGHT) + rule.time_of_day
