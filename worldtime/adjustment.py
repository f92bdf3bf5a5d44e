"""Library for finding the daylight saving time window of a year.

A time zone's daylight saving time policy changes over time, so it is
described as a sequence of adjustment rules. Each rule has a validity
interval of calendar dates and the transition rules used for DST start
and end while it is in effect.

The window for a year is found from the first rule whose validity interval
overlaps the year. Rules are expected to not overlap one another, though
that is not checked here and iteration order decides when they do.

In the Southern Hemisphere DST starts late in the year and ends early in the
year, so the resolved end is earlier than the resolved start. These windows
are returned as they are resolved and are never reordered.
"""

from __future__ import annotations

import datetime
import heapq
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import NamedTuple

from .transition import TransitionRule, resolve

__all__ = [
    "AdjustmentRule",
    "DstWindow",
    "DstTransition",
    "find_window",
    "iter_transitions",
]

_LOGGER = logging.getLogger(__name__)

_MIDNIGHT = datetime.time()


@dataclass(frozen=True)
class AdjustmentRule:
    """A daylight saving time policy for a bounded period."""

    date_start: datetime.date
    """First date the rule is in effect."""

    date_end: datetime.date
    """Last date (inclusive) the rule is in effect."""

    daylight_transition_start: TransitionRule
    """Describes when DST goes into effect."""

    daylight_transition_end: TransitionRule
    """Describes when DST ends (standard time starts)."""

    def __post_init__(self) -> None:
        """Verify the validity interval is not empty."""
        if self.date_start > self.date_end:
            raise ValueError(
                f"Rule start must not be after the end: {self.date_start} > {self.date_end}"
            )

    def overlaps(self, year: int) -> bool:
        """Return true if the rule is in effect for any part of the year."""
        return self.date_start <= datetime.date(
            year, 12, 31
        ) and self.date_end >= datetime.date(year, 1, 1)


@dataclass(frozen=True)
class DstWindow:
    """The local wall clock times that DST starts and ends within one year."""

    start: datetime.datetime
    end: datetime.datetime

    @property
    def inverted(self) -> bool:
        """Return true when DST ends earlier in the year than it starts."""
        return self.start > self.end

    def contains(self, value: datetime.datetime) -> bool:
        """Return true if the local wall clock time is in DST.

        An inverted window is in effect at the beginning and the end of the
        year, and not in between.
        """
        if self.inverted:
            return not self.end <= value < self.start
        return self.start <= value < self.end


class DstTransition(NamedTuple):
    """A single DST start or end at a local wall clock time."""

    when: datetime.datetime
    is_dst_start: bool


def find_window(year: int, rules: Iterable[AdjustmentRule]) -> DstWindow | None:
    """Return the DST window for the year, or None if DST is not observed."""
    for rule in rules:
        if rule.overlaps(year):
            _LOGGER.debug("Using rule %s for year %s", rule, year)
            return DstWindow(
                start=resolve(year, rule.daylight_transition_start),
                end=resolve(year, rule.daylight_transition_end),
            )
    return None


def _rule_transitions(
    rule: AdjustmentRule,
    transition: TransitionRule,
    is_dst_start: bool,
    start: datetime.datetime,
    end: datetime.datetime,
) -> Iterator[DstTransition]:
    """Yield transitions for a single rule clipped to its validity interval."""
    first = max(rule.date_start, datetime.date(start.year, 1, 1))
    last = min(rule.date_end, datetime.date(end.year, 12, 31))
    if first > last:
        return
    for value in transition.as_rrule(datetime.datetime.combine(first, _MIDNIGHT)):
        if value.date() > last:
            return
        when = value + transition.time_of_day
        if start <= when < end:
            yield DstTransition(when, is_dst_start)


def iter_transitions(
    rules: Iterable[AdjustmentRule],
    start: datetime.datetime,
    end: datetime.datetime,
) -> Iterator[DstTransition]:
    """Yield every DST start and end in [start, end) in chronological order."""
    iters: list[Iterator[DstTransition]] = []
    for rule in rules:
        iters.append(
            _rule_transitions(rule, rule.daylight_transition_start, True, start, end)
        )
        iters.append(
            _rule_transitions(rule, rule.daylight_transition_end, False, start, end)
        )
    return heapq.merge(*iters, key=lambda item: item.when)
