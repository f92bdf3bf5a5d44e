"""Data model for the tzif library."""

from dataclasses import dataclass
from typing import Optional

from .tz_rule import Rule


@dataclass
class Transition:
    """A time at which the rules for computing local time change."""

    transition_time: int
    """Seconds since the epoch (UTC) when the change takes effect."""

    utoff: int
    """Number of seconds added to UTC to determine local time after the change."""

    dst: bool
    """Determines if local time is Daylight Savings Time (else Standard time)."""

    designation: str
    """The abbreviation of local time after the change e.g. CEST."""


@dataclass
class TimezoneInfo:
    """The results of parsing the TZif file."""

    transitions: list[Transition]
    """Local time changes in chronological order."""

    rule: Optional[Rule] = None
    """A rule for computing local time changes after the last transition."""
