"""Exceptions for worldtime library."""


class WorldTimeError(Exception):
    """Base exception for all worldtime errors."""


class ZoneNotFoundError(WorldTimeError):
    """Exception raised when a time zone identifier is not known."""


class TimezoneDataError(WorldTimeError):
    """Exception raised when time zone data exists but could not be read."""


class InvalidDateError(WorldTimeError):
    """Exception raised when a fixed date rule names a day not in the month.

    A rule such as "February 30th" can't be resolved to a calendar date. The
    'year', 'month', and 'day' attributes hold the values that were requested
    so the caller can report which rule was at fault.
    """

    def __init__(self, year: int, month: int, day: int) -> None:
        """Initialize the InvalidDateError with the requested date."""
        super().__init__(f"Day {day} does not exist in month {year}-{month:02d}")
        self.year = year
        self.month = month
        self.day = day
