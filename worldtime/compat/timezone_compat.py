"""Options for which time zone identifiers are accepted.

Lookups accept both IANA keys such as "Europe/Berlin" and Windows time zone
ids such as "W. Europe Standard Time". The option is stored in a context
variable so it may be changed for a single request or task.
"""

from collections.abc import Generator
import contextlib
import contextvars


_windows_timezones = contextvars.ContextVar("windows_timezones", default=True)


@contextlib.contextmanager
def disable_windows_timezones() -> Generator[None]:
    """Context manager to only accept IANA time zone keys."""
    token = _windows_timezones.set(False)
    try:
        yield
    finally:
        _windows_timezones.reset(token)


def is_windows_timezones_enabled() -> bool:
    """Check if Windows time zone ids are accepted."""
    return _windows_timezones.get()
