"""Library for returning details about a timezone.

This package follows the same approach as zoneinfo for loading timezone
data. It first checks the tzdata python package, then falls back to the
system TZPATH.
"""

from __future__ import annotations

import logging
import os
import struct
import zoneinfo
from functools import cache
from importlib import resources

from worldtime.compat import timezone_compat
from worldtime.exceptions import TimezoneDataError, ZoneNotFoundError

from . import extended_timezones
from .model import TimezoneInfo
from .tzif import read_tzif

__all__ = [
    "exists",
    "read",
    "resolve_key",
]

_LOGGER = logging.getLogger(__name__)


@cache
def _read_system_timezones() -> set[str]:
    """Read and cache the set of system and tzdata timezones."""
    return zoneinfo.available_timezones()


@cache
def _find_tzfile(key: str) -> str | None:
    """Retrieve the path to a TZif file from a key."""
    for search_path in zoneinfo.TZPATH:
        filepath = os.path.join(search_path, key)
        if os.path.isfile(filepath):
            return filepath

    return None


@cache
def _read_tzdata_timezones() -> set[str]:
    """Returns the set of valid timezones from tzdata only."""
    try:
        with resources.files("tzdata").joinpath("zones").open(
            "r", encoding="utf-8"
        ) as zones_file:
            return {line.strip() for line in zones_file.readlines()}
    except ModuleNotFoundError:
        return set()


def _iana_key_to_resource(key: str) -> tuple[str, str]:
    """Returns the package and resource file for the specified timezone."""
    if "/" not in key:
        return "tzdata.zoneinfo", key
    package_loc, resource = key.rsplit("/", 1)
    package = "tzdata.zoneinfo." + package_loc.replace("/", ".")
    return package, resource


def resolve_key(key: str) -> str:
    """Return the IANA key for a time zone identifier.

    Windows time zone ids are mapped to IANA keys when enabled. The returned
    key is not checked for existence.
    """
    if timezone_compat.is_windows_timezones_enabled():
        if target_timezone := extended_timezones.EXTENDED_TIMEZONES.get(key):
            _LOGGER.debug("Mapped Windows timezone %s to %s", key, target_timezone)
            return target_timezone
    return key


def exists(key: str) -> bool:
    """Return true if the IANA key names a zone in the system timezones or tzdata."""
    return key in _read_system_timezones() or key in _read_tzdata_timezones()


def read(key: str) -> TimezoneInfo:
    """Read the TZif file from the tzdata package and return timezone records."""
    _LOGGER.debug("Reading timezone: %s", key)
    return _read_cache(resolve_key(key))


@cache
def _read_cache(key: str) -> TimezoneInfo:
    if not exists(key):
        raise ZoneNotFoundError(f"Unable to find timezone in system timezones: {key}")

    # Prefer tzdata package
    (package, resource) = _iana_key_to_resource(key)
    try:
        with resources.files(package).joinpath(resource).open("rb") as tzdata_file:
            return read_tzif(tzdata_file.read())
    except ModuleNotFoundError:
        # No tzdata package, the key came from the system timezones
        pass
    except (ValueError, struct.error) as err:
        raise TimezoneDataError(f"Unable to load tzdata module: {key}") from err
    except FileNotFoundError:
        _LOGGER.debug("Timezone %s not in tzdata package, trying system", key)

    # Fallback to zoneinfo file on local disk
    tzfile = _find_tzfile(key)
    if tzfile is not None:
        with open(tzfile, "rb") as tzfile_file:
            try:
                return read_tzif(tzfile_file.read())
            except (ValueError, struct.error) as err:
                raise TimezoneDataError(f"Unable to load tzdata file: {key}") from err

    raise ZoneNotFoundError(f"Unable to find timezone data for {key}")
