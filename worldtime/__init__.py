"""
A library for finding the current time and daylight saving time transitions
of IANA and Windows time zones.

The core of the library resolves daylight saving time transition rules
(`worldtime.transition`) and selects the adjustment rule in effect for a
year (`worldtime.adjustment`). Time zone rules are supplied by a provider
(`worldtime.provider`), by default derived from the IANA time zone database
(`worldtime.tzif`). `worldtime.service` combines these to describe the
current time in a time zone.
"""

__all__ = [
    "adjustment",
    "compat",
    "exceptions",
    "provider",
    "service",
    "transition",
    "tzif",
]
