"""Library for reading TZif time zone information files.

A TZif file (see rfc8536) has a header and a data block with the historical
transitions of a time zone, followed in version 2+ files by a second header
and data block using 64-bit times and a footer with a POSIX TZ string. The
TZ string describes transitions after the last one in the data block.

Version 1 files only contain the first block. In version 2+ files the first
block exists for compatibility with older readers, and is skipped here.
"""

import enum
import io
import logging
import struct
from collections import namedtuple
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import cache

from .model import TimezoneInfo, Transition
from .tz_rule import parse_tz_rule

__all__ = [
    "read_tzif",
]

_LOGGER = logging.getLogger(__name__)

# Records specifying the local time type
_LOCAL_TIME_TYPE_STRUCT_FORMAT = "".join(
    [
        ">",  # Use standard size of packed value bytes
        "l",  # utoff (4 bytes): Number of seconds to add to UTC to determine local time
        "?",  # dst (1 byte): Indicates the time is DST (1) or standard (0)
        "B",  # idx (1 byte): Offset index into the time zone designation octets (0-charcnt-1)
    ]
)
_LOCAL_TIME_RECORD_SIZE = 6
_LEAP_CORRECTION_SIZE = 4


class _TZifVersion(enum.Enum):
    """Time size and format for the data block of each version."""

    V1 = (b"\x00", 4, "l")  # 32-bit in v1
    V2 = (b"2", 8, "q")  # 64-bit in v2+
    V3 = (b"3", 8, "q")

    def __init__(self, version: bytes, time_size: int, time_format: str):
        self.version = version
        self.time_size = time_size
        self.time_format = time_format


@dataclass
class _Header:
    """TZif header with the counts of records in the data block."""

    SIZE = 44
    STRUCT_FORMAT = "".join(
        [
            ">",  # Use standard size of packed value bytes
            "4s",  # magic (4 bytes)
            "c",  # version (1 byte)
            "15x",  # unused
            "6l",  # isutccnt, isstdcnt, leapcnt, timecnt, typecnt, charcnt
        ]
    )
    MAGIC = "TZif".encode()

    version: bytes
    isutccnt: int
    isstdcnt: int
    leapcnt: int
    timecnt: int
    typecnt: int
    charcnt: int

    @classmethod
    def from_bytes(cls, header_bytes: bytes) -> "_Header":
        """Parse the header bytes."""
        if len(header_bytes) != cls.SIZE:
            raise ValueError("zoneinfo file was truncated in header")
        (
            magic,
            version,
            isutccnt,
            isstdcnt,
            leapcnt,
            timecnt,
            typecnt,
            charcnt,
        ) = struct.unpack(cls.STRUCT_FORMAT, header_bytes)
        if magic != cls.MAGIC:
            raise ValueError("zoneinfo file did not contain magic header")
        if isutccnt not in (0, typecnt):
            raise ValueError(
                f"UTC/local indicators in datablock mismatched ({isutccnt}, {typecnt})"
            )
        if isstdcnt not in (0, typecnt):
            raise ValueError(
                f"standard/wall indicators in datablock mismatched ({isstdcnt}, {typecnt})"
            )
        return _Header(version, isutccnt, isstdcnt, leapcnt, timecnt, typecnt, charcnt)

    def validate_datablock(self) -> None:
        """Verify the data block has the records required to read it."""
        if self.typecnt == 0:
            raise ValueError("Local time records in block is zero")
        if self.charcnt == 0:
            raise ValueError("Total number of octets is zero")

    def datablock_size(self, version: _TZifVersion) -> int:
        """Return the number of bytes in the data block that follows."""
        return (
            self.timecnt * version.time_size
            + self.timecnt
            + self.typecnt * _LOCAL_TIME_RECORD_SIZE
            + self.charcnt
            + self.leapcnt * (version.time_size + _LEAP_CORRECTION_SIZE)
            + self.isstdcnt
            + self.isutccnt
        )


_LocalTimeType = namedtuple("_LocalTimeType", ["utoff", "dst", "idx"])


def _new_transition(
    transition_time: int,
    time_type: int,
    local_time_types: list[_LocalTimeType],
    get_tz_designation: Callable[[int], str],
) -> Transition:
    """Create a Transition from the local time type it refers to."""
    if time_type >= len(local_time_types):
        raise ValueError(
            f"transition_type out of bounds {time_type} >= {len(local_time_types)}"
        )
    (utoff, dst, idx) = local_time_types[time_type]
    return Transition(transition_time, utoff, dst, get_tz_designation(idx))


def _read_datablock(
    header: _Header, version: _TZifVersion, buf: io.BytesIO
) -> list[Transition]:
    """Read the transitions from the data block in the buffer."""
    # Transition times in ascending order, then an index into the local time
    # type records for each.
    transition_times = struct.unpack(
        f">{header.timecnt}{version.time_format}",
        buf.read(header.timecnt * version.time_size),
    )
    transition_types: Sequence[int] = struct.unpack(
        f">{header.timecnt}B", buf.read(header.timecnt)
    )

    local_time_types: list[_LocalTimeType] = [
        _LocalTimeType._make(
            struct.unpack(
                _LOCAL_TIME_TYPE_STRUCT_FORMAT, buf.read(_LOCAL_TIME_RECORD_SIZE)
            )
        )
        for _ in range(header.typecnt)
    ]

    # An array of NUL-terminated time zone designation strings
    tz_designations = buf.read(header.charcnt)

    @cache
    def get_tz_designation(idx: int) -> str:
        """Find the null terminated string starting at the specified index."""
        end = tz_designations.find(b"\x00", idx)
        return tz_designations[idx:end].decode("UTF-8")

    # Leap second records and the standard/wall and UTC/local indicators
    # only matter when converting to UTC, which is not needed for local
    # wall clock transitions.
    buf.read(
        header.leapcnt * (version.time_size + _LEAP_CORRECTION_SIZE)
        + header.isstdcnt
        + header.isutccnt
    )

    return [
        _new_transition(
            transition_time, time_type, local_time_types, get_tz_designation
        )
        for transition_time, time_type in zip(transition_times, transition_types)
    ]


def read_tzif(content: bytes) -> TimezoneInfo:
    """Read the TZif file and parse and return the timezone records."""
    buf = io.BytesIO(content)

    header = _Header.from_bytes(buf.read(_Header.SIZE))
    if header.version == _TZifVersion.V1.version:
        header.validate_datablock()
        return TimezoneInfo(_read_datablock(header, _TZifVersion.V1, buf))

    # Skip the v1 data block, the v2+ block has the same data with 64-bit times
    buf.read(header.datablock_size(_TZifVersion.V1))
    header = _Header.from_bytes(buf.read(_Header.SIZE))
    header.validate_datablock()
    transitions = _read_datablock(header, _TZifVersion.V2, buf)

    # V2+ footer
    footer = buf.read()
    parts = footer.decode("UTF-8").split("\n")
    if len(parts) != 3:
        raise ValueError("Failed to read TZ footer")
    rule = None
    if parts[1]:
        _LOGGER.debug("Parsing TZ footer rule: %s", parts[1])
        rule = parse_tz_rule(parts[1])
    return TimezoneInfo(transitions, rule=rule)
