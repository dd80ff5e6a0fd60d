"""Global header of a classic pcap stream."""

from __future__ import annotations

import io
import struct
import sys
from dataclasses import dataclass, replace
from enum import Enum
from typing import BinaryIO, Dict, Tuple

from pcapcodec.errors import UnknownMagicNumberError
from pcapcodec.format.byte_cursor import ByteCursor
from pcapcodec.logging_utils import get_logger

LOGGER = get_logger(__name__)

MAGIC_MICROSECONDS = 0xA1B2C3D4
MAGIC_NANOSECONDS = 0xA1B23C4D

DEFAULT_VERSION_MAJOR = 2
DEFAULT_VERSION_MINOR = 4
DEFAULT_SNAPSHOT_LENGTH = 65535
LINKTYPE_ETHERNET = 1

GLOBAL_HEADER_SIZE = 24
MAGIC_SIZE = 4


class ByteOrder(Enum):
    """Byte order of every multi-byte field in a stream.

    The value is the matching ``struct`` format prefix.
    """

    BIG = ">"
    LITTLE = "<"

    @classmethod
    def native(cls) -> "ByteOrder":
        return cls.LITTLE if sys.byteorder == "little" else cls.BIG


class TimestampUnit(Enum):
    """Resolution of the record timestamp fraction; value is ticks per second."""

    MICROSECONDS = 1_000_000
    NANOSECONDS = 1_000_000_000

    @property
    def magic_number(self) -> int:
        return MAGIC_NANOSECONDS if self is TimestampUnit.NANOSECONDS else MAGIC_MICROSECONDS


_FIELDS: Dict[ByteOrder, struct.Struct] = {
    order: struct.Struct(order.value + "HHiIII") for order in ByteOrder
}

_MAGIC_PATTERNS: Dict[bytes, Tuple[ByteOrder, TimestampUnit]] = {
    struct.pack(order.value + "I", unit.magic_number): (order, unit)
    for order in ByteOrder
    for unit in TimestampUnit
}


@dataclass(frozen=True)
class GlobalHeader:
    """The 24-byte preamble describing a capture stream."""

    byte_order: ByteOrder = ByteOrder.LITTLE
    timestamp_unit: TimestampUnit = TimestampUnit.MICROSECONDS
    version_major: int = DEFAULT_VERSION_MAJOR
    version_minor: int = DEFAULT_VERSION_MINOR
    time_zone_offset: int = 0
    timestamp_accuracy: int = 0
    snapshot_length: int = DEFAULT_SNAPSHOT_LENGTH
    link_type: int = LINKTYPE_ETHERNET

    @property
    def magic_number(self) -> int:
        return self.timestamp_unit.magic_number

    @classmethod
    def parse(cls, cursor: ByteCursor) -> "GlobalHeader":
        """Read a header from ``cursor``, discovering byte order and unit.

        Raises ``UnknownMagicNumberError`` when the first four bytes match no
        known pattern and ``TruncatedError`` when the stream ends early.
        """

        magic = cursor.read_exact(MAGIC_SIZE, "magic number")
        try:
            byte_order, unit = _MAGIC_PATTERNS[magic]
        except KeyError:
            raise UnknownMagicNumberError(magic) from None

        fields = _FIELDS[byte_order]
        raw = cursor.read_exact(fields.size, "global header")
        major, minor, tz_offset, accuracy, snaplen, link_type = fields.unpack(raw)

        header = cls(
            byte_order=byte_order,
            timestamp_unit=unit,
            version_major=major,
            version_minor=minor,
            time_zone_offset=tz_offset,
            timestamp_accuracy=accuracy,
            snapshot_length=snaplen,
            link_type=link_type,
        )
        LOGGER.debug("Parsed global header %s", header)
        return header

    @classmethod
    def from_bytes(cls, data: bytes) -> "GlobalHeader":
        return cls.parse(ByteCursor(io.BytesIO(data)))

    def write(self, sink: BinaryIO) -> None:
        sink.write(self.to_bytes())

    def to_bytes(self) -> bytes:
        prefix = self.byte_order.value
        return struct.pack(prefix + "I", self.magic_number) + _FIELDS[self.byte_order].pack(
            self.version_major,
            self.version_minor,
            self.time_zone_offset,
            self.timestamp_accuracy,
            self.snapshot_length,
            self.link_type,
        )

    def with_byte_order(self, byte_order: ByteOrder) -> "GlobalHeader":
        return replace(self, byte_order=byte_order)

    def with_timestamp_unit(self, timestamp_unit: TimestampUnit) -> "GlobalHeader":
        return replace(self, timestamp_unit=timestamp_unit)


__all__ = [
    "ByteOrder",
    "GLOBAL_HEADER_SIZE",
    "GlobalHeader",
    "LINKTYPE_ETHERNET",
    "MAGIC_MICROSECONDS",
    "MAGIC_NANOSECONDS",
    "TimestampUnit",
]
