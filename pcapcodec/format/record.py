"""Packet records and their byte-order aware codec."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import BinaryIO, Dict, Optional

from pcapcodec.format.byte_cursor import ByteCursor
from pcapcodec.format.header import ByteOrder, TimestampUnit

RECORD_HEADER_SIZE = 16

_RECORD_HEADERS: Dict[ByteOrder, struct.Struct] = {
    order: struct.Struct(order.value + "IIII") for order in ByteOrder
}


@dataclass
class Record:
    """One captured packet: timing and length metadata plus raw bytes.

    ``payload`` must hold exactly ``captured_length`` bytes. Decoded records
    always satisfy this; records built by hand are trusted to.
    """

    timestamp_seconds: int
    timestamp_fraction: int
    captured_length: int
    original_length: int
    payload: bytes = b""

    @classmethod
    def from_payload(
        cls,
        payload: bytes,
        timestamp_seconds: int = 0,
        timestamp_fraction: int = 0,
        original_length: Optional[int] = None,
    ) -> "Record":
        data = bytes(payload)
        return cls(
            timestamp_seconds=timestamp_seconds,
            timestamp_fraction=timestamp_fraction,
            captured_length=len(data),
            original_length=len(data) if original_length is None else original_length,
            payload=data,
        )

    @classmethod
    def from_timestamp(
        cls,
        ts: float,
        payload: bytes,
        unit: TimestampUnit = TimestampUnit.MICROSECONDS,
        original_length: Optional[int] = None,
    ) -> "Record":
        """Build a record from a non-negative epoch time in float seconds."""

        if ts < 0:
            raise ValueError(f"timestamp must not be negative, got {ts}")
        seconds = math.floor(ts)
        fraction = round((ts - seconds) * unit.value)
        if fraction >= unit.value:
            seconds += 1
            fraction -= unit.value
        return cls.from_payload(payload, seconds, fraction, original_length)

    @property
    def is_truncated(self) -> bool:
        return self.original_length > self.captured_length

    def timestamp(self, unit: TimestampUnit = TimestampUnit.MICROSECONDS) -> float:
        return self.timestamp_seconds + self.timestamp_fraction / unit.value


def decode_record(cursor: ByteCursor, byte_order: ByteOrder) -> Optional[Record]:
    """Decode the next record, or return None if the stream ended cleanly.

    A stream that stops at a record boundary is a normal end; one that stops
    inside a record header or payload raises ``TruncatedError``.
    """

    if cursor.is_exhausted():
        return None

    layout = _RECORD_HEADERS[byte_order]
    raw = cursor.read_exact(layout.size, "record header")
    ts_sec, ts_frac, captured_length, original_length = layout.unpack(raw)
    payload = cursor.read_exact(captured_length, "record payload")

    return Record(
        timestamp_seconds=ts_sec,
        timestamp_fraction=ts_frac,
        captured_length=captured_length,
        original_length=original_length,
        payload=payload,
    )


def encode_record(record: Record, sink: BinaryIO, byte_order: ByteOrder) -> None:
    """Write ``record`` to ``sink``; the payload is written as-is."""

    sink.write(
        _RECORD_HEADERS[byte_order].pack(
            record.timestamp_seconds,
            record.timestamp_fraction,
            record.captured_length,
            record.original_length,
        )
    )
    sink.write(record.payload)


__all__ = ["RECORD_HEADER_SIZE", "Record", "decode_record", "encode_record"]
