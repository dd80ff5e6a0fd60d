"""Tests for record decoding, encoding and timestamp helpers."""

import io
import struct
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pcapcodec.errors import TruncatedError
from pcapcodec.format.byte_cursor import ByteCursor
from pcapcodec.format.header import ByteOrder, TimestampUnit
from pcapcodec.format.record import Record, decode_record, encode_record


def _cursor(data: bytes) -> ByteCursor:
    return ByteCursor(io.BytesIO(data))


def test_decode_big_endian_record() -> None:
    data = struct.pack(">IIII", 1, 2, 3, 9) + b"xyz"

    record = decode_record(_cursor(data), ByteOrder.BIG)

    assert record == Record(1, 2, 3, 9, b"xyz")
    assert record.is_truncated


def test_decode_returns_none_at_clean_end() -> None:
    assert decode_record(_cursor(b""), ByteOrder.LITTLE) is None


def test_zero_length_payload() -> None:
    cursor = _cursor(struct.pack("<IIII", 5, 6, 0, 60))

    record = decode_record(cursor, ByteOrder.LITTLE)

    assert record is not None
    assert record.payload == b""
    assert record.captured_length == 0
    assert record.original_length == 60
    assert decode_record(cursor, ByteOrder.LITTLE) is None


def test_partial_record_header_is_truncation() -> None:
    with pytest.raises(TruncatedError) as excinfo:
        decode_record(_cursor(b"\x01\x02\x03"), ByteOrder.LITTLE)

    assert excinfo.value.context == "record header"
    assert excinfo.value.received == 3


def test_short_payload_is_truncation() -> None:
    data = struct.pack("<IIII", 0, 0, 10, 10) + b"\x00" * 4

    with pytest.raises(TruncatedError) as excinfo:
        decode_record(_cursor(data), ByteOrder.LITTLE)

    assert excinfo.value.context == "record payload"
    assert excinfo.value.expected == 10
    assert excinfo.value.received == 4


def test_captured_length_beyond_any_snaplen_is_accepted() -> None:
    payload = bytes(range(256)) * 300
    data = struct.pack("<IIII", 0, 0, len(payload), len(payload)) + payload

    record = decode_record(_cursor(data), ByteOrder.LITTLE)

    assert record.payload == payload


def test_encode_writes_fields_in_requested_order() -> None:
    record = Record(0x01020304, 7, 2, 2, b"\xaa\xbb")
    little, big = io.BytesIO(), io.BytesIO()

    encode_record(record, little, ByteOrder.LITTLE)
    encode_record(record, big, ByteOrder.BIG)

    assert little.getvalue()[:4] == b"\x04\x03\x02\x01"
    assert big.getvalue()[:4] == b"\x01\x02\x03\x04"
    assert little.getvalue() != big.getvalue()
    assert decode_record(_cursor(little.getvalue()), ByteOrder.LITTLE) == record
    assert decode_record(_cursor(big.getvalue()), ByteOrder.BIG) == record


def test_encode_does_not_check_payload_length() -> None:
    sink = io.BytesIO()

    encode_record(Record(0, 0, 10, 10, b"ab"), sink, ByteOrder.LITTLE)

    assert len(sink.getvalue()) == 18


def test_out_of_range_fraction_is_preserved() -> None:
    record = Record(1, 2_000_000, 0, 0)
    sink = io.BytesIO()

    encode_record(record, sink, ByteOrder.LITTLE)

    assert decode_record(_cursor(sink.getvalue()), ByteOrder.LITTLE).timestamp_fraction == 2_000_000


def test_from_payload_sets_lengths() -> None:
    record = Record.from_payload(b"abcd", 10, 20, original_length=1514)

    assert record.captured_length == 4
    assert record.original_length == 1514
    assert Record.from_payload(b"").original_length == 0


def test_timestamp_helpers() -> None:
    micro = Record.from_timestamp(1000.5, b"")
    nano = Record.from_timestamp(1000.25, b"", unit=TimestampUnit.NANOSECONDS)

    assert (micro.timestamp_seconds, micro.timestamp_fraction) == (1000, 500000)
    assert (nano.timestamp_seconds, nano.timestamp_fraction) == (1000, 250000000)
    assert micro.timestamp() == pytest.approx(1000.5)
    assert nano.timestamp(TimestampUnit.NANOSECONDS) == pytest.approx(1000.25)


def test_from_timestamp_carries_rounded_fraction() -> None:
    record = Record.from_timestamp(41.9999999, b"")

    assert record.timestamp_seconds == 42
    assert record.timestamp_fraction == 0


def test_from_timestamp_rejects_negative_time() -> None:
    with pytest.raises(ValueError):
        Record.from_timestamp(-0.5, b"")


def test_from_timestamp_accepts_integral_time() -> None:
    record = Record.from_timestamp(7, b"x", unit=TimestampUnit.NANOSECONDS)

    assert (record.timestamp_seconds, record.timestamp_fraction) == (7, 0)
    assert isinstance(record.timestamp_fraction, int)
