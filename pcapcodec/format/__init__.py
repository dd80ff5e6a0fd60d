"""Wire-level building blocks of the classic pcap format."""

from .byte_cursor import ByteCursor
from .header import ByteOrder, GlobalHeader, TimestampUnit
from .record import Record, decode_record, encode_record

__all__ = [
    "ByteCursor",
    "ByteOrder",
    "GlobalHeader",
    "Record",
    "TimestampUnit",
    "decode_record",
    "encode_record",
]
