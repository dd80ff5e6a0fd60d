"""Reader and writer for the classic pcap capture file format."""

from .errors import (
    PcapError,
    ReaderFailedError,
    ReaderStateError,
    TruncatedError,
    UnknownMagicNumberError,
)
from .format import ByteCursor, ByteOrder, GlobalHeader, Record, TimestampUnit
from .reader import CaptureReader, ReaderState
from .writer import CaptureWriter

__version__ = "0.1.0"

__all__ = [
    "ByteCursor",
    "ByteOrder",
    "CaptureReader",
    "CaptureWriter",
    "GlobalHeader",
    "PcapError",
    "ReaderFailedError",
    "ReaderState",
    "ReaderStateError",
    "Record",
    "TimestampUnit",
    "TruncatedError",
    "UnknownMagicNumberError",
]
