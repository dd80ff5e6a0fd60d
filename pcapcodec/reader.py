"""Pull-style reader for classic pcap streams."""

from __future__ import annotations

from enum import Enum
from typing import BinaryIO, Iterator, Optional

from pcapcodec.errors import PcapError, ReaderFailedError, ReaderStateError
from pcapcodec.format.byte_cursor import ByteCursor
from pcapcodec.format.header import GlobalHeader
from pcapcodec.format.record import Record, decode_record
from pcapcodec.logging_utils import get_logger

LOGGER = get_logger(__name__)


class ReaderState(Enum):
    INIT = "init"
    STREAMING = "streaming"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


class CaptureReader:
    """Decode a capture stream one record at a time.

    The global header is parsed when the reader is created, so a stream with
    a bad or missing header fails before any record is requested. Iterating
    yields ``Record`` values until the stream ends cleanly; a corrupt record
    raises, after which the reader refuses further pulls.

    Example::

        with open("capture.pcap", "rb") as handle:
            reader = CaptureReader(handle)
            for record in reader:
                print(record.timestamp(reader.header.timestamp_unit), len(record.payload))
    """

    def __init__(self, source: BinaryIO) -> None:
        self._state = ReaderState.INIT
        self._cursor = ByteCursor(source)
        self._records_read = 0
        self.header = GlobalHeader.parse(self._cursor)
        self._state = ReaderState.STREAMING

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def records_read(self) -> int:
        return self._records_read

    @property
    def source(self) -> BinaryIO:
        """The wrapped stream. Reading from it directly desynchronises the reader."""

        return self._cursor.source

    def read_record(self) -> Optional[Record]:
        """Return the next record, or None once the stream has ended cleanly."""

        if self._state is ReaderState.EXHAUSTED:
            return None
        if self._state is ReaderState.FAILED:
            raise ReaderFailedError("reader cannot continue after a decode error")

        try:
            record = decode_record(self._cursor, self.header.byte_order)
        except (PcapError, OSError) as exc:
            self._state = ReaderState.FAILED
            LOGGER.warning("Capture stream corrupt after %s records: %s", self._records_read, exc)
            raise

        if record is None:
            self._state = ReaderState.EXHAUSTED
            LOGGER.debug("Capture stream ended after %s records", self._records_read)
            return None

        self._records_read += 1
        return record

    def at_end(self) -> bool:
        """Return True if no further record follows, without consuming anything.

        A byte may be held back afterwards; ``detach`` refuses until it is
        consumed by the next pull.
        """

        if self._state is ReaderState.FAILED:
            raise ReaderFailedError("reader cannot continue after a decode error")
        if self._state is ReaderState.EXHAUSTED:
            return True
        try:
            return self._cursor.is_exhausted()
        except OSError:
            self._state = ReaderState.FAILED
            raise

    def detach(self) -> BinaryIO:
        """Stop reading and hand the wrapped stream back to the caller."""

        if self._cursor.holding:
            raise ReaderStateError("cannot detach while a look-ahead byte is pending")
        if self._state is ReaderState.STREAMING:
            self._state = ReaderState.EXHAUSTED
        return self._cursor.source

    def __iter__(self) -> Iterator[Record]:
        return self

    def __next__(self) -> Record:
        record = self.read_record()
        if record is None:
            raise StopIteration
        return record


__all__ = ["CaptureReader", "ReaderState"]
