"""Writer emitting classic pcap streams."""

from __future__ import annotations

from typing import BinaryIO, Iterable, Optional

from pcapcodec.format.header import GlobalHeader
from pcapcodec.format.record import Record, encode_record
from pcapcodec.logging_utils import get_logger

LOGGER = get_logger(__name__)


class CaptureWriter:
    """Write a global header followed by any number of records.

    The header goes out as soon as the writer is created and its byte order
    is used for every record afterwards. The sink is neither flushed nor
    closed here; that belongs to whoever opened it.
    """

    def __init__(self, sink: BinaryIO, header: Optional[GlobalHeader] = None) -> None:
        self._sink = sink
        self.header = header if header is not None else GlobalHeader()
        self._records_written = 0
        self.header.write(sink)
        LOGGER.debug("Wrote global header %s", self.header)

    @property
    def sink(self) -> BinaryIO:
        return self._sink

    @property
    def records_written(self) -> int:
        return self._records_written

    def write_record(self, record: Record) -> None:
        encode_record(record, self._sink, self.header.byte_order)
        self._records_written += 1

    def write_records(self, records: Iterable[Record]) -> int:
        count = 0
        for record in records:
            self.write_record(record)
            count += 1
        return count


__all__ = ["CaptureWriter"]
