"""One-byte look-ahead over a sequential byte source."""

from __future__ import annotations

from typing import BinaryIO, Optional

from pcapcodec.errors import TruncatedError


class ByteCursor:
    """Wrap a readable binary stream so callers can test for a clean end.

    At most one byte is held back between calls; nothing else is read ahead,
    so the wrapped stream never needs to support ``seek``.
    """

    def __init__(self, source: BinaryIO) -> None:
        self._source = source
        self._held: Optional[int] = None

    @property
    def source(self) -> BinaryIO:
        return self._source

    @property
    def holding(self) -> bool:
        return self._held is not None

    def peek_one(self) -> Optional[int]:
        """Return the next byte without consuming it, or None at end of stream."""

        if self._held is None:
            chunk = self._source.read(1)
            if chunk:
                self._held = chunk[0]
        return self._held

    def is_exhausted(self) -> bool:
        return self.peek_one() is None

    def read_exact(self, size: int, context: str = "data") -> bytes:
        """Read exactly ``size`` bytes or raise ``TruncatedError``."""

        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")

        buffer = bytearray()
        if size and self._held is not None:
            buffer.append(self._held)
            self._held = None

        while len(buffer) < size:
            chunk = self._source.read(size - len(buffer))
            if not chunk:
                raise TruncatedError(size, len(buffer), context)
            buffer.extend(chunk)

        return bytes(buffer)


__all__ = ["ByteCursor"]
