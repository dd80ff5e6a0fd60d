"""Exceptions raised while decoding or encoding capture streams.

Failures of the wrapped source or sink are not translated: the ``OSError``
raised by the underlying stream reaches the caller unchanged.
"""

from __future__ import annotations


class PcapError(Exception):
    """Base class for capture codec errors."""


class UnknownMagicNumberError(PcapError):
    """Raised when a stream does not start with a recognized magic number."""

    def __init__(self, magic: bytes) -> None:
        self.magic = bytes(magic)
        super().__init__(f"Unknown pcap magic number: {self.magic.hex() or '<empty>'}")


class TruncatedError(PcapError):
    """Raised when the stream ends partway through a structure."""

    def __init__(self, expected: int, received: int, context: str = "data") -> None:
        self.expected = expected
        self.received = received
        self.context = context
        super().__init__(
            f"Truncated {context}: expected {expected} bytes, got {received}"
        )


class ReaderStateError(PcapError):
    """Raised when a reader is used in a state that does not allow it."""


class ReaderFailedError(ReaderStateError):
    """Raised when a reader is pulled again after a decode error."""


__all__ = [
    "PcapError",
    "ReaderFailedError",
    "ReaderStateError",
    "TruncatedError",
    "UnknownMagicNumberError",
]
