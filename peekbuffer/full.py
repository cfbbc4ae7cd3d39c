"""
Full pulls: keep pulling until the requested amount is obtained or the
source is exhausted.
"""

import logging

from .source import ByteSource, pull_into

logger = logging.getLogger(__name__)


class UnexpectedEOFError(EOFError):
    """The source ended after supplying some, but not all, requested bytes."""

    def __init__(self, expected: int, partial: bytes):
        super().__init__(f"Expected {expected} bytes, got {len(partial)}")
        self.expected = expected
        self.partial = partial


def readinto_full(source: ByteSource, view: memoryview) -> int:
    """
    Pull from the source until view is full or the source is exhausted.

    End of stream is not an error here; callers compare the returned count
    with len(view). Errors raised by the source propagate.

    Args:
        source: The upstream source
        view: Writable buffer to fill

    Returns:
        Number of bytes obtained
    """
    n = 0
    while n < len(view):
        got = pull_into(source, view[n:])
        if got == 0:
            logger.debug(f"End of stream after {n} of {len(view)} bytes")
            break
        n += got
    return n


def read_full(source: ByteSource, size: int) -> bytes:
    """
    Read exactly size bytes.

    Args:
        source: The upstream source (a PeekBuffer works too)
        size: Number of bytes to read

    Returns:
        Bytes read

    Raises:
        EOFError: If the source was already exhausted
        UnexpectedEOFError: If the source ended partway through
    """
    buf = bytearray(size)
    with memoryview(buf) as view:
        n = readinto_full(source, view)
    if n == size:
        return bytes(buf)
    if n == 0 and size > 0:
        raise EOFError("End of stream")
    raise UnexpectedEOFError(size, bytes(buf[:n]))
