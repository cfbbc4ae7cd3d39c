"""
Reader with lookahead (peek) support over a sequential byte source.
"""

import io
import logging

from .source import ByteSource, pull_into

logger = logging.getLogger(__name__)


FILL_SIZE = 4096


class PeekBuffer(io.RawIOBase):
    """
    A reader that wraps a sequential source and allows looking ahead in it.

    Bytes pulled from the source but not yet consumed are kept in a pending
    buffer. Consuming reads always drain the pending buffer first, in order,
    before going back to the source. Peeks extend the pending buffer as needed
    without advancing the read position.

    Useful when upcoming data decides how the stream gets processed, such as
    detecting file types or parsing length-prefixed records.

    The source is owned by the PeekBuffer once wrapped and must not be read
    directly anymore. Closing the PeekBuffer does not close the source.
    """

    def __init__(self, source: ByteSource, fill_size: int = FILL_SIZE):
        """
        Initialize a PeekBuffer.

        Args:
            source: The underlying sequential source
            fill_size: Unit in which the pending buffer is filled (default: 4KB)
        """
        super().__init__()
        if fill_size <= 0:
            raise ValueError(f"fill_size must be positive, got {fill_size}")
        self.source = source
        self.fill_size = fill_size
        self.pos = 0
        # Pending bytes are _buf[_start:]. _buf is replaced, never resized,
        # so views returned by peek() stay usable.
        self._buf = bytearray()
        self._start = 0

    @property
    def buffered(self) -> int:
        """Number of pending bytes pulled from the source but not yet consumed."""
        return len(self._buf) - self._start

    def readable(self) -> bool:
        return True

    def _consume(self, n: int) -> None:
        self._start += n
        self.pos += n
        if self._start == len(self._buf):
            self._buf = bytearray()
            self._start = 0

    def _fill(self, size: int, full: bool) -> None:
        """
        Pull up to size more bytes from the source onto the pending buffer.

        Whatever was obtained is kept, even if the source raises partway.

        Args:
            size: Number of bytes to request
            full: Keep pulling until size bytes are obtained or the source is
                exhausted, instead of pulling once
        """
        pending = self.buffered
        new = bytearray(pending + size)
        new[:pending] = self._buf[self._start:]
        obtained = 0
        try:
            with memoryview(new) as view:
                while obtained < size:
                    got = pull_into(self.source, view[pending + obtained:])
                    if got == 0:
                        logger.debug(f"End of stream after pulling {obtained} of {size} bytes")
                        break
                    obtained += got
                    if not full:
                        break
        finally:
            self._buf = new if obtained == size else new[:pending + obtained]
            self._start = 0
            logger.debug(f"Pulled {obtained} bytes, {self.buffered} pending")

    def readinto(self, buffer) -> int:
        """
        Read into buffer, returning pending bytes before touching the source.

        May return fewer bytes than len(buffer) even before the end of the
        stream. When nothing is pending this is a single pull from the source.

        Args:
            buffer: Writable buffer to read into

        Returns:
            Number of bytes read, 0 at end of stream
        """
        self._checkClosed()
        with memoryview(buffer) as mv, mv.cast('B') as view:
            pending = self.buffered
            if pending:
                n = min(len(view), pending)
                view[:n] = self._buf[self._start:self._start + n]
                self._consume(n)
                return n

            n = pull_into(self.source, view)
            self.pos += n
            return n

    def read_byte(self) -> int:
        """
        Read a single byte.

        When nothing is pending, a whole fill unit is pulled from the source
        so byte-by-byte reading doesn't hit the source for every byte.

        Returns:
            The byte value (0-255)

        Raises:
            EOFError: If at end of stream
        """
        self._checkClosed()
        if not self.buffered:
            self._fill(self.fill_size, full=False)
            if not self.buffered:
                raise EOFError("End of stream")
        b = self._buf[self._start]
        self._consume(1)
        return b

    def peek(self, size: int) -> memoryview:
        """
        Look ahead at the next size bytes without consuming them.

        The returned view may be shorter than size if the source has fewer
        bytes left; running out of data is not an error here. If the source
        raises any other error it propagates, and the bytes obtained before
        it stay pending.

        The view shares storage with the pending buffer: writing to it
        changes what later reads return. It is only valid until the next
        read or a peek that grows the pending buffer, so don't hold on to it.
        Use peek_bytes() for an independent copy.

        Args:
            size: Number of bytes to peek

        Returns:
            View of the peeked bytes (may be shorter than size at end of stream)
        """
        self._checkClosed()
        if size < 0:
            raise ValueError(f"Peek size must be non-negative, got {size}")

        need = size - self.buffered
        if need > 0:
            # Round up to a multiple of the fill unit
            rounded = -(-need // self.fill_size) * self.fill_size
            try:
                self._fill(rounded, full=True)
            except EOFError:
                logger.debug("Source raised end of stream while peeking")

        have = min(size, self.buffered)
        return memoryview(self._buf)[self._start:self._start + have]

    def peek_bytes(self, size: int) -> bytes:
        """Like peek(), but return a copy that is safe to keep."""
        return bytes(self.peek(size))

    def peek_byte(self, offset: int) -> int:
        """
        Look ahead at the byte at offset without consuming anything.

        Args:
            offset: Offset from the current position

        Returns:
            The byte value (0-255)

        Raises:
            EOFError: If the stream ends before offset
        """
        if offset < 0:
            raise ValueError(f"Peek offset must be non-negative, got {offset}")
        peeked = self.peek(offset + 1)
        if offset >= len(peeked):
            raise EOFError(f"End of stream before offset {offset}")
        return peeked[offset]

    def discard(self, n: int) -> int:
        """
        Skip n bytes.

        Args:
            n: Number of bytes to discard

        Returns:
            Number of bytes actually discarded, less than n only at end of stream
        """
        if n < 0:
            raise ValueError(f"Discard count must be non-negative, got {n}")
        discarded = min(n, self.buffered)
        self._consume(discarded)
        while discarded < n:
            chunk = self.read(min(n - discarded, self.fill_size))
            if not chunk:
                break
            discarded += len(chunk)
        return discarded

    def readline(self, size: int = -1) -> bytes:
        """
        Read up to and including the next newline, or at most size bytes.

        Overridden because the io default expects peek() to return bytes.
        """
        self._checkClosed()
        line = bytearray()
        while size < 0 or len(line) < size:
            if not self.buffered:
                self._fill(self.fill_size, full=False)
                if not self.buffered:
                    break
            limit = len(self._buf)
            if size >= 0:
                limit = min(limit, self._start + size - len(line))
            end = self._buf.find(b'\n', self._start, limit)
            stop = limit if end < 0 else end + 1
            line += self._buf[self._start:stop]
            self._consume(stop - self._start)
            if end >= 0:
                break
        return bytes(line)
