"""
Upstream byte sources and single pulls from them.
"""

import io
import logging
from pathlib import Path
from typing import Optional, Protocol, TYPE_CHECKING, Union

import zstandard as zstd

if TYPE_CHECKING:
    from .reader import PeekBuffer

logger = logging.getLogger(__name__)


class ByteSource(Protocol):
    """Protocol for sequential, forward-only byte sources."""

    def read(self, size: int = -1) -> Optional[bytes]:
        """
        Read up to size bytes.

        Args:
            size: Maximum number of bytes to return

        Returns:
            The bytes read, empty at end of stream
        """
        ...


def pull_into(source: ByteSource, view: memoryview) -> int:
    """
    Perform a single pull from the source into view.

    Sources offering readinto() fill the view directly, other sources are
    read with read() and copied in.

    Args:
        source: The upstream source
        view: Writable buffer to fill

    Returns:
        Number of bytes obtained, 0 at end of stream

    Raises:
        BlockingIOError: If a non-blocking source has no data available
    """
    readinto = getattr(source, 'readinto', None)
    if readinto is not None:
        n = readinto(view)
    else:
        data = source.read(len(view))
        n = None if data is None else len(data)
        if n:
            view[:n] = data

    if n is None:
        raise BlockingIOError("Source has no data available")
    return n


def open_source(path: Union[str, Path], buffer_size: int = 8 * 4096) -> 'PeekBuffer':
    """
    Open a file as a peekable sequential source.

    Files ending in .zst are decompressed on the fly.

    Args:
        path: Path to the file
        buffer_size: Size of the read buffer (default: 32KB)

    Returns:
        PeekBuffer over the (decompressed) file contents. Close its source
        when done.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    from .reader import PeekBuffer

    path = Path(path)
    if path.suffix == '.zst':
        file_handle = open(path, 'rb')
        dctx = zstd.ZstdDecompressor()
        decompressed = dctx.stream_reader(file_handle, read_size=buffer_size)
        logger.debug(f"Opened {path} with zstd decompression")
        return PeekBuffer(io.BufferedReader(decompressed, buffer_size=buffer_size))

    logger.debug(f"Opened {path}")
    return PeekBuffer(open(path, 'rb', buffering=buffer_size))
