"""peekbuffer - Sequential byte reader with peeking support."""

from .reader import PeekBuffer, FILL_SIZE
from .full import UnexpectedEOFError, read_full, readinto_full
from .source import ByteSource, open_source, pull_into

__all__ = [
    'PeekBuffer', 'FILL_SIZE', 'UnexpectedEOFError', 'read_full', 'readinto_full',
    'ByteSource', 'open_source', 'pull_into',
]

__version__ = "0.1.0"
