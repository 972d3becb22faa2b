from __future__ import annotations
from typing import Any

from .capabilities import SegmentIO, WHITELIST
from .errors import InvalidSeekError, MarkerNotFoundError, SegmentError, UnsupportedOperationError
from .marker import DEFAULT_MARKER, find_marker
from .segment import OffsetFile, write_segment

open_segment = OffsetFile.open

def read_segment(path, **options: Any) -> bytes:
    """Return the whole data segment of path."""
    return OffsetFile.read_all(path, **options)

__all__ = [
    "OffsetFile",
    "SegmentIO",
    "WHITELIST",
    "DEFAULT_MARKER",
    "open_segment",
    "read_segment",
    "write_segment",
    "find_marker",
    "SegmentError",
    "InvalidSeekError",
    "UnsupportedOperationError",
    "MarkerNotFoundError",
]
