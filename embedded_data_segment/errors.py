from __future__ import annotations


class SegmentError(Exception):
    """Base class for data segment errors."""


class InvalidSeekError(SegmentError, ValueError):
    """Negative offset or a seek origin other than the segment start."""


class UnsupportedOperationError(SegmentError, AttributeError):
    """
    Raised on lookup of a raw stream primitive that is not part of the
    segment interface. Calling it would bypass offset translation.
    """


class MarkerNotFoundError(SegmentError, LookupError):
    """File has no marker line and creating one was not allowed."""
