from __future__ import annotations
import logging
import os
from typing import BinaryIO, NamedTuple, Optional, Union

from .progress import Progress, ProgressCallback

DEFAULT_MARKER = b"__END__"

logger = logging.getLogger(__name__)

class ScanResult(NamedTuple):
    consumed: int      # bytes read, including the marker line when found
    found: bool
    last_line: bytes   # last line read (b"" for an empty file)

def normalize_marker(marker: Union[bytes, str]) -> bytes:
    if isinstance(marker, str):
        marker = marker.encode("utf-8")
    if not isinstance(marker, (bytes, bytearray)):
        raise TypeError(f"marker must be bytes or str, not {type(marker).__name__}")
    marker = bytes(marker)
    if not marker:
        raise ValueError("marker must not be empty")
    if b"\n" in marker:
        raise ValueError("marker must be a single line")
    return marker

def scan_for_marker(fh: BinaryIO, marker: bytes, progress: Optional[Progress] = None) -> ScanResult:
    """
    Read fh line by line from the start until a line equal to marker + b"\\n".
    Only whole lines count: the marker inside a longer line is header content.
    On return fh is positioned right after the last line read.
    """
    target = marker + b"\n"
    total = 0
    if progress is not None and progress.enabled:
        total = os.fstat(fh.fileno()).st_size
        progress.emit("scan", 0, "looking for marker")
    fh.seek(0)
    consumed = 0
    line = b""
    while True:
        chunk = fh.readline()
        if not chunk:
            break
        line = chunk
        consumed += len(line)
        if line == target:
            if progress is not None:
                progress.emit("scan", 100, "marker found")
            return ScanResult(consumed, True, line)
        if progress is not None and total:
            progress.update("scan", consumed, total)
    if progress is not None:
        progress.emit("scan", 100, "no marker")
    return ScanResult(consumed, False, line)

def find_marker(
    path: Union[str, "os.PathLike[str]"],
    marker: Union[bytes, str] = DEFAULT_MARKER,
    on_progress: Optional[ProgressCallback] = None,
) -> Optional[int]:
    """
    Read-only probe. Returns the offset at which the data segment of path
    starts, or None if the file has no marker line yet.
    """
    m = normalize_marker(marker)
    with open(path, "rb") as fh:
        res = scan_for_marker(fh, m, Progress(on_progress))
    if not res.found:
        logger.debug("no marker in %s", path)
        return None
    return res.consumed
