from __future__ import annotations
import io
import logging
import os
from datetime import datetime
from typing import Any, Callable, Iterable, Iterator, List, Optional, TypeVar, Union

from .capabilities import BLOCKED, Writable
from .errors import InvalidSeekError, MarkerNotFoundError, UnsupportedOperationError
from .marker import DEFAULT_MARKER, normalize_marker, scan_for_marker
from .progress import Progress, ProgressCallback

logger = logging.getLogger(__name__)

T = TypeVar("T")
PathLike = Union[str, "os.PathLike[str]"]

def _logical_mode(mode: str) -> str:
    if not isinstance(mode, str) or not mode or mode[0] not in "rwa" or any(c not in "+bt" for c in mode[1:]):
        raise ValueError(f"invalid mode: {mode!r}")
    return mode[0]

class OffsetFile:
    """
    File view that starts after the marker line (``__END__`` by default).

    Everything up to and including the marker is header and stays hidden:
    positions passed to and returned from seek/tell/truncate are relative to
    the first byte after the marker. If the file has no marker yet, one is
    appended on open (preceded by a newline when the file does not end in one).

    Mode only decides where the segment starts out: "r" at 0, "w" emptied,
    "a" at the end. The file itself is always opened read/write.
    """
    __slots__ = ("_fh", "_offset", "_marker", "_mode", "_encoding", "_name")

    def __init__(
        self,
        path: PathLike,
        mode: str = "r",
        *,
        marker: Union[bytes, str] = DEFAULT_MARKER,
        create_marker: bool = True,
        encoding: str = "utf-8",
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        kind = _logical_mode(mode)
        self._marker = normalize_marker(marker)
        self._mode = mode
        self._encoding = encoding
        self._name = os.fspath(path)
        self._fh = open(path, "r+b")
        try:
            self._offset = self._discover(create_marker, Progress(on_progress))
            if kind == "w":
                self.truncate(0)
            elif kind == "a":
                self._fh.seek(0, io.SEEK_END)
            else:
                self._fh.seek(self._offset)
        except BaseException:
            self._fh.close()
            raise

    def _discover(self, create_marker: bool, progress: Progress) -> int:
        fh = self._fh
        res = scan_for_marker(fh, self._marker, progress)
        if res.found:
            logger.debug("%s: data segment starts at %d", self._name, res.consumed)
            return res.consumed
        if not create_marker:
            raise MarkerNotFoundError(f"{self._name}: no {self._marker.decode('utf-8', 'replace')} line")

        # fh sits at EOF after the scan
        offset = res.consumed
        if res.last_line == self._marker:
            # Last line is the marker without its newline: complete it
            fh.write(b"\n")
            offset += 1
        else:
            if res.last_line and not res.last_line.endswith(b"\n"):
                fh.write(b"\n")
                offset += 1
            fh.write(self._marker + b"\n")
            offset += len(self._marker) + 1
        fh.flush()
        logger.debug("%s: marker appended, data segment starts at %d", self._name, offset)
        return offset

    @classmethod
    def open(
        cls,
        path: PathLike,
        mode: Union[str, Callable[["OffsetFile"], T]] = "r",
        work: Optional[Callable[["OffsetFile"], T]] = None,
        **options: Any,
    ) -> Union["OffsetFile", T]:
        """
        Without work, return the open file; the caller closes it (or uses ``with``).
        With work, call work(fh), close fh however work exits, and return its result.
        work may also take the place of mode: open(path, work) reads in "r" mode.
        """
        if callable(mode):
            if work is not None:
                raise TypeError("work given twice")
            mode, work = "r", mode
        fh = cls(path, mode, **options)
        if work is None:
            return fh
        try:
            return work(fh)
        finally:
            fh.close()

    @classmethod
    def read_all(cls, path: PathLike, **options: Any) -> bytes:
        with cls(path, "r", **options) as fh:
            return fh.read()

    # ----- Offset-aware positioning -----

    @property
    def segment_offset(self) -> int:
        return self._offset

    def seek(self, offset: int = 0, whence: int = io.SEEK_SET) -> int:
        if offset < 0:
            raise InvalidSeekError(f"negative seek offset {offset} is not supported")
        if whence != io.SEEK_SET:
            raise InvalidSeekError("only io.SEEK_SET is supported")
        return self._fh.seek(self._offset + offset) - self._offset

    def tell(self) -> int:
        return self._fh.tell() - self._offset

    @property
    def pos(self) -> int:
        return self.tell()

    def truncate(self, size: int = 0) -> int:
        """
        Cut the data segment to size bytes, counted from its start
        (not from the current position), and move there. Returns 0.
        """
        if size < 0:
            raise InvalidSeekError(f"negative truncate size {size} is not supported")
        self._fh.truncate(self._offset + size)
        self.seek(size)
        logger.debug("%s: data segment truncated to %d bytes", self._name, size)
        return 0

    # ----- Reads -----

    def read(self, size: int = -1) -> bytes:
        return self._fh.read(size)

    def readline(self, size: int = -1) -> bytes:
        return self._fh.readline(size)

    def readlines(self, hint: int = -1) -> List[bytes]:
        return self._fh.readlines(hint)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._fh.readline, b"")

    def iter_bytes(self) -> Iterator[int]:
        # One byte per read so the position tracks what was yielded
        while True:
            b = self._fh.read(1)
            if not b:
                return
            yield b[0]

    def gets(self) -> Optional[bytes]:
        return self._fh.readline() or None

    def getc(self) -> Optional[bytes]:
        return self._fh.read(1) or None

    def readchar(self) -> bytes:
        b = self._fh.read(1)
        if not b:
            raise EOFError("end of data segment")
        return b

    # ----- Writes -----

    def _to_bytes(self, obj: Any) -> bytes:
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return bytes(obj)
        if not isinstance(obj, str):
            obj = str(obj)
        return obj.encode(self._encoding)

    def write(self, data: Writable) -> int:
        return self._fh.write(self._to_bytes(data))

    def writelines(self, lines: Iterable[Writable]) -> None:
        for line in lines:
            self.write(line)

    def puts(self, *objects: Any) -> None:
        """Write each object on its own line; a bare call writes a newline."""
        if not objects:
            self._fh.write(b"\n")
            return
        for obj in objects:
            if isinstance(obj, (list, tuple)):
                self.puts(*obj)
                continue
            data = b"" if obj is None else self._to_bytes(obj)
            self._fh.write(data if data.endswith(b"\n") else data + b"\n")

    def putc(self, ch: Union[int, Writable]) -> Union[int, Writable]:
        if isinstance(ch, int):
            self._fh.write(bytes([ch & 0xFF]))
        else:
            first = ch[:1] if isinstance(ch, str) else bytes(ch)[:1]
            self._fh.write(self._to_bytes(first))
        return ch

    def print(self, *objects: Any) -> None:
        for obj in objects:
            self.write(obj)

    def printf(self, fmt: Union[str, bytes], *args: Any) -> None:
        self.write(fmt % args)

    def flush(self) -> None:
        self._fh.flush()

    # ----- Metadata -----

    def _stat(self) -> os.stat_result:
        return os.fstat(self._fh.fileno())

    def ctime(self) -> datetime:
        return datetime.fromtimestamp(self._stat().st_ctime)

    def atime(self) -> datetime:
        return datetime.fromtimestamp(self._stat().st_atime)

    def mtime(self) -> datetime:
        return datetime.fromtimestamp(self._stat().st_mtime)

    @property
    def name(self) -> str:
        return self._name

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def marker(self) -> bytes:
        return self._marker

    @property
    def encoding(self) -> str:
        return self._encoding

    # ----- Lifecycle -----

    def close(self) -> None:
        self._fh.close()

    @property
    def closed(self) -> bool:
        return self._fh.closed

    def __enter__(self) -> "OffsetFile":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not defined above
        if name in BLOCKED:
            raise UnsupportedOperationError(
                f"{type(self).__name__}.{name} is not available: "
                "raw stream access would bypass the data segment offset"
            )
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"pos={self.tell()}"
        return f"<{type(self).__name__} {self._name!r} mode={self._mode!r} offset={self._offset} {state}>"


def write_segment(path: PathLike, data: Writable, **options: Any) -> int:
    """Replace the data segment of path with data. Returns bytes written."""
    with OffsetFile(path, "w", **options) as fh:
        return fh.write(data)
