from __future__ import annotations
import io
from datetime import datetime
from typing import Any, FrozenSet, Iterable, Iterator, List, Optional, Protocol, Union, runtime_checkable

Writable = Union[bytes, bytearray, memoryview, str]

# Public surface of OffsetFile. Anything else the underlying stream offers
# is blocked, since it would see absolute positions.
READ_OPS = ("read", "readline", "readlines", "__iter__", "iter_bytes", "getc", "gets", "readchar")
WRITE_OPS = ("write", "writelines", "puts", "putc", "print", "printf", "flush")
META_OPS = ("ctime", "atime", "mtime")
LIFECYCLE_OPS = ("close", "closed", "__enter__", "__exit__")
OFFSET_OPS = ("seek", "tell", "pos", "truncate")
INFO_OPS = ("name", "mode", "marker", "encoding", "segment_offset")

WHITELIST: FrozenSet[str] = frozenset(READ_OPS + WRITE_OPS + META_OPS + LIFECYCLE_OPS + OFFSET_OPS + INFO_OPS)

BLOCKED: FrozenSet[str] = frozenset(
    name for name in dir(io.BufferedRandom)
    if not name.startswith("_") and name not in WHITELIST
)

@runtime_checkable
class SegmentIO(Protocol):
    """
    Operations permitted on a data segment. Positions are logical:
    0 is the first byte after the marker line.
    """

    def read(self, size: int = -1) -> bytes: ...
    def readline(self, size: int = -1) -> bytes: ...
    def readlines(self, hint: int = -1) -> List[bytes]: ...
    def __iter__(self) -> Iterator[bytes]: ...
    def iter_bytes(self) -> Iterator[int]: ...
    def getc(self) -> Optional[bytes]: ...
    def gets(self) -> Optional[bytes]: ...
    def readchar(self) -> bytes: ...

    def write(self, data: Writable) -> int: ...
    def writelines(self, lines: Iterable[Writable]) -> None: ...
    def puts(self, *objects: Any) -> None: ...
    def putc(self, ch: Union[int, Writable]) -> Union[int, Writable]: ...
    def print(self, *objects: Any) -> None: ...
    def printf(self, fmt: str, *args: Any) -> None: ...
    def flush(self) -> None: ...

    def ctime(self) -> datetime: ...
    def atime(self) -> datetime: ...
    def mtime(self) -> datetime: ...

    def close(self) -> None: ...
    @property
    def closed(self) -> bool: ...

    def seek(self, offset: int = 0, whence: int = io.SEEK_SET) -> int: ...
    def tell(self) -> int: ...
    @property
    def pos(self) -> int: ...
    def truncate(self, size: int = 0) -> int: ...
