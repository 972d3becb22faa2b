from __future__ import annotations
from typing import Any, Callable, Dict, Optional

ProgressCallback = Callable[[Dict[str, Any]], None]

class Progress:
    """
    Thin wrapper around an optional on_progress callback.
    Events are dicts: {"phase": str, "pct": int, "msg": str}.
    """
    def __init__(self, callback: Optional[ProgressCallback] = None, step: int = 5) -> None:
        self._cb = callback
        self._step = step
        self._last: Dict[str, int] = {}
        self._last_msg: Dict[str, str] = {}

    @property
    def enabled(self) -> bool:
        return self._cb is not None

    def emit(self, phase: str, pct: int, msg: str = "") -> None:
        if self._cb is None:
            return
        pct = max(0, min(100, int(pct)))
        prev = self._last.get(phase, -1)
        # Always report start and end; throttle everything in between
        if pct not in (0, 100) and prev >= 0 and pct - prev < self._step:
            return
        if pct == prev and msg == self._last_msg.get(phase, ""):
            return
        self._last[phase] = pct
        self._last_msg[phase] = msg
        self._cb({"phase": phase, "pct": pct, "msg": msg})

    def update(self, phase: str, done: int, total: int, msg: str = "") -> None:
        if total <= 0:
            return
        self.emit(phase, done * 100 // total, msg)
