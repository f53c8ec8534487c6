"""
Event log for itinerary and recommendation activity, one JSON object per
line in <config.LOGS_DIR>/<session_id>.jsonl.

Sessions:
    trip_<id>          ITINERARY_GENERATED, ITINERARY_WRITE
    recommendations    RECOMMENDATION_* cache and generation events
"""

from __future__ import annotations

import json
import threading
from collections import OrderedDict
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any

import config

# Trip sessions are unbounded, so only the most recently used files stay open.
MAX_OPEN_SESSIONS = 32


class StructuredLogger:

    def __init__(self, logs_dir: Path | str | None = None, max_open: int = MAX_OPEN_SESSIONS) -> None:
        self._logs_dir = Path(logs_dir) if logs_dir else config.LOGS_DIR
        self._max_open = max_open
        self._lock = threading.Lock()
        self._handles: OrderedDict[str, IO[str]] = OrderedDict()

    def log(self, session_id: str, event_type: str, payload: dict[str, Any]) -> None:
        line = json.dumps({
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "session_id": session_id,
            "event_type": event_type,
            "payload": payload,
        }, default=str, ensure_ascii=False)

        with self._lock:
            fh = self._handle_for(session_id)
            fh.write(line + "\n")
            fh.flush()

    def close(self) -> None:
        with self._lock:
            while self._handles:
                _, fh = self._handles.popitem(last=False)
                fh.close()

    @property
    def open_sessions(self) -> list[str]:
        with self._lock:
            return list(self._handles)

    def _handle_for(self, session_id: str) -> IO[str]:
        fh = self._handles.get(session_id)
        if fh is not None:
            self._handles.move_to_end(session_id)
            return fh
        if len(self._handles) >= self._max_open:
            _, oldest = self._handles.popitem(last=False)
            oldest.close()
        self._logs_dir.mkdir(parents=True, exist_ok=True)
        fh = open(self._logs_dir / f"{session_id}.jsonl", "a", encoding="utf-8")
        self._handles[session_id] = fh
        return fh


# Created lazily so tests can install their own before first use.
_event_logger: StructuredLogger | None = None


def get_event_logger() -> StructuredLogger:
    global _event_logger
    if _event_logger is None:
        _event_logger = StructuredLogger()
    return _event_logger


def set_event_logger(event_logger: StructuredLogger | None) -> None:
    """Swap the process-wide event logger, closing the one it replaces."""
    global _event_logger
    if _event_logger is not None and _event_logger is not event_logger:
        _event_logger.close()
    _event_logger = event_logger


def trip_session(trip_id: int) -> str:
    return f"trip_{trip_id}"
