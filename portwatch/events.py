"""
Design (events.py)
- Purpose: Observability sink. Every reachability check and every listener event becomes one
           EventRecord, kept in a bounded in-memory buffer and written to the log.
- Inputs: EventRecords from the monitor and the registry/accept loops.
- Outputs: records() copies for inspection; optional subscriber callbacks.
- Side effects: Logs each record via loguru (stderr, so operator output on stdout stays clean).
- Thread-safety: emit/records/subscribe take the internal lock; subscribers are called outside it.
"""

import sys
import threading
from collections import deque
from typing import Callable, List, Optional

from loguru import logger

from .config import LOG_MAX_LINES
from .models import EventRecord

# Record kinds that indicate something went wrong
_WARNING_KINDS = {"bind_error", "conflict", "not_found", "accept_error"}


def configure_logging(level: str = "INFO") -> None:
    """Send loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


class EventLog:
    def __init__(self, max_records: int = LOG_MAX_LINES) -> None:
        self._lock = threading.Lock()
        self._records: deque = deque(maxlen=max_records)
        self._subscribers: List[Callable[[EventRecord], None]] = []

    def subscribe(self, fn: Callable[[EventRecord], None]) -> None:
        with self._lock:
            self._subscribers.append(fn)

    def emit(self, kind: str, subject, result: str, **counters) -> EventRecord:
        record = EventRecord(kind=kind, subject=str(subject), result=result, counters=counters)
        with self._lock:
            self._records.append(record)
            subscribers = list(self._subscribers)

        if kind in _WARNING_KINDS or (kind == "check" and not counters.get("online", True)):
            logger.warning(record.format())
        else:
            logger.debug(record.format())

        for fn in subscribers:
            try:
                fn(record)
            except Exception as e:
                logger.error("Event subscriber failed: {}", e)
        return record

    def records(self, kind: Optional[str] = None) -> List[EventRecord]:
        """Return a copy of buffered records, optionally filtered by kind (oldest first)."""
        with self._lock:
            items = list(self._records)
        if kind is None:
            return items
        return [r for r in items if r.kind == kind]

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
