"""
Design (registry.py)
- Purpose: Own every live listener behind a tiny API (and a lock), so the dispatcher never touches
           sockets or threads directly.
- Inputs: Port numbers and labels.
- Outputs: ListenerEntry on start; snapshots (copies) of the active ports.
- Side effects: Binds/closes listening sockets, starts accept threads, emits events.
- Thread-safety: Every existence check and mutation of _entries happens under _lock, including the
                 bind, so two starts of one port cannot double-bind. Events are emitted and
                 threads joined after the lock is released.
"""

import os
import socket
import threading
from typing import Dict, List, Optional

from .config import ACCEPT_JOIN_TIMEOUT_SEC, ACCEPT_POLL_SEC, LOOPBACK_HOST
from .errors import BindError, ConflictError, NotFoundError
from .events import EventLog
from .listener import AcceptLoop
from .models import ListenerEntry


class Registry:
    """
    Design (Registry)
    - State:
        _entries: {port -> ListenerEntry}
        _lock: threading.Lock protecting _entries
    """

    def __init__(
        self,
        events: EventLog,
        host: str = LOOPBACK_HOST,
        poll_interval: float = ACCEPT_POLL_SEC,
        join_timeout: float = ACCEPT_JOIN_TIMEOUT_SEC,
    ) -> None:
        self.events = events
        self.host = host
        self.poll_interval = poll_interval
        self.join_timeout = join_timeout
        self._lock = threading.Lock()
        self._entries: Dict[int, ListenerEntry] = {}

    # -------- Start / stop --------

    def start(self, port: int, label: str) -> ListenerEntry:
        """
        Purpose: Bind and listen on `port`, then launch its accept loop.
        Outputs: The new ListenerEntry (returned without waiting for any connection).
        Raises: ConflictError if the port is already registered (entry unchanged);
                BindError if the port is out of range or bind/listen fails.
        """
        with self._lock:
            existing = port in self._entries
            error = None
            entry = None
            if not existing:
                try:
                    acceptor = self._open_acceptor(port)
                except (OSError, OverflowError, TypeError, ValueError) as e:
                    error = BindError(port, _reason(e))
                else:
                    entry = ListenerEntry(port=port, label=label, acceptor=acceptor)
                    self._entries[port] = entry
                    AcceptLoop(entry, self.events, self.poll_interval).start()

        if existing:
            self.events.emit("conflict", port, "already running", label=label)
            raise ConflictError(port)
        if error is not None:
            self.events.emit("bind_error", port, error.reason, label=label)
            raise error
        self.events.emit("start", port, "listening", label=label)
        return entry

    def stop(self, port: int) -> None:
        """
        Purpose: Cancel the port's accept loop, close its acceptor and forget the entry.
        Raises: NotFoundError if the port has no live listener.
        """
        with self._lock:
            entry = self._entries.pop(port, None)
            if entry is not None:
                entry.stop_event.set()
                entry.acceptor.close()

        if entry is None:
            self.events.emit("not_found", port, "not running")
            raise NotFoundError(port)

        thread = entry.thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(self.join_timeout)
        self.events.emit("stop", port, "stopped", label=entry.label)

    def stop_all(self) -> List[int]:
        """Stop every live listener; returns the ports stopped. Safe to call repeatedly."""
        stopped = []
        for port in self.ports():
            try:
                self.stop(port)
            except NotFoundError:
                # Stopped concurrently by someone else
                continue
            stopped.append(port)
        return stopped

    # -------- Snapshots for safe reading --------

    def ports(self) -> List[int]:
        with self._lock:
            return list(self._entries)

    def get(self, port: int) -> Optional[ListenerEntry]:
        with self._lock:
            return self._entries.get(port)

    def snapshot(self) -> Dict[int, str]:
        """port -> label for every live listener."""
        with self._lock:
            return {p: e.label for p, e in self._entries.items()}

    def __contains__(self, port) -> bool:
        with self._lock:
            return port in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # -------- Helpers --------

    def _open_acceptor(self, port: int) -> socket.socket:
        if isinstance(port, bool) or not isinstance(port, int) or not (1 <= port <= 65535):
            raise ValueError(f"port must be 1-65535, got {port!r}")
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            if os.name == "nt":
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_EXCLUSIVEADDRUSE, 1)
            else:
                # Lets a stopped port be reopened while old connections sit in TIME_WAIT
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, port))
            sock.listen()
            sock.setblocking(False)
        except BaseException:
            sock.close()
            raise
        return sock


def _reason(exc: BaseException) -> str:
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc) or type(exc).__name__
