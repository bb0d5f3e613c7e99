"""
Design (listener.py)
- Purpose: Per-port accept loop. Accepts each inbound connection, records it, closes it at once
           (this tool tests reachability, not payload exchange).
- Inputs: ListenerEntry (acceptor socket + stop event), EventLog.
- Outputs: None (runs until cancelled or the acceptor fails).
- Side effects: Accepts and closes client sockets; emits "accept" / "accept_error" events.
- Thread-safety: One AcceptLoop per thread. The Registry may close the acceptor from another
                 thread; that only happens after stop_event is set, so the loop treats any
                 socket error seen after cancellation as a normal exit.
"""

import selectors
import threading

from loguru import logger

from .config import ACCEPT_POLL_SEC
from .events import EventLog
from .models import ListenerEntry


class AcceptLoop:
    def __init__(self, entry: ListenerEntry, events: EventLog, poll_interval: float = ACCEPT_POLL_SEC):
        self.entry = entry
        self.events = events
        self.poll_interval = poll_interval

    def start(self) -> threading.Thread:
        thread = threading.Thread(target=self.run, name=f"accept-{self.entry.port}", daemon=True)
        self.entry.thread = thread
        thread.start()
        return thread

    def run(self) -> None:
        entry = self.entry
        stop = entry.stop_event
        try:
            sel = selectors.DefaultSelector()
            sel.register(entry.acceptor, selectors.EVENT_READ)
        except (OSError, ValueError) as e:
            self._fail(e)
            return

        try:
            while not stop.is_set():
                if entry.acceptor.fileno() < 0:
                    # Closed without cancellation: the selector drops it silently
                    if not stop.is_set():
                        self._fail(OSError("acceptor socket closed"))
                    return
                try:
                    ready = sel.select(self.poll_interval)
                except (OSError, ValueError) as e:
                    if not stop.is_set():
                        self._fail(e)
                    return
                if not ready or stop.is_set():
                    continue

                try:
                    conn, remote = entry.acceptor.accept()
                except (BlockingIOError, InterruptedError):
                    continue
                except (OSError, ValueError) as e:
                    if not stop.is_set():
                        self._fail(e)
                    return

                with conn:
                    self.events.emit("accept", entry.port, _format_remote(remote), label=entry.label)
        finally:
            sel.close()
        logger.debug("Accept loop on port {} exited", entry.port)

    def _fail(self, exc: BaseException) -> None:
        self.events.emit("accept_error", self.entry.port, str(exc) or type(exc).__name__, label=self.entry.label)


def _format_remote(remote) -> str:
    if isinstance(remote, tuple) and len(remote) >= 2:
        host, port = remote[0], remote[1]
        return f"[{host}]:{port}" if ":" in str(host) else f"{host}:{port}"
    return str(remote)
