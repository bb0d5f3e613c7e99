"""
Design (models.py)
- Purpose: Define simple, typed data structures for domain entities (targets, listeners,
           monitor state, configured ports, event records).
- Inputs: Field values.
- Outputs: Dataclass instances.
- Side effects: None.
- Thread-safety: Dataclasses are plain containers; Registry and ReachabilityMonitor protect
                 concurrent access to the mutable ones.
"""

import socket
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Target:
    """
    Design (Target)
    - Purpose: A host/port pair to probe. Frozen so it cannot change once a monitor uses it.
    """
    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class PortConfigEntry:
    """
    Design (PortConfigEntry)
    - Purpose: One configured port and its label.
    - Fields:
        port: positive port number, or None / non-positive for the disabled sentinel.
        label: descriptive name shown in console output (e.g. "CLS").
    """
    port: Optional[int]
    label: str

    @property
    def enabled(self) -> bool:
        return self.port is not None and self.port > 0


@dataclass
class MonitorState:
    """
    Design (MonitorState)
    - Purpose: Debounced reachability of one target.
    - Fields:
        target: the monitored Target.
        consecutive_failures: failed probes since the last success (>= 0).
        online: False once consecutive_failures reaches the threshold.
    - Thread-safety: Owned by ReachabilityMonitor; only copies leave it.
    """
    target: Target
    consecutive_failures: int = 0
    online: bool = True


@dataclass
class ListenerEntry:
    """
    Design (ListenerEntry)
    - Purpose: One live listener owned by the Registry.
    - Fields:
        port, label: what was requested.
        acceptor: the bound, listening socket.
        stop_event: cancellation handle polled by the accept loop.
        thread: the accept loop thread (set once started).
    """
    port: int
    label: str
    acceptor: socket.socket
    stop_event: threading.Event = field(default_factory=threading.Event)
    thread: Optional[threading.Thread] = None


@dataclass(frozen=True)
class EventRecord:
    """
    Design (EventRecord)
    - Purpose: One diagnostic record for the observability sink.
    - Fields:
        kind: "check", "start", "stop", "bind_error", "conflict", "not_found",
              "accept", "accept_error".
        subject: target ("host:port") or port number as text.
        result: short outcome ("ok", "failed", "online", remote address, error text...).
        counters: extra numeric/boolean fields (consecutive_failures, online, ...).
    """
    kind: str
    subject: str
    result: str
    counters: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now().strftime("%Y-%m-%d %H:%M:%S"))

    def format(self) -> str:
        extra = " ".join(f"{k}={v}" for k, v in self.counters.items())
        line = f"[{self.timestamp}] {self.kind} {self.subject} {self.result}"
        return f"{line} {extra}" if extra else line
