"""
Background reachability worker.

Design:
- Runs in its own thread so the command console stays responsive.
- Every cycle:
    1) Probe the target once with the short health-check timeout.
    2) Success resets the failure counter; failure increments it.
    3) online = failures < threshold, so a single blip never flips the status.
    4) Always emit a per-check event so the log shows every probe.
    5) On an online/offline transition, call notify (desktop notification in main).
- Methods:
    start(): begin the daemon thread
    stop(): signal the thread to stop and wait briefly for it
    check_once(): run one evaluation synchronously (used by the loop and by tests)
- Thread-safety: State lives behind a lock; readers get copies or single booleans.
"""

import copy
import threading
from typing import Callable, Optional

from loguru import logger

from .config import FAILURE_THRESHOLD, HEALTH_CHECK_TIMEOUT_SEC, MONITOR_INTERVAL_SEC
from .events import EventLog
from .models import MonitorState, Target
from .probe import probe


class ReachabilityMonitor:
    def __init__(
        self,
        target: Target,
        events: EventLog,
        interval: float = MONITOR_INTERVAL_SEC,
        threshold: int = FAILURE_THRESHOLD,
        timeout: float = HEALTH_CHECK_TIMEOUT_SEC,
        probe_fn: Callable[[str, int, float], bool] = probe,
        notify: Optional[Callable[[Target, bool], None]] = None,
    ):
        if threshold < 1:
            raise ValueError("threshold must be >= 1")
        self.events = events
        self.interval = interval
        self.threshold = threshold
        self.timeout = timeout
        self.probe_fn = probe_fn
        self.notify = notify
        self._lock = threading.Lock()
        self._state = MonitorState(target=target)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def target(self) -> Target:
        return self._state.target

    def start(self) -> None:
        if self._thread and self._thread.is_alive() and not self._stop.is_set():
            return
        # Fresh event per run: a thread still finishing a slow probe keeps its own (set) event
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._loop, args=(self._stop,), name="reachability-monitor", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        self._stop.set()
        thread = self._thread
        if thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout)

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def is_online(self) -> bool:
        with self._lock:
            return self._state.online

    def snapshot(self) -> MonitorState:
        with self._lock:
            return copy.copy(self._state)

    def check_once(self) -> MonitorState:
        """
        Purpose: Probe once and update the debounced state.
        Outputs: Copy of the state after this check.
        Side effects: Emits one "check" event; may call notify on a transition.
        """
        target = self.target
        try:
            ok = bool(self.probe_fn(target.host, target.port, self.timeout))
        except Exception as e:
            logger.warning("Probe of {} raised: {}", target, e)
            ok = False

        with self._lock:
            if ok:
                self._state.consecutive_failures = 0
            else:
                self._state.consecutive_failures += 1
            was_online = self._state.online
            self._state.online = self._state.consecutive_failures < self.threshold
            state = copy.copy(self._state)

        self.events.emit(
            "check",
            target,
            "ok" if ok else "failed",
            consecutive_failures=state.consecutive_failures,
            online=state.online,
        )

        if was_online != state.online and self.notify is not None:
            try:
                self.notify(target, state.online)
            except Exception as e:
                logger.error("Notification failed: {}", e)
        return state

    def _loop(self, stop: threading.Event) -> None:
        while not stop.is_set():
            self.check_once()
            stop.wait(self.interval)
