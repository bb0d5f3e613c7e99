"""
Design (dispatcher.py)
- Purpose: Operator console. Parse one line at a time and drive the Registry, the monitor and
           the probe.
- Inputs: Lines of text (stdin in main), Registry, ReachabilityMonitor, configured ports.
- Outputs: Human-readable status lines through `write` (print by default).
- Side effects: Starts/stops listeners; opens short-lived probe sockets.
- Thread-safety: One dispatcher per console, never called concurrently with itself. It only issues
                 commands and reads status; it never blocks on registry or monitor internals.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from .config import LOOPBACK_HOST, MANUAL_LABEL, PORT_TEST_TIMEOUT_SEC
from .errors import BindError, ConflictError, NotFoundError
from .models import PortConfigEntry
from .monitor import ReachabilityMonitor
from .probe import probe
from .registry import Registry
from .storage import enabled_entries

START = "start"
STOP = "stop"
TEST = "test"
TEST_ALL = "test all"
STATUS = "status"
EXIT = "exit"
HELP = "help"
UNKNOWN = "unknown"

_INT_RE = re.compile(r"-?[0-9]+")

HELP_TEXT = (
    "Commands:\n"
    "  start <port>   - Start listening on a port\n"
    "  stop <port>    - Stop listening on a port\n"
    "  test <port>    - Test socket connection to port\n"
    "  test all       - Test all configured ports\n"
    "  status         - Show monitored server status\n"
    "  exit           - Exit program"
)


@dataclass(frozen=True)
class Command:
    kind: str
    port: Optional[int] = None
    text: str = ""


def parse_command(line: str) -> Command:
    """
    Purpose: Turn one console line into a Command.
    Grammar: prefix-based and case-sensitive. "stop ", "start " and "test " take an integer
             argument; when it does not parse, port is None and the command does nothing.
    """
    text = line.rstrip("\r\n")
    if text.startswith("stop "):
        return Command(STOP, _parse_int(text[5:]), text)
    if text.startswith("start "):
        return Command(START, _parse_int(text[6:]), text)
    if text.startswith("test all"):
        return Command(TEST_ALL, text=text)
    if text.startswith("test "):
        return Command(TEST, _parse_int(text[5:]), text)
    if text == "status":
        return Command(STATUS, text=text)
    if text == "exit":
        return Command(EXIT, text=text)
    if text == "help":
        return Command(HELP, text=text)
    return Command(UNKNOWN, text=text)


def _parse_int(raw: str) -> Optional[int]:
    match = _INT_RE.fullmatch(raw.strip())
    return int(match.group(0)) if match else None


class CommandDispatcher:
    def __init__(
        self,
        registry: Registry,
        monitor: ReachabilityMonitor,
        port_config: List[PortConfigEntry],
        write: Callable[[str], None] = print,
        test_host: str = LOOPBACK_HOST,
        test_timeout: float = PORT_TEST_TIMEOUT_SEC,
        probe_fn: Callable[[str, int, float], bool] = probe,
    ):
        self.registry = registry
        self.monitor = monitor
        self.port_config = list(port_config)
        self.write = write
        self.test_host = test_host
        self.test_timeout = test_timeout
        self.probe_fn = probe_fn

    def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the console should stop."""
        cmd = parse_command(line)

        if cmd.kind in (START, STOP, TEST) and cmd.port is None:
            # Recognised verb with a malformed number: silently ignored
            return True

        if cmd.kind == START:
            self.start(cmd.port, MANUAL_LABEL)
        elif cmd.kind == STOP:
            self.stop(cmd.port)
        elif cmd.kind == TEST:
            self.test(cmd.port)
        elif cmd.kind == TEST_ALL:
            self.test_all()
        elif cmd.kind == STATUS:
            self.write(f"[Server status] {'Online' if self.monitor.is_online() else 'Offline'}")
        elif cmd.kind == EXIT:
            self.registry.stop_all()
            return False
        elif cmd.kind == HELP:
            self.write(HELP_TEXT)
        elif cmd.text.strip():
            self.write("[!] Unknown command.")
        return True

    def run(self, lines: Iterable[str]) -> None:
        """Read commands until `exit`; end of input is treated as `exit`."""
        for line in lines:
            if not self.handle(line):
                return
        self.registry.stop_all()

    # -------- Commands --------

    def start(self, port: int, label: str) -> bool:
        try:
            self.registry.start(port, label)
        except ConflictError:
            self.write(f"[!] Port {port} already running.")
            return False
        except BindError as e:
            self.write(f"[X] Failed to start port {port}: {e.reason}")
            return False
        self.write(f"[+] Listening on port {port} ({label})")
        return True

    def stop(self, port: int) -> bool:
        try:
            self.registry.stop(port)
        except NotFoundError:
            self.write(f"[!] Port {port} not running.")
            return False
        self.write(f"[-] Stopped listening on port {port}")
        return True

    def test(self, port: int) -> bool:
        ok = self.probe_fn(self.test_host, port, self.test_timeout)
        if ok:
            self.write(f"[✓] Connection to port {port} succeeded.")
        else:
            self.write(f"[✗] Connection to port {port} failed.")
        return ok

    def test_all(self) -> List[bool]:
        return [self.test(entry.port) for entry in enabled_entries(self.port_config)]

    def autostart(self) -> None:
        """Start a listener for every enabled configured port, with its label."""
        for entry in enabled_entries(self.port_config):
            self.start(entry.port, entry.label)
