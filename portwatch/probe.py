"""
Design (probe.py)
- Purpose: One bounded TCP connect attempt (non-blocking connect + select on writability).
- Inputs: host, port, timeout (seconds).
- Outputs: True iff the connection completed with no socket error inside the timeout.
- Side effects: Opens and always closes one socket per probe.
- Thread-safety: Stateless; safe to call from any thread.
"""

import errno
import select
import socket
from typing import Iterable, List, Tuple

# connect_ex results that mean "connection still in progress"
_IN_PROGRESS = {0, errno.EINPROGRESS, errno.EWOULDBLOCK, errno.EALREADY, getattr(errno, "WSAEWOULDBLOCK", 10035)}


def probe(host: str, port: int, timeout: float) -> bool:
    """
    Purpose: Test whether host:port accepts a TCP connection within `timeout` seconds.
    Outputs: True on connect; False on refusal, unreachable, timeout, bad address or bad port.
    Side Effects: None beyond the short-lived socket.
    """
    try:
        port = int(port)
        timeout = max(float(timeout), 0.0)
        if not (1 <= port <= 65535):
            return False
        family, socktype, proto, _, addr = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)[0]
    except (OSError, ValueError, TypeError, UnicodeError):
        return False

    try:
        with socket.socket(family, socktype, proto) as sock:
            sock.setblocking(False)
            rc = sock.connect_ex(addr)
            if rc not in _IN_PROGRESS:
                return False
            # Writable (or exceptional, on Windows) means the connect finished either way
            _, writable, errored = select.select([], [sock], [sock], timeout)
            if not writable and not errored:
                return False
            return sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR) == 0
    except (OSError, ValueError):
        return False


def probe_many(host: str, ports: Iterable[int], timeout: float) -> List[Tuple[int, bool]]:
    """Probe each port in order; returns [(port, ok), ...]."""
    return [(p, probe(host, p, timeout)) for p in ports]
