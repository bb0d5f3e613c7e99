import socket
import time

import pytest

from portwatch.events import EventLog
from portwatch.registry import Registry


def get_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def wait_for(predicate, timeout=2.0, interval=0.02) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def free_port():
    return get_free_port()


@pytest.fixture
def events():
    return EventLog()


@pytest.fixture
def registry(events):
    reg = Registry(events, poll_interval=0.02)
    yield reg
    reg.stop_all()


@pytest.fixture
def listening_socket():
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    s.listen()
    yield s
    s.close()
