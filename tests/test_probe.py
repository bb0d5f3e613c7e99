import select
import time

from portwatch.probe import probe, probe_many


def test_probe_open_port(listening_socket):
    port = listening_socket.getsockname()[1]
    assert probe("127.0.0.1", port, 1.0) is True


def test_probe_closed_port_fails_fast(free_port):
    t0 = time.monotonic()
    assert probe("127.0.0.1", free_port, 2.0) is False
    assert time.monotonic() - t0 < 1.0


def test_probe_invalid_port():
    assert probe("127.0.0.1", 0, 0.2) is False
    assert probe("127.0.0.1", 70000, 0.2) is False
    assert probe("127.0.0.1", "abc", 0.2) is False


def test_probe_timeout_counts_as_failure(listening_socket, monkeypatch):
    port = listening_socket.getsockname()[1]
    monkeypatch.setattr(select, "select", lambda r, w, x, t: ([], [], []))
    assert probe("127.0.0.1", port, 0.1) is False


def test_probe_many_keeps_order(listening_socket, free_port):
    open_port = listening_socket.getsockname()[1]
    results = probe_many("127.0.0.1", [free_port, open_port], 1.0)
    assert results == [(free_port, False), (open_port, True)]


def test_probe_bad_timeout_is_a_failure(listening_socket):
    port = listening_socket.getsockname()[1]
    assert probe("127.0.0.1", port, None) is False
    assert probe("127.0.0.1", port, "soon") is False
