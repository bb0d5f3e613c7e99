import threading

from portwatch.models import Target
from portwatch.monitor import ReachabilityMonitor

from .conftest import wait_for


def scripted(results):
    it = iter(results)

    def _probe(host, port, timeout):
        return next(it)

    return _probe


def make_monitor(events, results, threshold=3, notify=None):
    return ReachabilityMonitor(
        Target("127.0.0.1", 80),
        events,
        interval=0.01,
        threshold=threshold,
        probe_fn=scripted(results),
        notify=notify,
    )


def test_starts_online(events):
    monitor = make_monitor(events, [])
    state = monitor.snapshot()
    assert state.online is True
    assert state.consecutive_failures == 0


def test_goes_offline_exactly_at_threshold(events):
    monitor = make_monitor(events, [False, False, False, False])
    assert monitor.check_once().online is True
    assert monitor.check_once().online is True
    state = monitor.check_once()
    assert state.online is False
    assert state.consecutive_failures == 3
    assert monitor.check_once().consecutive_failures == 4
    assert monitor.is_online() is False


def test_success_resets_counter(events):
    monitor = make_monitor(events, [False, False, False, True, False])
    for _ in range(3):
        monitor.check_once()
    assert monitor.is_online() is False
    state = monitor.check_once()
    assert state.online is True
    assert state.consecutive_failures == 0
    assert monitor.check_once().online is True


def test_one_record_per_check(events):
    monitor = make_monitor(events, [True, False])
    monitor.check_once()
    monitor.check_once()
    records = events.records("check")
    assert [r.result for r in records] == ["ok", "failed"]
    assert records[1].counters == {"consecutive_failures": 1, "online": True}
    assert records[0].subject == "127.0.0.1:80"


def test_probe_exception_is_a_failure(events):
    def boom(host, port, timeout):
        raise RuntimeError("socket subsystem hiccup")

    monitor = ReachabilityMonitor(Target("127.0.0.1", 80), events, threshold=1, probe_fn=boom)
    assert monitor.check_once().online is False


def test_notify_on_transitions_only(events):
    calls = []
    monitor = make_monitor(events, [False, False, True, True], threshold=2,
                           notify=lambda target, online: calls.append(online))
    for _ in range(4):
        monitor.check_once()
    assert calls == [False, True]


def test_background_loop_can_be_stopped(events):
    monitor = ReachabilityMonitor(
        Target("127.0.0.1", 80), events, interval=0.01, probe_fn=lambda h, p, t: False
    )
    monitor.start()
    assert wait_for(lambda: not monitor.is_online())
    monitor.stop()
    assert not monitor.is_running()
    monitor.stop()


def test_restart_after_slow_stop(events):
    release = threading.Event()
    calls = []

    def slow_probe(host, port, timeout):
        calls.append(1)
        if len(calls) == 1:
            release.wait(2.0)
        return True

    monitor = ReachabilityMonitor(Target("127.0.0.1", 80), events, interval=0.01, probe_fn=slow_probe)
    monitor.start()
    assert wait_for(lambda: len(calls) == 1)
    monitor.stop(timeout=0.05)
    monitor.start()
    release.set()
    assert wait_for(lambda: len(calls) >= 3)
    assert monitor.is_running()
    monitor.stop()
