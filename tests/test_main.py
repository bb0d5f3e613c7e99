import io
import json
import sys

import main as entry
from portwatch.probe import probe

from .conftest import get_free_port


def write_config(tmp_path, port):
    path = tmp_path / "ports.json"
    path.write_text(json.dumps([{"port": port, "label": "CLS"}, {"port": "disabled", "label": "-1"}]),
                    encoding="utf-8")
    return path


def run_main(config_path, monkeypatch, stdin):
    monkeypatch.setattr(sys, "stdin", stdin)
    return entry.main([
        "--config", str(config_path),
        "--monitor-port", str(get_free_port()),
        "--interval", "60",
        "--log-level", "ERROR",
    ])


def test_corrupt_config_exits_before_starting(tmp_path, monkeypatch, capsys):
    path = tmp_path / "ports.json"
    path.write_text("{not json", encoding="utf-8")
    assert run_main(path, monkeypatch, io.StringIO("")) == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[X] Cannot read port config" in captured.err


def test_end_of_input_shuts_listeners_down(tmp_path, monkeypatch, capsys, free_port):
    path = write_config(tmp_path, free_port)
    assert run_main(path, monkeypatch, io.StringIO(f"test {free_port}\nstatus\n")) == 0
    out = capsys.readouterr().out
    assert f"[+] Listening on port {free_port} (CLS)" in out
    assert f"[✓] Connection to port {free_port} succeeded." in out
    assert "[Server status] Online" in out
    assert probe("127.0.0.1", free_port, 1.0) is False


class InterruptedInput:
    def __init__(self, port):
        self.port = port

    def __iter__(self):
        yield f"test {self.port}\n"
        raise KeyboardInterrupt


def test_ctrl_c_still_stops_listeners(tmp_path, monkeypatch, capsys, free_port):
    path = write_config(tmp_path, free_port)
    assert run_main(path, monkeypatch, InterruptedInput(free_port)) == 0
    assert f"[✓] Connection to port {free_port} succeeded." in capsys.readouterr().out
    assert probe("127.0.0.1", free_port, 1.0) is False
