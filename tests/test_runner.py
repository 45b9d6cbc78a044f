from __future__ import annotations

import sys

import pytest

from check_apt.runner import CommandError, CommandTimeout, Deadline, Output, run_command


def test_deadline_counts_down(clock):
    d = Deadline(10, clock=clock)
    assert d.remaining() == 10
    assert not d.expired
    clock.advance(4)
    assert d.remaining() == 6
    clock.advance(7)
    assert d.remaining() == 0
    assert d.expired


def test_output_from_bytes_keeps_byte_count():
    out = Output.from_bytes("Inst a\nConf a\n".encode("utf-8"))
    assert out.lines == ["Inst a", "Conf a"]
    assert out.buflen == 14
    assert Output.from_bytes(None) == Output(lines=[], buflen=0)


def test_run_command_captures_streams_separately():
    code = "import sys; print('Inst foo'); print('Conf foo'); sys.stderr.write('W: oops\\n'); sys.exit(0)"
    res = run_command([sys.executable, "-c", code], Deadline(30))
    assert res.returncode == 0
    assert res.stdout.lines == ["Inst foo", "Conf foo"]
    assert res.stderr.lines == ["W: oops"]
    assert res.stderr.buflen > 0
    assert sys.executable in res.command


def test_run_command_reports_non_zero_exit():
    res = run_command([sys.executable, "-c", "import sys; sys.exit(100)"], Deadline(30))
    assert res.returncode == 100
    assert res.stdout.buflen == 0


def test_run_command_child_gets_no_stdin():
    res = run_command([sys.executable, "-c", "import sys; print(repr(sys.stdin.read()))"], Deadline(30))
    assert res.stdout.lines == ["''"]


def test_run_command_missing_binary_raises():
    with pytest.raises(CommandError) as exc:
        run_command(["/nonexistent/apt-get", "-s", "upgrade"], Deadline(30))
    assert not isinstance(exc.value, CommandTimeout)
    assert "could not be executed" in str(exc.value)


def test_run_command_kills_child_at_deadline():
    with pytest.raises(CommandTimeout):
        run_command([sys.executable, "-c", "import time; time.sleep(30)"], Deadline(0.5))


def test_run_command_refuses_to_start_after_deadline(clock, monkeypatch):
    d = Deadline(5, clock=clock)
    clock.advance(5)

    def boom(*a, **kw):
        raise AssertionError("spawned after deadline")

    monkeypatch.setattr("check_apt.runner.subprocess.run", boom)
    with pytest.raises(CommandTimeout):
        run_command(["/usr/bin/apt-get", "-s", "upgrade"], d)


def test_output_splits_on_newline_only():
    out = Output.from_bytes(b"Inst a\x0cInst b\nConf a\x85\n\nInst c")
    assert out.lines == ["Inst a\x0cInst b", "Conf a\ufffd", "", "Inst c"]
    assert Output.from_bytes(b"\n").lines == [""]
