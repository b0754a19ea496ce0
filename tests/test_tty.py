import os
import select
import signal
import struct
import sys
import termios
import fcntl
import tty as stdtty

import pytest

from simpleterm.emulator import Terminal
from simpleterm.glyph import TermConfig
from simpleterm.screen import TermMode
from simpleterm.tty import (
    ChildExited,
    Tty,
    TtyError,
    shell_environment,
    stty_command,
)


def row_text(terminal, y):
    return "".join(chr(g.u) for g in terminal.screen.lines[y] if g.u).rstrip()


def read_available(fd, timeout=2.0):
    out = b""
    while True:
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return out
        out += os.read(fd, 4096)
        timeout = 0.2


@pytest.fixture
def pair():
    master, slave = os.openpty()
    stdtty.setraw(slave)
    yield master, slave
    for fd in (master, slave):
        try:
            os.close(fd)
        except OSError:
            pass


@pytest.fixture
def terminal():
    return Terminal(20, 3, TermConfig(history_size=10))


@pytest.fixture
def attached(terminal, pair):
    master, slave = pair
    t = Tty(terminal)
    t.fd = master
    return t, slave


def test_shell_environment_sets_and_unsets(monkeypatch):
    monkeypatch.setenv("COLUMNS", "80")
    monkeypatch.setenv("LINES", "24")
    monkeypatch.setenv("TERMCAP", "x")
    config = TermConfig()
    env = shell_environment(config, "/bin/zsh", "alice", "/home/alice")
    assert "COLUMNS" not in env and "LINES" not in env and "TERMCAP" not in env
    assert env["USER"] == "alice"
    assert env["LOGNAME"] == "alice"
    assert env["SHELL"] == "/bin/zsh"
    assert env["HOME"] == "/home/alice"
    assert env["TERM"] == config.termname


def test_stty_command_joins_args():
    assert stty_command("stty raw", ["-echo", "38400"]) == "stty raw -echo 38400"
    assert stty_command("stty raw", None) == "stty raw"


def test_stty_command_limits():
    with pytest.raises(ValueError):
        stty_command("x" * 4096, [])
    with pytest.raises(ValueError):
        stty_command("stty", ["y" * 4092])


def test_read_feeds_terminal(attached, terminal):
    t, slave = attached
    os.write(slave, b"hi")
    assert t.read() == 2
    assert row_text(terminal, 0) == "hi"


def test_read_keeps_incomplete_utf8(attached, terminal):
    t, slave = attached
    euro = "€".encode()
    os.write(slave, euro[:2])
    t.read()
    assert row_text(terminal, 0) == ""
    os.write(slave, euro[2:])
    t.read()
    assert row_text(terminal, 0) == "€"


def test_write_plain(attached):
    t, slave = attached
    t.write(b"a\rb", False)
    assert read_available(slave) == b"a\rb"


def test_write_crlf_mode(attached, terminal):
    t, slave = attached
    terminal.screen.mode |= TermMode.CRLF
    t.write(b"a\rb", False)
    assert read_available(slave) == b"a\r\nb"


def test_write_echo(attached, terminal):
    t, slave = attached
    terminal.screen.mode |= TermMode.ECHO
    t.write(b"xy", True)
    assert row_text(terminal, 0) == "xy"
    assert read_available(slave) == b"xy"


def test_terminal_reply_goes_to_tty(attached, terminal):
    t, slave = attached
    terminal.write(b"\033[6n")
    assert read_available(slave) == b"\033[1;1R"


def test_resize_sets_winsize(attached, terminal):
    t, slave = attached
    t.resize(160, 48)
    raw = fcntl.ioctl(slave, termios.TIOCGWINSZ, b"\0" * 8)
    rows, cols, width, height = struct.unpack("HHHH", raw)
    assert (rows, cols) == (terminal.screen.rows, terminal.screen.cols)
    assert (width, height) == (160, 48)


def test_read_without_line_raises(terminal):
    with pytest.raises(TtyError):
        Tty(terminal).read()


def test_spawn_runs_child(terminal):
    t = Tty(terminal)
    t.spawn(args=[sys.executable, "-c", "print('hello')"])
    with pytest.raises(ChildExited) as info:
        for _ in range(100):
            t.read()
    t.close()
    assert info.value.status == 0
    assert not info.value.failed
    assert row_text(terminal, 0) == "hello"


def test_spawn_reports_failure(terminal):
    t = Tty(terminal)
    t.spawn(args=[sys.executable, "-c", "raise SystemExit(3)"])
    with pytest.raises(ChildExited) as info:
        for _ in range(100):
            t.read()
    t.close()
    assert info.value.status == 3
    assert info.value.failed


def test_hangup_kills_child(terminal):
    t = Tty(terminal)
    t.spawn(args=[sys.executable, "-c", "import time; time.sleep(30)"])
    t.hangup()
    with pytest.raises(ChildExited) as info:
        for _ in range(100):
            t.read()
    t.close()
    assert info.value.signal == signal.SIGHUP


def test_spawn_out_file_prints(tmp_path, terminal):
    out = tmp_path / "print.txt"
    t = Tty(terminal)
    t.spawn(args=[sys.executable, "-c", "print('ok')"], out=str(out))
    assert terminal.screen.mode & TermMode.PRINT
    with pytest.raises(ChildExited):
        for _ in range(100):
            t.read()
    t.close()
    assert "ok" in out.read_text()


def test_external_pipe_sends_screen(tmp_path, terminal):
    target = tmp_path / "out.txt"
    terminal.write(b"abc")
    t = Tty(terminal)
    proc = t.external_pipe(["sh", "-c", f"cat > '{target}'"])
    proc.wait()
    assert target.read_text() == "abc \n"


def test_external_pipe_joins_wrapped_lines(tmp_path, terminal):
    target = tmp_path / "out.txt"
    terminal.write(b"a" * 20 + b"b")
    t = Tty(terminal)
    proc = t.external_pipe(["sh", "-c", f"cat > '{target}'"])
    proc.wait()
    assert target.read_text() == "a" * 20 + "b \n"


def test_external_pipe_missing_program(terminal):
    t = Tty(terminal)
    assert t.external_pipe(["/nonexistent/program-xyz"]) is None


def test_iso14755_types_codepoint(attached):
    t, slave = attached
    assert t.iso14755("printf 41") == 0x41
    assert read_available(slave) == b"A"


def test_iso14755_rejects_bad_input(attached):
    t, _ = attached
    assert t.iso14755("printf -- -41") is None
    assert t.iso14755("printf 12345678") is None
    assert t.iso14755("printf zz") is None