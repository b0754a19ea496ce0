"""Pseudo-terminal plumbing: the child shell, the line, printing and pipes."""

from __future__ import annotations

import errno
import fcntl
import logging
import os
import pty
import pwd
import re
import select
import signal
import struct
import subprocess
import termios
from typing import Optional, Sequence

from .codec import utf8_encode
from .emulator import Terminal
from .glyph import Attr, TermConfig
from .screen import TermMode

log = logging.getLogger(__name__)

BUFSIZ = 8192
POSIX_ARG_MAX = 4096
WRITE_LIMIT = 256
ISO14755_COMMAND = 'dmenu -w "$WINDOWID" -p codepoint: </dev/null'

_RESET_SIGNALS = (
    signal.SIGCHLD,
    signal.SIGHUP,
    signal.SIGINT,
    signal.SIGQUIT,
    signal.SIGTERM,
    signal.SIGALRM,
)
_HEX = re.compile(r"[ \t\n\v\f\r]*\+?(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")


class TtyError(Exception):
    """The terminal line could not be opened, read or written."""


class ChildExited(Exception):
    """The child program has ended.

    ``status`` holds its exit status, or ``signal`` the signal that ended it.
    """

    def __init__(self, status: Optional[int] = None, signal_number: Optional[int] = None) -> None:
        self.status = status
        self.signal = signal_number
        if signal_number is not None:
            message = f"child terminated due to signal {signal_number}"
        else:
            message = f"child exited with status {status}"
        super().__init__(message)

    @property
    def failed(self) -> bool:
        return self.signal is not None or bool(self.status)


def shell_environment(config: TermConfig, shell: str, user: str, home: str) -> dict[str, str]:
    """Build the environment a child shell starts with."""
    env = dict(os.environ)
    for name in ("COLUMNS", "LINES", "TERMCAP"):
        env.pop(name, None)
    env["LOGNAME"] = user
    env["USER"] = user
    env["SHELL"] = shell
    env["HOME"] = home
    env["TERM"] = config.termname
    return env


def stty_command(stty_args: str, args: Optional[Sequence[str]]) -> str:
    """Join the stty command line, enforcing the POSIX argument size limit."""
    if len(stty_args) > POSIX_ARG_MAX - 1:
        raise ValueError("incorrect stty parameters")
    room = POSIX_ARG_MAX - len(stty_args)
    parts = [stty_args]
    for arg in args or ():
        if len(arg) > room - 1:
            raise ValueError("stty parameter length too long")
        parts.append(arg)
        room -= len(arg) + 1
    return " ".join(parts)


def _parse_codepoint(text: str) -> Optional[int]:
    """Read a hexadecimal code point the way strtoul does, or None if invalid."""
    if not text or text.startswith("-") or len(text) > 7:
        return None
    match = _HEX.match(text)
    digits = match.group(1) if match else ""
    if not digits:
        value, rest = 0, text
    else:
        value, rest = int(digits, 16), text[match.end():]
    if rest and rest[0] != "\n":
        return None
    return value


class Tty:
    """Connects a :class:`Terminal` to a child program through a pseudo-terminal."""

    def __init__(self, terminal: Terminal, config: TermConfig | None = None) -> None:
        self.terminal = terminal
        self.config = config if config is not None else terminal.config
        self.fd: Optional[int] = None
        self.pid: Optional[int] = None
        self._iofd = 1
        self._own_iofd = False
        self._pending = b""
        terminal.writer = lambda data: self.write(data, False)
        terminal.printer = self._print

    # printer output

    def _print(self, data: bytes) -> None:
        if self._iofd == -1:
            return
        view = memoryview(data)
        try:
            while view:
                view = view[os.write(self._iofd, view):]
        except OSError as exc:
            log.error("Error writing to output file: %s", exc.strerror)
            if self._own_iofd:
                os.close(self._iofd)
            self._own_iofd = False
            self._iofd = -1

    # child management

    def spawn(
        self,
        cmd: Optional[str] = None,
        args: Optional[Sequence[str]] = None,
        line: Optional[str] = None,
        out: Optional[str] = None,
    ) -> int:
        """Start the child program (or open ``line``); return the tty descriptor."""
        if out:
            self.terminal.screen.mode |= TermMode.PRINT
            if out == "-":
                self._iofd = 1
            else:
                try:
                    self._iofd = os.open(out, os.O_WRONLY | os.O_CREAT, 0o666)
                    self._own_iofd = True
                except OSError as exc:
                    log.error("Error opening %s:%s", out, exc.strerror)
                    self._iofd = -1

        if line:
            try:
                self.fd = os.open(line, os.O_RDWR)
            except OSError as exc:
                raise TtyError(f"open line '{line}' failed: {exc.strerror}") from exc
            os.dup2(self.fd, 0)
            command = stty_command(self.config.stty_args, args)
            if subprocess.run(command, shell=True).returncode != 0:
                log.error("Couldn't call stty")
            return self.fd

        try:
            pw = pwd.getpwuid(os.getuid())
        except KeyError as exc:
            raise TtyError("who are you?") from exc
        cmd = cmd if cmd is not None else self.config.shell
        shell = os.environ["SHELL"] if "SHELL" in os.environ else (pw.pw_shell or cmd)
        if args:
            prog = args[0]
        elif self.config.utmp:
            prog = self.config.utmp
        else:
            prog = shell
        argv = list(args) if args else [prog]
        env = shell_environment(self.config, shell, pw.pw_name, pw.pw_dir)

        try:
            pid, fd = pty.fork()
        except OSError as exc:
            raise TtyError(f"fork failed: {exc.strerror}") from exc
        if pid == 0:
            try:
                if self._iofd > 2:
                    os.close(self._iofd)
                for sig in _RESET_SIGNALS:
                    signal.signal(sig, signal.SIG_DFL)
                os.execvpe(prog, argv, env)
            except BaseException:
                pass
            os._exit(1)

        self.pid = pid
        self.fd = fd
        return fd

    def _reap(self) -> None:
        pid, self.pid = self.pid, None
        try:
            _, status = os.waitpid(pid, 0)
        except ChildProcessError as exc:
            raise TtyError(f"waiting for pid {pid} failed: {exc.strerror}") from exc
        if os.WIFSIGNALED(status):
            raise ChildExited(signal_number=os.WTERMSIG(status))
        raise ChildExited(status=os.WEXITSTATUS(status))

    def _require_fd(self) -> int:
        if self.fd is None:
            raise TtyError("no terminal line is open")
        return self.fd

    # data flow

    def read(self) -> int:
        """Read from the child and feed the terminal; return the bytes read.

        Raises :class:`ChildExited` once the child program has ended.
        """
        fd = self._require_fd()
        try:
            chunk = os.read(fd, BUFSIZ - len(self._pending))
        except OSError as exc:
            if exc.errno == errno.EIO and self.pid is not None:
                self._reap()
            raise TtyError(f"couldn't read from shell: {exc.strerror}") from exc
        if not chunk and self.pid is not None:
            self._reap()
        data = self._pending + chunk
        written = self.terminal.write(data)
        # keep an incomplete UTF-8 sequence for the next call
        self._pending = data[written:]
        return len(chunk)

    def write(self, data: bytes, may_echo: bool = False) -> None:
        """Send ``data`` to the child, echoing and translating CR as the modes say."""
        screen = self.terminal.screen
        screen.history_scroll_down(screen.scr)
        data = bytes(data)
        if may_echo and screen.mode & TermMode.ECHO:
            self.terminal.write(data, True)
        if screen.mode & TermMode.CRLF:
            data = data.replace(b"\r", b"\r\n")
        self._write_raw(data)

    def _write_raw(self, data: bytes) -> None:
        # A pty may be a slow line: write in small slices and drain input
        # whenever the child has something to say.
        fd = self._require_fd()
        view = memoryview(data)
        limit = WRITE_LIMIT
        while view:
            try:
                readable, writable, _ = select.select([fd], [fd], [])
            except InterruptedError:
                continue
            except OSError as exc:
                raise TtyError(f"select failed: {exc.strerror}") from exc
            if writable:
                try:
                    count = os.write(fd, view[:limit])
                except OSError as exc:
                    raise TtyError(f"write error on tty: {exc.strerror}") from exc
                if count < len(view):
                    if len(view) < limit:
                        limit = max(self.read(), 1)
                    view = view[count:]
                else:
                    break
            if readable:
                limit = max(self.read(), 1)

    # line control

    def resize(self, width: int, height: int) -> None:
        """Tell the child the screen size in cells and pixels."""
        screen = self.terminal.screen
        winsize = struct.pack("HHHH", screen.rows, screen.cols, width, height)
        try:
            fcntl.ioctl(self._require_fd(), termios.TIOCSWINSZ, winsize)
        except OSError as exc:
            log.error("Couldn't set window size: %s", exc.strerror)

    def hangup(self) -> None:
        """Send SIGHUP to the child."""
        if self.pid is not None:
            os.kill(self.pid, signal.SIGHUP)

    def send_break(self) -> None:
        try:
            termios.tcsendbreak(self._require_fd(), 0)
        except (OSError, termios.error) as exc:
            log.error("Error sending break: %s", exc)

    def close(self) -> None:
        if self.fd is not None:
            os.close(self.fd)
            self.fd = None
        if self._own_iofd:
            os.close(self._iofd)
            self._own_iofd = False
            self._iofd = -1

    # helpers started from key bindings

    def external_pipe(self, argv: Sequence[str]) -> Optional[subprocess.Popen]:
        """Pipe the history and screen text to a new process started from ``argv``."""
        try:
            proc = subprocess.Popen(list(argv), stdin=subprocess.PIPE)
        except OSError as exc:
            log.error("execvp %s failed: %s", argv[0] if argv else "", exc)
            return None
        screen = self.terminal.screen
        stdin = proc.stdin
        newline = False
        try:
            for n in range(screen.history_size + 3):
                line = screen.history_line(n)
                lastpos = min(screen.history_line_length(n) + 1, screen.cols) - 1
                if lastpos < 0:
                    break
                if lastpos == 0:
                    continue
                stdin.write(b"".join(utf8_encode(g.u) for g in line[: lastpos + 1]))
                newline = bool(line[lastpos].mode & Attr.WRAP)
                if newline:
                    continue
                stdin.write(b"\n")
            if newline:
                stdin.write(b"\n")
        except BrokenPipeError:
            pass
        try:
            stdin.close()
        except BrokenPipeError:
            pass
        return proc

    def iso14755(self, command: Optional[str] = None) -> Optional[int]:
        """Ask ``command`` for a hexadecimal code point and type it; return it."""
        try:
            result = subprocess.run(
                command if command is not None else ISO14755_COMMAND,
                shell=True,
                stdout=subprocess.PIPE,
            )
        except OSError:
            return None
        first = result.stdout[:8]
        if b"\n" in first:
            first = first[: first.index(b"\n") + 1]
        rune = _parse_codepoint(first.decode("latin-1"))
        if rune is None:
            return None
        self.write(utf8_encode(rune), True)
        return rune