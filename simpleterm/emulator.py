"""Escape-sequence interpreter that drives a :class:`Screen`."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Callable, Optional

from wcwidth import wcwidth

from .codec import base64_decode, utf8_decode, utf8_encode
from .glyph import Attr, TermConfig, truecolor
from .screen import Charset, CursorState, Screen, TermMode
from .window import Window, WinMode

log = logging.getLogger(__name__)

ESC_BUF_SIZE = 128 * 4
ESC_ARG_SIZE = 16
STR_BUF_SIZE = ESC_BUF_SIZE
STR_ARG_SIZE = ESC_ARG_SIZE

_NUMBER = re.compile(rb"\s*[+-]?\d+")
_LONG_MAX = 2**63 - 1

_SGR_CLEAR = (
    Attr.BOLD | Attr.FAINT | Attr.ITALIC | Attr.UNDERLINE
    | Attr.BLINK | Attr.REVERSE | Attr.INVISIBLE | Attr.STRUCK
)
_SGR_SET = {
    1: Attr.BOLD, 2: Attr.FAINT, 3: Attr.ITALIC, 4: Attr.UNDERLINE,
    5: Attr.BLINK, 6: Attr.BLINK, 7: Attr.REVERSE, 8: Attr.INVISIBLE,
    9: Attr.STRUCK,
}
_SGR_UNSET = {
    22: Attr.BOLD | Attr.FAINT, 23: Attr.ITALIC, 24: Attr.UNDERLINE,
    25: Attr.BLINK, 27: Attr.REVERSE, 28: Attr.INVISIBLE, 29: Attr.STRUCK,
}
_MOUSE_MODES = {
    9: WinMode.MOUSEX10, 1000: WinMode.MOUSEBTN,
    1002: WinMode.MOUSEMOTION, 1003: WinMode.MOUSEMANY,
}
_IGNORED_PRIVATE = {0, 2, 3, 4, 8, 18, 19, 42, 12, 1001, 1005, 1015}


class EscState(IntFlag):
    NONE = 0
    START = 1
    CSI = 2
    STR = 4
    ALTCHARSET = 8
    STR_END = 16
    TEST = 32
    UTF8 = 64
    DCS = 128


def _is_control_c1(u: int) -> bool:
    return 0x80 <= u <= 0x9F


def _is_control(u: int) -> bool:
    return 0 <= u <= 0x1F or u == 0x7F or _is_control_c1(u)


def _atoi(text: str) -> int:
    match = _NUMBER.match(text.encode("utf-8", errors="replace"))
    return int(match.group()) if match else 0


@dataclass
class CSIEscape:
    """A parsed control sequence: ``ESC [ [?] args ; ... mode``."""

    buf: bytes = b""
    priv: bool = False
    args: list[int] = field(default_factory=lambda: [0] * ESC_ARG_SIZE)
    narg: int = 0
    mode: str = "\0\0"

    def arg(self, index: int, default: int | None = None) -> int:
        value = self.args[index]
        return default if default is not None and not value else value


def parse_csi(buf: bytes) -> CSIEscape:
    """Parse the body of a control sequence (after ``ESC [``)."""
    buf = bytes(buf)
    csi = CSIEscape(buf=buf)
    p = 0
    if buf[:1] == b"?":
        csi.priv = True
        p = 1
    values: list[int] = []
    while p < len(buf):
        match = _NUMBER.match(buf, p)
        if match:
            value = int(match.group())
            p = match.end()
            if value >= _LONG_MAX or value <= -_LONG_MAX - 1:
                value = -1
        else:
            value = 0
        values.append(value)
        if p >= len(buf) or buf[p] != ord(";") or len(values) == ESC_ARG_SIZE:
            break
        p += 1
    csi.narg = len(values)
    csi.args[: len(values)] = values
    first = chr(buf[p]) if p < len(buf) else "\0"
    p += 1
    second = chr(buf[p]) if p < len(buf) else "\0"
    csi.mode = first + second
    return csi


def parse_str(buf: bytes) -> list[str]:
    """Split the body of a string sequence at ``;`` into at most 16 fields."""
    data = bytes(buf).split(b"\0", 1)[0]
    if not data:
        return []
    return [part.decode("utf-8", errors="replace") for part in data.split(b";")[:STR_ARG_SIZE]]


class Terminal:
    """Feeds bytes from the program through the escape parser onto a screen."""

    def __init__(
        self,
        cols: int,
        rows: int,
        config: TermConfig | None = None,
        window: Window | None = None,
        writer: Optional[Callable[[bytes], None]] = None,
        printer: Optional[Callable[[bytes], None]] = None,
    ) -> None:
        self.config = config if config is not None else TermConfig()
        self.window = window if window is not None else Window()
        self.writer = writer
        self.printer = printer
        self.screen = Screen(cols, rows, self.config)
        self.esc = EscState.NONE
        self.csi_buf = bytearray()
        self.str_type = ""
        self.str_buf = bytearray()

    # output helpers

    def _reply(self, data: bytes) -> None:
        self.screen.history_scroll_down(self.screen.scr)
        if self.writer is not None:
            self.writer(data)

    def _print(self, data: bytes) -> None:
        if self.printer is not None:
            self.printer(data)

    # input

    def write(self, data: bytes, show_ctrl: bool = False) -> int:
        """Interpret ``data``; return how many bytes were consumed."""
        data = bytes(data)
        n = 0
        while n < len(data):
            mode = self.screen.mode
            if mode & TermMode.UTF8 and not mode & TermMode.SIXEL:
                rune, size = utf8_decode(data[n:])
                if size == 0:
                    break
            else:
                rune, size = data[n], 1
            if show_ctrl and _is_control(rune):
                if rune & 0x80:
                    rune &= 0x7F
                    self.put_char(ord("^"))
                    self.put_char(ord("["))
                elif rune not in (0x0A, 0x0D, 0x09):
                    rune ^= 0x40
                    self.put_char(ord("^"))
            self.put_char(rune)
            n += size
        return n

    def put_char(self, rune: int) -> None:
        """Handle one decoded character."""
        screen = self.screen
        control = _is_control(rune)
        width = 1
        if not screen.mode & TermMode.UTF8 and not screen.mode & TermMode.SIXEL:
            encoded = bytes([rune & 0xFF])
        else:
            encoded = utf8_encode(rune)
            if not control:
                width = wcwidth(chr(rune))
                if width == -1:
                    encoded = b"\xef\xbf\xbd"
                    width = 1

        if screen.mode & TermMode.PRINT:
            self._print(encoded)

        if self.esc & EscState.STR:
            if rune in (0x07, 0x18, 0x1A, 0x1B) or _is_control_c1(rune):
                self.esc &= ~(EscState.START | EscState.STR | EscState.DCS)
                if screen.mode & TermMode.SIXEL:
                    screen.mode &= ~TermMode.SIXEL
                    return
                self.esc |= EscState.STR_END
            else:
                if screen.mode & TermMode.SIXEL:
                    return
                if self.esc & EscState.DCS and not self.str_buf and rune == ord("q"):
                    screen.mode |= TermMode.SIXEL
                if len(self.str_buf) + len(encoded) >= STR_BUF_SIZE - 1:
                    return
                self.str_buf += encoded
                return

        if control:
            self.control_code(rune)
            return
        if self.esc & EscState.START:
            if self.esc & EscState.CSI:
                self.csi_buf.append(rune & 0xFF)
                if 0x40 <= rune <= 0x7E or len(self.csi_buf) >= ESC_BUF_SIZE - 1:
                    self.esc = EscState.NONE
                    self.handle_csi(parse_csi(self.csi_buf))
                return
            if self.esc & EscState.UTF8:
                self._define_utf8(rune)
            elif self.esc & EscState.ALTCHARSET:
                self._define_translation(rune)
            elif self.esc & EscState.TEST:
                self._dec_test(rune)
            elif not self.handle_escape(rune):
                return
            self.esc = EscState.NONE
            return

        sel = screen.selection
        if sel.active and sel.ob.y <= screen.cursor.y <= sel.oe.y:
            sel.clear()

        cur = screen.cursor
        if screen.mode & TermMode.WRAP and cur.state & CursorState.WRAPNEXT:
            screen.lines[cur.y][cur.x].mode |= Attr.WRAP
            screen.new_line(True)
            cur = screen.cursor

        if screen.mode & TermMode.INSERT and cur.x + width < screen.cols:
            line = screen.lines[cur.y]
            line[cur.x + width:screen.cols] = [g.copy() for g in line[cur.x:screen.cols - width]]

        if cur.x + width > screen.cols:
            screen.new_line(True)
            cur = screen.cursor

        x, y = cur.x, cur.y
        screen.set_char(rune, cur.attr, x, y)
        line = screen.lines[y]
        if width == 2:
            line[x].mode |= Attr.WIDE
            if x + 1 < screen.cols:
                line[x + 1].u = 0
                line[x + 1].mode = Attr.WDUMMY
        if x + width < screen.cols:
            screen.move_to(x + width, y)
        else:
            cur.state |= CursorState.WRAPNEXT

    def _define_utf8(self, rune: int) -> None:
        if rune == ord("G"):
            self.screen.mode |= TermMode.UTF8
        elif rune == ord("@"):
            self.screen.mode &= ~TermMode.UTF8

    def _define_translation(self, rune: int) -> None:
        charsets = {ord("0"): Charset.GRAPHIC0, ord("B"): Charset.USA}
        if rune in charsets:
            self.screen.trantbl[self.screen.icharset] = charsets[rune]
        else:
            log.warning("esc unhandled charset: ESC ( %c", rune)

    def _dec_test(self, rune: int) -> None:
        screen = self.screen
        if rune == ord("8"):
            for x in range(screen.cols):
                for y in range(screen.rows):
                    screen.set_char(ord("E"), screen.cursor.attr, x, y)

    def _start_string(self, code: int) -> None:
        self.str_buf = bytearray()
        mapping = {0x90: "P", 0x9F: "_", 0x9E: "^", 0x9D: "]"}
        if code == 0x90:
            self.esc |= EscState.DCS
        self.str_type = mapping.get(code, chr(code))
        self.esc |= EscState.STR

    def control_code(self, code: int) -> None:
        """Act on a C0 or C1 control character."""
        screen = self.screen
        cur = screen.cursor
        if code == 0x09:
            screen.put_tab(1)
            return
        if code == 0x08:
            screen.move_to(cur.x - 1, cur.y)
            return
        if code == 0x0D:
            screen.move_to(0, cur.y)
            return
        if code in (0x0C, 0x0B, 0x0A):
            screen.new_line(bool(screen.mode & TermMode.CRLF))
            return
        if code == 0x07:
            if self.esc & EscState.STR_END:
                self.handle_str()
            else:
                self.window.bell()
        elif code == 0x1B:
            self.csi_buf = bytearray()
            self.esc &= ~(EscState.CSI | EscState.ALTCHARSET | EscState.TEST)
            self.esc |= EscState.START
            return
        elif code in (0x0E, 0x0F):
            screen.charset = 1 - (code - 0x0E)
            return
        elif code in (0x1A, 0x18):
            if code == 0x1A:
                screen.set_char(ord("?"), cur.attr, cur.x, cur.y)
            self.csi_buf = bytearray()
        elif code in (0x05, 0x00, 0x11, 0x13, 0x7F):
            return
        elif code == 0x85:
            screen.new_line(True)
        elif code == 0x88:
            screen.tabs[cur.x] = True
        elif code == 0x9A:
            self._reply(self.config.vtiden.encode())
        elif code in (0x90, 0x9D, 0x9E, 0x9F):
            self._start_string(code)
            return
        self.esc &= ~(EscState.STR_END | EscState.STR)

    def handle_escape(self, char: int) -> bool:
        """Handle the character after ESC; True when the sequence is finished."""
        screen = self.screen
        cur = screen.cursor
        c = chr(char)
        if c == "[":
            self.esc |= EscState.CSI
            return False
        if c == "#":
            self.esc |= EscState.TEST
            return False
        if c == "%":
            self.esc |= EscState.UTF8
            return False
        if c in "P_^]k":
            self._start_string(char)
            return False
        if c in "no":
            screen.charset = 2 + (char - ord("n"))
        elif c in "()*+":
            screen.icharset = char - ord("(")
            self.esc |= EscState.ALTCHARSET
            return False
        elif c == "D":
            if cur.y == screen.bot:
                screen.scroll_up(screen.top, 1, True)
            else:
                screen.move_to(cur.x, cur.y + 1)
        elif c == "E":
            screen.new_line(True)
        elif c == "H":
            screen.tabs[cur.x] = True
        elif c == "M":
            if cur.y == screen.top:
                screen.scroll_down(screen.top, 1, True)
            else:
                screen.move_to(cur.x, cur.y - 1)
        elif c == "Z":
            self._reply(self.config.vtiden.encode())
        elif c == "c":
            screen.reset()
            self.window.set_title(None)
            self.window.load_colors()
        elif c == "=":
            self.window.set_mode(True, WinMode.APPKEYPAD)
        elif c == ">":
            self.window.set_mode(False, WinMode.APPKEYPAD)
        elif c == "7":
            screen.cursor_save()
        elif c == "8":
            screen.cursor_load()
        elif c == "\\":
            if self.esc & EscState.STR_END:
                self.handle_str()
        else:
            log.warning("erresc: unknown sequence ESC 0x%02X", char & 0xFF)
        return True

    def handle_csi(self, csi: CSIEscape) -> None:
        """Carry out a parsed control sequence."""
        screen = self.screen
        cur = screen.cursor
        mode = csi.mode[0]
        known = True
        if mode == "@":
            screen.insert_blanks(csi.arg(0, 1))
        elif mode == "A":
            screen.move_to(cur.x, cur.y - csi.arg(0, 1))
        elif mode in "Be":
            screen.move_to(cur.x, cur.y + csi.arg(0, 1))
        elif mode == "i":
            action = csi.arg(0)
            if action == 0:
                self.dump_screen()
            elif action == 1:
                self.dump_line(cur.y)
            elif action == 2:
                self.dump_selection()
            elif action == 4:
                screen.mode &= ~TermMode.PRINT
            elif action == 5:
                screen.mode |= TermMode.PRINT
        elif mode == "c":
            if csi.arg(0) == 0:
                self._reply(self.config.vtiden.encode())
        elif mode in "Ca":
            screen.move_to(cur.x + csi.arg(0, 1), cur.y)
        elif mode == "D":
            screen.move_to(cur.x - csi.arg(0, 1), cur.y)
        elif mode == "E":
            screen.move_to(0, cur.y + csi.arg(0, 1))
        elif mode == "F":
            screen.move_to(0, cur.y - csi.arg(0, 1))
        elif mode == "g":
            if csi.arg(0) == 0:
                screen.tabs[cur.x] = False
            elif csi.arg(0) == 3:
                screen.tabs = [False] * screen.cols
            else:
                known = False
        elif mode in "G`":
            screen.move_to(csi.arg(0, 1) - 1, cur.y)
        elif mode in "Hf":
            screen.move_to_absolute(csi.arg(1, 1) - 1, csi.arg(0, 1) - 1)
        elif mode == "I":
            screen.put_tab(csi.arg(0, 1))
        elif mode == "J":
            what = csi.arg(0)
            if what == 0:
                screen.clear_region(cur.x, cur.y, screen.cols - 1, cur.y)
                if cur.y < screen.rows - 1:
                    screen.clear_region(0, cur.y + 1, screen.cols - 1, screen.rows - 1)
            elif what == 1:
                if cur.y > 1:
                    screen.clear_region(0, 0, screen.cols - 1, cur.y - 1)
                screen.clear_region(0, cur.y, cur.x, cur.y)
            elif what == 2:
                screen.clear_region(0, 0, screen.cols - 1, screen.rows - 1)
            else:
                known = False
        elif mode == "K":
            what = csi.arg(0)
            if what == 0:
                screen.clear_region(cur.x, cur.y, screen.cols - 1, cur.y)
            elif what == 1:
                screen.clear_region(0, cur.y, cur.x, cur.y)
            elif what == 2:
                screen.clear_region(0, cur.y, screen.cols - 1, cur.y)
        elif mode == "S":
            screen.scroll_up(screen.top, csi.arg(0, 1), False)
        elif mode == "T":
            screen.scroll_down(screen.top, csi.arg(0, 1), False)
        elif mode == "L":
            screen.insert_blank_lines(csi.arg(0, 1))
        elif mode == "l":
            self.set_mode(csi.priv, False, csi.args[: csi.narg])
        elif mode == "M":
            screen.delete_lines(csi.arg(0, 1))
        elif mode == "X":
            screen.clear_region(cur.x, cur.y, cur.x + csi.arg(0, 1) - 1, cur.y)
        elif mode == "P":
            screen.delete_chars(csi.arg(0, 1))
        elif mode == "Z":
            screen.put_tab(-csi.arg(0, 1))
        elif mode == "d":
            screen.move_to_absolute(cur.x, csi.arg(0, 1) - 1)
        elif mode == "h":
            self.set_mode(csi.priv, True, csi.args[: csi.narg])
        elif mode == "m":
            self.set_attr(csi.args[: csi.narg])
        elif mode == "n":
            if csi.arg(0) == 6:
                self._reply(f"\033[{cur.y + 1};{cur.x + 1}R".encode())
        elif mode == "r":
            if csi.priv:
                known = False
            else:
                screen.set_scroll_region(csi.arg(0, 1) - 1, csi.arg(1, screen.rows) - 1)
                screen.move_to_absolute(0, 0)
        elif mode == "s":
            screen.cursor_save()
        elif mode == "u":
            screen.cursor_load()
        elif mode == " " and csi.mode[1] == "q":
            try:
                self.window.set_cursor(csi.arg(0))
            except ValueError:
                known = False
        else:
            known = False
        if not known:
            log.warning("erresc: unknown csi ESC[%r", csi.buf)

    def handle_str(self) -> None:
        """Carry out a finished string sequence (OSC, DCS, APC, PM)."""
        self.esc &= ~(EscState.STR_END | EscState.STR)
        args = parse_str(self.str_buf)
        narg = len(args)
        par = _atoi(args[0]) if args else 0
        kind = self.str_type
        cfg = self.config

        if kind == "]":
            if par in (0, 1, 2):
                if narg > 1:
                    self.window.set_title(args[1])
                return
            if par == 52:
                if narg > 2:
                    decoded = base64_decode(args[2]).decode("utf-8", errors="replace")
                    self.window.set_selection(decoded)
                    self.window.clip_copy()
                return
            if par in (4, 10, 11, 12, 104):
                name = None
                if par != 104:
                    if (par == 4 and narg < 3) or narg < 2:
                        log.warning("erresc: unknown str %r", bytes(self.str_buf))
                        return
                    name = args[2 if par == 4 else 1]
                if par == 10:
                    index = cfg.defaultfg
                elif par == 11:
                    index = cfg.defaultbg
                elif par == 12:
                    index = cfg.defaultcs
                else:
                    index = _atoi(args[1]) if narg > 1 else -1
                try:
                    self.window.set_color_name(index, name)
                except ValueError:
                    if par == 104 and narg <= 1:
                        return
                    log.warning("erresc: invalid color j=%d, p=%s", index, name)
                else:
                    if index == cfg.defaultbg:
                        self.window.clear_window()
                    self.screen.full_dirty()
                    self.window.redraw()
                return
        elif kind == "k":
            self.window.set_title(args[0] if args else "")
            return
        elif kind == "P":
            # the DCS flag shares its bit with the sixel mode flag
            self.screen.mode |= TermMode.SIXEL
            return
        elif kind in "_^":
            return
        log.warning("erresc: unknown str ESC%s%r", kind, bytes(self.str_buf))

    def define_color(self, args: list[int], index: int) -> tuple[int, int]:
        """Read an extended colour at ``args[index]``.

        Returns the colour (or -1 when invalid) and the index of the last
        argument consumed.
        """
        def at(i: int) -> int:
            return args[i] if 0 <= i < len(args) else 0

        count = len(args)
        kind = at(index + 1)
        if kind == 2:
            if index + 4 >= count:
                log.warning("erresc(38): Incorrect number of parameters (%d)", index)
                return -1, index
            r, g, b = at(index + 2), at(index + 3), at(index + 4)
            index += 4
            if not all(0 <= v <= 255 for v in (r, g, b)):
                log.warning("erresc: bad rgb color (%d,%d,%d)", r, g, b)
                return -1, index
            return truecolor(r, g, b), index
        if kind == 5:
            if index + 2 >= count:
                log.warning("erresc(38): Incorrect number of parameters (%d)", index)
                return -1, index
            index += 2
            if not 0 <= at(index) <= 255:
                log.warning("erresc: bad fgcolor %d", at(index))
                return -1, index
            return at(index), index
        log.warning("erresc(38): gfx attr %d unknown", at(index))
        return -1, index

    def set_attr(self, args: list[int]) -> None:
        """Apply SGR parameters to the cursor's attributes."""
        attr = self.screen.cursor.attr
        cfg = self.config
        i = 0
        while i < len(args):
            value = args[i]
            if value == 0:
                attr.mode &= ~_SGR_CLEAR
                attr.fg = cfg.defaultfg
                attr.bg = cfg.defaultbg
            elif value in _SGR_SET:
                attr.mode |= _SGR_SET[value]
            elif value in _SGR_UNSET:
                attr.mode &= ~_SGR_UNSET[value]
            elif value in (38, 48):
                color, i = self.define_color(args, i)
                if color >= 0:
                    if value == 38:
                        attr.fg = color
                    else:
                        attr.bg = color
            elif value == 39:
                attr.fg = cfg.defaultfg
            elif value == 49:
                attr.bg = cfg.defaultbg
            elif 30 <= value <= 37:
                attr.fg = value - 30
            elif 40 <= value <= 47:
                attr.bg = value - 40
            elif 90 <= value <= 97:
                attr.fg = value - 90 + 8
            elif 100 <= value <= 107:
                attr.bg = value - 100 + 8
            else:
                log.warning("erresc(default): gfx attr %d unknown", value)
            i += 1

    def _alt_screen(self, enable: bool) -> None:
        screen = self.screen
        alt = screen.alt_screen
        if alt:
            screen.clear_region(0, 0, screen.cols - 1, screen.rows - 1)
        if bool(enable) ^ alt:
            screen.swap_screen()

    def set_mode(self, private: bool, enable: bool, args: list[int]) -> None:
        """Set or reset the modes in ``args`` (DECSET/DECRST, SM/RM)."""
        screen = self.screen
        win = self.window
        for arg in args:
            if private:
                if arg == 1:
                    win.set_mode(enable, WinMode.APPCURSOR)
                elif arg == 5:
                    win.set_mode(enable, WinMode.REVERSE)
                elif arg == 6:
                    if enable:
                        screen.cursor.state |= CursorState.ORIGIN
                    else:
                        screen.cursor.state &= ~CursorState.ORIGIN
                    screen.move_to_absolute(0, 0)
                elif arg == 7:
                    if enable:
                        screen.mode |= TermMode.WRAP
                    else:
                        screen.mode &= ~TermMode.WRAP
                elif arg in _IGNORED_PRIVATE:
                    pass
                elif arg == 25:
                    win.set_mode(not enable, WinMode.HIDE)
                elif arg in _MOUSE_MODES:
                    win.set_pointer_motion(enable if arg == 1003 else False)
                    win.set_mode(False, WinMode.MOUSE)
                    win.set_mode(enable, _MOUSE_MODES[arg])
                elif arg == 1004:
                    win.set_mode(enable, WinMode.FOCUS)
                elif arg == 1006:
                    win.set_mode(enable, WinMode.MOUSESGR)
                elif arg == 1034:
                    win.set_mode(enable, WinMode.EIGHTBIT)
                elif arg == 1049:
                    if not self.config.allowaltscreen:
                        continue
                    if enable:
                        screen.cursor_save()
                    else:
                        screen.cursor_load()
                    self._alt_screen(enable)
                    if enable:
                        screen.cursor_save()
                    else:
                        screen.cursor_load()
                elif arg in (47, 1047):
                    if self.config.allowaltscreen:
                        self._alt_screen(enable)
                elif arg == 1048:
                    if enable:
                        screen.cursor_save()
                    else:
                        screen.cursor_load()
                elif arg == 2004:
                    win.set_mode(enable, WinMode.BRCKTPASTE)
                else:
                    log.warning("erresc: unknown private set/reset mode %d", arg)
            else:
                flags = {4: (TermMode.INSERT, enable), 12: (TermMode.ECHO, not enable),
                         20: (TermMode.CRLF, enable)}
                if arg == 0:
                    pass
                elif arg == 2:
                    win.set_mode(enable, WinMode.KBDLOCK)
                elif arg in flags:
                    flag, on = flags[arg]
                    if on:
                        screen.mode |= flag
                    else:
                        screen.mode &= ~flag
                else:
                    log.warning("erresc: unknown set/reset mode %d", arg)

    # printing

    def dump_line(self, n: int) -> None:
        """Send row ``n`` of the screen to the printer."""
        screen = self.screen
        line = screen.lines[n]
        length = min(screen.line_length(n), screen.cols)
        if not (length == 1 and line[0].u == ord(" ")):
            self._print(b"".join(utf8_encode(g.u) for g in line[:length]))
        self._print(b"\n")

    def dump_screen(self) -> None:
        for n in range(self.screen.rows):
            self.dump_line(n)

    def dump_selection(self) -> None:
        text = self.selection_text()
        if text:
            self._print(text.encode("utf-8"))

    def toggle_printer(self) -> None:
        self.screen.mode ^= TermMode.PRINT

    def selection_text(self) -> str | None:
        return self.screen.selection.text()