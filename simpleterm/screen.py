"""The terminal screen: visible lines, alternate screen, history and cursor."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag

from .glyph import Attr, Glyph, TermConfig
from .selection import Selection


class TermMode(IntFlag):
    """Mode flags held by the terminal core."""

    NONE = 0
    WRAP = 1 << 0
    INSERT = 1 << 1
    ALTSCREEN = 1 << 2
    CRLF = 1 << 3
    ECHO = 1 << 4
    PRINT = 1 << 5
    UTF8 = 1 << 6
    SIXEL = 1 << 7


class CursorState(IntFlag):
    DEFAULT = 0
    WRAPNEXT = 1
    ORIGIN = 2


class Charset(IntEnum):
    GRAPHIC0 = 0
    GRAPHIC1 = 1
    UK = 2
    USA = 3
    MULTI = 4
    GER = 5
    FIN = 6


# DEC special graphics, as used by rxvt
_VT100_GRAPHICS = {
    "A": "↑", "B": "↓", "C": "→", "D": "←", "E": "█", "F": "▚", "G": "☃",
    "_": " ",
    "`": "◆", "a": "▒", "b": "␉", "c": "␌", "d": "␍", "e": "␊", "f": "°", "g": "±",
    "h": "␤", "i": "␋", "j": "┘", "k": "┐", "l": "┌", "m": "└", "n": "┼", "o": "⎺",
    "p": "⎻", "q": "─", "r": "⎼", "s": "⎽", "t": "├", "u": "┤", "v": "┴", "w": "┬",
    "x": "│", "y": "≤", "z": "≥", "{": "π", "|": "≠", "}": "£", "~": "·",
}


def _clamp(value: int, low: int, high: int) -> int:
    return low if value < low else high if value > high else value


@dataclass
class Cursor:
    """Cursor position, state and the attributes of new characters."""

    attr: Glyph = field(default_factory=Glyph)
    x: int = 0
    y: int = 0
    state: CursorState = CursorState.DEFAULT

    def copy(self) -> "Cursor":
        return dataclasses.replace(self, attr=self.attr.copy())


def _line_length(line: list[Glyph]) -> int:
    length = len(line)
    if line[length - 1].mode & Attr.WRAP:
        return length
    while length > 0 and line[length - 1].u == ord(" "):
        length -= 1
    return length


class Screen:
    """Character grid with scroll-back history and an alternate screen."""

    def __init__(self, cols: int, rows: int, config: TermConfig | None = None) -> None:
        self.config = config if config is not None else TermConfig()
        self.cols = 0
        self.rows = 0
        self.lines: list[list[Glyph]] = []
        self.alt: list[list[Glyph]] = []
        self.hist: list[list[Glyph]] = [[] for _ in range(self.history_size)]
        self.histi = 0
        self.scr = 0
        self.dirty: list[bool] = []
        self.cursor = Cursor(attr=Glyph(fg=self.config.defaultfg, bg=self.config.defaultbg))
        self.saved_cursors = [Cursor(attr=Glyph(u=0)), Cursor(attr=Glyph(u=0))]
        self.top = 0
        self.bot = 0
        self.mode = TermMode.NONE
        self.trantbl = [Charset.GRAPHIC0] * 4
        self.charset = 0
        self.icharset = 0
        self.tabs: list[bool] = []
        self.selection = Selection(self)
        self.resize(cols, rows)
        self.reset()

    @property
    def history_size(self) -> int:
        return self.config.history_size

    @property
    def alt_screen(self) -> bool:
        return bool(self.mode & TermMode.ALTSCREEN)

    def line(self, y: int) -> list[Glyph]:
        """Visible row ``y``, taking the scroll-back offset into account."""
        if y < self.scr:
            size = self.history_size
            return self.hist[(y + self.histi - self.scr + size + 1) % size]
        return self.lines[y - self.scr]

    def line_length(self, y: int) -> int:
        """Length of visible row ``y`` without trailing blanks."""
        return _line_length(self.line(y))

    def history_line(self, n: int) -> list[Glyph]:
        """Row ``n`` of the history buffer followed by the screen."""
        size = self.history_size
        if n <= size - self.rows + 2:
            return self.hist[n]
        return self.lines[n - size + self.rows - 3]

    def history_line_length(self, n: int) -> int:
        return _line_length(self.history_line(n))

    def _blank(self) -> Glyph:
        return Glyph(u=ord(" "), mode=Attr.NULL, fg=self.cursor.attr.fg, bg=self.cursor.attr.bg)

    def reset(self) -> None:
        """Return cursor, tabs, modes and both screens to their initial state."""
        cfg = self.config
        self.cursor = Cursor(attr=Glyph(fg=cfg.defaultfg, bg=cfg.defaultbg))
        self.tabs = [False] * self.cols
        for i in range(cfg.tabspaces, self.cols, cfg.tabspaces):
            self.tabs[i] = True
        self.top = 0
        self.bot = self.rows - 1
        self.mode = TermMode.WRAP | TermMode.UTF8
        self.trantbl = [Charset.USA] * 4
        self.charset = 0
        for _ in range(2):
            self.move_to(0, 0)
            self.cursor_save()
            self.clear_region(0, 0, self.cols - 1, self.rows - 1)
            self.swap_screen()

    def resize(self, cols: int, rows: int) -> None:
        """Change the screen size, keeping the cursor row visible."""
        if cols < 1 or rows < 1:
            raise ValueError(f"cannot resize to {cols}x{rows}")
        minrow = min(rows, self.rows)
        mincol = min(cols, self.cols)

        # slide the screen so the cursor stays in view
        shift = max(0, self.cursor.y - rows + 1)
        self.lines = self.lines[shift:shift + rows]
        self.alt = self.alt[shift:shift + rows]

        def fit(line: list[Glyph]) -> list[Glyph]:
            return line[:cols] + [Glyph() for _ in range(cols - len(line))]

        self.lines = [fit(line) for line in self.lines]
        self.alt = [fit(line) for line in self.alt]
        while len(self.lines) < rows:
            self.lines.append(fit([]))
            self.alt.append(fit([]))

        self.dirty = (self.dirty + [False] * rows)[:rows]

        attr = self.cursor.attr
        self.hist = [
            line[:mincol]
            + [Glyph(u=ord(" "), mode=attr.mode, fg=attr.fg, bg=attr.bg) for _ in range(mincol, cols)]
            for line in self.hist
        ]

        old_cols = self.cols
        if cols > old_cols:
            tabs = self.tabs + [False] * (cols - old_cols)
            pos = old_cols - 1
            while pos > 0 and not tabs[pos]:
                pos -= 1
            for p in range(pos + self.config.tabspaces, cols, self.config.tabspaces):
                tabs[p] = True
            self.tabs = tabs
        else:
            self.tabs = self.tabs[:cols]

        self.cols = cols
        self.rows = rows
        self.set_scroll_region(0, rows - 1)
        self.move_to(self.cursor.x, self.cursor.y)

        saved = self.cursor.copy()
        for _ in range(2):
            if mincol < cols and minrow > 0:
                self.clear_region(mincol, 0, cols - 1, minrow - 1)
            if minrow < rows:
                self.clear_region(0, minrow, cols - 1, rows - 1)
            self.swap_screen()
            self.cursor_load()
        self.cursor = saved

    def set_dirty(self, top: int, bot: int) -> None:
        top = _clamp(top, 0, self.rows - 1)
        bot = _clamp(bot, 0, self.rows - 1)
        for i in range(top, bot + 1):
            self.dirty[i] = True

    def set_dirty_attr(self, attr: int) -> None:
        """Mark dirty every row holding a cell with ``attr``."""
        for i in range(self.rows - 1):
            if any(glyph.mode & attr for glyph in self.lines[i][: self.cols - 1]):
                self.set_dirty(i, i)

    def full_dirty(self) -> None:
        self.set_dirty(0, self.rows - 1)

    def has_attr(self, attr: int) -> bool:
        """Tell whether any cell carries ``attr``."""
        return any(
            glyph.mode & attr
            for line in self.lines[: self.rows - 1]
            for glyph in line[: self.cols - 1]
        )

    def swap_screen(self) -> None:
        self.lines, self.alt = self.alt, self.lines
        self.mode ^= TermMode.ALTSCREEN
        self.full_dirty()

    def cursor_save(self) -> None:
        self.saved_cursors[int(self.alt_screen)] = self.cursor.copy()

    def cursor_load(self) -> None:
        saved = self.saved_cursors[int(self.alt_screen)]
        self.cursor = saved.copy()
        self.move_to(saved.x, saved.y)

    def move_to(self, x: int, y: int) -> None:
        if self.cursor.state & CursorState.ORIGIN:
            miny, maxy = self.top, self.bot
        else:
            miny, maxy = 0, self.rows - 1
        self.cursor.state &= ~CursorState.WRAPNEXT
        self.cursor.x = _clamp(x, 0, self.cols - 1)
        self.cursor.y = _clamp(y, miny, maxy)

    def move_to_absolute(self, x: int, y: int) -> None:
        """Move relative to the scrolling region when origin mode is on."""
        offset = self.top if self.cursor.state & CursorState.ORIGIN else 0
        self.move_to(x, y + offset)

    def set_char(self, rune: int, attr: Glyph, x: int, y: int) -> None:
        """Store ``rune`` with ``attr`` at ``(x, y)``."""
        if self.trantbl[self.charset] == Charset.GRAPHIC0 and 0x41 <= rune <= 0x7E:
            graphic = _VT100_GRAPHICS.get(chr(rune))
            if graphic is not None:
                rune = ord(graphic)

        line = self.lines[y]
        cell = line[x]
        if cell.mode & Attr.WIDE:
            if x + 1 < self.cols:
                line[x + 1].u = ord(" ")
                line[x + 1].mode &= ~Attr.WDUMMY
        elif cell.mode & Attr.WDUMMY:
            line[x - 1].u = ord(" ")
            line[x - 1].mode &= ~Attr.WIDE

        self.dirty[y] = True
        glyph = attr.copy()
        glyph.u = rune
        line[x] = glyph

    def clear_region(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Blank the rectangle between the two corners, inclusive."""
        if x1 > x2:
            x1, x2 = x2, x1
        if y1 > y2:
            y1, y2 = y2, y1
        x1 = _clamp(x1, 0, self.cols - 1)
        x2 = _clamp(x2, 0, self.cols - 1)
        y1 = _clamp(y1, 0, self.rows - 1)
        y2 = _clamp(y2, 0, self.rows - 1)

        for y in range(y1, y2 + 1):
            self.dirty[y] = True
            line = self.lines[y]
            for x in range(x1, x2 + 1):
                if self.selection.selected(x, y):
                    self.selection.clear()
                line[x] = self._blank()

    def delete_chars(self, n: int) -> None:
        """Delete ``n`` cells at the cursor, pulling the rest of the line left."""
        x, y = self.cursor.x, self.cursor.y
        n = _clamp(n, 0, self.cols - x)
        line = self.lines[y]
        line[x:self.cols - n] = line[x + n:self.cols]
        self.clear_region(self.cols - n, y, self.cols - 1, y)

    def insert_blanks(self, n: int) -> None:
        """Insert ``n`` blank cells at the cursor, pushing the line right."""
        x, y = self.cursor.x, self.cursor.y
        n = _clamp(n, 0, self.cols - x)
        line = self.lines[y]
        line[x + n:self.cols] = line[x:self.cols - n]
        self.clear_region(x, y, x + n - 1, y)

    def insert_blank_lines(self, n: int) -> None:
        if self.top <= self.cursor.y <= self.bot:
            self.scroll_down(self.cursor.y, n, False)

    def delete_lines(self, n: int) -> None:
        if self.top <= self.cursor.y <= self.bot:
            self.scroll_up(self.cursor.y, n, False)

    def scroll_down(self, orig: int, n: int, copy_history: bool) -> None:
        """Scroll rows ``orig``..``bot`` down by ``n``."""
        n = _clamp(n, 0, self.bot - orig + 1)
        if copy_history:
            size = self.history_size
            self.histi = (self.histi - 1 + size) % size
            self.hist[self.histi], self.lines[self.bot] = self.lines[self.bot], self.hist[self.histi]

        self.set_dirty(orig, self.bot - n)
        self.clear_region(0, self.bot - n + 1, self.cols - 1, self.bot)

        for i in range(self.bot, orig + n - 1, -1):
            self.lines[i], self.lines[i - n] = self.lines[i - n], self.lines[i]

        self.selection.scroll(orig, n)

    def scroll_up(self, orig: int, n: int, copy_history: bool) -> None:
        """Scroll rows ``orig``..``bot`` up by ``n``, optionally into history."""
        n = _clamp(n, 0, self.bot - orig + 1)
        size = self.history_size
        if copy_history:
            self.histi = (self.histi + 1) % size
            self.hist[self.histi], self.lines[orig] = self.lines[orig], self.hist[self.histi]

        if 0 < self.scr < size:
            self.scr = min(self.scr + n, size - 1)

        self.clear_region(0, orig, self.cols - 1, orig + n - 1)
        self.set_dirty(orig + n, self.bot)

        for i in range(orig, self.bot - n + 1):
            self.lines[i], self.lines[i + n] = self.lines[i + n], self.lines[i]

        self.selection.scroll(orig, -n)

    def history_scroll_down(self, n: int) -> None:
        """Move the view ``n`` rows towards the live screen."""
        if n < 0:
            n = self.rows + n
        n = min(n, self.scr)
        if self.scr > 0:
            self.scr -= n
            self.selection.scroll(0, -n)
            self.full_dirty()

    def history_scroll_up(self, n: int) -> None:
        """Move the view ``n`` rows back into history."""
        if n < 0:
            n = self.rows + n
        if self.scr <= self.history_size - n:
            self.scr += n
            self.selection.scroll(0, n)
            self.full_dirty()

    def new_line(self, first_col: bool) -> None:
        y = self.cursor.y
        if y == self.bot:
            self.scroll_up(self.top, 1, True)
        else:
            y += 1
        self.move_to(0 if first_col else self.cursor.x, y)

    def put_tab(self, n: int) -> None:
        """Move the cursor ``n`` tab stops forward, or back when negative."""
        x = self.cursor.x
        if n > 0:
            while x < self.cols and n > 0:
                n -= 1
                x += 1
                while x < self.cols and not self.tabs[x]:
                    x += 1
        elif n < 0:
            while x > 0 and n < 0:
                n += 1
                x -= 1
                while x > 0 and not self.tabs[x]:
                    x -= 1
        self.cursor.x = _clamp(x, 0, self.cols - 1)

    def set_scroll_region(self, top: int, bot: int) -> None:
        top = _clamp(top, 0, self.rows - 1)
        bot = _clamp(bot, 0, self.rows - 1)
        if top > bot:
            top, bot = bot, top
        self.top = top
        self.bot = bot