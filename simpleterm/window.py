"""Window mode flags and a headless window that records what it is told."""

from __future__ import annotations

from enum import IntFlag


class WinMode(IntFlag):
    """Mode flags held by the window side of the terminal."""

    NONE = 0
    VISIBLE = 1 << 0
    FOCUSED = 1 << 1
    APPKEYPAD = 1 << 2
    MOUSEBTN = 1 << 3
    MOUSEMOTION = 1 << 4
    REVERSE = 1 << 5
    KBDLOCK = 1 << 6
    HIDE = 1 << 7
    APPCURSOR = 1 << 8
    MOUSESGR = 1 << 9
    EIGHTBIT = 1 << 10
    BLINK = 1 << 11
    FBLINK = 1 << 12
    FOCUS = 1 << 13
    MOUSEX10 = 1 << 14
    MOUSEMANY = 1 << 15
    BRCKTPASTE = 1 << 16
    NUMLOCK = 1 << 17
    MOUSE = MOUSEBTN | MOUSEMOTION | MOUSEX10 | MOUSEMANY


class Window:
    """A display-less window.

    It keeps the state a terminal asks it to hold (title, modes, colours,
    selection) so the core can run without a graphical front end.
    Subclasses may override the methods to drive a real display.
    """

    MAX_CURSOR_STYLE = 7

    def __init__(self, default_title: str = "simpleterm", palette_size: int = 260) -> None:
        self.default_title = default_title
        self.palette_size = palette_size
        self.title = default_title
        self.mode = WinMode.NONE
        self.pointer_motion = False
        self.cursor_style = 0
        self.colors: dict[int, str] = {}
        self.selection: str | None = None
        self.clipboard: str | None = None
        self.bells = 0
        self.redraws = 0
        self.clears = 0

    def bell(self) -> None:
        self.bells += 1

    def clip_copy(self) -> None:
        """Copy the current selection to the clipboard."""
        self.clipboard = self.selection

    def load_colors(self) -> None:
        """Return every palette entry to its default."""
        self.colors.clear()

    def set_color_name(self, index: int, name: str | None) -> None:
        """Set palette entry ``index`` to ``name``, or reset it when ``name`` is None."""
        if not 0 <= index < self.palette_size:
            raise ValueError(f"colour index out of range: {index}")
        if name is None:
            self.colors.pop(index, None)
            return
        if not name:
            raise ValueError("empty colour name")
        self.colors[index] = name

    def set_title(self, title: str | None) -> None:
        self.title = self.default_title if title is None else title

    def set_cursor(self, style: int) -> None:
        if not 0 <= style <= self.MAX_CURSOR_STYLE:
            raise ValueError(f"unknown cursor style: {style}")
        self.cursor_style = style

    def set_mode(self, enable: bool, flag: WinMode) -> None:
        if enable:
            self.mode |= flag
        else:
            self.mode &= ~flag

    def set_pointer_motion(self, enable: bool) -> None:
        self.pointer_motion = bool(enable)

    def set_selection(self, text: str | None) -> None:
        self.selection = text

    def clear_window(self) -> None:
        self.clears += 1

    def redraw(self) -> None:
        self.redraws += 1