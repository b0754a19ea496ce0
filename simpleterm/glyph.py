"""Character cells, attribute flags and terminal configuration."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import IntEnum, IntFlag


class Attr(IntFlag):
    """Attribute flags of a character cell."""

    NULL = 0
    BOLD = 1 << 0
    FAINT = 1 << 1
    ITALIC = 1 << 2
    UNDERLINE = 1 << 3
    BLINK = 1 << 4
    REVERSE = 1 << 5
    INVISIBLE = 1 << 6
    STRUCK = 1 << 7
    WRAP = 1 << 8
    WIDE = 1 << 9
    WDUMMY = 1 << 10
    BOXDRAW = 1 << 11
    LIGA = 1 << 12
    BOLD_FAINT = BOLD | FAINT


class SelectionMode(IntEnum):
    IDLE = 0
    EMPTY = 1
    READY = 2


class SelectionType(IntEnum):
    REGULAR = 1
    RECTANGULAR = 2


class SelectionSnap(IntEnum):
    NONE = 0
    WORD = 1
    LINE = 2


_TRUECOLOR_FLAG = 1 << 24


def truecolor(r: int, g: int, b: int) -> int:
    """Pack an RGB triple into a direct-colour value."""
    return _TRUECOLOR_FLAG | (r << 16) | (g << 8) | b


def is_truecolor(color: int) -> bool:
    """Tell whether a colour value is direct RGB rather than a palette index."""
    return bool(color & _TRUECOLOR_FLAG)


@dataclass
class Glyph:
    """One character cell: rune, attributes and colours."""

    u: int = ord(" ")
    mode: Attr = Attr.NULL
    fg: int = 0
    bg: int = 0

    def copy(self) -> "Glyph":
        return dataclasses.replace(self)

    def same_attributes(self, other: "Glyph") -> bool:
        """Compare rendering attributes, ignoring wrap and ligature flags."""
        ignored = ~(Attr.WRAP | Attr.LIGA)
        return (
            (self.mode & ignored) == (other.mode & ignored)
            and self.fg == other.fg
            and self.bg == other.bg
        )


@dataclass
class TermConfig:
    """Settings the terminal core reads."""

    shell: str = "/bin/sh"
    utmp: str | None = None
    stty_args: str = "stty raw pass8 nl -echo -iexten -cstopb 38400"
    vtiden: str = "\033[?6c"
    worddelimiters: str = " "
    allowaltscreen: bool = True
    termname: str = "st-256color"
    tabspaces: int = 8
    defaultfg: int = 7
    defaultbg: int = 0
    defaultcs: int = 256
    history_size: int = 2000