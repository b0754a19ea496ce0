"""Mouse selection over the visible screen.

The selection works on any screen object that provides:

* ``cols`` and ``rows``: the screen size;
* ``top`` and ``bot``: the scrolling region;
* ``alt_screen``: whether the alternate screen is shown;
* ``config``: a :class:`~simpleterm.glyph.TermConfig`;
* ``line(y)``: the glyphs of visible row ``y``, scroll-back included;
* ``line_length(y)``: the length of row ``y`` without trailing blanks;
* ``set_dirty(top, bot)``: mark rows for redrawing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .codec import utf8_encode
from .glyph import Attr, Glyph, SelectionMode, SelectionSnap, SelectionType


@dataclass
class Point:
    """A cell position on the screen."""

    x: int = 0
    y: int = 0


class Selection:
    """The text selection of a terminal screen.

    ``ob``/``oe`` hold the original begin and end points as the user gave
    them; ``nb``/``ne`` hold the normalized, snapped begin and end.
    """

    def __init__(self, screen: Any) -> None:
        self.screen = screen
        self.mode = SelectionMode.IDLE
        self.type = SelectionType.REGULAR
        self.snap_mode = SelectionSnap.NONE
        self.nb = Point()
        self.ne = Point()
        self.ob = Point(-1, 0)
        self.oe = Point()
        self.alt = False

    @property
    def active(self) -> bool:
        """Whether any selection exists."""
        return self.ob.x != -1

    def clear(self) -> None:
        """Drop the selection and mark its rows dirty."""
        if not self.active:
            return
        self.mode = SelectionMode.IDLE
        self.ob.x = -1
        self.screen.set_dirty(self.nb.y, self.ne.y)

    def start(self, col: int, row: int, snap: int) -> None:
        """Begin a new selection at ``(col, row)`` with the given snapping."""
        self.clear()
        self.mode = SelectionMode.EMPTY
        self.type = SelectionType.REGULAR
        self.alt = bool(self.screen.alt_screen)
        self.snap_mode = SelectionSnap(snap)
        self.ob = Point(col, row)
        self.oe = Point(col, row)
        self.normalize()
        if self.snap_mode != SelectionSnap.NONE:
            self.mode = SelectionMode.READY
        self.screen.set_dirty(self.nb.y, self.ne.y)

    def extend(self, col: int, row: int, type: int, done: bool) -> None:
        """Move the end of the selection; ``done`` finishes it."""
        if self.mode == SelectionMode.IDLE:
            return
        if done and self.mode == SelectionMode.EMPTY:
            self.clear()
            return

        old_end = Point(self.oe.x, self.oe.y)
        old_top = self.nb.y
        old_bot = self.ne.y
        old_type = self.type

        self.oe = Point(col, row)
        self.normalize()
        self.type = SelectionType(type)

        if (
            old_end != self.oe
            or old_type != self.type
            or self.mode == SelectionMode.EMPTY
        ):
            self.screen.set_dirty(min(self.nb.y, old_top), max(self.ne.y, old_bot))

        self.mode = SelectionMode.IDLE if done else SelectionMode.READY

    def normalize(self) -> None:
        """Recompute ``nb`` and ``ne`` from the original points."""
        ob, oe = self.ob, self.oe
        if self.type == SelectionType.REGULAR and ob.y != oe.y:
            nbx, nex = (ob.x, oe.x) if ob.y < oe.y else (oe.x, ob.x)
        else:
            nbx, nex = min(ob.x, oe.x), max(ob.x, oe.x)
        nby, ney = min(ob.y, oe.y), max(ob.y, oe.y)

        self.nb = Point(*self.snap(nbx, nby, -1))
        self.ne = Point(*self.snap(nex, ney, +1))

        if self.type == SelectionType.RECTANGULAR:
            return
        # expand the selection over line breaks
        length = self.screen.line_length(self.nb.y)
        if length < self.nb.x:
            self.nb.x = length
        if self.screen.line_length(self.ne.y) <= self.ne.x:
            self.ne.x = self.screen.cols - 1

    def selected(self, x: int, y: int) -> bool:
        """Tell whether the cell ``(x, y)`` lies inside the selection."""
        if (
            self.mode == SelectionMode.EMPTY
            or not self.active
            or self.alt != bool(self.screen.alt_screen)
        ):
            return False
        if self.type == SelectionType.RECTANGULAR:
            return self.nb.y <= y <= self.ne.y and self.nb.x <= x <= self.ne.x
        return (
            self.nb.y <= y <= self.ne.y
            and (y != self.nb.y or x >= self.nb.x)
            and (y != self.ne.y or x <= self.ne.x)
        )

    def _glyph(self, x: int, y: int) -> Glyph:
        line = self.screen.line(y)
        return line[min(max(x, 0), len(line) - 1)]

    def _is_delimiter(self, rune: int) -> bool:
        return rune != 0 and chr(rune) in self.screen.config.worddelimiters

    def snap(self, x: int, y: int, direction: int) -> tuple[int, int]:
        """Move ``(x, y)`` in ``direction`` to the edge of a word or line."""
        screen = self.screen
        cols, rows = screen.cols, screen.rows

        if self.snap_mode == SelectionSnap.WORD:
            prev = self._glyph(x, y)
            prev_delim = self._is_delimiter(prev.u)
            while True:
                newx, newy = x + direction, y
                if not 0 <= newx <= cols - 1:
                    newy += direction
                    newx = (newx + cols) % cols
                    if not 0 <= newy <= rows - 1:
                        break
                    xt, yt = (x, y) if direction > 0 else (newx, newy)
                    if not self._glyph(xt, yt).mode & Attr.WRAP:
                        break
                if newx >= screen.line_length(newy):
                    break
                glyph = self._glyph(newx, newy)
                delim = self._is_delimiter(glyph.u)
                if not glyph.mode & Attr.WDUMMY and (
                    delim != prev_delim or (delim and glyph.u != prev.u)
                ):
                    break
                x, y = newx, newy
                prev, prev_delim = glyph, delim

        elif self.snap_mode == SelectionSnap.LINE:
            # follow wrapped lines so that the whole logical line is taken
            if direction < 0:
                x = 0
                while y > 0 and self._glyph(cols - 1, y - 1).mode & Attr.WRAP:
                    y -= 1
            else:
                x = cols - 1
                if direction > 0:
                    while y < rows - 1 and self._glyph(cols - 1, y).mode & Attr.WRAP:
                        y += 1

        return x, y

    def scroll(self, orig: int, n: int) -> None:
        """Shift the selection by ``n`` rows after the region from ``orig`` scrolled."""
        if not self.active:
            return
        screen = self.screen
        top, bot = screen.top, screen.bot
        if not (orig <= self.ob.y <= bot or orig <= self.oe.y <= bot):
            return

        self.ob.y += n
        if self.ob.y > bot:
            self.clear()
            return
        self.oe.y += n
        if self.oe.y < top:
            self.clear()
            return

        if self.type == SelectionType.RECTANGULAR:
            if self.ob.y < top:
                self.ob.y = top
            if self.oe.y > bot:
                self.oe.y = bot
        else:
            if self.ob.y < top:
                self.ob.y = top
                self.ob.x = 0
            if self.oe.y > bot:
                self.oe.y = bot
                self.oe.x = screen.cols
        self.normalize()

    def text(self) -> str | None:
        """Return the selected text, or None when nothing is selected."""
        if not self.active:
            return None
        screen = self.screen
        out = bytearray()

        for y in range(self.nb.y, self.ne.y + 1):
            length = screen.line_length(y)
            if length == 0:
                out += b"\n"
                continue

            line = screen.line(y)
            if self.type == SelectionType.RECTANGULAR:
                first, lastx = self.nb.x, self.ne.x
            else:
                first = self.nb.x if self.nb.y == y else 0
                lastx = self.ne.x if self.ne.y == y else screen.cols - 1

            last = min(lastx, length - 1)
            while last >= first and line[last].u == ord(" "):
                last -= 1

            for glyph in line[max(first, 0):last + 1]:
                if not glyph.mode & Attr.WDUMMY:
                    out += utf8_encode(glyph.u)

            # copied line ends become '\n'; wrapped lines are joined
            wrapped = last >= 0 and bool(line[last].mode & Attr.WRAP)
            if (y < self.ne.y or lastx >= length) and not wrapped:
                out += b"\n"

        return out.decode("utf-8", errors="replace")