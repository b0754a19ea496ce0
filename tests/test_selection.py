import pytest

from simpleterm.glyph import Attr, Glyph, SelectionMode, SelectionSnap, SelectionType, TermConfig
from simpleterm.selection import Point, Selection


class FakeScreen:
    def __init__(self, rows_text, cols, wrapped=()):
        self.cols = cols
        self.rows = len(rows_text)
        self.top = 0
        self.bot = self.rows - 1
        self.alt_screen = False
        self.config = TermConfig()
        self.dirty = set()
        self.lines = []
        for y, text in enumerate(rows_text):
            padded = text.ljust(cols)
            line = [Glyph(u=ord(ch)) for ch in padded]
            if y in wrapped:
                line[cols - 1].mode |= Attr.WRAP
            self.lines.append(line)

    def line(self, y):
        return self.lines[y]

    def line_length(self, y):
        line = self.lines[y]
        if line[self.cols - 1].mode & Attr.WRAP:
            return self.cols
        i = self.cols
        while i > 0 and line[i - 1].u == ord(" "):
            i -= 1
        return i

    def set_dirty(self, top, bot):
        top = min(max(top, 0), self.rows - 1)
        bot = min(max(bot, 0), self.rows - 1)
        self.dirty.update(range(top, bot + 1))


def select(sel, start, end, type=SelectionType.REGULAR, snap=0):
    sel.start(start[0], start[1], snap)
    sel.extend(end[0], end[1], type, False)
    sel.extend(end[0], end[1], type, True)


def test_initially_nothing_selected():
    sel = Selection(FakeScreen(["abc"], 5))
    assert sel.text() is None
    assert sel.selected(0, 0) is False
    assert sel.mode == SelectionMode.IDLE


def test_single_line_selection():
    sel = Selection(FakeScreen(["hello world"], 12))
    select(sel, (0, 0), (4, 0))
    assert sel.text() == "hello"
    assert sel.selected(4, 0)
    assert not sel.selected(5, 0)
    assert sel.mode == SelectionMode.IDLE


def test_multi_line_regular_selection():
    sel = Selection(FakeScreen(["abc", "def", "ghi"], 5))
    select(sel, (1, 0), (1, 2))
    assert sel.text() == "bc\ndef\ngh"
    assert sel.selected(0, 1)
    assert not sel.selected(0, 0)
    assert not sel.selected(2, 2)


def test_reverse_drag_normalizes():
    screen = FakeScreen(["abc", "def", "ghi"], 5)
    forward = Selection(screen)
    select(forward, (1, 0), (1, 2))
    backward = Selection(screen)
    select(backward, (1, 2), (1, 0))
    assert backward.text() == forward.text()
    assert (backward.nb, backward.ne) == (forward.nb, forward.ne)


def test_rectangular_selection():
    sel = Selection(FakeScreen(["abcd", "efgh", "ijkl"], 4))
    select(sel, (1, 0), (2, 2), type=SelectionType.RECTANGULAR)
    assert sel.text() == "bc\nfg\njk"
    assert sel.selected(1, 1)
    assert not sel.selected(0, 1)
    assert not sel.selected(3, 1)


def test_done_while_empty_clears():
    sel = Selection(FakeScreen(["abc"], 5))
    sel.start(1, 0, 0)
    assert sel.mode == SelectionMode.EMPTY
    sel.extend(1, 0, SelectionType.REGULAR, True)
    assert sel.text() is None
    assert sel.ob.x == -1


def test_extend_when_idle_does_nothing():
    sel = Selection(FakeScreen(["abc"], 5))
    sel.extend(2, 0, SelectionType.REGULAR, False)
    assert sel.text() is None
    assert sel.mode == SelectionMode.IDLE


def test_empty_selection_is_not_selected():
    sel = Selection(FakeScreen(["abc"], 5))
    sel.start(1, 0, 0)
    assert not sel.selected(1, 0)


def test_word_snap():
    sel = Selection(FakeScreen(["foo bar baz"], 12))
    sel.start(5, 0, SelectionSnap.WORD)
    assert sel.mode == SelectionMode.READY
    assert sel.text() == "bar"
    assert (sel.nb.x, sel.ne.x) == (4, 6)


def test_word_snap_method_returns_position():
    sel = Selection(FakeScreen(["foo bar baz"], 12))
    sel.snap_mode = SelectionSnap.WORD
    assert sel.snap(1, 0, -1) == (0, 0)
    assert sel.snap(1, 0, +1) == (2, 0)


def test_word_snap_follows_wrapped_line():
    sel = Selection(FakeScreen(["  abcd", "ef gh"], 6, wrapped={0}))
    sel.start(4, 0, SelectionSnap.WORD)
    assert sel.text() == "abcdef"


def test_line_snap():
    sel = Selection(FakeScreen(["foo bar baz", "next"], 12))
    sel.start(3, 0, SelectionSnap.LINE)
    assert sel.text() == "foo bar baz\n"
    assert sel.nb.x == 0


def test_line_snap_spans_wrapped_lines():
    screen = FakeScreen(["abcdef", "ghi", "jkl"], 6, wrapped={0})
    sel = Selection(screen)
    sel.start(1, 1, SelectionSnap.LINE)
    assert (sel.nb.y, sel.ne.y) == (0, 1)
    assert sel.text() == "abcdefghi\n"


def test_clear_marks_dirty_and_resets():
    screen = FakeScreen(["abc", "def"], 5)
    sel = Selection(screen)
    select(sel, (0, 0), (1, 1))
    screen.dirty.clear()
    sel.clear()
    assert sel.text() is None
    assert screen.dirty == {0, 1}


def test_alt_screen_mismatch_hides_selection():
    screen = FakeScreen(["abc"], 5)
    sel = Selection(screen)
    select(sel, (0, 0), (2, 0))
    assert sel.selected(1, 0)
    screen.alt_screen = True
    assert not sel.selected(1, 0)


def test_scroll_moves_selection():
    screen = FakeScreen(["abc", "def", "ghi"], 5)
    sel = Selection(screen)
    select(sel, (0, 1), (2, 1))
    sel.scroll(0, -1)
    assert (sel.ob.y, sel.oe.y) == (0, 0)
    assert sel.selected(1, 0)


def test_scroll_out_of_view_clears():
    screen = FakeScreen(["abc", "def", "ghi"], 5)
    sel = Selection(screen)
    select(sel, (0, 1), (2, 1))
    sel.scroll(0, -5)
    assert sel.text() is None


def test_scroll_clamps_begin_to_top():
    screen = FakeScreen(["abc", "def", "ghi"], 5)
    sel = Selection(screen)
    select(sel, (2, 0), (1, 2))
    sel.scroll(0, -1)
    assert sel.ob == Point(0, 0)
    assert sel.oe.y == 1


def test_scroll_outside_region_is_ignored():
    screen = FakeScreen(["abc", "def", "ghi"], 5)
    sel = Selection(screen)
    select(sel, (0, 0), (2, 0))
    sel.scroll(1, 1)
    assert (sel.ob.y, sel.oe.y) == (0, 0)


def test_wrapped_line_joined_without_newline():
    sel = Selection(FakeScreen(["abcd", "ef"], 4, wrapped={0}))
    select(sel, (0, 0), (1, 1))
    assert sel.text() == "abcdef"


def test_blank_line_gives_newline():
    sel = Selection(FakeScreen(["ab", "", "cd"], 4))
    select(sel, (0, 0), (1, 2))
    assert sel.text().split("\n") == ["ab", "", "cd"]


def test_wide_dummy_cells_skipped():
    screen = FakeScreen(["ab"], 4)
    screen.lines[0][0] = Glyph(u=0x4E2D, mode=Attr.WIDE)
    screen.lines[0][1] = Glyph(u=0, mode=Attr.WDUMMY)
    screen.lines[0][2] = Glyph(u=ord("x"))
    sel = Selection(screen)
    select(sel, (0, 0), (2, 0))
    assert sel.text() == "\u4e2dx"


def test_start_with_invalid_snap_raises():
    sel = Selection(FakeScreen(["abc"], 5))
    with pytest.raises(ValueError):
        sel.start(0, 0, 9)