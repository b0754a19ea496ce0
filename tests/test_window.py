import pytest

from simpleterm.window import WinMode, Window


def test_title_set_and_reset():
    window = Window(default_title="term")
    window.set_title("editor")
    assert window.title == "editor"
    window.set_title(None)
    assert window.title == "term"


def test_set_mode_toggles_flags():
    window = Window()
    window.set_mode(True, WinMode.APPCURSOR)
    window.set_mode(True, WinMode.BRCKTPASTE)
    assert WinMode.APPCURSOR in window.mode
    assert WinMode.BRCKTPASTE in window.mode
    window.set_mode(False, WinMode.APPCURSOR)
    assert WinMode.APPCURSOR not in window.mode
    assert WinMode.BRCKTPASTE in window.mode


def test_clearing_mouse_group_clears_every_mouse_mode():
    window = Window()
    window.set_mode(True, WinMode.MOUSEBTN | WinMode.FOCUS)
    window.set_mode(False, WinMode.MOUSE)
    assert not window.mode & WinMode.MOUSE
    assert WinMode.FOCUS in window.mode


def test_mouse_group_members():
    window = Window()
    for flag in (WinMode.MOUSEBTN, WinMode.MOUSEMOTION, WinMode.MOUSEX10, WinMode.MOUSEMANY):
        window.set_mode(True, flag)
    window.set_mode(True, WinMode.MOUSESGR)
    window.set_mode(False, WinMode.MOUSE)
    for flag in (WinMode.MOUSEBTN, WinMode.MOUSEMOTION, WinMode.MOUSEX10, WinMode.MOUSEMANY):
        assert flag not in window.mode
    assert WinMode.MOUSESGR in window.mode


def test_cursor_style_validation():
    window = Window()
    window.set_cursor(Window.MAX_CURSOR_STYLE)
    assert window.cursor_style == Window.MAX_CURSOR_STYLE
    with pytest.raises(ValueError):
        window.set_cursor(Window.MAX_CURSOR_STYLE + 1)
    with pytest.raises(ValueError):
        window.set_cursor(-1)
    assert window.cursor_style == Window.MAX_CURSOR_STYLE


def test_color_set_reset_and_reload():
    window = Window()
    window.set_color_name(1, "#ff0000")
    window.set_color_name(2, "#00ff00")
    assert window.colors[1] == "#ff0000"
    window.set_color_name(1, None)
    assert 1 not in window.colors
    window.load_colors()
    assert window.colors == {}


def test_color_index_out_of_range():
    window = Window(palette_size=16)
    with pytest.raises(ValueError):
        window.set_color_name(-1, None)
    with pytest.raises(ValueError):
        window.set_color_name(16, "#ffffff")


def test_empty_color_name_rejected():
    window = Window()
    with pytest.raises(ValueError):
        window.set_color_name(3, "")


def test_clip_copy_uses_selection():
    window = Window()
    window.set_selection("copied text")
    window.clip_copy()
    assert window.clipboard == "copied text"


def test_event_counters():
    window = Window()
    window.bell()
    window.bell()
    window.redraw()
    window.clear_window()
    assert window.bells == 2
    assert window.redraws == 1
    assert window.clears == 1


def test_pointer_motion():
    window = Window()
    window.set_pointer_motion(1)
    assert window.pointer_motion is True
    window.set_pointer_motion(0)
    assert window.pointer_motion is False