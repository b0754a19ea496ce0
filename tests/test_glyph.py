from simpleterm.glyph import (
    Attr,
    Glyph,
    SelectionMode,
    SelectionSnap,
    SelectionType,
    TermConfig,
    is_truecolor,
    truecolor,
)


def test_default_glyph_is_blank():
    glyph = Glyph()
    assert glyph.u == ord(" ")
    assert glyph.mode == Attr.NULL


def test_copy_is_independent():
    original = Glyph(u=ord("x"), mode=Attr.BOLD, fg=3, bg=4)
    duplicate = original.copy()
    assert duplicate == original
    duplicate.mode |= Attr.ITALIC
    duplicate.u = ord("y")
    assert original.mode == Attr.BOLD
    assert original.u == ord("x")


def test_same_attributes_ignores_wrap_and_ligature():
    a = Glyph(u=ord("a"), mode=Attr.BOLD, fg=1, bg=2)
    b = Glyph(u=ord("b"), mode=Attr.BOLD | Attr.WRAP | Attr.LIGA, fg=1, bg=2)
    assert a.same_attributes(b)
    assert b.same_attributes(a)


def test_same_attributes_detects_mode_difference():
    a = Glyph(mode=Attr.BOLD)
    b = Glyph(mode=Attr.UNDERLINE)
    assert not a.same_attributes(b)


def test_same_attributes_detects_colour_difference():
    assert not Glyph(fg=1).same_attributes(Glyph(fg=2))
    assert not Glyph(bg=1).same_attributes(Glyph(bg=2))


def test_truecolor_components_recoverable():
    r, g, b = 12, 200, 255
    color = truecolor(r, g, b)
    assert (color >> 16) & 0xFF == r
    assert (color >> 8) & 0xFF == g
    assert color & 0xFF == b


def test_truecolor_flag():
    assert is_truecolor(truecolor(0, 0, 0))
    assert not is_truecolor(255)


def test_bold_faint_combination():
    combined = Glyph(mode=Attr.BOLD_FAINT)
    assert combined.same_attributes(Glyph(mode=Attr.BOLD | Attr.FAINT))
    assert not combined.same_attributes(Glyph(mode=Attr.BOLD))
    assert not combined.same_attributes(Glyph(mode=Attr.BOLD | Attr.ITALIC))


def test_selection_enums_follow_source_values():
    assert SelectionMode.IDLE < SelectionMode.EMPTY < SelectionMode.READY
    assert SelectionType(SelectionType.RECTANGULAR.value) is SelectionType.RECTANGULAR
    assert SelectionSnap(SelectionSnap.LINE.value) is SelectionSnap.LINE


def test_config_instances_are_independent():
    first = TermConfig(tabspaces=4)
    second = TermConfig()
    assert first.tabspaces == 4
    assert second.tabspaces != first.tabspaces
    assert second.vtiden.startswith("\033[")