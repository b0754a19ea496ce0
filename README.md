# simpleterm

`simpleterm` is the emulation core of a small VT100/xterm-style terminal.
It keeps a model of the terminal screen and interprets the byte stream that a
program writes to its terminal. It can also run a program on a
pseudo-terminal, or open a serial line. It has no display of its own. A front
end reads the screen model and draws it.

## Modules

- `simpleterm.codec`: `utf8_decode`, `utf8_encode`, `utf8_validate` and
  `base64_decode`.
  - `utf8_decode(data)` returns `(rune, consumed)`. A count of 0 means the data
    stops in the middle of a sequence, so the caller should keep the tail.
    Malformed input and surrogates decode to U+FFFD.
  - `base64_decode` is lenient. It skips non-printable characters, treats
    unknown symbols as zero, stops at `=`, and cuts the result at the first
    NUL byte.
- `simpleterm.glyph`: cell data and settings.
  - `Glyph` is one cell: rune, `Attr` flags, foreground and background.
    `copy()` duplicates it. `same_attributes()` compares attributes and
    ignores the wrap and ligature flags.
  - `truecolor(r, g, b)` packs an RGB value and `is_truecolor(color)` tests for
    one.
  - The selection enums are `SelectionMode`, `SelectionType` and
    `SelectionSnap`.
  - `TermConfig` holds the shell, `stty` arguments, the answerback string
    (`vtiden`), word delimiters, whether the alternate screen is allowed, the
    `TERM` name, tab width, default colours and the history size (2000 lines).
- `simpleterm.window`: `WinMode` flags and `Window`, the object the emulator
  calls for bell, title, palette colours, cursor style, window modes, pointer
  motion, selection, clipboard, clearing and redrawing.
  - The default `Window` has no display. It only records what it is told:
    `title`, `mode`, `colors`, `cursor_style`, `selection`, `clipboard`, and
    the `bells`, `redraws` and `clears` counters.
  - `set_color_name` raises `ValueError` for an index outside the palette or
    an empty name. `set_cursor` raises it for a style above 7.
  - Subclass `Window` to drive a real display.
- `simpleterm.screen`: `Screen` and `Cursor`.
  - `Screen` has a primary and an alternate grid, scroll-back history with a
    view offset, a scrolling region, tab stops and dirty-row tracking.
  - Cursor movement, with origin mode and save/restore per screen.
  - Editing: clear regions, insert and delete characters or lines.
  - DEC special graphics translation when that charset is selected.
  - `resize(cols, rows)` raises `ValueError` for sizes below 1x1.
- `simpleterm.selection`: `Selection` handles regular and rectangular
  selection, word and line snapping, and follows the text when the screen
  scrolls. `text()` returns the selected text, with wrapped lines joined and
  other line ends as `\n`.
- `simpleterm.emulator`: `Terminal`, `CSIEscape`, `parse_csi` and
  `parse_str`.
  - `Terminal.write(data, show_ctrl)` handles control codes, the ESC, CSI,
    OSC, DCS, APC and PM sequences, and SGR attributes (16, 256 and true
    colour).
  - It handles DEC private and ANSI modes, including mouse modes, bracketed
    paste and the alternate screen (47, 1047, 1048, 1049).
  - OSC handles titles, clipboard setting (52) and palette changes (4, 10,
    11, 12, 104).
  - It answers device status and attribute requests.
  - Unknown sequences are reported through the `logging` module.
- `simpleterm.tty`: `Tty`, `shell_environment`, `stty_command`, `TtyError` and
  `ChildExited`.
  - `Tty.spawn` starts the shell, or `args`, on a new pty. With a `line` it
    opens that device and runs `stty` on it instead. With `out` it writes
    printer output to a file, or to standard output for `-`.
  - `read`, `write`, `resize`, `hangup`, `send_break` and `close` manage the
    line.
  - `external_pipe(argv)` sends history and screen text to a new process.
    `iso14755(command)` runs a command that prints a hexadecimal code point
    and types that character.
  - `read` raises `ChildExited` once the child has ended.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
python -m pytest
```

## Example

```python
from simpleterm.glyph import TermConfig
from simpleterm.window import Window
from simpleterm.emulator import Terminal

replies = []
term = Terminal(80, 24, TermConfig(), Window(), replies.append, None)

term.write(b"\x1b[1;31mhello\x1b[0m world\r\n", False)
term.write(b"\x1b[6n", False)   # ask for the cursor position

print(replies)                  # [b'\x1b[2;1R']
print(term.screen.lines[0][0])  # the 'h' cell, bold, foreground 1
```

The `writer` callable receives every reply the terminal sends back to the
program, such as device attribute and cursor position reports. The
`printer` callable, if given, receives:

- the text that arrives while printer mode is on;
- the output of `dump_screen`, `dump_line` and `dump_selection`.

To run a real shell, attach a `Tty`. It takes over the terminal's writer and
printer:

```python
from simpleterm.tty import Tty

tty = Tty(term, TermConfig())
tty.spawn(None, None, None, None)  # starts $SHELL on a new pty
tty.read()                         # feeds the shell's output into the terminal
tty.write(b"ls\r", True)
tty.close()
```

## What it does not do

`simpleterm` has no graphical window and draws nothing. It has no font or
glyph rendering, no box-drawing or ligature shaping, and does not translate
keyboard or mouse input. There is no command-line program either: it is a
library for a front end to build on. Sixel data is recognised and discarded,
not rendered.