"""Headless terminal emulation core: codec, cells, window interface, screen, selection, escape-sequence interpreter and pty handling."""

__version__ = "0.8.2"

__all__ = ["codec", "glyph", "window", "screen", "selection", "emulator", "tty"]