[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "simpleterm"
version = "0.8.2"
description = "Headless VT100/xterm terminal emulation core: screen model, escape-sequence interpreter, selection and pty handling"
requires-python = ">=3.10"
keywords = ["terminal", "emulator", "vt100", "xterm", "pty", "ansi", "escape-sequences"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals :: Terminal Emulators/X Terminals",
]
dependencies = [
    "wcwidth",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.setuptools.packages.find]
include = ["simpleterm*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
