"""UTF-8 and base64 decoding with the terminal's own tolerance rules."""

from __future__ import annotations

from itertools import zip_longest
from typing import Iterator, Union

UTF_INVALID = 0xFFFD
UTF_SIZE = 4

_UTF_BYTE = (0x80, 0x00, 0xC0, 0xE0, 0xF0)
_UTF_MASK = (0xC0, 0x80, 0xE0, 0xF0, 0xF8)
_UTF_MIN = (0, 0, 0x80, 0x800, 0x10000)
_UTF_MAX = (0x10FFFF, 0x7F, 0x7FF, 0xFFFF, 0x10FFFF)

_BASE64_ALPHABET = b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_BASE64_DIGITS = {symbol: value for value, symbol in enumerate(_BASE64_ALPHABET)}
_BASE64_DIGITS[ord("=")] = -1

BytesLike = Union[bytes, bytearray, memoryview]


def _decode_byte(byte: int) -> tuple[int, int]:
    """Return the payload bits of a byte and its kind (0 = continuation)."""
    for kind, (mask, lead) in enumerate(zip(_UTF_MASK, _UTF_BYTE)):
        if byte & mask == lead:
            return byte & ~mask & 0xFF, kind
    return 0, len(_UTF_MASK)


def utf8_validate(rune: int, size: int) -> tuple[int, int]:
    """Check a rune against the range allowed for ``size`` bytes.

    Returns the rune (replaced by U+FFFD when out of range or a surrogate)
    and the number of bytes needed to encode it.
    """
    if not 0 <= size <= UTF_SIZE:
        raise ValueError(f"invalid UTF-8 sequence size: {size}")
    if not _UTF_MIN[size] <= rune <= _UTF_MAX[size] or 0xD800 <= rune <= 0xDFFF:
        rune = UTF_INVALID
    length = next(n for n in range(1, UTF_SIZE + 1) if rune <= _UTF_MAX[n])
    return rune, length


def utf8_decode(data: BytesLike) -> tuple[int, int]:
    """Decode one rune from the start of ``data``.

    Returns ``(rune, consumed)``. A consumed count of 0 means the data is
    empty or ends in the middle of a sequence and more bytes are needed.
    Malformed input yields U+FFFD.
    """
    data = bytes(data)
    if not data:
        return UTF_INVALID, 0
    rune, size = _decode_byte(data[0])
    if not 1 <= size <= UTF_SIZE:
        return UTF_INVALID, 1
    for count, byte in enumerate(data[1:size], start=1):
        bits, kind = _decode_byte(byte)
        if kind != 0:
            return UTF_INVALID, count
        rune = (rune << 6) | bits
    if len(data) < size:
        return UTF_INVALID, 0
    rune, _ = utf8_validate(rune, size)
    return rune, size


def utf8_encode(rune: int) -> bytes:
    """Encode a rune as UTF-8, substituting U+FFFD for invalid runes."""
    rune, length = utf8_validate(rune, 0)
    tail = []
    for _ in range(length - 1):
        tail.append(_UTF_BYTE[0] | (rune & ~_UTF_MASK[0] & 0xFF))
        rune >>= 6
    lead = _UTF_BYTE[length] | (rune & ~_UTF_MASK[length] & 0xFF)
    return bytes([lead, *reversed(tail)])


def _base64_digits(data: bytes) -> Iterator[int]:
    for byte in data:
        if 0x20 <= byte <= 0x7E:
            yield _BASE64_DIGITS.get(byte, 0)


def base64_decode(text: Union[str, BytesLike]) -> bytes:
    """Decode base64 leniently.

    Non-printable characters are skipped, unknown symbols count as zero,
    ``=`` ends the data and the result stops at its first NUL byte.
    """
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    data = data.split(b"\0", 1)[0]
    digits = _base64_digits(data)
    out = bytearray()
    for a, b, c, d in zip_longest(digits, digits, digits, digits, fillvalue=0):
        out.append(((a << 2) | ((b & 0x30) >> 4)) & 0xFF)
        if c == -1:
            break
        out.append((((b & 0x0F) << 4) | ((c & 0x3C) >> 2)) & 0xFF)
        if d == -1:
            break
        out.append((((c & 0x03) << 6) | d) & 0xFF)
    return bytes(out).split(b"\0", 1)[0]