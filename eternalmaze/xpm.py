"""Reading XPM texture images.

Supports the subset of XPM used for wall textures: a header line with
width, height, colour count and characters per pixel, colour lines using
the ``c`` key with either ``#RRGGBB`` values or colour names, and pixel
rows. Pixels are stored as 32-bit 0xAARRGGBB integers. A transparent
colour ("None") becomes 0xFF000000.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike

from .colors import color_by_name

TRANSPARENT = 0xFF000000

_WORD_SEPARATORS = re.compile(r"[ \t]+")
_QUOTED = re.compile(r'"([^"]*)"')
_C_INT = re.compile(r"\s*([+-]?\d+)")
_C_HEX = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")
_NAME_BUFFER = 63


class XpmError(ValueError):
    """Raised when XPM data cannot be read or parsed."""


@dataclass(frozen=True)
class XpmImage:
    """A decoded XPM image with row-major 32-bit pixels."""

    width: int
    height: int
    pixels: tuple[int, ...]

    def pixel(self, x: int, y: int) -> int:
        """Return the colour at column x, row y."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return self.pixels[y * self.width + x]


def split_words(text: str) -> list[str]:
    """Split text into words separated by spaces and tabs."""
    return [word for word in _WORD_SEPARATORS.split(text) if word]


def _find_unquoted(text: str, token: str) -> int:
    """Index of the first occurrence of token outside double quotes, or -1."""
    inside = False
    for pos, char in enumerate(text[: len(text) - len(token) + 1]):
        if char == '"':
            inside = not inside
        if not inside and text.startswith(token, pos):
            return pos
    return -1


def _blank_comments(text: str, opener: str, closer: str) -> str:
    while (begin := _find_unquoted(text, opener)) != -1:
        close = text.find(closer, begin + len(opener))
        end = len(text) if close == -1 else close + len(closer)
        text = text[:begin] + " " * (end - begin) + text[end:]
    return text


def strip_comments(text: str) -> str:
    """Blank out C-style comments that lie outside quoted strings.

    Comments are replaced by spaces, so the text keeps its length.
    Block comments are removed first, then line comments including their
    terminating newline.
    """
    text = _blank_comments(text, "/*", "*/")
    return _blank_comments(text, "//", "\n")


def extract_strings(text: str) -> list[str]:
    """Return the contents of every double-quoted string, in order."""
    return _QUOTED.findall(text)


def _parse_hex(text: str) -> int:
    match = _C_HEX.match(text)
    digits = match.group(2) if match else ""
    if not digits:
        return 0
    value = int(digits, 16)
    return -value if match.group(1) == "-" else value


def text_to_rgb(name: str, end: str | None) -> int:
    """Resolve a colour specification to 0xRRGGBB.

    ``#`` introduces a hexadecimal value. Otherwise the name, joined with
    the following word when there is one, is looked up among the named
    colours; unknown names give 0 and "none" gives -1.
    """
    if name.startswith("#"):
        return _parse_hex(name[1:])
    if end is not None:
        name = f"{name} {end}"[:_NAME_BUFFER]
    value = color_by_name(name)
    return 0 if value is None else value


def _atoi(text: str) -> int:
    match = _C_INT.match(text)
    return int(match.group(1)) if match else 0


def _next_line(lines, what: str) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise XpmError(f"missing {what}") from None


def _parse_header(line: str) -> tuple[int, int, int, int]:
    words = split_words(line)
    if len(words) < 4:
        raise XpmError(f"invalid XPM header: {line!r}")
    values = tuple(_atoi(word) for word in words[:4])
    if any(value <= 0 for value in values):
        raise XpmError(f"invalid XPM header: {line!r}")
    return values  # type: ignore[return-value]


def _parse_color_line(line: str, cpp: int) -> tuple[str, int]:
    if len(line) < cpp:
        raise XpmError(f"colour line too short: {line!r}")
    words = split_words(line[cpp:])
    try:
        index = words.index("c") + 1
    except ValueError:
        raise XpmError(f"colour line without 'c' key: {line!r}") from None
    if index >= len(words):
        raise XpmError(f"colour line without value: {line!r}")
    end = words[index + 1] if index + 1 < len(words) else None
    return line[:cpp], text_to_rgb(words[index], end)


def parse_xpm(lines: Iterable[str]) -> XpmImage:
    """Build an image from the quoted strings of an XPM document."""
    source = iter(lines)
    width, height, ncolors, cpp = _parse_header(_next_line(source, "XPM header"))

    # Short keys keep the last definition of a key, longer ones the first.
    table: dict[str, int] = {}
    for _ in range(ncolors):
        key, rgb = _parse_color_line(_next_line(source, "colour line"), cpp)
        if cpp <= 2:
            table[key] = rgb
        else:
            table.setdefault(key, rgb)

    pixels: list[int] = []
    for _ in range(height):
        row = _next_line(source, "pixel row")
        if len(row) < width * cpp:
            raise XpmError(f"pixel row too short: {row!r}")
        for x in range(width):
            color = table.get(row[x * cpp:(x + 1) * cpp], 0)
            if color == -1:
                color = TRANSPARENT
            pixels.append(color & 0xFFFFFFFF)
    return XpmImage(width, height, tuple(pixels))


def read_xpm(path: str | PathLike[str]) -> XpmImage:
    """Read and decode an XPM file."""
    try:
        with open(path, encoding="latin-1") as handle:
            text = handle.read()
    except OSError as exc:
        raise XpmError(f"cannot read {path}: {exc}") from exc
    return parse_xpm(extract_strings(strip_comments(text)))