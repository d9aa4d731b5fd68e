"""Reading XPM pixmaps, from files or from in-memory string arrays."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Iterator, Union

from .colors import lookup_color
from .image import Image

# Pixels whose colour is "none" are stored with this value.
TRANSPARENT = 0xFF000000

_WORD = re.compile(r"[^ \t]+")
_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?)([0-9]*)")


class XpmError(Exception):
    """Raised when XPM data cannot be read or is malformed."""


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    sign, digits = match.group(1), match.group(2)
    if not digits:
        return 0
    value = int(digits)
    return -value if sign == "-" else value


def split_words(text: str) -> list[str]:
    """Split ``text`` into words separated by spaces and tabs only."""
    return _WORD.findall(text)


def _find(text: str, pattern: str, start: int = 0) -> int:
    return text.find(pattern, start)


def _find_unquoted(text: str, pattern: str) -> int:
    quoted = False
    for pos in range(len(text) - len(pattern) + 1):
        if text[pos] == '"':
            quoted = not quoted
        if not quoted and text.startswith(pattern, pos):
            return pos
    return -1


def _blank(text: str, start: int, length: int) -> str:
    end = min(len(text), start + max(length, 0))
    return text[:start] + " " * (end - start) + text[end:]


def strip_comments(text: str) -> str:
    """Blank out C comments lying outside double-quoted strings.

    Block comments are replaced, delimiters included, by spaces; line
    comments are replaced up to and including their newline. The length
    of the text is kept.
    """
    while (begin := _find_unquoted(text, "/*")) != -1:
        end = _find(text, "*/", begin + 2)
        length = (end - begin - 2) + 4 if end != -1 else 3
        text = _blank(text, begin, length)
    while (begin := _find_unquoted(text, "//")) != -1:
        end = _find(text, "\n", begin + 2)
        length = (end - begin - 2) + 3 if end != -1 else 2
        text = _blank(text, begin, length)
    return text


def quoted_strings(text: str) -> Iterator[str]:
    """Yield the contents of each complete double-quoted string in order."""
    pos = 0
    while True:
        opening = text.find('"', pos)
        if opening == -1:
            return
        closing = text.find('"', opening + 1)
        if closing == -1:
            return
        yield text[opening + 1:closing]
        pos = closing + 1


def _parse_header(line: str) -> tuple[int, int, int, int]:
    words = split_words(line)
    if len(words) < 4:
        raise XpmError(f"XPM header needs four values, got {line!r}")
    values = tuple(_atoi(word) for word in words[:4])
    if any(value <= 0 for value in values):
        raise XpmError(f"invalid XPM header {line!r}")
    return values  # type: ignore[return-value]


def _parse_color(line: str, cpp: int) -> int:
    words = split_words(line[cpp:])
    try:
        index = words.index("c") + 1
    except ValueError:
        raise XpmError(f"no colour key in {line!r}") from None
    if index >= len(words):
        raise XpmError(f"missing colour after key in {line!r}")
    end = words[index + 1] if index + 1 < len(words) else None
    return lookup_color(words[index], end)


def parse_xpm(lines: Iterable[str]) -> Image:
    """Build an :class:`Image` from the quoted strings of an XPM.

    The first string is the header (width, height, colour count, chars per
    pixel), followed by the colour definitions and one string per row.
    """
    it = iter(lines)
    try:
        header = next(it)
    except StopIteration:
        raise XpmError("empty XPM data") from None
    width, height, ncolors, cpp = _parse_header(header)

    colors: dict[str, int] = {}
    for _ in range(ncolors):
        try:
            line = next(it)
        except StopIteration:
            raise XpmError("XPM data ends inside the colour table") from None
        rgb = _parse_color(line, cpp)
        if cpp <= 2:
            colors[line[:cpp]] = rgb
        else:
            colors.setdefault(line[:cpp], rgb)

    image = Image(width, height)
    for y in range(height):
        try:
            row = next(it)
        except StopIteration:
            raise XpmError(f"XPM data ends at row {y} of {height}") from None
        for x in range(width):
            col = colors.get(row[cpp * x:cpp * x + cpp], 0)
            if col == -1:
                col = TRANSPARENT
            image.set_pixel(x, y, col)
    return image


def xpm_to_image(data: Iterable[str]) -> Image:
    """Build an image from XPM strings as they appear in a C array."""
    return parse_xpm(data)


def xpm_file_to_image(path: Union[str, Path]) -> Image:
    """Read an XPM file and build an image from it."""
    try:
        text = Path(path).read_bytes().decode("latin-1")
    except OSError as exc:
        raise XpmError(f"cannot read {path}: {exc}") from exc
    return parse_xpm(quoted_strings(strip_comments(text)))