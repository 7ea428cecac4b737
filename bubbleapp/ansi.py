"""Width-aware helpers for terminal text that may hold ANSI escape sequences."""

from __future__ import annotations

import re
from itertools import zip_longest
from typing import Iterator, Sequence

from wcwidth import wcwidth

_ANSI_RE = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"  # CSI sequences
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"  # OSC sequences
    r"|\x1b[@-Z\\-_]"  # two-character escapes
)


def _char_width(ch: str) -> int:
    return max(wcwidth(ch), 0)


def _tokens(text: str) -> Iterator[tuple[bool, str]]:
    """Yield (is_escape, token) pairs: whole escape sequences or single characters."""
    pos = 0
    for match in _ANSI_RE.finditer(text):
        for ch in text[pos:match.start()]:
            yield False, ch
        yield True, match.group()
        pos = match.end()
    for ch in text[pos:]:
        yield False, ch


def strip_ansi(text: str) -> str:
    """Remove every ANSI escape sequence from ``text``."""
    return _ANSI_RE.sub("", text)


def string_width(text: str) -> int:
    """Number of terminal cells ``text`` occupies, ignoring escape sequences."""
    return sum(_char_width(ch) for ch in strip_ansi(text))


def text_width(text: str) -> int:
    """Cell width of the widest line of ``text``."""
    return max(string_width(line) for line in text.split("\n"))


def text_height(text: str) -> int:
    """Number of lines in ``text``."""
    return text.count("\n") + 1


def cut(text: str, start: int, end: int) -> str:
    """Keep the cells of ``text`` in the column range [start, end).

    Escape sequences are kept; a wide character straddling a boundary is dropped.
    """
    out: list[str] = []
    col = 0
    last_included = False
    for is_escape, token in _tokens(text):
        if is_escape:
            out.append(token)
            continue
        width = _char_width(token)
        if width == 0:
            included = last_included or start <= col < end
        else:
            included = col >= start and col + width <= end
            col += width
        if included:
            out.append(token)
        last_included = included
    return "".join(out)


def _pad(line: str, width: int) -> str:
    return line + " " * max(0, width - string_width(line))


def join_horizontal(blocks: Sequence[str]) -> str:
    """Place text blocks side by side, aligned to the top."""
    if not blocks:
        return ""
    if len(blocks) == 1:
        return blocks[0]
    split = [block.split("\n") for block in blocks]
    widths = [max(string_width(line) for line in lines) for lines in split]
    rows = (
        "".join(_pad(line, width) for line, width in zip(row, widths))
        for row in zip_longest(*split, fillvalue="")
    )
    return "\n".join(rows)


def join_vertical(blocks: Sequence[str]) -> str:
    """Stack text blocks on top of each other, aligned to the left."""
    if not blocks:
        return ""
    if len(blocks) == 1:
        return blocks[0]
    lines = [line for block in blocks for line in block.split("\n")]
    width = max(string_width(line) for line in lines)
    return "\n".join(_pad(line, width) for line in lines)