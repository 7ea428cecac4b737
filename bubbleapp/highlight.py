"""Conversion of match ranges in text into per-line highlight column ranges."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

from .ansi import string_width, strip_ansi

_ZWJ = "\u200d"
_VS16 = "\ufe0f"


def _extends_cluster(ch: str) -> bool:
    return (
        ch == _ZWJ
        or unicodedata.combining(ch) != 0
        or 0xFE00 <= ord(ch) <= 0xFE0F
    )


def _graphemes(text: str) -> Iterator[str]:
    cluster = ""
    for ch in text:
        if cluster and ch != "\n" and cluster != "\n" and (
            _extends_cluster(ch) or cluster.endswith(_ZWJ)
        ):
            cluster += ch
            continue
        if cluster:
            yield cluster
        cluster = ch
    if cluster:
        yield cluster


def _grapheme_width(grapheme: str) -> int:
    if _VS16 in grapheme:
        return 2
    return string_width(grapheme[0])


@dataclass
class HighlightInfo:
    """A highlighted range: its first and last line and the columns per line."""

    line_start: int = 0
    line_end: int = 0
    lines: dict[int, tuple[int, int]] = field(default_factory=dict)

    def coords(self) -> tuple[int, int, int]:
        """Line and column range of the first highlighted line."""
        for line in range(self.line_start, self.line_end + 1):
            if line in self.lines:
                start, end = self.lines[line]
                return line, start, end
        return self.line_start, 0, 0


def parse_matches(
    content: str, matches: Iterable[Sequence[int]]
) -> list[HighlightInfo]:
    """Turn ordered, non-overlapping (start, end) character offsets into highlights.

    Offsets index ``content`` with escape sequences removed; lines end with ``\\n``.
    """
    matches = list(matches)
    if not matches:
        return []

    line = 0
    grapheme_pos = 0
    previous_lines_offset = 0
    pos = 0
    highlights: list[HighlightInfo] = []
    graphemes = _graphemes(strip_ansi(content))

    for match in matches:
        start, end = match[0], match[1]
        info = HighlightInfo()

        while start > pos:
            grapheme = next(graphemes, None)
            if grapheme is None:
                break
            if grapheme == "\n":
                previous_lines_offset = grapheme_pos + 1
                line += 1
            grapheme_pos += max(1, _grapheme_width(grapheme))
            pos += len(grapheme)

        info.line_start = info.line_end = line
        grapheme_start = grapheme_pos

        while end > pos:
            grapheme = next(graphemes, None)
            if grapheme is None:
                break
            if grapheme == "\n":
                colstart = max(0, grapheme_start - previous_lines_offset)
                colend = max(grapheme_pos - previous_lines_offset + 1, colstart)
                if colend > colstart:
                    info.lines[line] = (colstart, colend)
                    info.line_end = line
                previous_lines_offset = grapheme_pos + 1
                line += 1
            grapheme_pos += max(1, _grapheme_width(grapheme))
            pos += len(grapheme)

        if pos == end:
            colstart = max(0, grapheme_start - previous_lines_offset)
            colend = max(grapheme_pos - previous_lines_offset, colstart)
            if colend > colstart:
                info.lines[line] = (colstart, colend)
                info.line_end = line

        highlights.append(info)

    return highlights


def make_highlight_ranges(
    highlights: Iterable[HighlightInfo], line: int
) -> list[tuple[int, int]]:
    """Column ranges to highlight on ``line``, skipping empty ones."""
    return [
        info.lines[line]
        for info in highlights
        if line in info.lines and info.lines[line] != (0, 0)
    ]