import pytest

from bubbleapp.highlight import HighlightInfo, make_highlight_ranges, parse_matches


def test_no_matches_gives_no_highlights():
    assert parse_matches("hello", []) == []


@pytest.mark.parametrize(
    "content,matches",
    [
        ("hello world", [(6, 11)]),
        ("aa bb aa", [(0, 2), (6, 8)]),
        ("abcdef", [(1, 2), (3, 5)]),
    ],
)
def test_single_line_ascii_columns_equal_offsets(content, matches):
    highlights = parse_matches(content, matches)
    assert [h.coords() for h in highlights] == [(0, s, e) for s, e in matches]


def test_match_spanning_lines():
    highlights = parse_matches("ab\ncd", [(1, 4)])
    assert len(highlights) == 1
    info = highlights[0]
    assert info.line_start == 0
    assert info.line_end == 1
    assert sorted(info.lines) == [0, 1]
    assert info.lines[1][0] == 0


def test_match_on_second_line():
    highlights = parse_matches("xx\nhello", [(3, 8)])
    assert highlights[0].coords() == (1, 0, len("hello"))


def test_wide_characters_use_cell_columns():
    highlights = parse_matches("日本語", [(1, 2)])
    assert highlights[0].coords() == (0, 2, 4)


def test_escapes_are_ignored():
    highlights = parse_matches("\x1b[31mhello\x1b[0m", [(0, 5)])
    assert highlights[0].coords() == (0, 0, 5)


def test_coords_without_lines():
    info = HighlightInfo(line_start=7, line_end=7)
    assert info.coords() == (7, 0, 0)


def test_make_highlight_ranges_filters_line_and_empty():
    highlights = [
        HighlightInfo(0, 1, {0: (0, 0), 1: (2, 3)}),
        HighlightInfo(1, 1, {1: (5, 9)}),
        HighlightInfo(2, 2, {2: (1, 2)}),
    ]
    assert make_highlight_ranges(highlights, 1) == [(2, 3), (5, 9)]
    assert make_highlight_ranges(highlights, 0) == []


def test_make_highlight_ranges_from_parsed():
    highlights = parse_matches("one two", [(0, 3), (4, 7)])
    assert make_highlight_ranges(highlights, 0) == [(0, 3), (4, 7)]