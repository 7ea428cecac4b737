import pytest

from bubbleapp.ansi import (
    cut,
    join_horizontal,
    join_vertical,
    string_width,
    strip_ansi,
    text_height,
    text_width,
)

RED = "\x1b[31m"
RESET = "\x1b[0m"


def test_strip_ansi_removes_sgr():
    assert strip_ansi(f"{RED}red{RESET}") == "red"


def test_strip_ansi_plain_unchanged():
    assert strip_ansi("plain text") == "plain text"


def test_string_width_ignores_escapes():
    assert string_width(f"{RED}abc{RESET}") == len("abc")


def test_string_width_wide_characters():
    assert string_width("日本") == 4


def test_text_width_is_widest_line():
    assert text_width("ab\nabcd\nx") == len("abcd")


@pytest.mark.parametrize("text", ["a", "a\nb", "a\nb\nc", ""])
def test_text_height_counts_lines(text):
    assert text_height(text) == len(text.split("\n"))


def test_cut_plain():
    assert cut("hello", 1, 3) == "hello"[1:3]


def test_cut_keeps_escapes():
    result = cut(f"{RED}hello{RESET}", 0, 2)
    assert strip_ansi(result) == "he"
    assert result.startswith(RED)


def test_cut_drops_straddling_wide_char():
    assert cut("日本", 1, 4) == "本"


def test_join_horizontal_rows_have_equal_width():
    result = join_horizontal(["a\nbbb", "cc", "d\ne\nf"])
    lines = result.split("\n")
    assert len(lines) == 3
    assert len({string_width(line) for line in lines}) == 1
    assert lines[0].startswith("a")


def test_join_horizontal_single_block_unchanged():
    assert join_horizontal(["x\ny"]) == "x\ny"


def test_join_horizontal_empty():
    assert join_horizontal([]) == ""


def test_join_vertical_pads_to_widest():
    result = join_vertical(["a", "bbb"])
    lines = result.split("\n")
    assert [line.rstrip() for line in lines] == ["a", "bbb"]
    assert all(string_width(line) == len("bbb") for line in lines)