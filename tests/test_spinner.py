import pytest

from bubbleapp.spinner import Spinner, boomerang_frames, reverse_frames


def test_reverse_frames_reverses_order():
    assert reverse_frames(["a", "b", "c"]) == ["c", "b", "a"]


def test_reverse_frames_twice_is_identity():
    frames = ["x", "y", "z", "w"]
    assert reverse_frames(reverse_frames(frames)) == frames


def test_reverse_frames_empty():
    assert reverse_frames([]) == []


def test_boomerang_frames_loops_back():
    assert boomerang_frames(["a", "b", "c", "d"]) == ["a", "b", "c", "d", "c", "b"]


@pytest.mark.parametrize("frames", [[], ["a"], ["a", "b"]])
def test_boomerang_frames_short_input_unchanged(frames):
    assert boomerang_frames(frames) == frames


@pytest.mark.parametrize("size", [3, 4, 7, 10])
def test_boomerang_frames_length(size):
    frames = list(range(size))
    result = boomerang_frames(frames)
    assert len(result) == 2 * size - 2
    assert result[:size] == frames


def test_spinner_reverse_keeps_interval_and_original():
    spinner = Spinner(["a", "b", "c"], 0.1)
    reversed_spinner = spinner.reverse()
    assert reversed_spinner.frames == ("c", "b", "a")
    assert reversed_spinner.interval == 0.1
    assert spinner.frames == ("a", "b", "c")


def test_spinner_boomerang():
    spinner = Spinner(("a", "b", "c"), 0.25)
    assert spinner.boomerang().frames == ("a", "b", "c", "b")
    assert spinner.boomerang().interval == 0.25


def test_spinner_frames_become_tuple():
    spinner = Spinner(["a", "b"], 1.0)
    assert spinner.frames == ("a", "b")