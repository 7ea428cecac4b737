"""Spinner animations: frames shown one after another at a fixed interval."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence, TypeVar

T = TypeVar("T")


def reverse_frames(frames: Sequence[T]) -> list[T]:
    """The frames in reverse order."""
    return list(reversed(frames))


def boomerang_frames(frames: Sequence[T]) -> list[T]:
    """The frames played forwards, then backwards without repeating either end.

    Fewer than three frames are returned unchanged.
    """
    if len(frames) < 3:
        return list(frames)
    return list(frames) + list(frames[-2:0:-1])


@dataclass(frozen=True)
class Spinner:
    """A terminal spinner: its frames and the recommended interval in seconds."""

    frames: tuple[str, ...]
    interval: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "frames", tuple(self.frames))

    def reverse(self) -> Spinner:
        """A spinner that plays backwards."""
        return replace(self, frames=tuple(reverse_frames(self.frames)))

    def boomerang(self) -> Spinner:
        """A spinner that loops back and forth."""
        return replace(self, frames=tuple(boomerang_frames(self.frames)))