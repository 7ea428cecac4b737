"""Messages delivered to an application: keys, mouse, window size and ticks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class KeyMsg:
    """A key press, named like ``"enter"``, ``"tab"`` or ``"ctrl+c"``."""

    key: str

    def __str__(self) -> str:
        return self.key


class MouseButton(Enum):
    NONE = 0
    LEFT = 1
    MIDDLE = 2
    RIGHT = 3
    WHEEL_UP = 4
    WHEEL_DOWN = 5
    WHEEL_LEFT = 6
    WHEEL_RIGHT = 7


class MouseAction(Enum):
    CLICK = 0
    RELEASE = 1
    MOTION = 2
    WHEEL = 3


@dataclass(frozen=True)
class MouseMsg:
    """A mouse event at cell (x, y)."""

    x: int
    y: int
    button: MouseButton = MouseButton.NONE
    action: MouseAction = MouseAction.CLICK
    shift: bool = False


@dataclass(frozen=True)
class WindowSizeMsg:
    """The terminal was resized."""

    width: int
    height: int


@dataclass(frozen=True)
class InvalidateMsg:
    """Asks for the view to be rendered again."""


@dataclass(frozen=True)
class TickMsg:
    """A timer tick."""

    occurred_at: datetime = field(default_factory=datetime.now)