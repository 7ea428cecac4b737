"""Per-instance record of a rendered functional component."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .layout import Layout

KeyHandler = Callable[[Any], bool]
MouseHandler = Callable[[Any, str], bool]
MsgHandler = Callable[[Any], Any]


@dataclass
class EffectRecord:
    """State kept for one effect hook between renders."""

    cleanup: Optional[Callable[[], None]] = None
    deps: Optional[list[Any]] = None
    has_executed: bool = False


@dataclass(eq=False)
class Component:
    """A component instance: its output, tree links, layout and hook state."""

    id: str
    content: str = ""
    focusable: bool = False
    parent: Optional[Component] = field(default=None, repr=False)
    children: list[Component] = field(default_factory=list, repr=False)
    props: Any = None
    layout: Layout = field(default_factory=Layout)

    states: list[Any] = field(default_factory=list, repr=False)
    effects: list[EffectRecord] = field(default_factory=list, repr=False)
    key_handlers: list[KeyHandler] = field(default_factory=list, repr=False)
    global_key_handlers: list[KeyHandler] = field(default_factory=list, repr=False)
    mouse_handlers: list[MouseHandler] = field(default_factory=list, repr=False)
    message_handlers: list[MsgHandler] = field(default_factory=list, repr=False)
    on_focused: Optional[Callable[[bool], None]] = field(default=None, repr=False)

    use_effect_counter: int = 0
    use_state_counter: int = 0

    width: int = 0
    height: int = 0

    def __str__(self) -> str:
        return self.content

    def run_cleanups(self) -> None:
        """Run and forget every pending effect cleanup."""
        for record in self.effects:
            if record.cleanup is not None:
                cleanup, record.cleanup = record.cleanup, None
                cleanup()