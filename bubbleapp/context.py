"""Render context: component registry, ids, mouse zones, focus and context values."""

from __future__ import annotations

import itertools
import re
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .ansi import string_width, text_height, text_width
from .component import Component, KeyHandler
from .ids import IdContext
from .layout import (
    LayoutPhase,
    Order,
    distribute_height,
    distribute_width,
    extract_layout,
    visit,
)
from .messages import InvalidateMsg
from .tick import TickScheduler

RenderFn = Callable[["Ctx", Any], str]

_MARKER_RE = re.compile(r"\x1b\[(\d+)z")


@dataclass
class UIState:
    """Which component is focused and which one (and which part of it) is hovered."""

    focused: str = ""
    hovered: str = ""
    hovered_child: str = ""


@dataclass(frozen=True)
class _Zone:
    id: str
    start_x: int
    start_y: int
    end_x: int
    end_y: int

    def contains(self, x: int, y: int) -> bool:
        if self.start_x > self.end_x or self.start_y > self.end_y:
            return False
        return self.start_x <= x <= self.end_x and self.start_y <= y <= self.end_y


def _advance(text: str, x: int, y: int) -> tuple[int, int]:
    for index, line in enumerate(text.split("\n")):
        if index:
            y += 1
            x = 0
        x += string_width(line)
    return x, y


class ZoneManager:
    """Marks regions of rendered text and finds them again by screen position."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._pending: dict[int, str] = {}
        self._zones: dict[str, _Zone] = {}

    def mark(self, zone_id: str, content: str) -> str:
        """Wrap ``content`` in invisible markers naming ``zone_id``."""
        number = next(self._counter)
        self._pending[number] = zone_id
        marker = f"\x1b[{number}z"
        return f"{marker}{content}{marker}"

    def scan(self, content: str) -> str:
        """Record the position of every marked zone and return ``content`` without markers."""
        zones: dict[str, _Zone] = {}
        open_zones: dict[int, tuple[int, int]] = {}
        out: list[str] = []
        x = y = 0
        pos = 0
        for match in _MARKER_RE.finditer(content):
            segment = content[pos:match.start()]
            out.append(segment)
            x, y = _advance(segment, x, y)
            pos = match.end()
            number = int(match.group(1))
            zone_id = self._pending.get(number)
            if zone_id is None:
                out.append(match.group())
                continue
            if number in open_zones:
                start_x, start_y = open_zones.pop(number)
                zones[zone_id] = _Zone(zone_id, start_x, start_y, x - 1, y)
            else:
                open_zones[number] = (x, y)
        out.append(content[pos:])
        self._pending.clear()
        self._zones = zones
        return "".join(out)

    def ids_in_bounds(self, x: int, y: int) -> list[str]:
        """Ids of the zones from the last scan that cover cell (x, y)."""
        return [zone.id for zone in self._zones.values() if zone.contains(x, y)]


def get_key_name(fn: Callable[..., Any], props: Any) -> str:
    """Name for a rendered function: its own name, plus ``{key}`` if props carry a key."""
    if not callable(fn):
        raise TypeError("fn is not a function")
    name = getattr(fn, "__name__", "").rsplit(".", 1)[-1]
    if not name:
        raise ValueError("function name is empty")
    key = getattr(props, "key", None) if props is not None else None
    if isinstance(key, str) and key:
        return f"{name}{{{key}}}"
    return name


class Ctx:
    """State shared by every component during rendering and event handling.

    ``program`` is any object with ``send(msg)`` and ``quit()``.
    """

    def __init__(self, theme: Any = None) -> None:
        self.ui_state = UIState()
        self.zone = ZoneManager()
        self.zone_map: dict[str, Optional[Component]] = {}
        self.program: Any = None
        self.theme = theme
        self.id_context = IdContext()
        self.tick = TickScheduler()
        self.invalidate = False
        self.components: dict[str, Component] = {}
        self.ids: list[str] = []
        self.context_values: dict[int, list[Any]] = {}
        self.current_bg: Any = None
        self.layout_phase = LayoutPhase.INTRINSIC_WIDTH
        self.root: Optional[Component] = None
        self.screen_width = 0
        self.screen_height = 0
        self._parents: list[Component] = []

    # -- rendering -------------------------------------------------------

    def render_with_name(self, fn: RenderFn, props: Any, name: str) -> Component:
        """Render ``fn(ctx, props)`` as the component ``name`` at the current position."""
        component_id = self.id_context.push(name)
        try:
            comp = self.components.get(component_id)
            if comp is None or self.layout_phase is LayoutPhase.INTRINSIC_WIDTH:
                comp = self._init_component(component_id, props)
            self.ids.append(component_id)
            self._enter(comp)
            try:
                if self.root is None:
                    self.root = comp
                comp.use_state_counter = 0
                comp.use_effect_counter = 0
                comp.content = fn(self, props)
            finally:
                self._leave(comp)
            return comp
        finally:
            self.id_context.pop()

    def render(self, fn: RenderFn, props: Any) -> Component:
        """Render ``fn`` under a name taken from the function and the props key."""
        return self.render_with_name(fn, props, get_key_name(fn, props))

    def component(self, component_id: str) -> Optional[Component]:
        """The component with this id, or None."""
        return self.components.get(component_id)

    def current_component(self) -> Component:
        """The component being rendered now."""
        comp = self.components.get(self.id_context.current())
        if comp is None:
            raise LookupError("component instance not found")
        return comp

    def _init_component(self, component_id: str, props: Any) -> Component:
        comp = self.components.get(component_id)
        if comp is None:
            comp = Component(id=component_id)
            self.components[component_id] = comp
        comp.layout = extract_layout(props)
        comp.props = props
        return comp

    def _enter(self, comp: Component) -> None:
        if self._parents:
            parent = self._parents[-1]
            comp.parent = parent
            parent.children.append(comp)
        self._parents.append(comp)

    def _leave(self, comp: Component) -> None:
        content = str(comp)
        if self.layout_phase is LayoutPhase.INTRINSIC_WIDTH:
            if comp.parent is None:
                comp.width = self.screen_width
            elif not comp.layout.grow_x:
                comp.width = text_width(content)
        if self.layout_phase is LayoutPhase.INTRINSIC_HEIGHT:
            if comp.parent is None:
                comp.height = self.screen_height
            elif not comp.layout.grow_y:
                comp.height = 0 if content == "" else text_height(content)
        if self._parents:
            self._parents.pop()

    def _init_view(self) -> None:
        self.root = None
        self.id_context.init_path()
        self.tick.reset()
        self.zone_map = {}
        self.ids = []
        for comp in self.components.values():
            comp.key_handlers = []
            comp.mouse_handlers = []
            comp.message_handlers = []
            comp.on_focused = None
            comp.height = 0
            comp.width = 0
            comp.children = []
            comp.parent = None
            comp.layout = extract_layout(None)

    def _init_phase(self) -> None:
        self.ids = []
        for comp in self.components.values():
            comp.children = []
            comp.parent = None

    def _distribute_width(self) -> None:
        visit(self.root, 0, self, distribute_width, Order.PRE_ORDER)

    def _distribute_height(self) -> None:
        visit(self.root, 0, self, distribute_height, Order.PRE_ORDER)

    # -- mouse zones -----------------------------------------------------

    def mouse_zone(self, content: str) -> str:
        """Mark ``content`` as the mouse zone of the current component."""
        component_id = self.id_context.current()
        self.zone_map[component_id] = self.components.get(component_id)
        return self.zone.mark(component_id, content)

    def mouse_zone_child(self, child_id: str, content: str) -> str:
        """Mark ``content`` as part ``child_id`` of the current component."""
        return self.zone.mark(f"{self.id_context.current()}###{child_id}", content)

    # -- program interaction ---------------------------------------------

    def update(self) -> None:
        """Ask the program to render again; repeated calls before a render send once."""
        if self.program is None:
            raise RuntimeError("no program set; cannot update")
        if not self.invalidate:
            self.program.send(InvalidateMsg())
        self.invalidate = True

    def execute_cmd(self, cmd: Optional[Callable[[], Any]]) -> None:
        """Run ``cmd`` in the background and send its message to the program."""
        if self.program is None:
            raise RuntimeError("no program set; cannot execute command")
        if cmd is None:
            return
        program = self.program

        def run() -> None:
            msg = cmd()
            if msg is not None:
                program.send(msg)

        threading.Thread(target=run, daemon=True).start()

    def quit(self) -> None:
        """Stop the tick timer and ask the program to quit."""
        self.tick.stop()
        if self.program is None:
            raise RuntimeError("no program set; cannot quit")
        self.program.quit()

    # -- context values --------------------------------------------------

    def push_context_value(self, context_id: int, value: Any) -> None:
        self.context_values.setdefault(context_id, []).append(value)

    def pop_context_value(self, context_id: int) -> None:
        stack = self.context_values.get(context_id)
        if not stack:
            return
        stack.pop()
        if not stack:
            del self.context_values[context_id]

    def get_context_value(self, context_id: int) -> Any:
        """Innermost value provided for ``context_id``; KeyError if none."""
        stack = self.context_values.get(context_id)
        if not stack:
            raise KeyError(context_id)
        return stack[-1]

    # -- handlers and cleanup --------------------------------------------

    def global_key_handlers(self) -> list[KeyHandler]:
        """Global key handlers, latest registered component first."""
        return [
            handler
            for comp in reversed(list(self.components.values()))
            for handler in comp.global_key_handlers
        ]

    def cleanup_effects(self, removed_ids: list[str]) -> None:
        """Run effect cleanups of removed components and forget them."""
        for component_id in removed_ids:
            comp = self.components.get(component_id)
            if comp is not None:
                comp.run_cleanups()
            self.components.pop(component_id, None)

    # -- focus -----------------------------------------------------------

    def _focusable_ids(self) -> list[str]:
        return [
            component_id
            for component_id in self.ids
            if (comp := self.components.get(component_id)) is not None and comp.focusable
        ]

    def _give_focus(self, comp: Component, is_reverse: bool) -> None:
        self.ui_state.focused = comp.id
        if comp.on_focused is not None:
            comp.on_focused(is_reverse)

    def focus_this(self, component_id: str) -> None:
        """Focus the component, or its nearest focusable ancestor, or nothing."""
        comp = self.components.get(component_id)
        if comp is None:
            return
        if comp.focusable:
            self._give_focus(comp, False)
            return
        parent = comp.parent
        while parent is not None:
            ancestor = self.components.get(parent.id)
            if ancestor is None:
                break
            if ancestor.focusable:
                self._give_focus(ancestor, False)
                break
            parent = ancestor.parent
        if parent is None:
            self.ui_state.focused = ""

    def focus_next(self) -> str:
        """Move focus forward in render order, wrapping around; returns the new id."""
        focusable = self._focusable_ids()
        if not focusable:
            self.ui_state.focused = ""
            return ""
        current = self.ui_state.focused
        index = (focusable.index(current) + 1) % len(focusable) if current in focusable else 0
        target = focusable[index]
        self.ui_state.focused = target
        comp = self.components.get(target)
        if comp is not None and comp.on_focused is not None:
            comp.on_focused(False)
        return target

    def focus_prev(self) -> str:
        """Move focus backward in render order, wrapping around; returns the new id."""
        focusable = self._focusable_ids()
        if not focusable:
            self.ui_state.focused = ""
            return ""
        current = self.ui_state.focused
        if current in focusable:
            index = (focusable.index(current) - 1) % len(focusable)
        else:
            index = len(focusable) - 1
        target = focusable[index]
        self.ui_state.focused = target
        comp = self.components.get(target)
        if comp is not None and comp.on_focused is not None:
            comp.on_focused(True)
        return target