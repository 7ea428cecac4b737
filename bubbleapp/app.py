"""The application model: routes messages to components and renders the tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from .component import Component
from .context import Ctx
from .layout import LayoutPhase
from .messages import (
    InvalidateMsg,
    KeyMsg,
    MouseAction,
    MouseButton,
    MouseMsg,
    WindowSizeMsg,
)

RootFn = Callable[[Ctx], Component]


@dataclass(frozen=True)
class _ColorRequest:
    kind: str
    color: Any


def find_removed_ids(prev_ids: Iterable[str], current_ids: Iterable[str]) -> list[str]:
    """Ids present before but not now, in their earlier order."""
    current = set(current_ids)
    return [component_id for component_id in prev_ids if component_id not in current]


class App:
    """Binds a root component to a context and a running program."""

    def __init__(self, ctx: Ctx, root: RootFn, theme: Any = None) -> None:
        self.ctx = ctx
        self.root = root
        if theme is not None:
            ctx.theme = theme

    def set_program(self, program: Any) -> None:
        """Attach the program that receives messages and quit requests."""
        self.ctx.program = program

    def init(self) -> list[_ColorRequest]:
        """Terminal colour requests derived from the theme."""
        if self.ctx.program is None:
            raise RuntimeError("no program set; call set_program first")
        requests = []
        theme = self.ctx.theme
        background = getattr(theme, "background_color", None)
        foreground = getattr(theme, "foreground_color", None)
        if background is not None:
            requests.append(_ColorRequest("background", background))
        if foreground is not None:
            requests.append(_ColorRequest("foreground", foreground))
        return requests

    def update(self, msg: Any) -> Any:
        """Dispatch a message; returns a command to run, or None."""
        ctx = self.ctx
        if isinstance(msg, InvalidateMsg):
            return None
        if isinstance(msg, KeyMsg):
            self._handle_key(msg)
            return None
        if isinstance(msg, WindowSizeMsg):
            ctx.screen_width = msg.width
            ctx.screen_height = msg.height
            return None
        if isinstance(msg, MouseMsg):
            self._handle_mouse(msg)
            return None
        if ctx.ui_state.focused:
            focused = ctx.component(ctx.ui_state.focused)
            if focused is not None:
                for handler in focused.message_handlers:
                    cmd = handler(msg)
                    if cmd is not None:
                        return cmd
        return None

    def _handle_key(self, msg: KeyMsg) -> None:
        ctx = self.ctx
        focused = ctx.component(ctx.ui_state.focused)
        if focused is not None and any(handler(msg) for handler in focused.key_handlers):
            return
        if any(handler(msg) for handler in ctx.global_key_handlers()):
            return
        key = str(msg)
        if key == "ctrl+c":
            ctx.quit()
        elif key == "tab":
            ctx.focus_next()
        elif key == "shift+tab":
            ctx.focus_prev()

    def _handle_mouse(self, msg: MouseMsg) -> None:
        ctx = self.ctx
        is_motion = msg.action is MouseAction.MOTION
        if is_motion:
            ctx.ui_state.hovered = ""
            ctx.ui_state.hovered_child = ""
        for zone_id in ctx.zone.ids_in_bounds(msg.x, msg.y):
            component_id, _, child_id = zone_id.partition("###")
            if is_motion and (
                not ctx.ui_state.hovered or len(component_id) > len(ctx.ui_state.hovered)
            ):
                ctx.ui_state.hovered = component_id
                ctx.ui_state.hovered_child = child_id
            found = ctx.component(component_id)
            if found is not None and any(
                handler(msg, child_id) for handler in found.mouse_handlers
            ):
                return
        if msg.action is MouseAction.RELEASE and msg.button is MouseButton.LEFT:
            ctx.ui_state.focused = ""

    def _render_root(self) -> Component:
        return self.ctx.render_with_name(
            lambda c, _props: str(self.root(c)), None, "Root"
        )

    def view(self) -> str:
        """Lay out and render the whole tree, then retire vanished components."""
        ctx = self.ctx
        prev_ids = ctx.ids
        ctx._init_view()

        ctx.layout_phase = LayoutPhase.INTRINSIC_WIDTH
        self._render_root()
        ctx._distribute_width()

        ctx.layout_phase = LayoutPhase.INTRINSIC_HEIGHT
        ctx._init_phase()
        ctx.id_context.init_path()
        self._render_root()
        ctx._distribute_height()

        ctx.layout_phase = LayoutPhase.FINAL_RENDER
        ctx.invalidate = False
        ctx._init_phase()
        ctx.id_context.init_path()
        root_component = self._render_root()
        rendered = ctx.zone.scan(str(root_component))

        ctx.tick.start()

        ctx.cleanup_effects(find_removed_ids(prev_ids, ctx.ids))
        return rendered