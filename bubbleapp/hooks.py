"""Hooks that components call while rendering: state, effects, focus, input handlers."""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, TypeVar

from .component import Component, EffectRecord, KeyHandler, MouseHandler, MsgHandler
from .context import Ctx
from .layout import LayoutPhase
from .messages import KeyMsg, MouseAction, MouseButton, MouseMsg

T = TypeVar("T")

RUN_ONCE_DEPS: tuple[Any, ...] = ()
"""Dependencies that make an effect run only after the first render."""


def _final_render(c: Ctx) -> bool:
    return c.layout_phase is LayoutPhase.FINAL_RENDER


def use_id(c: Ctx) -> str:
    """Id of the component being rendered."""
    return c.id_context.current()


def use_is_focused(c: Ctx) -> bool:
    """Mark the component focusable and tell whether it has focus."""
    c.current_component().focusable = True
    return c.ui_state.focused == c.id_context.current()


def use_on_focused(c: Ctx, on_focused: Callable[[bool], None]) -> None:
    """Call ``on_focused(is_reverse)`` whenever the component receives focus."""
    if not _final_render(c):
        return
    instance = c.current_component()
    instance.focusable = True
    instance.on_focused = on_focused


def use_is_hovered(c: Ctx) -> tuple[bool, str]:
    """Whether the component is hovered, and which of its parts."""
    if c.ui_state.hovered == c.id_context.current():
        return True, c.ui_state.hovered_child
    return False, ""


def use_size(c: Ctx) -> tuple[int, int]:
    """Width and height available to the component in the current layout phase."""
    if c.layout_phase is LayoutPhase.INTRINSIC_WIDTH:
        return c.screen_width, c.screen_height
    instance = c.current_component()
    if c.layout_phase is LayoutPhase.INTRINSIC_HEIGHT:
        return instance.width, c.screen_height
    return instance.width, instance.height


def use_fcs(c: Ctx, fcs: Optional[Callable[[Ctx], Sequence[Component]]]) -> list[str]:
    """Render child components and return their output strings."""
    if fcs is None:
        return []
    outputs = [str(component) for component in fcs(c)]
    return outputs or [""]


def use_state(c: Ctx, initial_value: T) -> tuple[T, Callable[[Any], None]]:
    """A value kept between renders and a setter taking a value or an updater."""
    instance = c.current_component()
    index = instance.use_state_counter
    instance.use_state_counter += 1
    if index >= len(instance.states):
        instance.states.append(initial_value)

    def set_state(value_or_updater: Any) -> None:
        if callable(value_or_updater):
            new_value = value_or_updater(instance.states[index])
        else:
            new_value = value_or_updater
        if initial_value is not None and not isinstance(new_value, type(initial_value)):
            expected = type(initial_value).__name__
            raise TypeError(
                f"state setter got {type(new_value).__name__}, expected {expected} "
                f"or a function from {expected} to {expected}"
            )
        instance.states[index] = new_value
        c.update()

    return instance.states[index], set_state


def use_tick(c: Ctx, interval: float, callback: Callable[[], None]) -> None:
    """Call ``callback`` every ``interval`` seconds while the component is shown."""
    if not _final_render(c):
        return
    instance_id = c.id_context.current()
    c.tick.register(interval, instance_id, callback)
    use_effect_with_cleanup(
        c, lambda: (lambda: c.tick.unregister(instance_id)), RUN_ONCE_DEPS
    )


def _dep_changed(new: Any, old: Any) -> bool:
    if new is None and old is None:
        return False
    if new is None or old is None:
        return True
    if type(new) is not type(old):
        return True
    if type(new).__hash__ is None:
        # Mutable values are compared by identity, like references.
        return new is not old
    return bool(new != old)


def _deps_changed(record: EffectRecord, deps: Optional[Sequence[Any]]) -> bool:
    if not record.has_executed or deps is None:
        return True
    old = record.deps or []
    if not deps and not old:
        return False
    if len(deps) != len(old):
        return True
    return any(_dep_changed(new, previous) for new, previous in zip(deps, old))


def use_effect(c: Ctx, effect: Callable[[], None], deps: Optional[Sequence[Any]]) -> None:
    """Run ``effect`` after rendering when ``deps`` change."""

    def run() -> None:
        effect()
        return None

    use_effect_with_cleanup(c, run, deps)


def use_effect_with_cleanup(
    c: Ctx,
    effect: Callable[[], Optional[Callable[[], None]]],
    deps: Optional[Sequence[Any]],
) -> None:
    """Run ``effect`` when ``deps`` change, cleaning up the previous run first.

    With ``deps`` None the effect runs on every render; with no deps it runs once
    and its cleanup runs when the component goes away.
    """
    if not _final_render(c):
        return
    instance = c.current_component()
    index = instance.use_effect_counter
    instance.use_effect_counter += 1
    if index >= len(instance.effects):
        instance.effects.append(EffectRecord())
    record = instance.effects[index]

    if not _deps_changed(record, deps):
        return
    if record.cleanup is not None:
        record.cleanup()
    record.cleanup = effect()
    record.deps = None if deps is None else list(deps)
    record.has_executed = True
    c.update()


def use_key_handler(c: Ctx, handler: KeyHandler) -> None:
    """Handle keys while the component is focused; the handler returns True if handled."""
    if not _final_render(c):
        return
    instance = c.current_component()
    instance.focusable = True
    instance.key_handlers.append(handler)


def use_global_key_handler(c: Ctx, handler: KeyHandler) -> None:
    """Handle keys regardless of focus."""
    if not _final_render(c):
        return
    c.current_component().global_key_handlers.append(handler)


def use_mouse_handler(c: Ctx, handler: MouseHandler) -> None:
    """Handle mouse events inside the component's mouse zone."""
    if not _final_render(c):
        return
    c.current_component().mouse_handlers.append(handler)


def use_action(c: Ctx, handler: Callable[[str], None]) -> None:
    """Call ``handler`` on a left click release or on Enter while focused."""
    if not _final_render(c):
        return
    instance = c.current_component()

    def on_mouse(msg: MouseMsg, child_id: str) -> bool:
        if msg.action is MouseAction.RELEASE and msg.button is MouseButton.LEFT:
            handler(child_id)
            return True
        return False

    def on_key(msg: KeyMsg) -> bool:
        if str(msg) == "enter":
            handler("")
            return True
        return False

    instance.mouse_handlers.append(on_mouse)
    instance.key_handlers.append(on_key)


def use_msg_handler(c: Ctx, handler: MsgHandler) -> None:
    """Receive other messages while the component is focused."""
    if not _final_render(c):
        return
    c.current_component().message_handlers.append(handler)