import queue
from dataclasses import dataclass

import pytest

from bubbleapp.component import EffectRecord
from bubbleapp.context import Ctx, UIState, ZoneManager, get_key_name
from bubbleapp.layout import LayoutPhase
from bubbleapp.messages import InvalidateMsg


class FakeProgram:
    def __init__(self):
        self.messages = queue.Queue()
        self.quit_called = False

    def send(self, msg):
        self.messages.put(msg)

    def quit(self):
        self.quit_called = True


@dataclass
class KeyedProps:
    key: str = ""


def leaf(c, props):
    return "hello"


def focusable_leaf(c, props):
    c.current_component().focusable = True
    return "item"


def plain_leaf(c, props):
    return "plain"


def render_root(ctx, body):
    return ctx.render_with_name(body, None, "Root")


def test_ui_state_defaults_empty():
    state = UIState()
    assert (state.focused, state.hovered, state.hovered_child) == ("", "", "")


def test_get_key_name_uses_function_name():
    assert get_key_name(leaf, None) == "leaf"


def test_get_key_name_appends_key():
    assert get_key_name(leaf, KeyedProps(key="k1")) == "leaf{k1}"
    assert get_key_name(leaf, KeyedProps()) == "leaf"


def test_get_key_name_rejects_non_function():
    with pytest.raises(TypeError):
        get_key_name("not callable", None)


def test_render_builds_tree_and_ids():
    ctx = Ctx()

    def body(c, props):
        c.render(leaf, None)
        return "root"

    root = render_root(ctx, body)
    assert ctx.root is root
    assert str(root) == "root"
    assert len(root.children) == 1
    child = root.children[0]
    assert child.parent is root
    assert str(child) == "hello"
    assert ctx.ids == [root.id, child.id]
    assert child.id.startswith(root.id + "_")
    assert ctx.component(child.id) is child


def test_same_name_siblings_get_distinct_ids():
    ctx = Ctx()

    def body(c, props):
        c.render(leaf, None)
        c.render(leaf, None)
        return ""

    root = render_root(ctx, body)
    first, second = root.children
    assert first.id != second.id
    assert len(ctx.components) == 3


def test_intrinsic_width_pass():
    ctx = Ctx()
    ctx.screen_width = 80

    def body(c, props):
        c.render(leaf, None)
        return "root"

    root = render_root(ctx, body)
    assert root.width == 80
    assert root.children[0].width == len("hello")


def test_intrinsic_height_pass():
    ctx = Ctx()
    ctx.layout_phase = LayoutPhase.INTRINSIC_HEIGHT
    ctx.screen_height = 24

    def two_lines(c, props):
        return "a\nb"

    def empty(c, props):
        return ""

    def body(c, props):
        c.render(two_lines, None)
        c.render(empty, None)
        return ""

    root = render_root(ctx, body)
    assert root.height == 24
    assert root.children[0].height == 2
    assert root.children[1].height == 0


def test_current_component_outside_render_raises():
    with pytest.raises(LookupError):
        Ctx().current_component()


def test_zone_mark_and_scan():
    zones = ZoneManager()
    marked = zones.mark("a", "xy")
    out = zones.scan("12" + marked)
    assert out == "12xy"
    assert zones.ids_in_bounds(2, 0) == ["a"]
    assert zones.ids_in_bounds(3, 0) == ["a"]
    assert zones.ids_in_bounds(1, 0) == []
    assert zones.ids_in_bounds(4, 0) == []


def test_zone_on_second_line():
    zones = ZoneManager()
    out = zones.scan("top\n" + zones.mark("b", "zz"))
    assert out == "top\nzz"
    assert zones.ids_in_bounds(0, 1) == ["b"]
    assert zones.ids_in_bounds(0, 0) == []


def test_mouse_zone_marks_current_component():
    ctx = Ctx()

    def clickable(c, props):
        return c.mouse_zone("btn")

    def body(c, props):
        return str(c.render(clickable, None))

    root = render_root(ctx, body)
    child = root.children[0]
    assert ctx.zone_map[child.id] is child
    assert ctx.zone.scan(str(root)) == "btn"
    assert ctx.zone.ids_in_bounds(0, 0) == [child.id]


def test_mouse_zone_child_id():
    ctx = Ctx()

    def rows(c, props):
        return c.mouse_zone_child("row:0", "r")

    root = render_root(ctx, rows)
    ctx.zone.scan(str(root))
    assert ctx.zone.ids_in_bounds(0, 0) == [root.id + "###row:0"]


def test_update_sends_invalidate_once():
    ctx = Ctx()
    program = FakeProgram()
    ctx.program = program
    ctx.update()
    ctx.update()
    assert ctx.invalidate is True
    assert program.messages.get_nowait() == InvalidateMsg()
    assert program.messages.empty()


def test_update_without_program_raises():
    with pytest.raises(RuntimeError):
        Ctx().update()


def test_execute_cmd_sends_result():
    ctx = Ctx()
    program = FakeProgram()
    ctx.program = program
    ctx.execute_cmd(lambda: "done")
    assert program.messages.get(timeout=2) == "done"


def test_execute_cmd_without_program_raises():
    with pytest.raises(RuntimeError):
        Ctx().execute_cmd(lambda: None)


def test_quit_stops_tick_and_program():
    ctx = Ctx()
    program = FakeProgram()
    ctx.program = program
    ctx.tick.register(0.5, "x", None)
    ctx.tick.start()
    ctx.quit()
    assert program.quit_called is True
    assert ctx.tick.running is False


def test_context_values_stack():
    ctx = Ctx()
    ctx.push_context_value(1, "outer")
    ctx.push_context_value(1, "inner")
    assert ctx.get_context_value(1) == "inner"
    ctx.pop_context_value(1)
    assert ctx.get_context_value(1) == "outer"
    ctx.pop_context_value(1)
    with pytest.raises(KeyError):
        ctx.get_context_value(1)
    ctx.pop_context_value(1)
    assert ctx.context_values == {}


def test_global_key_handlers_latest_component_first():
    ctx = Ctx()

    def body(c, props):
        c.render(leaf, KeyedProps("a"))
        c.render(leaf, KeyedProps("b"))
        return ""

    root = render_root(ctx, body)
    first, second = root.children

    def h1(msg):
        return False

    def h2(msg):
        return False

    first.global_key_handlers.append(h1)
    second.global_key_handlers.append(h2)
    assert ctx.global_key_handlers() == [h2, h1]


def test_cleanup_effects_runs_cleanup_and_removes():
    ctx = Ctx()
    root = render_root(ctx, leaf)
    cleaned = []
    root.effects.append(EffectRecord(cleanup=lambda: cleaned.append(True)))
    ctx.cleanup_effects([root.id])
    assert cleaned == [True]
    assert ctx.component(root.id) is None


def make_focus_tree(ctx):
    def body(c, props):
        c.render(focusable_leaf, KeyedProps("a"))
        c.render(plain_leaf, None)
        c.render(focusable_leaf, KeyedProps("b"))
        return ""

    return render_root(ctx, body)


def test_focus_next_cycles():
    ctx = Ctx()
    root = make_focus_tree(ctx)
    a, _, b = root.children
    assert ctx.focus_next() == a.id
    assert ctx.focus_next() == b.id
    assert ctx.focus_next() == a.id
    assert ctx.ui_state.focused == a.id


def test_focus_prev_starts_at_last():
    ctx = Ctx()
    root = make_focus_tree(ctx)
    a, _, b = root.children
    reverse_flags = []
    b.on_focused = reverse_flags.append
    assert ctx.focus_prev() == b.id
    assert ctx.focus_prev() == a.id
    assert reverse_flags == [True]


def test_focus_with_nothing_focusable():
    ctx = Ctx()
    render_root(ctx, leaf)
    ctx.ui_state.focused = "stale"
    assert ctx.focus_next() == ""
    assert ctx.ui_state.focused == ""


def test_focus_this_walks_to_focusable_parent():
    ctx = Ctx()

    def body(c, props):
        c.current_component().focusable = True
        c.render(plain_leaf, None)
        return ""

    root = render_root(ctx, body)
    ctx.focus_this(root.children[0].id)
    assert ctx.ui_state.focused == root.id


def test_focus_this_clears_when_no_focusable_ancestor():
    ctx = Ctx()

    def body(c, props):
        c.render(plain_leaf, None)
        return ""

    root = render_root(ctx, body)
    ctx.ui_state.focused = root.id
    ctx.focus_this(root.children[0].id)
    assert ctx.ui_state.focused == ""


def test_focus_this_calls_on_focused():
    ctx = Ctx()
    root = make_focus_tree(ctx)
    a = root.children[0]
    flags = []
    a.on_focused = flags.append
    ctx.focus_this(a.id)
    assert ctx.ui_state.focused == a.id
    assert flags == [False]