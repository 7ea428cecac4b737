"""A bordered, scrollable table with sized columns and a row cursor."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, NamedTuple, Sequence, Union

from .ansi import cut, join_horizontal, join_vertical, string_width, text_height
from .component import Component
from .context import Ctx
from .hooks import (
    use_effect,
    use_is_focused,
    use_is_hovered,
    use_key_handler,
    use_mouse_handler,
    use_size,
    use_state,
)
from .layout import Layout, Margin
from .messages import KeyMsg, MouseAction, MouseButton, MouseMsg
from .viewport import KeyBinding, Viewport

Row = Sequence[str]

_ELLIPSIS = "…"


@dataclass(frozen=True)
class ColumnWidth:
    """A fixed width, or a share of the space left over when ``grow`` is set."""

    value: int = 0
    grow: bool = False


def width_grow() -> ColumnWidth:
    return ColumnWidth(grow=True)


def width_int(value: int) -> ColumnWidth:
    return ColumnWidth(value=value)


@dataclass(frozen=True)
class Column:
    title: str
    width: ColumnWidth = field(default_factory=ColumnWidth)


class _SizedColumn(NamedTuple):
    title: str
    width: int


@dataclass(frozen=True)
class TableKeyMap:
    """Key bindings for moving the table cursor."""

    line_up: KeyBinding
    line_down: KeyBinding
    page_up: KeyBinding
    page_down: KeyBinding
    half_page_up: KeyBinding
    half_page_down: KeyBinding
    goto_top: KeyBinding
    goto_bottom: KeyBinding


def default_table_key_map() -> TableKeyMap:
    return TableKeyMap(
        line_up=KeyBinding(("up", "k"), "↑/k", "up"),
        line_down=KeyBinding(("down", "j"), "↓/j", "down"),
        page_up=KeyBinding(("b", "pgup"), "b/pgup", "page up"),
        page_down=KeyBinding(("f", "pgdown", "space"), "f/pgdn", "page down"),
        half_page_up=KeyBinding(("u", "ctrl+u"), "u", "½ page up"),
        half_page_down=KeyBinding(("d", "ctrl+d"), "d", "½ page down"),
        goto_top=KeyBinding(("home", "g"), "g/home", "go to start"),
        goto_bottom=KeyBinding(("end", "G"), "G/end", "go to end"),
    )


@dataclass
class TableState:
    """Sized columns, the cursor row (-1 for none) and the scrolling viewport."""

    columns: list[_SizedColumn] = field(default_factory=list)
    cursor: int = -1
    viewport: Viewport = field(default_factory=Viewport)

    def copy(self) -> TableState:
        return TableState(list(self.columns), self.cursor, copy.copy(self.viewport))


def _grow_layout() -> Layout:
    return Layout(grow_x=True, grow_y=True)


@dataclass
class TableProps:
    """Where the data comes from, the key bindings, margins and layout."""

    data_func: Callable[[Ctx], tuple[Sequence[Column], Sequence[Row]]]
    key_map: TableKeyMap = field(default_factory=default_table_key_map)
    margin: Margin = field(default_factory=Margin)
    layout: Layout = field(default_factory=_grow_layout)


def clamp(value: int, low: int, high: int) -> int:
    """Limit ``value`` to [low, high]; when high < low the result is high."""
    if high < low:
        return min(max(value, low), high)
    return max(low, min(high, value))


def column_mapping(width: int, columns: Sequence[Column]) -> list[_SizedColumn]:
    """Give fixed columns their width and share what is left among growing ones.

    Leftover cells go one each to the first growing columns.
    """
    growers = sum(1 for column in columns if column.width.grow)
    static = sum(column.width.value for column in columns if not column.width.grow)
    base = remainder = 0
    if growers:
        grow_width = max(0, width - static)
        base, remainder = divmod(grow_width, growers)

    sized = []
    for column in columns:
        if column.width.grow:
            column_width = base
            if remainder > 0:
                column_width += 1
                remainder -= 1
        else:
            column_width = column.width.value
        sized.append(_SizedColumn(column.title, max(0, column_width)))
    return sized


def _clamped_cursor(cursor: int, delta: int, num_rows: int) -> int:
    if num_rows == 0:
        return -1
    return clamp(cursor + delta, 0, num_rows - 1)


def _moved(state: TableState, cursor: int, y_offset: int) -> TableState:
    if cursor == state.cursor and y_offset == state.viewport.y_offset:
        return state
    new_state = state.copy()
    new_state.cursor = cursor
    new_state.viewport.set_y_offset(y_offset)
    return new_state


def move_up(state: TableState, n: int, num_rows: int) -> TableState:
    """Move the cursor up ``n`` rows, scrolling so it stays visible."""
    if num_rows == 0:
        return state
    cursor = _clamped_cursor(state.cursor, -n, num_rows)
    y_offset = min(state.viewport.y_offset, cursor)
    return _moved(state, cursor, y_offset)


def move_down(state: TableState, n: int, num_rows: int) -> TableState:
    """Move the cursor down ``n`` rows, scrolling so it stays visible."""
    if num_rows == 0:
        return state
    cursor = _clamped_cursor(state.cursor, n, num_rows)
    y_offset = state.viewport.y_offset
    height = state.viewport.height
    if cursor >= y_offset + height:
        y_offset = cursor - height + 1
    return _moved(state, cursor, y_offset)


def goto_top(state: TableState, num_rows: int) -> TableState:
    """Put the cursor on the first row and scroll to the top."""
    if num_rows == 0:
        return state
    return _moved(state, _clamped_cursor(0, 0, num_rows), 0)


def goto_bottom(state: TableState, num_rows: int) -> TableState:
    """Put the cursor on the last row and scroll to the bottom."""
    if num_rows == 0:
        return state
    probe = copy.copy(state.viewport)
    probe.goto_bottom()
    return _moved(state, _clamped_cursor(num_rows - 1, 0, num_rows), probe.y_offset)


def process_key(
    key: Union[KeyMsg, str], key_map: TableKeyMap, num_rows: int, state: TableState
) -> tuple[bool, TableState]:
    """Apply a navigation key; returns whether it was handled and the new state."""
    if num_rows == 0 and not (key_map.line_up.matches(key) or key_map.line_down.matches(key)):
        return False, state
    height = state.viewport.height
    if key_map.line_up.matches(key):
        return True, move_up(state, 1, num_rows)
    if key_map.line_down.matches(key):
        return True, move_down(state, 1, num_rows)
    if key_map.page_up.matches(key):
        return True, move_up(state, height, num_rows)
    if key_map.page_down.matches(key):
        return True, move_down(state, height, num_rows)
    if key_map.half_page_up.matches(key):
        return True, move_up(state, height // 2, num_rows)
    if key_map.half_page_down.matches(key):
        return True, move_down(state, height // 2, num_rows)
    if key_map.goto_top.matches(key):
        return True, goto_top(state, num_rows)
    if key_map.goto_bottom.matches(key):
        return True, goto_bottom(state, num_rows)
    return False, state


def _truncate(text: str, width: int) -> str:
    if string_width(text) <= width:
        return text
    return cut(text, 0, max(0, width - string_width(_ELLIPSIS))) + _ELLIPSIS


def _pad(text: str, width: int) -> str:
    return text + " " * max(0, width - string_width(text))


def _sgr(codes: str, text: str) -> str:
    return f"\x1b[{codes}m{text}\x1b[0m" if text else text


def render_headers(columns: Sequence[_SizedColumn]) -> str:
    """Bold column titles, truncated to their widths, over a rule line."""
    cells = [
        _sgr("1", _pad(_truncate(title, width), width)) + "\n" + "─" * width
        for title, width in columns
        if width > 0
    ]
    return join_horizontal(cells)


def _frame_size(margin: Margin) -> tuple[int, int]:
    top, right, bottom, left = margin.resolve()
    return 2 + left + right, 2 + top + bottom


def _box(content: str, margin: Margin) -> str:
    lines = content.split("\n")
    inner = max(string_width(line) for line in lines)
    rows = [
        "┌" + "─" * inner + "┐",
        *("│" + _pad(line, inner) + "│" for line in lines),
        "└" + "─" * inner + "┘",
    ]
    top, right, bottom, left = margin.resolve()
    rows = [" " * left + row + " " * right for row in rows]
    blank = " " * (inner + 2 + left + right)
    return "\n".join([blank] * top + rows + [blank] * bottom)


def _render_row(
    c: Ctx, index: int, row: Row, state: TableState, child_hover_id: str
) -> str:
    cells = [
        _pad(_truncate(value, column.width), column.width)
        for value, column in zip(row, state.columns)
        if column.width > 0
    ]
    row_id = f"row:{index}"
    text = join_horizontal(cells)
    if row_id == child_hover_id:
        text = _sgr("1;4", text)
    elif index == state.cursor:
        text = _sgr("1;7", text)
    return c.mouse_zone_child(row_id, text)


def table(c: Ctx, props: Any) -> str:
    """Render the table from ``props.data_func`` and wire up keys and mouse."""
    if not isinstance(props, TableProps):
        raise TypeError("table requires TableProps")
    is_focused = use_is_focused(c)
    _, child_hover_id = use_is_hovered(c)
    state, set_state = use_state(c, TableState())
    current = state.copy()

    raw_columns, rows = props.data_func(c)
    num_rows = len(rows)

    def on_key(msg: KeyMsg) -> bool:
        handled, new_state = process_key(msg, props.key_map, num_rows, current)
        if new_state is not current:
            set_state(new_state)
        return handled

    use_key_handler(c, on_key)

    def on_mouse(msg: MouseMsg, child_id: str) -> bool:
        if not child_id or msg.button is not MouseButton.LEFT:
            return False
        if msg.action is not MouseAction.RELEASE:
            return False
        kind, _, index_text = child_id.partition(":")
        if kind == "row":
            try:
                index = int(index_text)
            except ValueError:
                return False
            if 0 <= index < num_rows:
                current.cursor = index
                set_state(current)
        return True

    use_mouse_handler(c, on_mouse)

    width, height = use_size(c)
    h_frame, v_frame = _frame_size(props.margin)

    def resize_columns() -> None:
        current.columns = column_mapping(width - h_frame, raw_columns)
        set_state(current)

    use_effect(c, resize_columns, [raw_columns, width])

    cursor = current.cursor
    if is_focused and cursor < 0 and num_rows > 0:
        cursor = 0
    cursor = clamp(cursor, 0, num_rows - 1) if num_rows > 0 else -1
    if cursor != current.cursor:
        moved = current.copy()
        moved.cursor = cursor
        if num_rows > 0:
            vp = moved.viewport
            if cursor < vp.y_offset:
                vp.set_y_offset(cursor)
            elif cursor >= vp.y_offset + vp.height:
                vp.set_y_offset(cursor - vp.height + 1)
        set_state(moved)

    headers = render_headers(current.columns)
    viewport = current.viewport
    viewport.height = height - text_height(headers) - v_frame
    viewport.width = width - h_frame
    if rows:
        viewport.set_content(
            join_vertical(
                [_render_row(c, i, row, current, child_hover_id) for i, row in enumerate(rows)]
            )
        )
    else:
        viewport.set_content("")

    return _box(headers + "\n" + viewport.view(), props.margin)


def new_table(
    c: Ctx, data_func: Callable[[Ctx], tuple[Sequence[Column], Sequence[Row]]]
) -> Component:
    """Render a table whose columns and rows come from ``data_func``."""
    return c.render(table, TableProps(data_func=data_func))