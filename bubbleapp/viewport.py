"""A scrollable window onto lines of text, with highlights and a left gutter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence, Union

from .ansi import cut, string_width, text_height, text_width
from .highlight import HighlightInfo, make_highlight_ranges, parse_matches
from .layout import Padding
from .messages import KeyMsg, MouseAction, MouseButton, MouseMsg

DEFAULT_HORIZONTAL_STEP = 6

TextStyle = Callable[[str], str]


@dataclass(frozen=True)
class KeyBinding:
    """Keys that trigger an action, plus the help text describing it."""

    keys: tuple[str, ...]
    help_key: str = ""
    help_desc: str = ""

    def matches(self, key: Union[KeyMsg, str]) -> bool:
        """Whether ``key`` is one of this binding's keys."""
        return str(key) in self.keys


@dataclass(frozen=True)
class KeyMap:
    """Key bindings understood by the viewport."""

    page_down: KeyBinding
    page_up: KeyBinding
    half_page_up: KeyBinding
    half_page_down: KeyBinding
    down: KeyBinding
    up: KeyBinding
    left: KeyBinding
    right: KeyBinding


def default_key_map() -> KeyMap:
    """Pager-like default key bindings."""
    return KeyMap(
        page_down=KeyBinding(("pgdown", "space", "f"), "f/pgdn", "page down"),
        page_up=KeyBinding(("pgup", "b"), "b/pgup", "page up"),
        half_page_up=KeyBinding(("u", "ctrl+u"), "u", "½ page up"),
        half_page_down=KeyBinding(("d", "ctrl+d"), "d", "½ page down"),
        up=KeyBinding(("up", "k"), "↑/k", "up"),
        down=KeyBinding(("down", "j"), "↓/j", "down"),
        left=KeyBinding(("left", "h"), "←/h", "move left"),
        right=KeyBinding(("right", "l"), "→/l", "move right"),
    )


@dataclass(frozen=True)
class GutterContext:
    """What a gutter function knows about the line it decorates."""

    index: int = 0
    total_lines: int = 0
    soft: bool = False


GutterFunc = Callable[[GutterContext], str]


def no_gutter(_ctx: GutterContext) -> str:
    """The default gutter: nothing."""
    return ""


def _clamp(value: int, low: int, high: int) -> int:
    if high < low:
        low, high = high, low
    return min(high, max(low, value))


def _style_ranges(
    line: str, ranges: Sequence[tuple[int, int]], style: Optional[TextStyle]
) -> str:
    if style is None or not ranges:
        return line
    parts: list[str] = []
    pos = 0
    for start, end in sorted(ranges):
        parts.append(cut(line, pos, start))
        parts.append(style(cut(line, start, end)))
        pos = end
    parts.append(cut(line, pos, max(pos, string_width(line))))
    return "".join(parts)


class Viewport:
    """Shows ``height`` lines of content at a time, scrolled by offsets."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.width = width
        self.height = height
        self.key_map: KeyMap = default_key_map()
        self.soft_wrap = False
        self.fill_height = False
        self.mouse_wheel_enabled = True
        self.mouse_wheel_delta = 3
        self.padding = Padding()
        self.left_gutter_func: Optional[GutterFunc] = no_gutter
        self.highlight_style: Optional[TextStyle] = None
        self.selected_highlight_style: Optional[TextStyle] = None
        self.style_line_func: Optional[Callable[[int, str], str]] = None
        self._y_offset = 0
        self._x_offset = 0
        self._horizontal_step = DEFAULT_HORIZONTAL_STEP
        self._lines: list[str] = []
        self._longest_line_width = 0
        self._highlights: list[HighlightInfo] = []
        self._hi_idx = -1

    # -- offsets and geometry ---------------------------------------------

    @property
    def y_offset(self) -> int:
        return self._y_offset

    @property
    def x_offset(self) -> int:
        return self._x_offset

    @property
    def horizontal_step(self) -> int:
        return self._horizontal_step

    @property
    def highlight_index(self) -> int:
        """Index of the selected highlight, -1 when none."""
        return self._hi_idx

    def _frame(self) -> tuple[int, int]:
        top, right, bottom, left = self.padding.resolve()
        return left + right, top + bottom

    def _gutter_size(self) -> int:
        if self.left_gutter_func is None:
            return 0
        return text_width(self.left_gutter_func(GutterContext()))

    def _max_width(self) -> int:
        return self.width - self._frame()[0] - self._gutter_size()

    def _max_height(self) -> int:
        return self.height - self._frame()[1]

    def _calculate_line(self, y_offset: int) -> tuple[int, int]:
        total = 0
        index = 0
        if self.soft_wrap:
            span = self._max_width() - self._gutter_size()

            def adjust_of(line: str) -> int:
                return max(1, text_width(line) // span) if span > 0 else 1
        else:

            def adjust_of(line: str) -> int:
                return max(1, text_height(line))

        for i, line in enumerate(self._lines):
            adjust = adjust_of(line)
            if total <= y_offset < total + adjust:
                index = i
            total += adjust
        if y_offset >= total:
            index = len(self._lines)
        return total, index

    def _line_to_index(self, y: int) -> int:
        return self._calculate_line(y)[1]

    def _line_count(self) -> int:
        return self._calculate_line(0)[0]

    def _max_y_offset(self) -> int:
        return max(0, self._line_count() - self.height + self._frame()[1])

    def _max_x_offset(self) -> int:
        return max(0, self._longest_line_width - self.width)

    # -- content ----------------------------------------------------------

    def set_content(self, content: str) -> None:
        """Set the text shown; line endings are normalised to ``\\n``."""
        self.set_content_lines(content.replace("\r\n", "\n").split("\n"))

    def set_content_lines(self, lines: Iterable[str]) -> None:
        """Set the lines shown; a line holding ``\\n`` spans several rows."""
        self._lines = list(lines)
        if len(self._lines) == 1 and string_width(self._lines[0]) == 0:
            self._lines = []
        self._longest_line_width = max(
            (text_width(line) for line in self._lines), default=0
        )
        self.clear_highlights()
        if self._y_offset > self._max_y_offset():
            self.goto_bottom()

    def get_content(self) -> str:
        """All content joined with ``\\n``."""
        return "\n".join(self._lines)

    # -- position queries -------------------------------------------------

    def at_top(self) -> bool:
        return self._y_offset <= 0

    def at_bottom(self) -> bool:
        return self._y_offset >= self._max_y_offset()

    def past_bottom(self) -> bool:
        """Scrolled beyond the last line, as after growing the height."""
        return self._y_offset > self._max_y_offset()

    def scroll_percent(self) -> float:
        """Vertical scroll position between 0 and 1."""
        count = self._line_count()
        if self.height >= count:
            return 1.0
        value = self._y_offset / (count - self.height)
        return max(0.0, min(1.0, value))

    def horizontal_scroll_percent(self) -> float:
        """Horizontal scroll position between 0 and 1."""
        if self._x_offset >= self._longest_line_width - self.width:
            return 1.0
        value = self._x_offset / (self._longest_line_width - self.width)
        return max(0.0, min(1.0, value))

    def total_line_count(self) -> int:
        """Rows of content, hidden and visible."""
        return self._line_count()

    def visible_line_count(self) -> int:
        return len(self.visible_lines())

    # -- rendering lines --------------------------------------------------

    def visible_lines(self) -> list[str]:
        """The rows currently inside the viewport."""
        max_height = self._max_height()
        max_width = self._max_width()
        lines: list[str] = []

        if self._line_count() > 0:
            pos = self._line_to_index(self._y_offset)
            top = max(0, pos)
            bottom = _clamp(pos + max_height, top, len(self._lines))
            lines = list(self._lines[top:bottom])
            lines = self._style_lines(lines, top)
            lines = self._highlight_lines(lines, top)

        while self.fill_height and len(lines) < max_height:
            lines.append("")

        if (self._x_offset == 0 and self._longest_line_width <= max_width) or max_width == 0:
            return self._setup_gutter(lines)

        if self.soft_wrap:
            return self._soft_wrap(lines, max_width)

        start, end = self._x_offset, self._x_offset + max_width
        lines = [
            "\n".join(cut(sub, start, end) for sub in line.split("\n"))
            for line in lines
        ]
        return self._setup_gutter(lines)

    def _style_lines(self, lines: list[str], offset: int) -> list[str]:
        if self.style_line_func is None:
            return lines
        return [self.style_line_func(i + offset, line) for i, line in enumerate(lines)]

    def _highlight_lines(self, lines: list[str], offset: int) -> list[str]:
        if not self._highlights:
            return lines
        result = []
        for i, line in enumerate(lines):
            row = i + offset
            line = _style_ranges(
                line, make_highlight_ranges(self._highlights, row), self.highlight_style
            )
            if self._hi_idx >= 0:
                selected = self._highlights[self._hi_idx].lines.get(row)
                if selected is not None:
                    line = _style_ranges(line, [selected], self.selected_highlight_style)
            result.append(line)
        return result

    def _soft_wrap(self, lines: list[str], max_width: int) -> list[str]:
        if max_width <= 0:
            return self._setup_gutter(lines)
        wrapped: list[str] = []
        total = self.total_line_count()
        for i, line in enumerate(lines):
            idx = 0
            while string_width(line) >= idx:
                piece = cut(line, idx, max_width + idx)
                if self.left_gutter_func is not None:
                    piece = self.left_gutter_func(
                        GutterContext(index=i + self._y_offset, total_lines=total, soft=idx > 0)
                    ) + piece
                wrapped.append(piece)
                idx += max_width
        return wrapped

    def _setup_gutter(self, lines: list[str]) -> list[str]:
        gutter = self.left_gutter_func
        if gutter is None:
            return lines
        offset = max(0, self._line_to_index(self._y_offset))
        total = self.total_line_count()
        return [
            "\n".join(
                gutter(GutterContext(index=i + offset, total_lines=total, soft=j > 0)) + sub
                for j, sub in enumerate(line.split("\n"))
            )
            for i, line in enumerate(lines)
        ]

    # -- scrolling --------------------------------------------------------

    def set_y_offset(self, n: int) -> None:
        self._y_offset = _clamp(n, 0, self._max_y_offset())

    def set_x_offset(self, n: int) -> None:
        """Set the horizontal offset; ignored while soft wrapping."""
        if self.soft_wrap:
            return
        self._x_offset = _clamp(n, 0, self._max_x_offset())

    def set_horizontal_step(self, n: int) -> None:
        """Columns moved per horizontal scroll step; 0 or less disables it."""
        self._horizontal_step = max(0, n)

    def ensure_visible(self, line: int, colstart: int, colend: int) -> None:
        """Scroll so that the given line and column range are shown."""
        if colend <= self._max_width():
            self.set_x_offset(0)
        else:
            self.set_x_offset(colstart - self._horizontal_step)
        if line < self._y_offset or line >= self._y_offset + self._max_height():
            self.set_y_offset(line)

    def scroll_down(self, n: int) -> None:
        if self.at_bottom() or n == 0 or not self._lines:
            return
        self.set_y_offset(self._y_offset + n)
        self._hi_idx = self._find_nearest_match()

    def scroll_up(self, n: int) -> None:
        if self.at_top() or n == 0 or not self._lines:
            return
        self.set_y_offset(self._y_offset - n)
        self._hi_idx = self._find_nearest_match()

    def scroll_left(self, n: int) -> None:
        self.set_x_offset(self._x_offset - n)

    def scroll_right(self, n: int) -> None:
        self.set_x_offset(self._x_offset + n)

    def page_down(self) -> None:
        if not self.at_bottom():
            self.scroll_down(self.height)

    def page_up(self) -> None:
        if not self.at_top():
            self.scroll_up(self.height)

    def half_page_down(self) -> None:
        if not self.at_bottom():
            self.scroll_down(self.height // 2)

    def half_page_up(self) -> None:
        if not self.at_top():
            self.scroll_up(self.height // 2)

    def goto_top(self) -> list[str]:
        """Scroll to the top and return the visible lines; empty if already there."""
        if self.at_top():
            return []
        self.set_y_offset(0)
        self._hi_idx = self._find_nearest_match()
        return self.visible_lines()

    def goto_bottom(self) -> list[str]:
        """Scroll to the bottom and return the visible lines."""
        self.set_y_offset(self._max_y_offset())
        self._hi_idx = self._find_nearest_match()
        return self.visible_lines()

    # -- highlights -------------------------------------------------------

    def set_highlights(self, matches: Iterable[Sequence[int]]) -> None:
        """Highlight ordered, non-overlapping (start, end) ranges of the content."""
        matches = list(matches)
        if not matches or not self._lines:
            return
        self._highlights = parse_matches(self.get_content(), matches)
        self._hi_idx = self._find_nearest_match()
        self._show_highlight()

    def clear_highlights(self) -> None:
        self._highlights = []
        self._hi_idx = -1

    def highlight_next(self) -> None:
        if not self._highlights:
            return
        self._hi_idx = (self._hi_idx + 1) % len(self._highlights)
        self._show_highlight()

    def highlight_previous(self) -> None:
        if not self._highlights:
            return
        self._hi_idx = (self._hi_idx - 1) % len(self._highlights)
        self._show_highlight()

    def _show_highlight(self) -> None:
        if self._hi_idx == -1:
            return
        line, colstart, colend = self._highlights[self._hi_idx].coords()
        self.ensure_visible(line, colstart, colend)

    def _find_nearest_match(self) -> int:
        for i, match in enumerate(self._highlights):
            if match.line_start >= self._y_offset:
                return i
        return -1

    # -- messages and view ------------------------------------------------

    def update(self, msg: object) -> Viewport:
        """React to key presses and mouse wheel messages; returns self."""
        if isinstance(msg, KeyMsg):
            km = self.key_map
            if km.page_down.matches(msg):
                self.page_down()
            elif km.page_up.matches(msg):
                self.page_up()
            elif km.half_page_down.matches(msg):
                self.half_page_down()
            elif km.half_page_up.matches(msg):
                self.half_page_up()
            elif km.down.matches(msg):
                self.scroll_down(1)
            elif km.up.matches(msg):
                self.scroll_up(1)
            elif km.left.matches(msg):
                self.scroll_left(self._horizontal_step)
            elif km.right.matches(msg):
                self.scroll_right(self._horizontal_step)
        elif isinstance(msg, MouseMsg) and msg.action is MouseAction.WHEEL:
            if not self.mouse_wheel_enabled:
                return self
            button = msg.button
            if button is MouseButton.WHEEL_DOWN:
                if msg.shift:
                    self.scroll_right(self._horizontal_step)
                else:
                    self.scroll_down(self.mouse_wheel_delta)
            elif button is MouseButton.WHEEL_UP:
                if msg.shift:
                    self.scroll_left(self._horizontal_step)
                else:
                    self.scroll_up(self.mouse_wheel_delta)
            elif button is MouseButton.WHEEL_LEFT:
                self.scroll_left(self._horizontal_step)
            elif button is MouseButton.WHEEL_RIGHT:
                self.scroll_right(self._horizontal_step)
        return self

    def view(self) -> str:
        """Render the viewport padded and truncated to its size."""
        h_frame, v_frame = self._frame()
        content_width = self.width - h_frame
        content_height = self.height - v_frame
        rows: list[str] = []
        for line in self.visible_lines():
            rows.extend(line.split("\n"))
        if content_height > 0:
            rows = rows[:content_height]
            rows.extend([""] * (content_height - len(rows)))
        if content_width > 0:
            rows = [cut(row, 0, content_width) for row in rows]
            rows = [row + " " * max(0, content_width - string_width(row)) for row in rows]
        top, right, bottom, left = self.padding.resolve()
        inner_width = max((string_width(row) for row in rows), default=0)
        full_width = inner_width + left + right
        rows = [" " * left + row + " " * right for row in rows]
        blank = " " * full_width
        rows = [blank] * top + rows + [blank] * bottom
        return "\n".join(rows)