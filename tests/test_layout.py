from dataclasses import dataclass, field
from types import SimpleNamespace

import pytest

from bubbleapp.layout import (
    Layout,
    LayoutDirection,
    Margin,
    Order,
    Padding,
    distribute_height,
    distribute_width,
    extract_layout,
    visit,
)


def node(layout=None, width=0, height=0, children=(), name=""):
    return SimpleNamespace(
        layout=layout or Layout(), width=width, height=height,
        children=list(children), name=name,
    )


def test_margin_uniform():
    assert Margin(m=2).resolve() == (2, 2, 2, 2)


def test_margin_precedence():
    assert Margin(m=1, mx=3, ml=5).resolve() == (1, 3, 1, 5)


def test_padding_precedence():
    assert Padding(p=1, py=2, pb=4).resolve() == (2, 1, 4, 1)


def test_padding_default_zero():
    assert Padding().resolve() == (0, 0, 0, 0)


@dataclass
class _Props:
    key: str = ""
    layout: Layout = field(default_factory=Layout)


def test_extract_layout_copies_flags_not_sizes():
    props = _Props(layout=Layout(
        direction=LayoutDirection.HORIZONTAL, grow_x=True, gap_x=2, width=10, height=5,
    ))
    result = extract_layout(props)
    assert result == Layout(direction=LayoutDirection.HORIZONTAL, grow_x=True, gap_x=2)


@pytest.mark.parametrize("props", [None, "text", 42, {"layout": Layout(grow_x=True)}])
def test_extract_layout_defaults(props):
    assert extract_layout(props) == Layout()


def test_visit_orders():
    a, b = node(name="a"), node(name="b")
    root = node(name="root", children=[a, b])
    seen = []
    visit(root, 0, None, lambda n, i, c: seen.append((n.name, i)), Order.PRE_ORDER)
    assert seen == [("root", 0), ("a", 0), ("b", 1)]
    seen.clear()
    visit(root, 0, None, lambda n, i, c: seen.append(n.name), Order.POST_ORDER)
    assert seen == ["a", "b", "root"]


def test_visit_none_is_noop():
    seen = []
    visit(None, 0, None, lambda *args: seen.append(args), Order.PRE_ORDER)
    assert seen == []


def test_vertical_parent_gives_full_width_to_growers():
    grow = node(Layout(grow_x=True))
    fixed = node(width=3)
    parent = node(width=20, children=[grow, fixed])
    distribute_width(parent, 0, None)
    assert grow.width == parent.width
    assert fixed.width == 3


def test_horizontal_width_split_fills_space():
    fixed = node(width=3)
    growers = [node(Layout(grow_x=True)) for _ in range(2)]
    parent = node(Layout(direction=LayoutDirection.HORIZONTAL), width=10,
                  children=[fixed, *growers])
    distribute_width(parent, 0, None)
    widths = [g.width for g in growers]
    assert sum(widths) + fixed.width == parent.width
    assert max(widths) - min(widths) <= 1
    assert widths[0] >= widths[1]


def test_horizontal_width_respects_gaps():
    growers = [node(Layout(grow_x=True)) for _ in range(3)]
    parent = node(Layout(direction=LayoutDirection.HORIZONTAL, gap_x=1), width=20,
                  children=growers)
    distribute_width(parent, 0, None)
    assert sum(g.width for g in growers) + 2 * parent.layout.gap_x == parent.width


def test_width_never_negative():
    fixed = node(width=50)
    grow = node(Layout(grow_x=True), width=7)
    parent = node(Layout(direction=LayoutDirection.HORIZONTAL), width=10,
                  children=[fixed, grow])
    distribute_width(parent, 0, None)
    assert grow.width == 0


def test_vertical_height_split():
    fixed = node(height=2)
    growers = [node(Layout(grow_y=True)) for _ in range(3)]
    parent = node(Layout(gap_y=1), height=12, children=[fixed, *growers])
    distribute_height(parent, 0, None)
    heights = [g.height for g in growers]
    assert sum(heights) + fixed.height + 3 * parent.layout.gap_y == parent.height
    assert max(heights) - min(heights) <= 1


def test_horizontal_parent_gives_full_height():
    grow = node(Layout(grow_y=True))
    parent = node(Layout(direction=LayoutDirection.HORIZONTAL), height=9, children=[grow])
    distribute_height(parent, 0, None)
    assert grow.height == parent.height