"""Layout description, spacing options and space distribution over a component tree."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


class LayoutDirection(Enum):
    VERTICAL = 0
    HORIZONTAL = 1


class LayoutPhase(Enum):
    INTRINSIC_WIDTH = 0
    INTRINSIC_HEIGHT = 1
    FINAL_RENDER = 2


class Order(Enum):
    PRE_ORDER = 0
    POST_ORDER = 1


@dataclass
class Layout:
    direction: LayoutDirection = LayoutDirection.VERTICAL
    grow_x: bool = False
    grow_y: bool = False
    gap_x: int = 0
    gap_y: int = 0
    width: int = 0
    height: int = 0


def _resolve_sides(
    all_sides: int, vertical: int, horizontal: int,
    top: int, right: int, bottom: int, left: int,
) -> tuple[int, int, int, int]:
    t = r = b = l = 0
    if all_sides > 0:
        t = r = b = l = all_sides
    if vertical > 0:
        t = b = vertical
    if horizontal > 0:
        l = r = horizontal
    if top > 0:
        t = top
    if bottom > 0:
        b = bottom
    if left > 0:
        l = left
    if right > 0:
        r = right
    return t, r, b, l


@dataclass
class Margin:
    m: int = 0
    mt: int = 0
    mb: int = 0
    ml: int = 0
    mr: int = 0
    my: int = 0
    mx: int = 0

    def resolve(self) -> tuple[int, int, int, int]:
        """Effective (top, right, bottom, left); single sides beat axes beat ``m``."""
        return _resolve_sides(self.m, self.my, self.mx, self.mt, self.mr, self.mb, self.ml)


@dataclass
class Padding:
    p: int = 0
    pt: int = 0
    pb: int = 0
    pl: int = 0
    pr: int = 0
    py: int = 0
    px: int = 0

    def resolve(self) -> tuple[int, int, int, int]:
        """Effective (top, right, bottom, left); single sides beat axes beat ``p``."""
        return _resolve_sides(self.p, self.py, self.px, self.pt, self.pr, self.pb, self.pl)


def extract_layout(props: Any) -> Layout:
    """Layout carried by a field of ``props``; fixed sizes are not taken over."""
    if props is None:
        return Layout()
    if dataclasses.is_dataclass(props) and not isinstance(props, type):
        values = [getattr(props, f.name) for f in dataclasses.fields(props)]
    elif hasattr(props, "__dict__"):
        values = list(vars(props).values())
    else:
        return Layout()
    for value in values:
        if isinstance(value, Layout):
            return Layout(
                direction=value.direction,
                grow_x=value.grow_x,
                grow_y=value.grow_y,
                gap_x=value.gap_x,
                gap_y=value.gap_y,
            )
    return Layout()


Visitor = Callable[[Any, int, Any], None]


def visit(node: Any, index: int, ctx: Any, visitor: Visitor, order: Order) -> None:
    """Walk the tree below ``node``, calling ``visitor(node, index, ctx)``."""
    if node is None:
        return
    if order is Order.PRE_ORDER:
        visitor(node, index, ctx)
    for child_index, child in enumerate(node.children):
        visit(child, child_index, ctx, visitor, order)
    if order is Order.POST_ORDER:
        visitor(node, index, ctx)


def _distribute(node: Any, axis: str, grow_attr: str, gap: int,
                cross: LayoutDirection) -> None:
    children = node.children
    if not children:
        return
    available = getattr(node, axis)
    if node.layout.direction is cross:
        for child in children:
            if getattr(child.layout, grow_attr):
                setattr(child, axis, available)
        return

    growing = [child for child in children if getattr(child.layout, grow_attr)]
    fixed = sum(getattr(child, axis) for child in children
                if not getattr(child.layout, grow_attr))
    total_gap = (len(children) - 1) * gap if len(children) > 1 and gap > 0 else 0
    remaining = max(0, available - fixed - total_gap)
    if not growing:
        return
    base, extra = divmod(remaining, len(growing))
    for position, child in enumerate(growing):
        setattr(child, axis, base + (1 if position < extra else 0))


def distribute_width(node: Any, index: int, ctx: Any) -> None:
    """Hand the node's width to its children that grow horizontally."""
    if node is None:
        return
    _distribute(node, "width", "grow_x", node.layout.gap_x, LayoutDirection.VERTICAL)


def distribute_height(node: Any, index: int, ctx: Any) -> None:
    """Hand the node's height to its children that grow vertically."""
    if node is None:
        return
    _distribute(node, "height", "grow_y", node.layout.gap_y, LayoutDirection.HORIZONTAL)