"""A container that places its children one after another."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from .ansi import join_horizontal, join_vertical
from .component import Component
from .context import Ctx
from .hooks import use_fcs
from .layout import Layout, LayoutDirection

FCs = Callable[[Ctx], Sequence[Component]]


def _default_layout() -> Layout:
    return Layout(direction=LayoutDirection.VERTICAL, grow_x=True, grow_y=True)


@dataclass
class StackProps:
    """The children to render and how to lay them out."""

    fcs: Optional[FCs] = None
    layout: Layout = field(default_factory=_default_layout)


def stack(c: Ctx, props: Any) -> str:
    """Join the children horizontally or vertically, with gaps between them.

    Empty children are skipped. A horizontal gap is ``gap_x`` spaces; a vertical
    gap is a single blank line.
    """
    if not isinstance(props, StackProps):
        raise TypeError("stack requires StackProps")
    outputs = use_fcs(c, props.fcs)
    layout = props.layout
    horizontal = layout.direction == LayoutDirection.HORIZONTAL
    gap = layout.gap_x if horizontal else layout.gap_y
    spacer = " " * layout.gap_x if horizontal else " "
    last = len(outputs) - 1

    pieces: list[str] = []
    for i, output in enumerate(outputs):
        if not output:
            continue
        pieces.append(output)
        if gap > 0 and i < last:
            pieces.append(spacer)

    return join_horizontal(pieces) if horizontal else join_vertical(pieces)


def new_stack(
    c: Ctx,
    fcs: Optional[FCs],
    direction: LayoutDirection = LayoutDirection.VERTICAL,
    gap: int = 0,
    grow_x: bool = True,
    grow_y: bool = True,
) -> Component:
    """Render a stack of the components ``fcs`` produces."""
    props = StackProps(
        fcs=fcs,
        layout=Layout(
            direction=direction,
            grow_x=grow_x,
            grow_y=grow_y,
            gap_x=gap,
            gap_y=gap,
        ),
    )
    return c.render(stack, props)