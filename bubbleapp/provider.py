"""Context values made available to a subtree of components."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, TypeVar

from .component import Component
from .context import Ctx
from .layout import Layout

T = TypeVar("T")

_next_context_id = itertools.count(1)


def _grow_layout() -> Layout:
    return Layout(grow_x=True, grow_y=True)


@dataclass(frozen=True, eq=False)
class Context(Generic[T]):
    """A context object; ``initial_value`` is used when no provider is found."""

    initial_value: T
    id: int = field(default_factory=lambda: next(_next_context_id), init=False)


@dataclass
class ProviderProps(Generic[T]):
    """Props of a provider: the context, the value it provides and its child."""

    context: Optional[Context[T]]
    value: T
    child: Callable[[Ctx], Component]
    layout: Layout = field(default_factory=_grow_layout)


def new_provider(
    c: Ctx,
    context: Optional[Context[T]],
    value: T,
    child: Callable[[Ctx], Component],
) -> Component:
    """Render ``child`` with ``value`` provided for ``context``."""
    if context is None:
        raise ValueError("new_provider called without a context")
    props = ProviderProps(context=context, value=value, child=child)
    return c.render_with_name(
        context_provider, props, f"CtxProvider{{{type(value).__name__}}}"
    )


def context_provider(c: Ctx, props: Any) -> str:
    """Component that makes ``props.value`` visible to everything it renders."""
    if not isinstance(props, ProviderProps):
        raise TypeError("context_provider requires ProviderProps")
    if props.context is None:
        raise ValueError("context_provider: context is missing from the props")
    c.push_context_value(props.context.id, props.value)
    try:
        return str(props.child(c))
    finally:
        c.pop_context_value(props.context.id)


def use_context(c: Ctx, context: Optional[Context[T]]) -> T:
    """Value of the nearest enclosing provider, or the context's initial value."""
    if context is None:
        raise ValueError("use_context called without a context")
    try:
        value = c.get_context_value(context.id)
    except KeyError:
        return context.initial_value
    initial = context.initial_value
    if initial is not None and not isinstance(value, type(initial)):
        raise TypeError(
            f"context value type mismatch for context {context.id}: expected "
            f"{type(initial).__name__}, found {type(value).__name__}"
        )
    return value