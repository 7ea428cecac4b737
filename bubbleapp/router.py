"""Path routing with nested routes, outlets and navigation history."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from .component import Component
from .context import Ctx
from .hooks import use_state
from .layout import Layout
from .provider import Context, new_provider, use_context

logger = logging.getLogger(__name__)

FC = Callable[[Ctx], Component]


def _grow_layout() -> Layout:
    return Layout(grow_x=True, grow_y=True)


def clean_path(path: str) -> str:
    """Shortest equivalent slash-separated path, resolving ``.``, ``..`` and ``//``."""
    if path == "":
        return "."
    rooted = path.startswith("/")
    parts: list[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            elif not rooted:
                parts.append("..")
            continue
        parts.append(segment)
    joined = "/".join(parts)
    if rooted:
        return "/" + joined
    return joined or "."


def _join_path(*elements: str) -> str:
    non_empty = [element for element in elements if element]
    if not non_empty:
        return ""
    return clean_path("/".join(non_empty))


@dataclass
class Route:
    """A path segment (``"users"``, ``":id"``), what to render, and nested routes."""

    path: str
    component: Optional[FC] = None
    children: list[Route] = field(default_factory=list)


@dataclass
class RouterProps:
    routes: list[Route] = field(default_factory=list)
    initial_path: str = ""
    not_found: Optional[FC] = None


class RouterController:
    """Current path and navigation history."""

    def __init__(
        self,
        initial_path: str = "/",
        routes: Optional[list[Route]] = None,
        not_found: Optional[FC] = None,
    ) -> None:
        self.routes: list[Route] = list(routes) if routes else []
        self.not_found = not_found
        self._current_path = initial_path or "/"
        self.history: list[str] = [self._current_path]

    def current(self) -> str:
        """The active path."""
        return self._current_path

    def push(self, c: Ctx, new_path: str) -> None:
        """Go to ``new_path`` and record it in the history."""
        cleaned = clean_path(new_path)
        if cleaned == self._current_path:
            return
        self._current_path = cleaned
        self.history.append(cleaned)
        c.update()

    def pop(self, c: Ctx) -> None:
        """Go back one step; the first entry is never removed."""
        if len(self.history) <= 1:
            return
        self.history.pop()
        self._current_path = self.history[-1]
        c.update()

    def replace(self, c: Ctx, new_path: str) -> None:
        """Go to ``new_path`` in place of the current history entry."""
        cleaned = clean_path(new_path)
        if cleaned == self._current_path and self.history:
            return
        self._current_path = cleaned
        if self.history:
            self.history[-1] = cleaned
        else:
            self.history.append(cleaned)
        c.update()

    def replace_root(self, c: Ctx, new_path: str) -> None:
        """Clear the history and start again at ``new_path``."""
        self._current_path = clean_path(new_path)
        self.history = [self._current_path]
        c.update()


@dataclass
class CurrentMatch:
    """The route matched at this level, its parameters and what is left of the path."""

    matched_route: Optional[Route] = None
    path_params: dict[str, str] = field(default_factory=dict)
    remaining_path: str = ""
    matched_path_prefix: str = ""


ROUTER_CONTEXT: Context[RouterController] = Context(RouterController("/"))
CURRENT_MATCH_CONTEXT: Context[CurrentMatch] = Context(CurrentMatch())


def use_router_controller(c: Ctx) -> RouterController:
    return use_context(c, ROUTER_CONTEXT)


def use_current_match(c: Ctx) -> CurrentMatch:
    return use_context(c, CURRENT_MATCH_CONTEXT)


def match_route(
    route_path: str, url_segment: str
) -> Optional[tuple[dict[str, str], str, str]]:
    """Match one route path against a URL segment.

    Returns (params, consumed path, remaining path), or None when it does not match.
    """
    params: dict[str, str] = {}
    clean_def = route_path.strip("/")
    clean_current = url_segment[1:] if url_segment.startswith("/") else url_segment

    if clean_def == "":
        if clean_current == "" or url_segment == "/":
            return params, "", url_segment
        return None

    if clean_current == "" and url_segment != "/":
        return None

    def_parts = clean_def.split("/")
    current_parts = clean_current.split("/")
    if len(current_parts) < len(def_parts):
        return None

    consumed_parts: list[str] = []
    for def_part, current_part in zip(def_parts, current_parts):
        if def_part.startswith(":"):
            params[def_part[1:]] = current_part
        elif def_part != current_part:
            return None
        consumed_parts.append(current_part)

    consumed = "/".join(consumed_parts)
    if url_segment.startswith("/") and consumed:
        consumed = "/" + consumed

    remaining = ""
    if len(current_parts) > len(def_parts):
        remaining = "/" + "/".join(current_parts[len(def_parts):])

    return params, consumed, remaining


@dataclass
class _KeyProps:
    key: str = ""
    layout: Layout = field(default_factory=_grow_layout)


def _not_found_text(c: Ctx, props: object) -> str:
    return "404 Not Found"


def _match_and_render(
    c: Ctx,
    routes: list[Route],
    full_url: str,
    segment: str,
    parent_prefix: str,
    not_found: Optional[FC],
) -> Component:
    normalized = clean_path(segment)
    if normalized == ".":
        normalized = "/"

    for route in routes:
        result = match_route(route.path, normalized)
        if result is None:
            continue
        params, consumed, remaining = result
        prefix = _join_path(parent_prefix, consumed)
        match = CurrentMatch(
            matched_route=route,
            path_params=params,
            remaining_path=remaining,
            matched_path_prefix=prefix,
        )

        def render_route(c: Ctx, route: Route = route, prefix: str = prefix) -> Component:
            if route.component is None:
                logger.error(
                    "route matched (%s) but has no component to render", prefix
                )
                raise RuntimeError("route matched but no component provided")
            component = route.component
            return c.render_with_name(
                lambda c, _props: str(component(c)), _KeyProps(), f"route{{{prefix}}}"
            )

        return new_provider(c, CURRENT_MATCH_CONTEXT, match, render_route)

    if not_found is not None:
        return not_found(c)
    return c.render(_not_found_text, None)


@dataclass
class _RouterViewProps:
    router: RouterProps
    layout: Layout = field(default_factory=_grow_layout)


def _router_view(c: Ctx, props: _RouterViewProps) -> str:
    router_props = props.router
    controller, _ = use_state(
        c,
        RouterController(
            router_props.initial_path, router_props.routes, router_props.not_found
        ),
    )

    def child(c: Ctx) -> Component:
        return _match_and_render(
            c,
            controller.routes,
            controller.current(),
            controller.current(),
            "",
            controller.not_found,
        )

    return str(new_provider(c, ROUTER_CONTEXT, controller, child))


def new_router(c: Ctx, props: RouterProps) -> Component:
    """Render the route that matches the current path, providing the controller."""
    return c.render(_router_view, _RouterViewProps(router=props))


@dataclass
class _OutletProps:
    key: str = ""
    layout: Layout = field(default_factory=_grow_layout)


def _outlet(c: Ctx, _props: object) -> str:
    match = use_current_match(c)
    controller = use_router_controller(c)
    if match.matched_route is None or not match.matched_route.children:
        return ""
    return str(
        _match_and_render(
            c,
            match.matched_route.children,
            controller.current(),
            match.remaining_path,
            match.matched_path_prefix,
            controller.not_found,
        )
    )


def new_outlet(c: Ctx) -> Component:
    """Render the child route of the route matched around this outlet."""
    match = use_current_match(c)
    return c.render(_outlet, _OutletProps(key=match.remaining_path))


def navigate(c: Ctx, to: str, replace: bool = False, reset: bool = False) -> None:
    """Go to ``to``: push by default, replace the entry, or reset the history."""
    controller = use_router_controller(c)
    if controller is None:
        logger.warning("navigate: no router controller found")
        return
    if reset:
        controller.replace_root(c, to)
    elif replace:
        controller.replace(c, to)
    else:
        controller.push(c, to)