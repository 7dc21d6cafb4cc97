"""Route declarations, path patterns and the group combinator.

Routes are plain frozen values. A route table is assembled by nesting
``group()`` calls around ``get()`` / ``post()`` / ``patch()`` /
``delete()`` declarations::

    ROUTES = group(
        post("/login", auth.login),
        group(
            get("/status", attendance.today_status),
            prefix="absen",
        ),
        protected=True,
    )

``group()`` flattens its children into a single tuple, so the result can
be handed straight to ``HandlerRegistry``.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, replace
from typing import Any

from presensi.routing.errors import RouteDefinitionError

HTTP_METHODS = frozenset({"GET", "POST", "PATCH", "DELETE"})

_PARAM_RE = re.compile(r"^\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?P<optional>\?)?\}$")


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Literal:   ``users``    (param_name=None)
    Param:     ``{id}``     (param_name="id")
    Optional:  ``{year?}``  (param_name="year", optional=True)
    """

    value: str
    param_name: str | None = None
    optional: bool = False

    @property
    def is_param(self) -> bool:
        return self.param_name is not None


def parse_path(path: str) -> tuple[PathSegment, ...]:
    """Parse a route path string into segments.

    Raises ``RouteDefinitionError`` for malformed placeholders, repeated
    parameter names, or an optional parameter that is not the last segment.
    """
    segments: list[PathSegment] = []
    seen: set[str] = set()
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if "{" in part or "}" in part:
            m = _PARAM_RE.match(part)
            if m is None:
                raise RouteDefinitionError(f"Malformed path parameter {part!r} in {path!r}")
            name = m.group("name")
            if name in seen:
                raise RouteDefinitionError(f"Duplicate path parameter {name!r} in {path!r}")
            seen.add(name)
            segments.append(PathSegment(part, param_name=name, optional=bool(m.group("optional"))))
        else:
            segments.append(PathSegment(part))

    for seg in segments[:-1]:
        if seg.optional:
            raise RouteDefinitionError(
                f"Optional parameter {seg.value!r} must be the last segment of {path!r}"
            )
    return tuple(segments)


def join_path(prefix: str, path: str) -> str:
    parts = [p.strip("/") for p in (prefix, path)]
    return "/" + "/".join(p for p in parts if p)


@dataclass(frozen=True, slots=True)
class HandlerCall:
    """Everything a handler receives for one dispatched request.

    ``principal`` is the authenticated user on protected routes and
    ``None`` on public ones.
    """

    request: Any
    db: Any
    params: dict[str, str]
    query: dict[str, str]
    body: Any = None
    principal: Any = None


HandlerResult = tuple[int, Any]
Handler = Callable[[HandlerCall], Awaitable[HandlerResult]]


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route declaration.

    Created while the route table is assembled, compiled into the
    registry once at startup.
    """

    method: str
    path: str
    handler: Handler
    protected: bool = False

    @property
    def segments(self) -> tuple[PathSegment, ...]:
        return parse_path(self.path)

    @property
    def name(self) -> str:
        module = getattr(self.handler, "__module__", None) or "?"
        return f"{module}.{getattr(self.handler, '__qualname__', repr(self.handler))}"

    def shapes(self) -> tuple[tuple[str, ...], ...]:
        """The fully-resolved path shapes this route can match.

        Parameter names are erased; a trailing optional parameter yields
        both the shorter and the longer shape.
        """
        erased = tuple("{}" if seg.is_param else seg.value for seg in self.segments)
        if self.segments and self.segments[-1].optional:
            return (erased[:-1], erased)
        return (erased,)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful registry lookup."""

    route: Route
    params: dict[str, str]


# ── Declaration helpers ─────────────────────────────────────────────
def get(path: str, handler: Handler) -> Route:
    return Route("GET", path, handler)


def post(path: str, handler: Handler) -> Route:
    return Route("POST", path, handler)


def patch(path: str, handler: Handler) -> Route:
    return Route("PATCH", path, handler)


def delete(path: str, handler: Handler) -> Route:
    return Route("DELETE", path, handler)


def group(
    *children: Route | Iterable[Route],
    prefix: str = "",
    protected: bool = False,
) -> tuple[Route, ...]:
    """Apply a shared prefix and protection flag to a batch of routes.

    Nested groups are flattened in declaration order. Protection only
    ever widens: a route stays protected if any enclosing group is.
    """
    flat: list[Route] = []
    for child in children:
        routes = (child,) if isinstance(child, Route) else tuple(child)
        for route in routes:
            flat.append(
                replace(
                    route,
                    path=join_path(prefix, route.path),
                    protected=route.protected or protected,
                )
            )
    return tuple(flat)
