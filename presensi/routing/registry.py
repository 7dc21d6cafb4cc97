"""Handler registry: the compiled, read-only route table.

Routes are registered during startup and frozen before the first
request. Lookups only read, so one registry is shared by every
concurrent request without locking.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from presensi.routing.errors import RouteConflictError, RouteDefinitionError
from presensi.routing.route import (HTTP_METHODS, Handler, PathSegment, Route,
                                    RouteMatch)

logger = logging.getLogger(__name__)


def compile_pattern(segments: tuple[PathSegment, ...]) -> re.Pattern[str]:
    """Build an anchored regex for a parsed path.

    ``/schedule/year/{year?}`` compiles to
    ``/schedule/year(?:/(?P<year>[^/]+))?``.
    """
    parts: list[str] = []
    for seg in segments:
        if not seg.is_param:
            parts.append("/" + re.escape(seg.value))
        elif seg.optional:
            parts.append(f"(?:/(?P<{seg.param_name}>[^/]+))?")
        else:
            parts.append(f"/(?P<{seg.param_name}>[^/]+)")
    return re.compile("".join(parts) or "/")


def normalise_path(path: str) -> str:
    """Strip a trailing slash so ``/users/`` and ``/users`` are one path."""
    if not path.startswith("/"):
        path = "/" + path
    return path.rstrip("/") or "/"


class HandlerRegistry:
    """Route table compiled into per-method, declaration-ordered lists.

    Usage::

        registry = HandlerRegistry()
        registry.register("GET", "/users/{id}", show_user, protected=True)
        registry.freeze()
        match = registry.lookup("GET", "/users/42")

    Conflicting declarations raise ``RouteConflictError`` as soon as the
    second one is registered.
    """

    __slots__ = ("_by_method", "_frozen", "_routes", "_shapes")

    def __init__(self, routes: Iterable[Route] = ()) -> None:
        self._by_method: dict[str, list[tuple[re.Pattern[str], Route]]] = {}
        self._routes: list[Route] = []
        self._shapes: dict[tuple[str, tuple[str, ...]], Route] = {}
        self._frozen = False
        for route in routes:
            self.add(route)

    @classmethod
    def build(cls, routes: Iterable[Route]) -> HandlerRegistry:
        """Register every route and freeze the result."""
        registry = cls(routes)
        registry.freeze()
        return registry

    # ── Build time ──────────────────────────────────────────────────
    def register(
        self,
        method: str,
        path: str,
        handler: Handler,
        protected: bool = False,
    ) -> Route:
        route = Route(method.upper(), path, handler, protected)
        self.add(route)
        return route

    def add(self, route: Route) -> None:
        if self._frozen:
            msg = "Cannot register routes after the registry is frozen."
            raise RuntimeError(msg)

        method = route.method.upper()
        if method not in HTTP_METHODS:
            raise RouteDefinitionError(
                f"Unsupported method {route.method!r} for {route.path!r}"
            )
        if not callable(route.handler):
            raise RouteDefinitionError(f"Handler for {method} {route.path!r} is not callable")

        segments = route.segments
        for shape in route.shapes():
            existing = self._shapes.get((method, shape))
            if existing is not None:
                raise RouteConflictError(
                    f"{method} {route.path!r} conflicts with {existing.method} {existing.path!r}"
                )

        for shape in route.shapes():
            self._shapes[(method, shape)] = route
        self._by_method.setdefault(method, []).append((compile_pattern(segments), route))
        self._routes.append(route)

    def freeze(self) -> None:
        """Freeze the registry. No more routes can be added."""
        self._frozen = True
        logger.debug("Route registry frozen with %d routes", len(self._routes))

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ── Request time ────────────────────────────────────────────────
    def lookup(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route matching *method* and *path*, else ``None``.

        A path that exists under another method is still ``None``.
        """
        path = normalise_path(path)
        for pattern, route in self._by_method.get(method.upper(), ()):
            m = pattern.fullmatch(path)
            if m is not None:
                params = {k: v for k, v in m.groupdict().items() if v is not None}
                return RouteMatch(route=route, params=params)
        return None

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)
