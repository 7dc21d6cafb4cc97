"""Declarative route table, registry and credential-gated router."""

from presensi.routing.credentials import (CredentialCheck, CredentialValidator,
                                          Invalid, Missing, Valid)
from presensi.routing.errors import RouteConflictError, RouteDefinitionError
from presensi.routing.registry import HandlerRegistry
from presensi.routing.route import (HandlerCall, HandlerResult, Route,
                                    RouteMatch, delete, get, group, patch,
                                    post)
from presensi.routing.router import RequestRouter

__all__ = [
    "CredentialCheck",
    "CredentialValidator",
    "HandlerCall",
    "HandlerRegistry",
    "HandlerResult",
    "Invalid",
    "Missing",
    "RequestRouter",
    "Route",
    "RouteConflictError",
    "RouteDefinitionError",
    "RouteMatch",
    "Valid",
    "delete",
    "get",
    "group",
    "patch",
    "post",
]
