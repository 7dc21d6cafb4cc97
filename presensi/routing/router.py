"""Request router: registry lookup, credential gate, handler dispatch.

Each request goes through at most three steps:

1. Look the (method, path) pair up in the registry; no match is a 404.
2. On a protected route, ask the credential validator about the bearer
   token. Anything but ``Valid`` is a 401 and the handler never runs.
3. Call the handler with a ``HandlerCall`` and JSON-encode whatever
   ``(status, payload)`` it returns.

Errors raised by handlers are not caught here; the application's
exception handlers render them.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.requests import Request

from presensi.routing.credentials import (CredentialValidator, Valid,
                                          bearer_token)
from presensi.routing.registry import HandlerRegistry
from presensi.routing.route import HandlerCall

logger = logging.getLogger(__name__)

_BODY_METHODS = frozenset({"POST", "PATCH"})


async def read_json_body(request: Request) -> Any:
    """Decode the JSON request body; an empty body decodes to ``None``."""
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Malformed JSON body",
        ) from None


class RequestRouter:
    """Stateless dispatcher over a frozen ``HandlerRegistry``."""

    __slots__ = ("_registry", "_validator")

    def __init__(self, registry: HandlerRegistry, validator: CredentialValidator) -> None:
        if not registry.frozen:
            registry.freeze()
        self._registry = registry
        self._validator = validator

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    async def dispatch(self, request: Request, path: str, db: Any) -> JSONResponse:
        method = request.method.upper()
        match = self._registry.lookup(method, path)
        if match is None:
            logger.info("No route for %s %s", method, path)
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

        route = match.route
        principal = None
        if route.protected:
            check = await self._validator.validate(bearer_token(request), db)
            if not isinstance(check, Valid):
                logger.info("Rejected %s %s: %s", method, path, check.reason)
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail=check.reason,
                    headers={"WWW-Authenticate": "Bearer"},
                )
            principal = check.principal

        body = await read_json_body(request) if method in _BODY_METHODS else None
        call = HandlerCall(
            request=request,
            db=db,
            params=match.params,
            query=dict(request.query_params),
            body=body,
            principal=principal,
        )
        logger.debug("Dispatching %s %s -> %s", method, path, route.name)
        status_code, payload = await route.handler(call)
        return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))
