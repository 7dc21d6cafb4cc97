"""Credential check results and the validator protocol.

The router only knows these three outcomes; how a token maps to a
principal is up to the validator plugged into it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from fastapi.security.utils import get_authorization_scheme_param
from starlette.requests import Request


@dataclass(frozen=True, slots=True)
class Valid:
    principal: Any


@dataclass(frozen=True, slots=True)
class Invalid:
    reason: str = "Could not validate credentials"


@dataclass(frozen=True, slots=True)
class Missing:
    reason: str = "Not authenticated"


CredentialCheck = Valid | Invalid | Missing


class CredentialValidator(Protocol):
    async def validate(self, token: str | None, db: Any) -> CredentialCheck: ...


def bearer_token(request: Request) -> str | None:
    """Extract the token from ``Authorization: Bearer <token>``.

    Returns ``None`` when the header is absent or blank, and ``""`` when
    it carries some other scheme, so validators can tell the two apart.
    """
    authorization = request.headers.get("Authorization")
    scheme, param = get_authorization_scheme_param(authorization)
    if not authorization or not scheme:
        return None
    if scheme.lower() != "bearer":
        return ""
    return param or None
