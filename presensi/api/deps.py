"""
Shared handler plumbing — database session, bearer-token validator,
role guards and lookup helpers.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any, TypeVar

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from presensi.core.security import decode_access_token
from presensi.db.session import async_session_factory
from presensi.models.user import User
from presensi.routing.credentials import CredentialCheck, Invalid, Missing, Valid

ModelT = TypeVar("ModelT")


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Credential validation ───────────────────────────────────────────
class BearerTokenValidator:
    """Resolve a JWT access token to an active ``User``."""

    async def validate(self, token: str | None, db: AsyncSession) -> CredentialCheck:
        if token is None:
            return Missing()
        if not token:
            return Invalid("Unsupported authorization scheme")

        payload = decode_access_token(token)
        if payload is None:
            return Invalid("Invalid or expired token")

        user_id = payload.get("sub")
        if user_id is None or not str(user_id).isdigit():
            return Invalid()

        result = await db.execute(select(User).where(User.id == int(user_id)))
        user = result.scalar_one_or_none()
        if user is None:
            return Invalid()
        if not user.is_active:
            return Invalid("Inactive user account")
        return Valid(user)


# ── Role guards ─────────────────────────────────────────────────────
def require_role(user: User, *roles: str) -> User:
    """Raise 403 unless *user* holds one of *roles*."""
    if user.role not in roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient privileges",
        )
    return user


def require_admin(user: User) -> User:
    """Only allow admin role to proceed."""
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return user


# ── Lookups ─────────────────────────────────────────────────────────
def parse_id(raw: str | None, label: str) -> int:
    """Path ids are raw strings; anything non-numeric cannot exist."""
    if raw is None or not raw.isdigit():
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return int(raw)


async def get_or_404(db: AsyncSession, model: type[ModelT], raw_id: str | None, label: str) -> ModelT:
    """Fetch *model* by primary key, re-populating already-loaded rows."""
    ident = parse_id(raw_id, label)
    result = await db.execute(
        select(model)
        .where(model.id == ident)  # type: ignore[attr-defined]
        .execution_options(populate_existing=True)
    )
    obj = result.scalar_one_or_none()
    if obj is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return obj


def query_int(query: dict[str, Any], name: str, default: int, maximum: int | None = None) -> int:
    """Read a non-negative integer query parameter (422 on garbage)."""
    raw = query.get(name)
    if raw is None or raw == "":
        return default
    if not str(raw).isdigit():
        raise HTTPException(status_code=422, detail=f"Query parameter '{name}' must be a non-negative integer")
    value = int(raw)
    if maximum is not None and value > maximum:
        raise HTTPException(status_code=422, detail=f"Query parameter '{name}' must be <= {maximum}")
    return value
