"""
Auth handlers — login (JSON credentials → bearer token) and
admin-only account registration.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from limits import parse
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy import select

from presensi.api.deps import require_admin
from presensi.api.handlers.employees import ensure_org_refs
from presensi.core.config import settings
from presensi.core.security import (create_access_token, get_password_hash,
                                    verify_password)
from presensi.models.employee import Employee
from presensi.models.user import User
from presensi.routing.route import HandlerCall, HandlerResult
from presensi.schemas.auth import LoginRequest, Token
from presensi.schemas.user import UserCreate, UserRead

logger = logging.getLogger(__name__)

# Rate limiter, keyed by client IP
limiter = Limiter(key_func=get_remote_address)
_LOGIN_LIMIT = parse(settings.LOGIN_RATE_LIMIT)


def _throttle_login(call: HandlerCall) -> None:
    if not limiter.limiter.hit(_LOGIN_LIMIT, "login", get_remote_address(call.request)):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts, try again later",
        )


async def login(call: HandlerCall) -> HandlerResult:
    """Authenticate with email/password and hand back a bearer token."""
    _throttle_login(call)
    body = LoginRequest.model_validate(call.body or {})

    result = await call.db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(body.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )

    logger.info("User %d logged in", user.id)
    return 200, Token(
        access_token=create_access_token(user.id),
        user=UserRead.model_validate(user),
    )


async def register(call: HandlerCall) -> HandlerResult:
    """Create a login account plus its employee record (admin only)."""
    require_admin(call.principal)
    body = UserCreate.model_validate(call.body or {})
    db = call.db

    existing = await db.execute(select(User).where(User.email == body.email))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Email already registered")
    await ensure_org_refs(db, body.department_id, body.position_id)

    user = User(
        name=body.name,
        email=body.email,
        hashed_password=get_password_hash(body.password),
        role=body.role,
    )
    db.add(user)
    await db.flush()

    db.add(
        Employee(
            user_id=user.id,
            employee_number=body.employee_number,
            phone=body.phone,
            department_id=body.department_id,
            position_id=body.position_id,
            employment_status=body.employment_status,
            join_date=body.join_date,
        )
    )
    await db.commit()
    await db.refresh(user)
    logger.info("Registered user %s (role %s) by admin %d", user.email, user.role, call.principal.id)
    return 201, UserRead.model_validate(user)
