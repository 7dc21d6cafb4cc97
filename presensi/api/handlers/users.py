"""
User account handlers.

- Any authenticated user may read accounts.
- Users may edit their own name, email and password.
- Role and activation changes, and edits to other accounts, are admin-only.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import select, update

from presensi.api.deps import get_or_404, query_int
from presensi.core.security import get_password_hash
from presensi.models.employee import Employee
from presensi.models.user import User
from presensi.routing.route import HandlerCall, HandlerResult
from presensi.schemas.user import UserRead, UserUpdate

logger = logging.getLogger(__name__)

_ADMIN_ONLY_FIELDS = {"role", "is_active"}


async def show_user(call: HandlerCall) -> HandlerResult:
    user = await get_or_404(call.db, User, call.params.get("id"), "User")
    return 200, UserRead.model_validate(user)


async def show_users(call: HandlerCall) -> HandlerResult:
    skip = query_int(call.query, "skip", 0)
    limit = query_int(call.query, "limit", 100, maximum=500)
    result = await call.db.execute(select(User).order_by(User.name).offset(skip).limit(limit))
    return 200, [UserRead.model_validate(u) for u in result.scalars().all()]


async def update_user(call: HandlerCall) -> HandlerResult:
    db = call.db
    principal: User = call.principal
    user = await get_or_404(db, User, call.params.get("id"), "User")
    body = UserUpdate.model_validate(call.body or {})
    changes = body.model_dump(exclude_unset=True)

    if principal.role != "admin":
        if principal.id != user.id or _ADMIN_ONLY_FIELDS & changes.keys():
            raise HTTPException(status_code=403, detail="Admin privileges required")

    new_email = changes.get("email")
    if new_email and new_email != user.email:
        clash = await db.execute(select(User).where(User.email == new_email))
        if clash.scalar_one_or_none():
            raise HTTPException(status_code=400, detail="Email already registered")

    password = changes.pop("password", None)
    if password:
        user.hashed_password = get_password_hash(password)
    for field, value in changes.items():
        if value is not None:
            setattr(user, field, value)
    if changes.get("is_active") is not None:
        await db.execute(
            update(Employee).where(Employee.user_id == user.id).values(is_active=changes["is_active"])
        )

    await db.commit()
    await db.refresh(user)
    logger.info("Updated user %d (fields: %s)", user.id, sorted(changes))
    return 200, UserRead.model_validate(user)
