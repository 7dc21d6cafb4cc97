"""
Employee handlers.

- GET operations require any authenticated user.
- Profile updates: the employee themself, or an admin.
- Management updates (department, position, contract): admin only.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from presensi.api.deps import get_or_404, query_int, require_admin
from presensi.models.employee import Employee
from presensi.models.organisation import Department, Position
from presensi.models.user import User
from presensi.routing.route import HandlerCall, HandlerResult
from presensi.schemas.employee import (EmployeeManagementUpdate,
                                       EmployeeProfileUpdate, EmployeeRead)

logger = logging.getLogger(__name__)


async def ensure_org_refs(
    db: AsyncSession,
    department_id: int | None,
    position_id: int | None,
) -> None:
    """404 if a referenced department or position does not exist."""
    if department_id is not None and await db.get(Department, department_id) is None:
        raise HTTPException(status_code=404, detail="Department not found")
    if position_id is not None and await db.get(Position, position_id) is None:
        raise HTTPException(status_code=404, detail="Position not found")


async def list_employees(call: HandlerCall) -> HandlerResult:
    skip = query_int(call.query, "skip", 0)
    limit = query_int(call.query, "limit", 50, maximum=500)
    search = call.query.get("search")

    query = (
        select(Employee)
        .join(User, Employee.user_id == User.id)
        .where(Employee.is_active.is_(True))
        .order_by(User.name)
        .offset(skip)
        .limit(limit)
    )
    if search:
        # Escape SQL LIKE metacharacters to prevent wildcard injection
        safe_search = search.replace("%", r"\%").replace("_", r"\_")
        query = query.where(User.name.ilike(f"%{safe_search}%", escape="\\"))
    if call.query.get("department_id"):
        query = query.where(Employee.department_id == query_int(call.query, "department_id", 0))

    result = await call.db.execute(query)
    return 200, [EmployeeRead.from_model(e) for e in result.scalars().all()]


async def get_employee(call: HandlerCall) -> HandlerResult:
    emp = await get_or_404(call.db, Employee, call.params.get("id"), "Employee")
    return 200, EmployeeRead.from_model(emp)


async def update_profile(call: HandlerCall) -> HandlerResult:
    db = call.db
    emp = await get_or_404(db, Employee, call.params.get("id"), "Employee")
    if call.principal.role != "admin" and emp.user_id != call.principal.id:
        raise HTTPException(status_code=403, detail="You can only edit your own profile")

    body = EmployeeProfileUpdate.model_validate(call.body or {})
    changes = body.model_dump(exclude_unset=True)
    name = changes.pop("name", None)
    if name:
        emp.user.name = name
    for field, value in changes.items():
        setattr(emp, field, value)

    await db.commit()
    emp = await get_or_404(db, Employee, str(emp.id), "Employee")
    logger.info("Updated profile of employee %d", emp.id)
    return 200, EmployeeRead.from_model(emp)


async def update_management(call: HandlerCall) -> HandlerResult:
    require_admin(call.principal)
    db = call.db
    emp = await get_or_404(db, Employee, call.params.get("id"), "Employee")

    body = EmployeeManagementUpdate.model_validate(call.body or {})
    changes = body.model_dump(exclude_unset=True)
    # department_id / position_id may be nulled to unassign; these may not
    for field in ("employment_status", "is_active"):
        if field in changes and changes[field] is None:
            del changes[field]
    await ensure_org_refs(db, changes.get("department_id"), changes.get("position_id"))
    for field, value in changes.items():
        setattr(emp, field, value)
    # The login account follows the employment record
    if "is_active" in changes:
        emp.user.is_active = changes["is_active"]

    await db.commit()
    emp = await get_or_404(db, Employee, str(emp.id), "Employee")
    logger.info("Updated employment data of employee %d: %s", emp.id, changes)
    return 200, EmployeeRead.from_model(emp)
