"""
Department CRUD handlers. Reads are open to any authenticated user,
writes are admin-only.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import select, update

from presensi.api.deps import get_or_404, require_admin
from presensi.models.employee import Employee
from presensi.models.organisation import Department, Position
from presensi.routing.route import HandlerCall, HandlerResult
from presensi.schemas.common import DeleteResponse
from presensi.schemas.organisation import (DepartmentCreate, DepartmentRead,
                                           DepartmentUpdate)

logger = logging.getLogger(__name__)


async def list_departments(call: HandlerCall) -> HandlerResult:
    result = await call.db.execute(select(Department).order_by(Department.name))
    return 200, [DepartmentRead.model_validate(d) for d in result.scalars().all()]


async def get_department(call: HandlerCall) -> HandlerResult:
    dept = await get_or_404(call.db, Department, call.params.get("id"), "Department")
    return 200, DepartmentRead.model_validate(dept)


async def create_department(call: HandlerCall) -> HandlerResult:
    require_admin(call.principal)
    body = DepartmentCreate.model_validate(call.body or {})
    db = call.db

    existing = await db.execute(select(Department).where(Department.name == body.name))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail=f"Department '{body.name}' already exists")

    dept = Department(**body.model_dump())
    db.add(dept)
    await db.commit()
    await db.refresh(dept)
    logger.info("Created department %s", dept.name)
    return 201, DepartmentRead.model_validate(dept)


async def update_department(call: HandlerCall) -> HandlerResult:
    require_admin(call.principal)
    db = call.db
    dept = await get_or_404(db, Department, call.params.get("id"), "Department")
    body = DepartmentUpdate.model_validate(call.body or {})
    changes = body.model_dump(exclude_unset=True)

    new_name = changes.get("name")
    if new_name and new_name != dept.name:
        clash = await db.execute(select(Department).where(Department.name == new_name))
        if clash.scalar_one_or_none():
            raise HTTPException(status_code=400, detail=f"Department '{new_name}' already exists")

    for field, value in changes.items():
        if field == "name" and value is None:
            continue
        setattr(dept, field, value)

    await db.commit()
    await db.refresh(dept)
    logger.info("Updated department %d", dept.id)
    return 200, DepartmentRead.model_validate(dept)


async def delete_department(call: HandlerCall) -> HandlerResult:
    """Delete a department; employees and positions in it become unassigned."""
    require_admin(call.principal)
    db = call.db
    dept = await get_or_404(db, Department, call.params.get("id"), "Department")

    await db.execute(
        update(Employee).where(Employee.department_id == dept.id).values(department_id=None)
    )
    await db.execute(
        update(Position).where(Position.department_id == dept.id).values(department_id=None)
    )
    await db.delete(dept)
    await db.commit()
    logger.info("Deleted department %d (%s)", dept.id, dept.name)
    return 200, DeleteResponse(success=True, message=f"Department '{dept.name}' deleted")
