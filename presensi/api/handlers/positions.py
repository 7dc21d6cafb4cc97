"""
Position CRUD handlers, plus the position held by a given user.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import select, update

from presensi.api.deps import get_or_404, parse_id, require_admin
from presensi.api.handlers.employees import ensure_org_refs
from presensi.models.employee import Employee
from presensi.models.organisation import Position
from presensi.routing.route import HandlerCall, HandlerResult
from presensi.schemas.common import DeleteResponse
from presensi.schemas.organisation import (PositionCreate, PositionRead,
                                           PositionUpdate)

logger = logging.getLogger(__name__)


async def list_positions(call: HandlerCall) -> HandlerResult:
    query = select(Position).order_by(Position.name)
    department_id = call.query.get("department_id")
    if department_id:
        query = query.where(Position.department_id == parse_id(department_id, "Department"))
    result = await call.db.execute(query)
    return 200, [PositionRead.model_validate(p) for p in result.scalars().all()]


async def get_position(call: HandlerCall) -> HandlerResult:
    pos = await get_or_404(call.db, Position, call.params.get("id"), "Position")
    return 200, PositionRead.model_validate(pos)


async def position_of_user(call: HandlerCall) -> HandlerResult:
    """Position held by the employee attached to ``userId``."""
    user_id = parse_id(call.params.get("userId"), "User")
    result = await call.db.execute(select(Employee).where(Employee.user_id == user_id))
    emp = result.scalar_one_or_none()
    if emp is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    if emp.position_id is None:
        raise HTTPException(status_code=404, detail="No position assigned")

    pos = await get_or_404(call.db, Position, str(emp.position_id), "Position")
    return 200, PositionRead.model_validate(pos)


async def create_position(call: HandlerCall) -> HandlerResult:
    require_admin(call.principal)
    body = PositionCreate.model_validate(call.body or {})
    db = call.db

    existing = await db.execute(select(Position).where(Position.name == body.name))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail=f"Position '{body.name}' already exists")
    await ensure_org_refs(db, body.department_id, None)

    pos = Position(**body.model_dump())
    db.add(pos)
    await db.commit()
    await db.refresh(pos)
    logger.info("Created position %s", pos.name)
    return 201, PositionRead.model_validate(pos)


async def update_position(call: HandlerCall) -> HandlerResult:
    require_admin(call.principal)
    db = call.db
    pos = await get_or_404(db, Position, call.params.get("id"), "Position")
    body = PositionUpdate.model_validate(call.body or {})
    changes = body.model_dump(exclude_unset=True)

    new_name = changes.get("name")
    if new_name and new_name != pos.name:
        clash = await db.execute(select(Position).where(Position.name == new_name))
        if clash.scalar_one_or_none():
            raise HTTPException(status_code=400, detail=f"Position '{new_name}' already exists")
    await ensure_org_refs(db, changes.get("department_id"), None)

    for field, value in changes.items():
        if field == "name" and value is None:
            continue
        setattr(pos, field, value)

    await db.commit()
    await db.refresh(pos)
    logger.info("Updated position %d", pos.id)
    return 200, PositionRead.model_validate(pos)


async def delete_position(call: HandlerCall) -> HandlerResult:
    """Delete a position; employees holding it become unassigned."""
    require_admin(call.principal)
    db = call.db
    pos = await get_or_404(db, Position, call.params.get("id"), "Position")

    await db.execute(
        update(Employee).where(Employee.position_id == pos.id).values(position_id=None)
    )
    await db.delete(pos)
    await db.commit()
    logger.info("Deleted position %d (%s)", pos.id, pos.name)
    return 200, DeleteResponse(success=True, message=f"Position '{pos.name}' deleted")
