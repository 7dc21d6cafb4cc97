"""Pydantic schemas for employee listing, profile and management updates."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from presensi.models.employee import Employee
from presensi.schemas.common import iso_date
from presensi.schemas.user import VALID_EMPLOYMENT_STATUSES

_VALID_GENDERS = {"male", "female"}


class EmployeeRead(BaseModel):
    id: int
    user_id: int
    name: str
    email: str
    role: str
    employee_number: str | None
    phone: str | None
    address: str | None
    gender: str | None
    birth_date: str | None
    department_id: int | None
    department: str | None
    position_id: int | None
    position: str | None
    employment_status: str
    join_date: str | None
    is_active: bool
    created_at: datetime | None

    @classmethod
    def from_model(cls, emp: Employee) -> EmployeeRead:
        """Flatten the employee row with its user, department and position."""
        return cls(
            id=emp.id,
            user_id=emp.user_id,
            name=emp.user.name,
            email=emp.user.email,
            role=emp.user.role,
            employee_number=emp.employee_number,
            phone=emp.phone,
            address=emp.address,
            gender=emp.gender,
            birth_date=emp.birth_date,
            department_id=emp.department_id,
            department=emp.department.name if emp.department else None,
            position_id=emp.position_id,
            position=emp.position.name if emp.position else None,
            employment_status=emp.employment_status,
            join_date=emp.join_date,
            is_active=emp.is_active,
            created_at=emp.created_at,
        )


class EmployeeProfileUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    address: str | None = None
    gender: str | None = None
    birth_date: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v

    @field_validator("gender")
    @classmethod
    def _gender(cls, v: str | None) -> str | None:
        if v is not None and v not in _VALID_GENDERS:
            raise ValueError(f"Gender must be one of: {sorted(_VALID_GENDERS)}")
        return v

    @field_validator("birth_date")
    @classmethod
    def _birth_date(cls, v: str | None) -> str | None:
        return iso_date(v) if v is not None else v


class EmployeeManagementUpdate(BaseModel):
    employee_number: str | None = None
    department_id: int | None = None
    position_id: int | None = None
    employment_status: str | None = None
    join_date: str | None = None
    is_active: bool | None = None

    @field_validator("employment_status")
    @classmethod
    def _status(cls, v: str | None) -> str | None:
        if v is not None and v not in VALID_EMPLOYMENT_STATUSES:
            raise ValueError(f"Employment status must be one of: {sorted(VALID_EMPLOYMENT_STATUSES)}")
        return v

    @field_validator("join_date")
    @classmethod
    def _join_date(cls, v: str | None) -> str | None:
        return iso_date(v) if v is not None else v
