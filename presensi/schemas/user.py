"""Pydantic schemas for User CRUD and registration."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from presensi.schemas.common import iso_date, normalise_email

VALID_ROLES = {"admin", "manager", "employee"}
VALID_EMPLOYMENT_STATUSES = {"permanent", "contract", "intern"}
MIN_PASSWORD_LENGTH = 8


def _check_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name must not be empty")
    if len(v) > 200:
        raise ValueError("Name must not exceed 200 characters")
    return v


def _check_password(v: str) -> str:
    if len(v) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return v


class UserCreate(BaseModel):
    name: str
    email: str
    password: str
    role: str = "employee"

    # Employee record created alongside the account
    employee_number: str | None = None
    phone: str | None = None
    department_id: int | None = None
    position_id: int | None = None
    employment_status: str = "permanent"
    join_date: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return normalise_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str) -> str:
        if v not in VALID_ROLES:
            raise ValueError(f"Role must be one of: {sorted(VALID_ROLES)}")
        return v

    @field_validator("employment_status")
    @classmethod
    def _validate_status(cls, v: str) -> str:
        if v not in VALID_EMPLOYMENT_STATUSES:
            raise ValueError(f"Employment status must be one of: {sorted(VALID_EMPLOYMENT_STATUSES)}")
        return v

    @field_validator("join_date")
    @classmethod
    def _join_date(cls, v: str | None) -> str | None:
        return iso_date(v) if v is not None else v


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    role: str
    is_active: bool
    created_at: datetime | None

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    role: str | None = None
    is_active: bool | None = None
    password: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return _check_name(v) if v is not None else v

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str | None) -> str | None:
        return normalise_email(v) if v is not None else v

    @field_validator("password")
    @classmethod
    def _password(cls, v: str | None) -> str | None:
        return _check_password(v) if v is not None else v

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str | None) -> str | None:
        if v is not None and v not in VALID_ROLES:
            raise ValueError(f"Role must be one of: {sorted(VALID_ROLES)}")
        return v
