"""Pydantic schemas for departments and positions."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name must not be empty")
    if len(v) > 100:
        raise ValueError("Name must not exceed 100 characters")
    return v


# ── Department ──────────────────────────────────────────────────────
class DepartmentCreate(BaseModel):
    name: str
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _clean_name(v)


class DepartmentUpdate(BaseModel):
    name: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return _clean_name(v) if v is not None else v


class DepartmentRead(BaseModel):
    id: int
    name: str
    description: str | None
    created_at: datetime | None

    model_config = {"from_attributes": True}


# ── Position ────────────────────────────────────────────────────────
class PositionCreate(BaseModel):
    name: str
    department_id: int | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _clean_name(v)


class PositionUpdate(BaseModel):
    name: str | None = None
    department_id: int | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return _clean_name(v) if v is not None else v


class PositionRead(BaseModel):
    id: int
    name: str
    department_id: int | None
    description: str | None
    created_at: datetime | None

    model_config = {"from_attributes": True}
