"""
Employee model — HR record attached one-to-one to a login account.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from presensi.db.base import Base


class Employee(Base):
    __tablename__ = "employees"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)  # type: ignore[assignment]
    employee_number: str | None = Column(String(30), unique=True, nullable=True)  # type: ignore[assignment]
    phone: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    address: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    gender: str | None = Column(String(10), nullable=True)  # type: ignore[assignment]
    birth_date: str | None = Column(String(10), nullable=True)  # type: ignore[assignment]  # YYYY-MM-DD
    department_id: int | None = Column(  # type: ignore[assignment]
        Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True
    )
    position_id: int | None = Column(  # type: ignore[assignment]
        Integer, ForeignKey("positions.id", ondelete="SET NULL"), nullable=True
    )
    employment_status: str = Column(  # type: ignore[assignment]
        String(20), nullable=False, default="permanent", server_default="permanent"
    )  # permanent | contract | intern
    join_date: str | None = Column(String(10), nullable=True)  # type: ignore[assignment]  # YYYY-MM-DD
    is_active: bool = Column(Boolean, default=True, server_default="true")  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    user = relationship("User", lazy="selectin")
    department = relationship("Department", lazy="selectin")
    position = relationship("Position", lazy="selectin")
