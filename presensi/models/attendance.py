"""
Attendance & Overtime models — one clock-in/out row per user per day,
plus any overtime ("lembur") sessions after clocking out.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (Boolean, Column, DateTime, ForeignKey, Index, Integer,
                        String, UniqueConstraint)

from presensi.db.base import Base


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_attendance_user_date"),
        Index("ix_attendance_user_date", "user_id", "date"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False)  # type: ignore[assignment]
    date: str = Column(String(10), nullable=False, index=True)  # type: ignore[assignment]  # YYYY-MM-DD
    clock_in: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    clock_out: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    is_late: bool = Column(Boolean, default=False, server_default="false")  # type: ignore[assignment]


class Overtime(Base):
    __tablename__ = "overtime"
    __table_args__ = (Index("ix_overtime_user_date", "user_id", "date"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False)  # type: ignore[assignment]
    date: str = Column(String(10), nullable=False)  # type: ignore[assignment]  # YYYY-MM-DD
    started_at: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    ended_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
