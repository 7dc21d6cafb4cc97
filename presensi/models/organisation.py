"""
Department & Position models — the organisation chart.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from presensi.db.base import Base


class Department(Base):
    __tablename__ = "departments"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(100), unique=True, nullable=False)  # type: ignore[assignment]
    description: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )


class Position(Base):
    __tablename__ = "positions"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(100), unique=True, nullable=False)  # type: ignore[assignment]
    department_id: int | None = Column(  # type: ignore[assignment]
        Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True
    )
    description: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
