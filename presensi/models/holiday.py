"""
Holiday model — company-declared days off, one row per calendar date.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from presensi.db.base import Base


class Holiday(Base):
    __tablename__ = "holidays"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    date: str = Column(String(10), unique=True, nullable=False, index=True)  # type: ignore[assignment]  # YYYY-MM-DD
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    created_by: int | None = Column(Integer, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
