"""Validators and small response bodies shared by several schema modules."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


def iso_date(v: str) -> str:
    """Accept only ``YYYY-MM-DD`` calendar dates."""
    v = v.strip()
    try:
        datetime.strptime(v, "%Y-%m-%d")
    except ValueError:
        raise ValueError("Date must be a valid YYYY-MM-DD value") from None
    return v


def normalise_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v:
        raise ValueError("Invalid email address")
    return v


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class DeleteResponse(BaseModel):
    success: bool
    message: str
