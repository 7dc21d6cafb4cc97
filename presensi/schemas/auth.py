"""Pydantic schemas for login and the password reset flow."""

from __future__ import annotations

import re

from pydantic import BaseModel, field_validator, model_validator

from presensi.schemas.common import normalise_email
from presensi.schemas.user import MIN_PASSWORD_LENGTH, UserRead

_TOKEN_RE = re.compile(r"^\d{6}$")


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return normalise_email(v)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class SendTokenRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return normalise_email(v)


class CheckTokenRequest(SendTokenRequest):
    token: str

    @field_validator("token")
    @classmethod
    def _token(cls, v: str) -> str:
        v = v.strip()
        if not _TOKEN_RE.match(v):
            raise ValueError("Token must be 6 digits")
        return v


class ChangePasswordRequest(CheckTokenRequest):
    password: str
    password_confirmation: str

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v

    @model_validator(mode="after")
    def _passwords_match(self) -> ChangePasswordRequest:
        if self.password != self.password_confirmation:
            raise ValueError("Password confirmation does not match")
        return self


class TokenCheckResponse(BaseModel):
    valid: bool
    message: str
