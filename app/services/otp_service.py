"""
OTP Service

Handles OTP generation, storage, and lookup of the active code per phone.
"""

import logging
import secrets
import uuid
from datetime import datetime, timezone

from sqlalchemy import and_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFound, StorageError
from app.models.otp_code import OTPCode


logger = logging.getLogger(__name__)

OTP_LENGTH = 5


def generate_otp() -> str:
    """Generate a uniformly random 5-digit OTP code, zero-padded."""
    return f"{secrets.randbelow(10 ** OTP_LENGTH):0{OTP_LENGTH}d}"


async def issue_or_replace(
    db: AsyncSession,
    phone: str,
    code: str,
    expires_at: datetime,
) -> OTPCode:
    """
    Store a new OTP for the phone, superseding any active one.

    Existing unconsumed codes are marked consumed (kept for audit) and the
    new code is inserted in the same transaction, so there is never more
    than one active code per phone.

    Args:
        db: Database session.
        phone: Phone number the code belongs to.
        code: The plain OTP code.
        expires_at: Expiry instant.

    Returns:
        OTPCode: The newly inserted record.

    Raises:
        StorageError: If the transaction could not be committed. Neither
            the invalidation nor the insert is kept in that case.
    """
    now = datetime.now(timezone.utc)
    otp_record = OTPCode(phone=phone, code=code, expires_at=expires_at)

    try:
        await db.execute(
            update(OTPCode)
            .where(
                and_(
                    OTPCode.phone == phone,
                    OTPCode.consumed_at.is_(None),
                )
            )
            .values(consumed_at=now)
        )
        db.add(otp_record)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error(f"Failed to store OTP for {phone}: {exc}")
        raise StorageError("store otp") from exc

    return otp_record


async def get_active(db: AsyncSession, phone: str) -> OTPCode:
    """
    Get the newest unconsumed, unexpired OTP for the phone.

    Raises:
        NotFound: If no such code exists. Expired and already consumed
            codes are reported the same way as missing ones.
    """
    result = await db.execute(
        select(OTPCode)
        .where(
            and_(
                OTPCode.phone == phone,
                OTPCode.consumed_at.is_(None),
                OTPCode.expires_at > datetime.now(timezone.utc),
            )
        )
        .order_by(OTPCode.created_at.desc())
        .limit(1)
    )
    otp_record = result.scalar_one_or_none()

    if otp_record is None:
        raise NotFound("OTP not found or expired")

    return otp_record


async def mark_consumed(db: AsyncSession, otp_id: uuid.UUID) -> bool:
    """
    Mark the OTP consumed. Repeated calls keep the first timestamp.

    Returns:
        bool: True if this call consumed the code, False if it was already
            consumed by an earlier or concurrent call.
    """
    try:
        result = await db.execute(
            update(OTPCode)
            .where(
                and_(
                    OTPCode.id == otp_id,
                    OTPCode.consumed_at.is_(None),
                )
            )
            .values(consumed_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StorageError("mark otp consumed") from exc

    return result.rowcount == 1
