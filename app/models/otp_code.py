"""
OTP Code Model

Stores one-time passcodes sent to phone numbers.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, String, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class OTPCode(Base):
    """
    One-time passcode for phone-number authentication.

    Rows are never deleted: a code is superseded by setting consumed_at,
    either when a newer code is issued or when it is verified. Expiry is
    enforced by the lookup predicate, not by a sweeper.

    Attributes:
        id: UUID primary key.
        phone: Phone number this OTP is for.
        code: 5-digit code, zero-padded.
        expires_at: When the OTP expires (2 minutes from creation).
        consumed_at: When the OTP was consumed or superseded (null if active).
        created_at: Creation timestamp.
    """

    __tablename__ = "otp_codes"
    __table_args__ = (
        Index(
            "ix_otp_codes_phone_active",
            "phone",
            postgresql_where=text("consumed_at IS NULL"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    phone: Mapped[str] = mapped_column(
        String(11),
        nullable=False,
    )
    code: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    consumed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<OTPCode(id={self.id}, phone={self.phone}, consumed_at={self.consumed_at})>"
