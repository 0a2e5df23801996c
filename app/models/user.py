"""
User Model

Registered account keyed by phone number.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.enums import AccountType


class User(Base):
    """
    User account created on registration.

    Attributes:
        id: UUID primary key for public-facing identification.
        phone: Unique phone number, indexed for fast lookups.
        account_type: One of personal, children, business.
        username: Optional unique handle.
        full_name: Optional display name.
        bio: Optional short bio (160 chars).
        business_phone: Optional business contact number.
        address: Optional postal address.
        avatar_key: Object storage key of the current avatar.
        created_at: Account creation timestamp.
        updated_at: Last modification timestamp.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "account_type IN ('personal', 'children', 'business')",
            name="ck_users_account_type",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    phone: Mapped[str] = mapped_column(
        String(11),
        unique=True,
        index=True,
        nullable=False,
    )
    account_type: Mapped[str] = mapped_column(
        String(20),
        default=AccountType.PERSONAL.value,
        nullable=False,
    )
    username: Mapped[Optional[str]] = mapped_column(
        String(50),
        unique=True,
        nullable=True,
    )
    full_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    bio: Mapped[Optional[str]] = mapped_column(
        String(160),
        nullable=True,
    )
    business_phone: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )
    address: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    avatar_key: Mapped[Optional[str]] = mapped_column(
        String(512),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, phone={self.phone}, account_type={self.account_type})>"
