"""
User Service

Account persistence: creation, lookup, profile and avatar updates.
Uniqueness of phone and username is left to the database constraints.
"""

import logging
import uuid
from typing import Any, Optional

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AlreadyExists, NotFound, StorageError, UsernameConflict
from app.models.enums import AccountType
from app.models.user import User


logger = logging.getLogger(__name__)

# Fields that PATCH /users/me may change.
PROFILE_FIELDS = ("username", "full_name", "bio", "business_phone", "address")


async def create(db: AsyncSession, phone: str, account_type: AccountType | str) -> User:
    """
    Insert a new account.

    Raises:
        AlreadyExists: If the phone number is already registered.
        StorageError: On any other database fault.
    """
    user = User(phone=phone, account_type=AccountType(account_type).value)
    db.add(user)

    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise AlreadyExists("user already exists") from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StorageError("create user") from exc

    await db.refresh(user)
    logger.info(f"Created account {user.id} ({user.account_type})")
    return user


async def get_by_id(db: AsyncSession, user_id: uuid.UUID) -> User:
    """Fetch an account by id or raise NotFound."""
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound("user not found")
    return user


async def get_by_phone(db: AsyncSession, phone: str) -> User:
    """Fetch an account by phone number or raise NotFound."""
    result = await db.execute(select(User).where(User.phone == phone))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound("user not found")
    return user


async def exists_by_phone(db: AsyncSession, phone: str) -> bool:
    return bool(await db.scalar(select(exists().where(User.phone == phone))))


async def username_exists(db: AsyncSession, username: str) -> bool:
    """
    Check whether any account already uses ``username``.

    Advisory only: the unique constraint is still what decides at write time.
    """
    return bool(await db.scalar(select(exists().where(User.username == username))))


async def update_profile(
    db: AsyncSession,
    user_id: uuid.UUID,
    fields: dict[str, Any],
) -> User:
    """
    Apply a partial profile update.

    Keys missing from ``fields`` or set to None leave the stored value
    unchanged.

    Raises:
        NotFound: If the account does not exist.
        UsernameConflict: If the new username belongs to another account.
    """
    user = await get_by_id(db, user_id)

    for name in PROFILE_FIELDS:
        value = fields.get(name)
        if value is not None:
            setattr(user, name, value)

    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise UsernameConflict("username is already taken") from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StorageError("update profile") from exc

    await db.refresh(user)
    return user


async def update_avatar_key(
    db: AsyncSession,
    user_id: uuid.UUID,
    key: str,
) -> Optional[str]:
    """
    Point the account at a new avatar object.

    Returns:
        The previous avatar key, if there was one.

    Raises:
        NotFound: If the account does not exist.
    """
    user = await get_by_id(db, user_id)
    previous_key = user.avatar_key
    user.avatar_key = key

    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StorageError("update avatar key") from exc

    await db.refresh(user)
    return previous_key
