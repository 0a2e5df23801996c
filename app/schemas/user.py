"""
User Schemas

Pydantic models for user request/response validation.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from app.core.validators import validate_bio, validate_username
from app.models.enums import AccountType
from app.models.user import User
from app.schemas.common import CamelModel
from app.services.storage_service import ObjectStorage, resolve_public_url


class UserResponse(CamelModel):
    """Schema for user profile response."""

    id: uuid.UUID
    phone: str
    account_type: AccountType
    username: Optional[str] = None
    full_name: Optional[str] = None
    bio: Optional[str] = None
    business_phone: Optional[str] = None
    address: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @classmethod
    def from_user(cls, user: User, storage: ObjectStorage) -> "UserResponse":
        """Build the response with the avatar key resolved to a public URL."""
        response = cls.model_validate(user)
        response.avatar_url = resolve_public_url(storage, user.avatar_key)
        return response


class UserUpdate(CamelModel):
    """
    Schema for updating user profile.

    Omitted or null fields are left unchanged.
    """

    username: Optional[str] = Field(None, description="Letters, digits and underscores, max 50")
    full_name: Optional[str] = Field(None, max_length=255, description="Display name")
    bio: Optional[str] = Field(None, description="Short bio, max 160 characters")
    business_phone: Optional[str] = Field(None, max_length=20, description="Business contact number")
    address: Optional[str] = Field(None, max_length=500, description="Postal address")

    @field_validator("username")
    @classmethod
    def check_username(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else validate_username(value)

    @field_validator("bio")
    @classmethod
    def check_bio(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else validate_bio(value)


class AvatarUploadResponse(CamelModel):
    avatar_url: str


class UsernameCheckResponse(CamelModel):
    available: bool
