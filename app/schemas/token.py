"""
Token Schemas

Pydantic models for JWT token handling.
"""

import uuid
from dataclasses import dataclass

from pydantic import BaseModel, Field

from app.models.enums import AccountType


class TokenClaims(BaseModel):
    """Schema for decoded token payload."""

    sub: uuid.UUID  # Account ID
    phone: str
    account_type: AccountType = Field(alias="accountType")
    iat: int
    exp: int  # Expiration timestamp
    jti: str | None = None


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, passed explicitly into protected operations."""

    account_id: uuid.UUID
    phone: str
    account_type: AccountType

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "Identity":
        return cls(
            account_id=claims.sub,
            phone=claims.phone,
            account_type=claims.account_type,
        )
