"""
Auth Schemas

Pydantic models for authentication request/response validation.
"""

from pydantic import Field, field_validator

from app.core.validators import validate_otp_code, validate_phone
from app.models.enums import AccountType
from app.schemas.common import CamelModel
from app.schemas.user import UserResponse


class SendOTPRequest(CamelModel):
    """Schema for send/resend OTP request."""

    phone: str = Field(..., description="Mobile number, e.g. 09121234567")

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str) -> str:
        return validate_phone(value)


class OTPSentResponse(CamelModel):
    success: bool = True


class VerifyOTPRequest(CamelModel):
    """Schema for OTP verification request."""

    phone: str = Field(..., description="Mobile number, e.g. 09121234567")
    code: str = Field(..., description="5-digit OTP code")

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str) -> str:
        return validate_phone(value)

    @field_validator("code")
    @classmethod
    def check_code(cls, value: str) -> str:
        return validate_otp_code(value)


class VerifyOTPResponse(CamelModel):
    """
    Schema for OTP verification response.

    ``token`` is only present for phones that already have an account.
    """

    is_new_user: bool
    token: str | None = None


class RegisterRequest(CamelModel):
    """Schema for account registration."""

    phone: str = Field(..., description="Mobile number, e.g. 09121234567")
    account_type: AccountType = Field(..., description="personal, children or business")

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str) -> str:
        return validate_phone(value)

    @field_validator("account_type", mode="before")
    @classmethod
    def check_account_type(cls, value):
        if value not in AccountType.values():
            raise ValueError(f"accountType must be one of: {', '.join(AccountType.values())}")
        return value


class RegisterResponse(CamelModel):
    token: str
    user: UserResponse
