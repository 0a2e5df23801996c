"""
Radif Backend - Schemas Module

Pydantic models for request/response validation.
"""

from app.schemas.common import APIResponse
from app.schemas.user import UserResponse, UserUpdate, AvatarUploadResponse, UsernameCheckResponse
from app.schemas.token import TokenClaims, Identity
from app.schemas.auth import (
    SendOTPRequest,
    OTPSentResponse,
    VerifyOTPRequest,
    VerifyOTPResponse,
    RegisterRequest,
    RegisterResponse,
)

__all__ = [
    # Common
    "APIResponse",
    # User
    "UserResponse",
    "UserUpdate",
    "AvatarUploadResponse",
    "UsernameCheckResponse",
    # Token
    "TokenClaims",
    "Identity",
    # Auth
    "SendOTPRequest",
    "OTPSentResponse",
    "VerifyOTPRequest",
    "VerifyOTPResponse",
    "RegisterRequest",
    "RegisterResponse",
]
