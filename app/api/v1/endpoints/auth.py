"""
Authentication Routes

Handles OTP send/resend/verify and account registration.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.deps import get_auth_service, get_storage
from app.schemas.auth import (
    OTPSentResponse,
    RegisterRequest,
    RegisterResponse,
    SendOTPRequest,
    VerifyOTPRequest,
    VerifyOTPResponse,
)
from app.schemas.common import APIResponse
from app.schemas.user import UserResponse
from app.services.auth_service import AuthService
from app.services.storage_service import ObjectStorage


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/otp/send",
    response_model=APIResponse[OTPSentResponse],
    response_model_exclude_none=True,
    summary="Send a one-time code to a phone number",
)
async def send_otp(
    data: SendOTPRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> APIResponse[OTPSentResponse]:
    """
    Generate a 5-digit OTP valid for 2 minutes and deliver it.

    Outside production the code is written to the server log.
    """
    await auth_service.request_code(data.phone)
    return APIResponse(data=OTPSentResponse())


@router.post(
    "/otp/resend",
    response_model=APIResponse[OTPSentResponse],
    response_model_exclude_none=True,
    summary="Replace the current code with a new one",
)
async def resend_otp(
    data: SendOTPRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> APIResponse[OTPSentResponse]:
    """Invalidate any active OTP and issue a new one with a fresh TTL."""
    await auth_service.request_code(data.phone)
    return APIResponse(data=OTPSentResponse())


@router.post(
    "/otp/verify",
    response_model=APIResponse[VerifyOTPResponse],
    response_model_exclude_none=True,
    summary="Verify a one-time code",
)
async def verify_otp(
    data: VerifyOTPRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> APIResponse[VerifyOTPResponse]:
    """
    Verify the OTP for a phone number.

    **Flow:**
    1. Find the active code for the phone
    2. Compare and consume it
    3. Existing account: return a token immediately
    4. New phone: return ``isNewUser: true`` without a token; the client
       must call ``/auth/register`` next

    Raises:
        InvalidCode: 400 for a missing, expired or wrong code.
    """
    result = await auth_service.verify_code(data.phone, data.code)
    return APIResponse(
        data=VerifyOTPResponse(is_new_user=result.is_new_user, token=result.token)
    )


@router.post(
    "/register",
    response_model=APIResponse[RegisterResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account and get an access token",
)
async def register(
    data: RegisterRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    storage: Annotated[ObjectStorage, Depends(get_storage)],
) -> APIResponse[RegisterResponse]:
    """
    Register the phone with the given account type.

    Idempotent: calling again with a registered phone returns a fresh
    token for the existing account.
    """
    token, user = await auth_service.register(data.phone, data.account_type)
    return APIResponse(
        data=RegisterResponse(token=token, user=UserResponse.from_user(user, storage))
    )
