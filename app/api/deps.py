"""
API Dependencies

Reusable dependencies for API routes including authentication.
"""

from datetime import timedelta
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import Unauthorized
from app.core.security import TokenIssuer
from app.schemas.token import Identity
from app.services.auth_service import AuthService
from app.services.sms_service import SmsService
from app.services.storage_service import ObjectStorage


# Bearer scheme for token extraction from Authorization header.
# auto_error is off so a missing header is reported as 401, not 403.
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_storage(request: Request) -> ObjectStorage:
    return request.app.state.storage


def get_sms_service(request: Request) -> SmsService:
    return request.app.state.sms_service


def get_otp_ttl(request: Request) -> timedelta:
    return request.app.state.otp_ttl


def get_auth_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    token_issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    sms_service: Annotated[SmsService, Depends(get_sms_service)],
    otp_ttl: Annotated[timedelta, Depends(get_otp_ttl)],
) -> AuthService:
    """Build the auth service for one request."""
    return AuthService(
        db=db,
        token_issuer=token_issuer,
        sms_service=sms_service,
        otp_ttl=otp_ttl,
    )


async def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    token_issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> Identity:
    """
    Dependency to get the authenticated caller.

    This dependency:
    1. Extracts the bearer token from the Authorization header
    2. Verifies signature and expiry
    3. Returns the identity carried by the token claims

    The account itself is not loaded here; handlers that need it look it
    up with ``identity.account_id``.

    Raises:
        Unauthorized: 401 if the header is missing or the token is invalid.
    """
    if credentials is None:
        raise Unauthorized("authorization header required")

    claims = token_issuer.verify(credentials.credentials)
    return Identity.from_claims(claims)
