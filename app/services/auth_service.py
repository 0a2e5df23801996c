"""
Auth Service

Phone-number authentication: OTP issuance and verification, idempotent
registration and token issuance.

No per-phone state is stored here. Where a phone stands in the flow is
derived from the OTP records and whether an account exists:

    no account  -> code requested -> verified (new user)  -> register -> active
    has account -> code requested -> verified (token issued)         -> active
"""

import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AlreadyExists, CreationFailed, InvalidCode, NotFound, StorageError
from app.core.security import TokenIssuer
from app.models.enums import AccountType
from app.models.user import User
from app.services import otp_service, user_service
from app.services.sms_service import SmsService


logger = logging.getLogger(__name__)

OTP_TTL = timedelta(minutes=2)


@dataclass
class VerifyResult:
    """Outcome of a successful code verification."""

    is_new_user: bool
    token: Optional[str] = None
    account_id: Optional[uuid.UUID] = None


class AuthService:
    """Orchestrates the OTP store, the user directory and the token issuer."""

    def __init__(
        self,
        db: AsyncSession,
        token_issuer: TokenIssuer,
        sms_service: SmsService,
        otp_ttl: timedelta = OTP_TTL,
    ):
        self.db = db
        self.token_issuer = token_issuer
        self.sms_service = sms_service
        self.otp_ttl = otp_ttl

    async def request_code(self, phone: str) -> None:
        """
        Issue a fresh code for ``phone`` and deliver it.

        Used for both the first send and resends; any code still active
        for the phone stops being valid.
        """
        code = otp_service.generate_otp()
        expires_at = datetime.now(timezone.utc) + self.otp_ttl

        await otp_service.issue_or_replace(self.db, phone, code, expires_at)
        await self.sms_service.send_otp(phone, code)

    async def verify_code(self, phone: str, code: str) -> VerifyResult:
        """
        Check ``code`` against the active OTP for ``phone``.

        The code is consumed before looking up the account, so a verified
        new user cannot verify again with the same code.

        Returns:
            VerifyResult: ``is_new_user`` True with no token when the phone
            has no account yet; otherwise a token for the existing account.

        Raises:
            InvalidCode: No active code, expired code, wrong code, or a code
                already spent by a concurrent verification.
        """
        try:
            active_otp = await otp_service.get_active(self.db, phone)
        except NotFound:
            raise InvalidCode()

        if not secrets.compare_digest(active_otp.code, code):
            raise InvalidCode()

        # A concurrent verification may have consumed it since the read.
        if not await otp_service.mark_consumed(self.db, active_otp.id):
            raise InvalidCode()

        if not await user_service.exists_by_phone(self.db, phone):
            return VerifyResult(is_new_user=True)

        user = await user_service.get_by_phone(self.db, phone)
        logger.info(f"Existing account {user.id} signed in")
        return VerifyResult(
            is_new_user=False,
            token=self._issue_token(user),
            account_id=user.id,
        )

    async def register(self, phone: str, account_type: AccountType | str) -> tuple[str, User]:
        """
        Create the account for ``phone`` and return a token for it.

        Idempotent: if the phone is already registered, a fresh token is
        issued for the existing account. A concurrent registration that
        wins the race between lookup and insert is handled the same way.

        Raises:
            CreationFailed: On an underlying storage fault.
        """
        try:
            user = await user_service.get_by_phone(self.db, phone)
        except NotFound:
            user = await self._create_or_fetch(phone, account_type)
        except SQLAlchemyError as exc:
            raise CreationFailed("look up account") from exc

        return self._issue_token(user), user

    async def _create_or_fetch(self, phone: str, account_type: AccountType | str) -> User:
        try:
            return await user_service.create(self.db, phone, account_type)
        except AlreadyExists:
            logger.info(f"Concurrent registration for {phone}, returning existing account")
            try:
                return await user_service.get_by_phone(self.db, phone)
            except (NotFound, SQLAlchemyError) as exc:
                raise CreationFailed("fetch account after duplicate insert") from exc
        except StorageError as exc:
            raise CreationFailed("create account") from exc

    def _issue_token(self, user: User) -> str:
        return self.token_issuer.issue(user.id, user.phone, user.account_type)
