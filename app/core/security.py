"""
Security Utilities

JWT bearer credential issuing and verification.
"""

import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import Unauthorized
from app.schemas.token import TokenClaims


class TokenIssuer:
    """
    Signs and verifies bearer credentials.

    Stateless: validity is purely a function of the signature and the
    expiry window. There is no revocation list.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_delta: timedelta = timedelta(days=30)):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expires_delta = expires_delta

    def issue(self, account_id: uuid.UUID | str, phone: str, account_type: str) -> str:
        """
        Create a signed access token.

        Args:
            account_id: The subject of the token.
            phone: Phone number bound to the account.
            account_type: Account category.

        Returns:
            str: Encoded JWT token.
        """
        now = datetime.now(timezone.utc)
        to_encode = {
            "sub": str(account_id),
            "phone": phone,
            "accountType": str(account_type),
            "iat": now,
            "exp": now + self._expires_delta,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate an access token.

        Raises:
            Unauthorized: On signature mismatch, unexpected algorithm,
                expiry, or malformed claims.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError:
            raise Unauthorized("invalid or expired token")

        try:
            return TokenClaims.model_validate(payload)
        except PydanticValidationError:
            raise Unauthorized("invalid token claims")
