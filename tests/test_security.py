"""
Token Issuer Unit Tests

Tests for bearer credential signing and verification.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.core.exceptions import Unauthorized
from app.core.security import TokenIssuer
from app.models.enums import AccountType


class TestTokenIssuer:
    """Tests for TokenIssuer."""

    def test_issue_and_verify_round_trip_claims(self, token_issuer):
        """Verify claims survive signing."""
        account_id = uuid.uuid4()

        token = token_issuer.issue(account_id, "09121234567", "business")
        claims = token_issuer.verify(token)

        assert claims.sub == account_id
        assert claims.phone == "09121234567"
        assert claims.account_type == AccountType.BUSINESS

    def test_expiry_is_thirty_days(self, token_issuer):
        """Verify the default validity window."""
        claims = token_issuer.verify(token_issuer.issue(uuid.uuid4(), "09121234567", "personal"))

        assert claims.exp - claims.iat == int(timedelta(days=30).total_seconds())

    def test_tokens_issued_back_to_back_differ(self, token_issuer):
        """Verify two tokens for the same account are distinct."""
        account_id = uuid.uuid4()

        first = token_issuer.issue(account_id, "09121234567", "personal")
        second = token_issuer.issue(account_id, "09121234567", "personal")

        assert first != second

    def test_expired_token_rejected(self):
        """Verify expiry is enforced."""
        issuer = TokenIssuer("test-secret", "HS256", timedelta(seconds=-5))
        token = issuer.issue(uuid.uuid4(), "09121234567", "personal")

        with pytest.raises(Unauthorized):
            issuer.verify(token)

    def test_wrong_secret_rejected(self, token_issuer):
        """Verify signature mismatch is rejected."""
        forged = TokenIssuer("other-secret").issue(uuid.uuid4(), "09121234567", "personal")

        with pytest.raises(Unauthorized):
            token_issuer.verify(forged)

    def test_unexpected_algorithm_rejected(self, token_issuer):
        """Verify a token signed with another algorithm is rejected."""
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "sub": str(uuid.uuid4()),
                "phone": "09121234567",
                "accountType": "personal",
                "iat": now,
                "exp": now + timedelta(days=1),
            },
            "test-secret",
            algorithm="HS512",
        )

        with pytest.raises(Unauthorized):
            token_issuer.verify(token)

    def test_malformed_claims_rejected(self, token_issuer):
        """Verify a validly signed token without identity claims is rejected."""
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "not-a-uuid", "iat": now, "exp": now + timedelta(days=1)},
            "test-secret",
            algorithm="HS256",
        )

        with pytest.raises(Unauthorized):
            token_issuer.verify(token)

    def test_garbage_rejected(self, token_issuer):
        with pytest.raises(Unauthorized):
            token_issuer.verify("not.a.token")
