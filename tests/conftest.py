"""
Pytest Configuration and Fixtures

Provides reusable async fixtures for testing the Radif Backend.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "test-secret")

from datetime import timedelta
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine

from app.core.database import close_db, create_session_maker, init_db
from app.core.security import TokenIssuer
from app.services.auth_service import AuthService
from app.services.sms_service import SmsService


# ==================== Fakes ====================

class FakeStorage:
    """In-memory ObjectStorage."""

    def __init__(self, public_base: str = "https://cdn.test/avatars"):
        self.public_base = public_base
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.deleted: list[str] = []

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        self.objects[key] = (data, content_type)

    async def delete(self, key: str) -> None:
        self.objects.pop(key, None)
        self.deleted.append(key)

    def public_url(self, key: str) -> str:
        return f"{self.public_base}/{key}"


class RecordingSmsService(SmsService):
    """SmsService that remembers every code it was asked to send."""

    def __init__(self):
        super().__init__("test")
        self.sent: list[tuple[str, str]] = []

    async def send_otp(self, phone: str, code: str) -> None:
        self.sent.append((phone, code))

    def last_code(self, phone: str) -> str:
        return [code for sent_phone, code in self.sent if sent_phone == phone][-1]


# ==================== Database Fixtures ====================

@pytest.fixture
def mock_async_session() -> AsyncMock:
    """
    Create a mock async database session.

    Returns:
        AsyncMock configured to behave like AsyncSession.
    """
    session = AsyncMock(spec=AsyncSession)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.scalar = AsyncMock()
    session.scalars = AsyncMock()
    return session


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Throwaway SQLite database with the full schema."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'radif.db'}")
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest_asyncio.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = create_session_maker(engine)
    async with session_maker() as session:
        yield session


# ==================== Service Fixtures ====================

@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer("test-secret", "HS256", timedelta(days=30))


@pytest.fixture
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def sms_service() -> RecordingSmsService:
    return RecordingSmsService()


@pytest.fixture
def auth_service(db_session, token_issuer, sms_service) -> AuthService:
    return AuthService(db_session, token_issuer, sms_service)


# ==================== HTTP Client Fixtures ====================

@pytest_asyncio.fixture
async def client(
    engine: AsyncEngine,
    token_issuer: TokenIssuer,
    fake_storage: FakeStorage,
    sms_service: RecordingSmsService,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    HTTP client for the FastAPI app.

    The lifespan is not run; the collaborators it would build are
    replaced with test doubles on app.state.
    """
    from app.main import app

    app.state.engine = engine
    app.state.session_maker = create_session_maker(engine)
    app.state.token_issuer = token_issuer
    app.state.storage = fake_storage
    app.state.sms_service = sms_service
    app.state.otp_ttl = timedelta(minutes=2)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
