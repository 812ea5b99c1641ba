"""
Pytest configuration and fixtures for consent ledger tests
"""

import os
import sys
from collections.abc import AsyncGenerator
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH120

# Configure the app for tests before anything reads settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_JSON", "false")

from app.constants.legal import AcceptanceType, DocumentStatus  # noqa: E402
from app.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from app.models.consent_record import ConsentRecord  # noqa: E402
from app.models.legal_document import LegalDocument  # noqa: E402
from helpers import USER_ID, utc  # noqa: E402

# Test database URL (SQLite in-memory for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory database per test function"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture(scope="function")
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_document(db):
    """Factory for legal documents; published and current unless told otherwise"""

    async def _make(
        document_type: str = "terms_of_service",
        version: int = 1,
        language: str = "en",
        acceptance_type: str = AcceptanceType.ACTIVE.value,
        status: str = DocumentStatus.PUBLISHED.value,
        is_current: bool = True,
        title: str | None = None,
    ) -> LegalDocument:
        document = LegalDocument(
            document_type=document_type,
            version=version,
            language=language,
            acceptance_type=acceptance_type,
            status=status,
            is_current=is_current,
            title=title or f"{document_type} v{version} ({language})",
        )
        db.add(document)
        await db.commit()
        return document

    return _make


@pytest.fixture
def make_record(db):
    """Seed ledger rows directly, e.g. legacy rows written before versioning"""

    async def _make(
        consent_type: str = "terms_of_service",
        document_version: int | None = None,
        action: str = "granted",
        recorded_at: datetime | None = None,
        user_id: str = USER_ID,
        document_id: str | None = None,
        context: dict | None = None,
    ) -> ConsentRecord:
        record = ConsentRecord(
            user_id=user_id,
            consent_type=consent_type,
            document_id=document_id,
            document_version=document_version,
            action=action,
            recorded_at=recorded_at or utc(2024),
            context=context,
        )
        db.add(record)
        await db.commit()
        return record

    return _make


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the full application with the test database"""
    from main import create_app

    test_app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    test_app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as test_client:
        yield test_client

    test_app.dependency_overrides.clear()
