"""
Shared helpers for consent ledger tests
"""

from datetime import datetime, timezone

from sqlalchemy import func, select

from app.auth import create_access_token
from app.models.consent_record import ConsentRecord

USER_ID = "5b0f3d1e-7c2a-4d8e-9a61-0c4f2e8b7a13"
OTHER_USER_ID = "c9e1a2b3-4d5e-4f60-8172-93a4b5c6d7e8"


def utc(year: int, month: int = 1, day: int = 1, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


async def count_records(session_factory, **filters) -> int:
    """Count ledger rows in a separate session so only committed rows are seen"""
    async with session_factory() as session:
        query = select(func.count(ConsentRecord.id))
        for column, value in filters.items():
            query = query.where(getattr(ConsentRecord, column) == value)
        result = await session.execute(query)
        return result.scalar_one()


async def fetch_records(session_factory, user_id: str = USER_ID) -> list[ConsentRecord]:
    async with session_factory() as session:
        result = await session.execute(
            select(ConsentRecord).where(ConsentRecord.user_id == user_id).order_by(ConsentRecord.id)
        )
        return list(result.scalars().all())


def auth_headers(user_id: str = USER_ID, role: str = "member") -> dict:
    """Generate authentication headers for a user"""
    token = create_access_token(data={"sub": user_id, "role": role})
    return {"Authorization": f"Bearer {token}"}
