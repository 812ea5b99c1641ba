"""
Tests for the ledger models

Ledger rows keep pointing at the exact document version they accept.
"""

import pytest
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from app.models.consent_record import ConsentRecord
from app.models.legal_document import LegalDocument


class TestLedgerDocumentLink:
    async def test_referenced_document_cannot_be_deleted(self, db, session_factory, make_document, make_record):
        document = await make_document("terms_of_service", version=2)
        record = await make_record("terms_of_service", document_version=2, document_id=document.id)

        with pytest.raises(IntegrityError):
            await db.execute(delete(LegalDocument).where(LegalDocument.id == document.id))
            await db.commit()
        await db.rollback()

        async with session_factory() as session:
            stored = await session.get(ConsentRecord, record.id)
            assert stored.document_id == document.id
            remaining = await session.execute(select(LegalDocument.id))
            assert remaining.scalars().all() == [document.id]

    async def test_unreferenced_document_can_be_deleted(self, db, session_factory, make_document):
        document = await make_document("dpa", acceptance_type="silent")

        await db.execute(delete(LegalDocument).where(LegalDocument.id == document.id))
        await db.commit()

        async with session_factory() as session:
            assert await session.get(LegalDocument, document.id) is None

    async def test_record_for_unknown_document_is_rejected(self, db, make_record):
        with pytest.raises(IntegrityError):
            await make_record("privacy_policy", document_version=1, document_id="no-such-document")
        await db.rollback()
