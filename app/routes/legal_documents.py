"""
Legal Document Routes

Current documents for display, and acceptance read-outs for ledger
admins.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Identity, require_ledger_admin
from app.database import get_db
from app.schemas.legal_document import AcceptanceRecordOut, AcceptanceRecordsPage, DocumentStatistics, LegalDocumentOut
from app.services import consent_service, document_registry
from app.services.consent_service import MAX_PAGE_SIZE

router = APIRouter(tags=["Legal Documents"])


@router.get("/current", response_model=list[LegalDocumentOut])
async def read_current_documents(
    language: str | None = Query(None, max_length=10),
    db: AsyncSession = Depends(get_db),
) -> list[LegalDocumentOut]:
    documents = await document_registry.list_current_documents(language, db)
    return [LegalDocumentOut.model_validate(document) for document in documents]


@router.get("/{document_id}/statistics", response_model=DocumentStatistics)
async def read_document_statistics(
    document_id: str,
    db: AsyncSession = Depends(get_db),
    _: Identity = Depends(require_ledger_admin),
) -> DocumentStatistics:
    return await consent_service.get_document_statistics(document_id, db)


@router.get("/{document_id}/acceptances", response_model=AcceptanceRecordsPage)
async def read_acceptance_records(
    document_id: str,
    page: int = Query(0, ge=0),
    page_size: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    _: Identity = Depends(require_ledger_admin),
) -> AcceptanceRecordsPage:
    """Paginated ledger entries for one document, newest first."""
    records, total = await consent_service.get_acceptance_records(document_id, db, page=page, page_size=page_size)
    return AcceptanceRecordsPage(
        items=[AcceptanceRecordOut.model_validate(record) for record in records],
        total=total,
        page=page,
        page_size=page_size,
        has_next=(page + 1) * page_size < total,
    )
