"""
Consent Read-outs

Side-effect free queries over the consent ledger: status for dashboards,
a user's own history, and per-document acceptance statistics for admins.
Nothing in this module writes to the ledger, so reading a status never
triggers a silent acceptance.
"""

import logging
from collections.abc import Iterable

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.legal import AFFIRMATIVE_ACTIONS, ConsentAction, DocumentType
from app.exceptions import DocumentNotFoundError, NotAuthenticatedError, ValidationError
from app.models.consent_record import ConsentRecord
from app.schemas.consent import ConsentStatus
from app.schemas.legal_document import DocumentStatistics
from app.services.consent_resolver import resolve_all
from app.services.document_registry import current_documents, get_document, normalize_document_types

logger = logging.getLogger(__name__)

NON_AFFIRMATIVE_ACTIONS = (ConsentAction.WITHDRAWN.value, ConsentAction.DECLINED.value)
MAX_PAGE_SIZE = 100


async def fetch_consent_records(
    user_id: str,
    db: AsyncSession,
    consent_types: Iterable[str] | None = None,
) -> list[ConsentRecord]:
    """Return the user's ledger entries, newest first."""
    query = select(ConsentRecord).where(ConsentRecord.user_id == user_id)
    if consent_types is not None:
        query = query.where(ConsentRecord.consent_type.in_(list(consent_types)))
    result = await db.execute(query.order_by(ConsentRecord.recorded_at.desc(), ConsentRecord.id.desc()))
    return list(result.scalars().all())


async def get_consent_status(
    user_id: str,
    document_types: Iterable[str | DocumentType],
    db: AsyncSession,
    language: str | None = None,
) -> list[ConsentStatus]:
    """
    Report the consent status of each requested document type.

    Types with no current document in any language are omitted.

    Raises:
        NotAuthenticatedError: If no user id is supplied
    """
    if not user_id:
        raise NotAuthenticatedError()

    requested = normalize_document_types(document_types)
    documents = await current_documents(requested, language, db)
    if len(documents) < len(requested):
        logger.warning(
            "Consent status omits types without a current document: %s",
            [t for t in requested if t not in documents],
        )
    if not documents:
        return []

    records = await fetch_consent_records(user_id, db, consent_types=documents.keys())
    return resolve_all(records, documents)


async def get_consent_history(user_id: str, db: AsyncSession) -> list[ConsentRecord]:
    """Return all consent records for the user, newest first."""
    if not user_id:
        raise NotAuthenticatedError()
    return await fetch_consent_records(user_id, db)


async def get_document_statistics(document_id: str, db: AsyncSession) -> DocumentStatistics:
    """
    Count ledger entries that reference one document version.

    Raises:
        DocumentNotFoundError: If the document does not exist
    """
    document = await get_document(document_id, db)
    if document is None:
        raise DocumentNotFoundError(document_id)

    accepted = await db.execute(
        select(func.count(ConsentRecord.id), func.count(distinct(ConsentRecord.user_id))).where(
            ConsentRecord.document_id == document_id,
            ConsentRecord.action.in_(AFFIRMATIVE_ACTIONS),
        )
    )
    accepted_count, distinct_users = accepted.one()

    withdrawn = await db.execute(
        select(func.count(ConsentRecord.id)).where(
            ConsentRecord.document_id == document_id,
            ConsentRecord.action.in_(NON_AFFIRMATIVE_ACTIONS),
        )
    )

    return DocumentStatistics(
        document_id=document_id,
        accepted_count=accepted_count,
        withdrawn_count=withdrawn.scalar_one(),
        distinct_users=distinct_users,
    )


async def get_acceptance_records(
    document_id: str,
    db: AsyncSession,
    page: int = 0,
    page_size: int = 20,
) -> tuple[list[ConsentRecord], int]:
    """
    Return one page of ledger entries for a document, newest first.

    Args:
        document_id: Legal document id
        db: Database session
        page: Zero-based page number
        page_size: Records per page (1-100)

    Returns:
        Tuple of (records, total matching records)
    """
    if page < 0:
        raise ValidationError("Page must not be negative", field="page")
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise ValidationError(f"Page size must be between 1 and {MAX_PAGE_SIZE}", field="page_size")

    document = await get_document(document_id, db)
    if document is None:
        raise DocumentNotFoundError(document_id)

    total_result = await db.execute(
        select(func.count(ConsentRecord.id)).where(ConsentRecord.document_id == document_id)
    )
    total = total_result.scalar_one()

    result = await db.execute(
        select(ConsentRecord)
        .where(ConsentRecord.document_id == document_id)
        .order_by(ConsentRecord.recorded_at.desc(), ConsentRecord.id.desc())
        .offset(page * page_size)
        .limit(page_size)
    )
    return list(result.scalars().all()), total
