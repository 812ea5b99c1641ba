"""
Consent Writer

The only code path that inserts ConsentRecord rows. Records are never
updated or deleted. Every batch is committed in a single transaction: if
the append fails nothing from the batch is visible.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.legal import ConsentAction, DocumentType
from app.exceptions import LedgerWriteError, NoCurrentDocumentError, NotAuthenticatedError
from app.models.consent_record import ConsentRecord
from app.models.legal_document import LegalDocument
from app.schemas.consent import Provenance
from app.services.document_registry import current_documents, normalize_document_types

logger = logging.getLogger(__name__)


async def append_consent_records(
    user_id: str,
    documents: Iterable[LegalDocument],
    provenance: Provenance,
    db: AsyncSession,
) -> list[ConsentRecord]:
    """
    Append one granted record per document, atomically.

    Args:
        user_id: Identity provider subject of the consenting user
        documents: Already resolved current documents
        provenance: Source tag, IP address and user agent of the request
        db: Database session

    Returns:
        The committed records, in document order

    Raises:
        LedgerWriteError: If the store rejects the batch (rolled back)
    """
    recorded_at = datetime.now(timezone.utc)
    records = [
        ConsentRecord(
            user_id=user_id,
            consent_type=document.document_type,
            document_id=document.id,
            document_version=document.version,
            action=ConsentAction.GRANTED.value,
            recorded_at=recorded_at,
            ip_address=provenance.ip_address,
            user_agent=provenance.user_agent,
            context=provenance.to_context(),
        )
        for document in documents
    ]
    if not records:
        return []

    consent_types = [record.consent_type for record in records]
    audit = {"user_id": user_id, "document_types": consent_types, "consent_source": provenance.source.value}
    try:
        db.add_all(records)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            "Consent batch rejected: user=%s types=%s source=%s error=%s",
            user_id,
            consent_types,
            provenance.source.value,
            e,
            extra=audit,
        )
        raise LedgerWriteError(document_types=consent_types) from e

    logger.info(
        "Consent recorded: user=%s types=%s source=%s",
        user_id,
        consent_types,
        provenance.source.value,
        extra=audit,
    )
    return records


async def record_consent(
    user_id: str,
    document_types: Iterable[str | DocumentType],
    provenance: Provenance,
    db: AsyncSession,
    language: str | None = None,
) -> list[ConsentRecord]:
    """
    Record an explicit, user-initiated grant for the current version of
    each requested document type.

    Types without a current document are skipped; the batch fails only
    when none of the requested types can be resolved.

    Raises:
        NotAuthenticatedError: If no user id is supplied
        NoCurrentDocumentError: If no requested type has a current document
        LedgerWriteError: If the append fails
    """
    if not user_id:
        raise NotAuthenticatedError()

    requested = normalize_document_types(document_types)
    documents = await current_documents(requested, language, db)
    if not documents:
        logger.warning("No current documents for %s; nothing recorded for user=%s", requested, user_id)
        raise NoCurrentDocumentError(requested, language)

    missing = [document_type for document_type in requested if document_type not in documents]
    if missing:
        logger.warning("Skipping consent for types without a current document: %s", missing)

    return await append_consent_records(user_id, documents.values(), provenance, db)
