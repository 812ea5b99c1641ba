"""
Reconciliation Service

Compares a user's latest consent with the documents currently in force and
closes the gap where it may:

- consent matches the current version: nothing to do
- the document accepts silently: a granted record is appended on the
  user's behalf (also when the user never consented before)
- the document needs active acceptance: it is returned to the caller,
  which must ask the user

Silent grants go through the Consent Writer and share the caller's
session, so the result returned here never depends on re-reading what
was just written.
"""

import logging
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.legal import AcceptanceType, ConsentSource, DocumentType, is_church_document
from app.exceptions import NotAuthenticatedError
from app.models.legal_document import LegalDocument
from app.schemas.consent import PendingConsent, Provenance
from app.services.consent_resolver import resolve_consent_status
from app.services.consent_service import fetch_consent_records, get_consent_status
from app.services.consent_writer import append_consent_records
from app.services.document_registry import current_documents, normalize_document_types

logger = logging.getLogger(__name__)


def _silent_provenance(provenance: Provenance) -> Provenance:
    return provenance.model_copy(
        update={
            "source": ConsentSource.SILENT_ACCEPTANCE,
            "extra": {**provenance.extra, "auto_accepted": True},
        }
    )


def _pending(document: LegalDocument, accepted_version: int | None) -> PendingConsent:
    return PendingConsent(
        document_type=document.document_type,
        document_id=document.id,
        title=document.title,
        current_version=document.version,
        accepted_version=accepted_version,
        is_church_document=is_church_document(document.document_type),
    )


async def reconcile(
    user_id: str,
    document_types: Iterable[str | DocumentType],
    language: str | None,
    provenance: Provenance,
    db: AsyncSession,
) -> list[PendingConsent]:
    """
    Bring a user's consent up to date for the given document types.

    Args:
        user_id: Identity provider subject
        document_types: Types to check, in display order
        language: Preferred document language
        provenance: Request metadata used for any silent grant
        db: Database session

    Returns:
        Documents that still require explicit acceptance, in request order

    Raises:
        NotAuthenticatedError: If no user id is supplied
        LedgerWriteError: If a silent grant cannot be written
    """
    if not user_id:
        raise NotAuthenticatedError()

    requested = normalize_document_types(document_types)
    documents = await current_documents(requested, language, db)
    records = await fetch_consent_records(user_id, db, consent_types=documents.keys())

    pending: list[PendingConsent] = []
    for document_type in requested:
        document = documents.get(document_type)
        if document is None:
            logger.warning("No current %s document; skipping reconciliation for user=%s", document_type, user_id)
            continue

        status = resolve_consent_status(records, document)
        if status.has_consent:
            continue

        if document.is_silent:
            await append_consent_records(user_id, [document], _silent_provenance(provenance), db)
            logger.info(
                "Silently accepted %s v%d for user=%s (previous=%s)",
                document_type,
                document.version,
                user_id,
                status.consented_version,
            )
            continue

        pending.append(_pending(document, status.consented_version))

    return pending


async def needs_reconsent(
    user_id: str,
    document_types: Iterable[str | DocumentType],
    db: AsyncSession,
    language: str | None = None,
) -> bool:
    """
    Read-only check for outstanding documents that need the user's action.

    Silent documents are not counted; reconciliation settles them
    without involving the user.
    """
    statuses = await get_consent_status(user_id, document_types, db, language)
    return any(
        not status.has_consent and status.acceptance_type != AcceptanceType.SILENT.value for status in statuses
    )
