"""
Consent Resolver

Pure functions that turn a user's ledger entries and the current version
of a document into a ConsentStatus. Nothing here touches the database or
raises: missing data simply means no consent.

Rules:
- only affirmative actions count (``granted``, and the deprecated
  ``accept``); declined or withdrawn rows are ignored
- the authoritative row is the affirmative one with the latest
  ``recorded_at``, never the latest by id or by storage order
- a row without ``document_version`` predates version tracking and counts
  as ``LEGACY_VERSION``
- consent is current only when the consented version equals the current
  document version
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone

from app.constants.legal import AFFIRMATIVE_ACTIONS, LEGACY_VERSION
from app.models.consent_record import ConsentRecord
from app.models.legal_document import LegalDocument
from app.schemas.consent import ConsentStatus


def is_affirmative(action: str | None) -> bool:
    return action in AFFIRMATIVE_ACTIONS


def effective_version(record: ConsentRecord) -> int:
    """Version a record consented to, with legacy rows mapped to LEGACY_VERSION."""
    if record.document_version is None:
        return LEGACY_VERSION
    return record.document_version


def _recorded_at_key(record: ConsentRecord) -> datetime:
    # Some backends (SQLite) hand timestamps back without tzinfo; they are stored as UTC
    recorded_at = record.recorded_at
    if recorded_at.tzinfo is None:
        return recorded_at.replace(tzinfo=timezone.utc)
    return recorded_at


def latest_affirmative_record(records: Iterable[ConsentRecord], consent_type: str) -> ConsentRecord | None:
    candidates = [
        record
        for record in records
        if record.consent_type == consent_type and is_affirmative(record.action) and record.recorded_at is not None
    ]
    if not candidates:
        return None
    return max(candidates, key=_recorded_at_key)


def resolve_consent_status(records: Iterable[ConsentRecord], document: LegalDocument) -> ConsentStatus:
    """
    Compute the consent status of one document type for one user.

    Args:
        records: The user's ledger entries (any types, any order)
        document: The current document for the type being resolved

    Returns:
        ConsentStatus for ``document.document_type``
    """
    record = latest_affirmative_record(records, document.document_type)
    if record is None:
        return ConsentStatus(
            document_type=document.document_type,
            has_consent=False,
            consented_version=None,
            current_version=document.version,
            consented_at=None,
            document_id=document.id,
            acceptance_type=document.acceptance_type,
        )

    consented_version = effective_version(record)
    return ConsentStatus(
        document_type=document.document_type,
        has_consent=consented_version == document.version,
        consented_version=consented_version,
        current_version=document.version,
        consented_at=record.recorded_at,
        document_id=document.id,
        acceptance_type=document.acceptance_type,
    )


def resolve_all(
    records: Iterable[ConsentRecord],
    documents: Mapping[str, LegalDocument],
) -> list[ConsentStatus]:
    """Resolve every document in ``documents``, preserving its order."""
    records = list(records)
    return [resolve_consent_status(records, document) for document in documents.values()]
