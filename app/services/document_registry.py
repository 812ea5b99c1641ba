"""
Document Registry

Read-only access to the legal documents that are currently in force.
A document is consent-relevant only when it is published and flagged
current. Each document type is resolved independently; when a type has
no current document in the requested language another language is used
instead of failing.
"""

import logging
from collections.abc import Iterable, Sequence
from enum import Enum

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.constants.legal import DocumentStatus, DocumentType
from app.models.legal_document import LegalDocument

logger = logging.getLogger(__name__)


def normalize_document_types(document_types: Iterable[str | DocumentType]) -> list[str]:
    """Return plain string types, de-duplicated, in first-seen order."""
    normalized: list[str] = []
    for document_type in document_types:
        value = document_type.value if isinstance(document_type, Enum) else str(document_type)
        if value not in normalized:
            normalized.append(value)
    return normalized


def language_preference(language: str | None = None) -> list[str]:
    """
    Ordered list of languages to try for a request.

    The requested language comes first, then the configured fallbacks.
    Languages not in the list are still acceptable but rank last, in
    alphabetical order.
    """
    preference: list[str] = []
    for candidate in [language or settings.default_language, *settings.fallback_languages]:
        if candidate and candidate not in preference:
            preference.append(candidate)
    return preference


def _rank(document: LegalDocument, preference: Sequence[str]) -> tuple[int, str, int]:
    try:
        language_rank = preference.index(document.language)
    except ValueError:
        language_rank = len(preference)
    return (language_rank, document.language, -document.version)


def select_preferred_variants(
    documents: Iterable[LegalDocument],
    language: str | None = None,
) -> dict[str, LegalDocument]:
    """
    Collapse several candidate documents into one per document type.

    The best language according to ``language_preference`` wins. Within
    that language the highest version wins, so a registry that briefly
    holds two current rows still yields a single document.

    Args:
        documents: Published, current candidates (any language)
        language: Preferred language of the caller

    Returns:
        dict mapping document_type to the chosen LegalDocument
    """
    preference = language_preference(language)
    chosen: dict[str, LegalDocument] = {}
    for document in documents:
        existing = chosen.get(document.document_type)
        if existing is None or _rank(document, preference) < _rank(existing, preference):
            chosen[document.document_type] = document
    return chosen


async def current_documents(
    document_types: Iterable[str | DocumentType],
    language: str | None,
    db: AsyncSession,
) -> dict[str, LegalDocument]:
    """
    Fetch the current published document for each requested type.

    Types that have no current document in any language are absent from
    the result; callers decide whether that is an error.

    Returns:
        dict keyed by document_type, in the order the types were requested
    """
    requested = normalize_document_types(document_types)
    if not requested:
        return {}

    result = await db.execute(
        select(LegalDocument).where(
            LegalDocument.document_type.in_(requested),
            LegalDocument.status == DocumentStatus.PUBLISHED.value,
            LegalDocument.is_current.is_(True),
        )
    )
    chosen = select_preferred_variants(result.scalars().all(), language)

    resolved = {document_type: chosen[document_type] for document_type in requested if document_type in chosen}
    for document in resolved.values():
        if language and document.language != language:
            logger.debug(
                "No current %s in '%s'; using '%s' v%d",
                document.document_type,
                language,
                document.language,
                document.version,
            )
    return resolved


async def list_current_documents(language: str | None, db: AsyncSession) -> list[LegalDocument]:
    """Return the current document of every known type, one per type."""
    documents = await current_documents([t.value for t in DocumentType], language, db)
    return list(documents.values())


async def get_document(document_id: str, db: AsyncSession) -> LegalDocument | None:
    return await db.get(LegalDocument, document_id)
