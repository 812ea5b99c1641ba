"""
Consent Routes

Thin adapters over the consent engine for the three call sites:
- dashboards read status without side effects
- login/dashboard gating reconciles and gets the documents to show
- sign-up and the re-consent form record an explicit grant
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Identity, get_current_identity
from app.constants.legal import ConsentSource, DocumentType, required_document_types
from app.database import get_db
from app.schemas.consent import (
    ConsentRecordOut,
    ConsentStatus,
    ReconcileRequest,
    ReconcileResponse,
    RecordConsentRequest,
    RecordConsentResponse,
)
from app.services import consent_service, consent_writer, reconciliation_service
from app.utils.request_meta import build_provenance

router = APIRouter(tags=["Consent"])

logger = logging.getLogger(__name__)


@router.get("/status", response_model=list[ConsentStatus])
async def read_consent_status(
    document_types: list[DocumentType] | None = Query(None),
    language: str | None = Query(None, max_length=10),
    db: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> list[ConsentStatus]:
    """
    Consent status of the current user, without side effects.

    Defaults to the document types required for the caller's role.
    """
    types = document_types or required_document_types(identity.is_church_owner)
    return await consent_service.get_consent_status(identity.user_id, types, db, language)


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile_consents(
    payload: ReconcileRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> ReconcileResponse:
    """
    Settle outdated consent for the current user.

    Silent documents are accepted on the user's behalf; documents that
    need active acceptance are returned so the client can prompt.
    """
    types = payload.document_types or required_document_types(identity.is_church_owner)
    pending = await reconciliation_service.reconcile(
        identity.user_id,
        types,
        payload.language,
        # reconcile only ever writes silent grants
        build_provenance(request, ConsentSource.SILENT_ACCEPTANCE),
        db,
    )
    return ReconcileResponse(needs_action=bool(pending), pending=pending)


@router.post("", response_model=RecordConsentResponse, status_code=status.HTTP_201_CREATED)
async def record_consent(
    payload: RecordConsentRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> RecordConsentResponse:
    """Record the current user's explicit acceptance of the given documents."""
    records = await consent_writer.record_consent(
        identity.user_id,
        payload.document_types,
        build_provenance(request, payload.source),
        db,
        language=payload.language,
    )
    return RecordConsentResponse(
        success=True,
        recorded=[ConsentRecordOut.model_validate(record) for record in records],
    )


@router.get("/history", response_model=list[ConsentRecordOut])
async def read_consent_history(
    db: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> list[ConsentRecordOut]:
    """All consent events of the current user, newest first."""
    records = await consent_service.get_consent_history(identity.user_id, db)
    return [ConsentRecordOut.model_validate(record) for record in records]
