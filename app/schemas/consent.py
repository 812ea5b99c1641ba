from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.constants.legal import USER_INITIATED_SOURCES, ConsentSource, DocumentType


class Provenance(BaseModel):
    """Request metadata stored with every ledger entry."""

    source: ConsentSource
    ip_address: str | None = None
    user_agent: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)

    def to_context(self) -> dict[str, Any]:
        return {**self.extra, "source": self.source.value}


class ConsentStatus(BaseModel):
    """Consent state of one user for one document type. Computed, never stored."""

    document_type: str
    has_consent: bool
    consented_version: int | None = None
    current_version: int
    consented_at: datetime | None = None
    document_id: str | None = None
    acceptance_type: str | None = None


class PendingConsent(BaseModel):
    """A document the user still has to accept explicitly."""

    document_type: str
    document_id: str
    title: str | None = None
    current_version: int
    accepted_version: int | None = None
    is_church_document: bool = False


class ReconcileRequest(BaseModel):
    document_types: list[DocumentType] | None = Field(
        None, description="Document types to check. Defaults to the types required for the caller's role."
    )
    language: str | None = Field(None, max_length=10, description="Preferred document language.")


class ReconcileResponse(BaseModel):
    needs_action: bool
    pending: list[PendingConsent]


class RecordConsentRequest(BaseModel):
    document_types: list[DocumentType] = Field(..., min_length=1)
    source: ConsentSource = Field(ConsentSource.SIGNUP, description="Flow the consent was captured in.")
    language: str | None = Field(None, max_length=10)

    @field_validator("source")
    @classmethod
    def source_must_be_user_initiated(cls, value: ConsentSource) -> ConsentSource:
        if value not in USER_INITIATED_SOURCES:
            raise ValueError(f"'{value.value}' cannot be recorded through an explicit grant")
        return value

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "document_types": ["terms_of_service", "privacy_policy"],
                "source": "signup",
            }
        }
    )


class ConsentRecordOut(BaseModel):
    id: int
    user_id: str
    consent_type: str
    document_id: str | None = None
    document_version: int | None = None
    action: str
    recorded_at: datetime
    context: dict[str, Any] | None = None

    model_config = ConfigDict(from_attributes=True)


class RecordConsentResponse(BaseModel):
    success: bool
    recorded: list[ConsentRecordOut]
