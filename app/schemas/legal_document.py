from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.consent import ConsentRecordOut


class LegalDocumentOut(BaseModel):
    id: str
    document_type: str
    language: str
    version: int
    title: str
    status: str
    is_current: bool
    acceptance_type: str
    effective_date: date | None = None

    model_config = ConfigDict(from_attributes=True)


class DocumentStatistics(BaseModel):
    document_id: str
    accepted_count: int = Field(..., description="Affirmative ledger entries for this document.")
    withdrawn_count: int = Field(..., description="Withdrawn or declined ledger entries for this document.")
    distinct_users: int = Field(..., description="Users with at least one affirmative entry.")


class AcceptanceRecordOut(ConsentRecordOut):
    """Ledger entry with its request provenance, for compliance review."""

    ip_address: str | None = None
    user_agent: str | None = None


class AcceptanceRecordsPage(BaseModel):
    items: list[AcceptanceRecordOut]
    total: int
    page: int
    page_size: int
    has_next: bool
