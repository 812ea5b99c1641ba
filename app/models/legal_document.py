"""
LegalDocument model.

One row per published or drafted version of a legal document in one
language. The authoring workflow owns these rows; the consent engine only
reads them.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, Index, Integer, String

from app.constants.legal import AcceptanceType, DocumentStatus
from app.database import Base


class LegalDocument(Base):
    """
    A versioned legal document.

    At most one published row per (document_type, language) has
    is_current set; the publishing workflow maintains that.
    """

    __tablename__ = "legal_documents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    document_type = Column(String(50), nullable=False)
    language = Column(String(10), nullable=False, default="en")
    version = Column(Integer, nullable=False, default=1)
    title = Column(String(255), nullable=False, default="")
    status = Column(String(20), nullable=False, default=DocumentStatus.DRAFT.value)
    is_current = Column(Boolean, nullable=False, default=False)
    acceptance_type = Column(String(20), nullable=False, default=AcceptanceType.ACTIVE.value)
    # Informational only, never used to resolve consent
    effective_date = Column(Date, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_legal_document_current", "document_type", "language", "is_current"),
        Index("idx_legal_document_lineage", "document_type", "language", "version"),
    )

    @property
    def is_silent(self) -> bool:
        return self.acceptance_type == AcceptanceType.SILENT.value

    def __repr__(self) -> str:
        return f"<LegalDocument {self.document_type} v{self.version} ({self.language})>"
