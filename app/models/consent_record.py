"""
ConsentRecord model for the legal consent ledger.

Records each consent event for a user, providing a complete timestamped
audit trail of document acceptance. Rows are never updated or deleted.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String

from app.database import Base


class ConsentRecord(Base):
    """
    A single consent event.

    Duplicates are intentional and expected (every consent action is
    recorded as a fact), so there is no uniqueness constraint on
    (user_id, consent_type, document_version).
    """

    __tablename__ = "consent_records"

    id = Column(Integer, primary_key=True, index=True)
    # Subject issued by the identity provider
    user_id = Column(String(64), nullable=False, index=True)
    # Mirrors LegalDocument.document_type
    consent_type = Column(String(50), nullable=False)
    # A document referenced by the ledger can no longer be deleted
    document_id = Column(
        String(36),
        ForeignKey("legal_documents.id", ondelete="RESTRICT"),
        nullable=True,
    )
    # NULL: recorded before version tracking existed, see LEGACY_VERSION
    document_version = Column(Integer, nullable=True)
    action = Column(String(20), nullable=False, default="granted")
    recorded_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    # IPv6 addresses can be up to 39 chars; 45 allows for mapped IPv4 addresses
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(512), nullable=True)
    context = Column(JSON, nullable=True)

    __table_args__ = (
        Index("idx_consent_user_type", "user_id", "consent_type"),
        Index("idx_consent_document", "document_id"),
    )
