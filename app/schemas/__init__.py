from .consent import (
    ConsentRecordOut,
    ConsentStatus,
    PendingConsent,
    Provenance,
    ReconcileRequest,
    ReconcileResponse,
    RecordConsentRequest,
    RecordConsentResponse,
)
from .legal_document import AcceptanceRecordOut, AcceptanceRecordsPage, DocumentStatistics, LegalDocumentOut

# Define the public API of this module
__all__ = [
    "ConsentRecordOut",
    "ConsentStatus",
    "PendingConsent",
    "Provenance",
    "ReconcileRequest",
    "ReconcileResponse",
    "RecordConsentRequest",
    "RecordConsentResponse",
    "AcceptanceRecordOut",
    "AcceptanceRecordsPage",
    "DocumentStatistics",
    "LegalDocumentOut",
]
