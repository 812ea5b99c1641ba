from .consent_record import ConsentRecord
from .legal_document import LegalDocument

__all__ = [
    "ConsentRecord",
    "LegalDocument",
]
