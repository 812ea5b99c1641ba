"""
Legal Document & Consent Constants

Closed vocabularies used by the document registry and the consent ledger.
Stored values are plain strings so new document types can be added without
a schema change.
"""

from enum import Enum


class DocumentType(str, Enum):
    """Legal document types a user can be asked to consent to."""

    TERMS_OF_SERVICE = "terms_of_service"
    PRIVACY_POLICY = "privacy_policy"
    DPA = "dpa"
    CHURCH_ADMIN_TERMS = "church_admin_terms"


class DocumentStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class AcceptanceType(str, Enum):
    """How a new document version is accepted."""

    ACTIVE = "active"  # user must click through
    SILENT = "silent"  # may be recorded on the user's behalf


class ConsentAction(str, Enum):
    GRANTED = "granted"
    ACCEPT = "accept"  # deprecated synonym of GRANTED, read only
    DECLINED = "declined"
    WITHDRAWN = "withdrawn"


class ConsentSource(str, Enum):
    """Values written to ``ConsentRecord.context["source"]``."""

    SIGNUP = "signup"
    RECONSENT_FLOW = "reconsent_flow"
    ACTIVE_ACCEPTANCE_FLOW = "active_acceptance_flow"
    CHURCH_CREATION = "church_creation"
    SILENT_ACCEPTANCE = "silent_acceptance"


# Records written before per-record version tracking carry no version.
# They satisfy version 1 of their document type, never "unknown".
LEGACY_VERSION = 1

AFFIRMATIVE_ACTIONS = frozenset({ConsentAction.GRANTED.value, ConsentAction.ACCEPT.value})

# Sources a caller may pass to the explicit grant endpoint
USER_INITIATED_SOURCES = frozenset(
    {
        ConsentSource.SIGNUP,
        ConsentSource.RECONSENT_FLOW,
        ConsentSource.ACTIVE_ACCEPTANCE_FLOW,
        ConsentSource.CHURCH_CREATION,
    }
)

USER_DOCUMENT_TYPES = (DocumentType.TERMS_OF_SERVICE, DocumentType.PRIVACY_POLICY)
CHURCH_DOCUMENT_TYPES = (DocumentType.DPA, DocumentType.CHURCH_ADMIN_TERMS)


def required_document_types(is_church_owner: bool = False) -> list[str]:
    """
    Document types a user has to have accepted.

    Every user needs the Terms of Service and the Privacy Policy. Church
    owners are additionally bound by the DPA and the church admin terms.

    Args:
        is_church_owner: Whether the user owns a church account

    Returns:
        list[str]: Document type values in display order
    """
    types = [t.value for t in USER_DOCUMENT_TYPES]
    if is_church_owner:
        types.extend(t.value for t in CHURCH_DOCUMENT_TYPES)
    return types


def is_church_document(document_type: str) -> bool:
    return document_type in {t.value for t in CHURCH_DOCUMENT_TYPES}
