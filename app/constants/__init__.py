"""Constants package for the consent ledger."""

from .auth import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from .legal import (
    AFFIRMATIVE_ACTIONS,
    LEGACY_VERSION,
    AcceptanceType,
    ConsentAction,
    ConsentSource,
    DocumentStatus,
    DocumentType,
    is_church_document,
    required_document_types,
)
from .roles import DEFAULT_ROLE, LEDGER_ADMIN_ROLES, RoleName, get_default_role_name

__all__ = [
    # Role constants
    "RoleName",
    "DEFAULT_ROLE",
    "LEDGER_ADMIN_ROLES",
    "get_default_role_name",
    # Auth constants
    "SECRET_KEY",
    "ALGORITHM",
    "ACCESS_TOKEN_EXPIRE_MINUTES",
    # Legal constants
    "DocumentType",
    "DocumentStatus",
    "AcceptanceType",
    "ConsentAction",
    "ConsentSource",
    "LEGACY_VERSION",
    "AFFIRMATIVE_ACTIONS",
    "required_document_types",
    "is_church_document",
]
