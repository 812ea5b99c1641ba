"""
Custom Exception Classes for the Consent Ledger

This module defines custom exceptions for better error handling and
consistent error responses across the application.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in error responses."""

    AUTH_NOT_AUTHENTICATED = "AUTH_NOT_AUTHENTICATED"
    AUTH_PERMISSION_DENIED = "AUTH_PERMISSION_DENIED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    LEGAL_DOCUMENT_NOT_FOUND = "LEGAL_DOCUMENT_NOT_FOUND"
    LEGAL_NO_CURRENT_DOCUMENT = "LEGAL_NO_CURRENT_DOCUMENT"
    LEDGER_WRITE_FAILED = "LEDGER_WRITE_FAILED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ConsentLedgerError(Exception):
    """Base exception class for all consent ledger exceptions"""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)


# ============================================================================
# Authentication & Authorization Exceptions
# ============================================================================


class NotAuthenticatedError(ConsentLedgerError):
    """Raised when no user identity is available"""

    error_code = ErrorCode.AUTH_NOT_AUTHENTICATED

    def __init__(self, message: str = "Not authenticated", details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED, details=details or {})


class AuthorizationError(ConsentLedgerError):
    """Raised when user lacks permission for an action"""

    error_code = ErrorCode.AUTH_PERMISSION_DENIED

    def __init__(
        self, message: str = "You do not have permission to perform this action", required_role: str | None = None
    ):
        details = {"required_role": required_role} if required_role else {}
        super().__init__(message=message, status_code=status.HTTP_403_FORBIDDEN, details=details)


# ============================================================================
# Legal Document Exceptions
# ============================================================================


class DocumentNotFoundError(ConsentLedgerError):
    """Raised when a legal document id does not exist"""

    error_code = ErrorCode.LEGAL_DOCUMENT_NOT_FOUND

    def __init__(self, document_id: Any | None = None):
        message = "Legal document not found"
        if document_id is not None:
            message = f"Legal document with id '{document_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"document_id": document_id},
        )


class NoCurrentDocumentError(ConsentLedgerError):
    """Raised when no published, current document exists for any requested type"""

    error_code = ErrorCode.LEGAL_NO_CURRENT_DOCUMENT

    def __init__(self, document_types: list[str], language: str | None = None):
        super().__init__(
            message="No current legal document found for the requested types",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"document_types": list(document_types), "language": language},
        )


# ============================================================================
# Ledger & Validation Exceptions
# ============================================================================


class LedgerWriteError(ConsentLedgerError):
    """Raised when the ledger rejects an append; the whole batch is discarded"""

    error_code = ErrorCode.LEDGER_WRITE_FAILED

    def __init__(self, message: str = "Failed to record consent", document_types: list[str] | None = None):
        details = {"document_types": list(document_types)} if document_types else {}
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)


class ValidationError(ConsentLedgerError):
    """Raised when input validation fails"""

    error_code = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=error_details)
