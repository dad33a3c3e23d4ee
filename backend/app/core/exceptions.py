"""
Custom exceptions for the CMS domain.

These exceptions represent domain-level errors and are independent
of infrastructure concerns. The API layer renders them with the
status code each one carries.
"""
from typing import Optional


class CMSException(Exception):
    """Base exception for all CMS errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class DocumentNotFoundException(CMSException):
    """Raised when a document id does not exist in its collection."""

    status_code = 404

    def __init__(self, collection: str, doc_id: str):
        super().__init__(
            message=f"Document {doc_id} not found in {collection}",
            details={"collection": collection, "id": doc_id},
        )


class ValidationFailedException(CMSException):
    """Raised when a form is missing a required field or holds bad input."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message=message, details={"field": field} if field else {})


class DuplicateDocumentException(CMSException):
    """Raised when a product already exists on one of the selected websites."""

    status_code = 409

    def __init__(self, message: str, existing_id: Optional[str] = None):
        super().__init__(message=message, details={"existing_id": existing_id})


class ConfirmationMismatchException(CMSException):
    """Raised when the typed confirmation does not match the item name."""

    status_code = 400

    def __init__(self, expected: str):
        super().__init__(
            message="Name doesn't match. Type exactly as shown.",
            details={"expected": expected},
        )


class HoldNotCompletedException(CMSException):
    """Raised when a hold-to-confirm action is released or consumed too early."""

    status_code = 400

    def __init__(self, hold_id: str, reason: str):
        super().__init__(
            message=f"Hold {hold_id} not completed: {reason}",
            details={"hold_id": hold_id, "reason": reason},
        )


class StorageUploadException(CMSException):
    """Raised when Cloudinary is not configured or rejects an upload."""

    status_code = 502

    def __init__(self, reason: str):
        super().__init__(message=reason, details={"service": "cloudinary"})


class SpreadsheetParseException(CMSException):
    """Raised when an uploaded CSV/XLSX file cannot be read."""

    status_code = 400

    def __init__(self, filename: str, reason: str):
        super().__init__(
            message=f"Could not parse {filename}: {reason}",
            details={"filename": filename},
        )


class UploadCancelledException(CMSException):
    """Raised inside a bulk upload loop once its cancel flag is set."""

    status_code = 409

    def __init__(self, job_id: str):
        super().__init__(message="Upload Cancelled", details={"job_id": job_id})
