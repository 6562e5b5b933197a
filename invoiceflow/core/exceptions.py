"""
Domain exceptions for the InvoiceFlow ledger.

Every failure a ledger operation can surface is one of these types, so the
caller can tell a bad form (validation), a stale view (not found) and a
lost race (conflict) apart.
"""

from typing import Any


class InvoiceFlowError(Exception):
    """Base exception for all InvoiceFlow errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(InvoiceFlowError):
    """Input validation failed before any transaction was opened."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Storage Exceptions
class StorageError(InvoiceFlowError):
    """Base exception for storage operations."""

    pass


class DocumentNotFoundError(StorageError):
    """An invoice or purchase vanished before the transaction could use it."""

    def __init__(self, kind: str, doc_id: int | str, code: str | None = None):
        super().__init__(
            f"{kind.capitalize()} not found: {doc_id}",
            code=code or "DOCUMENT_NOT_FOUND",
            details={"kind": kind, "doc_id": doc_id},
        )


class InvoiceNotFoundError(DocumentNotFoundError):
    """Invoice not found in storage."""

    def __init__(self, invoice_id: int | str):
        super().__init__("invoice", invoice_id, code="INVOICE_NOT_FOUND")


class PurchaseNotFoundError(DocumentNotFoundError):
    """Purchase not found in storage."""

    def __init__(self, purchase_id: int | str):
        super().__init__("purchase", purchase_id, code="PURCHASE_NOT_FOUND")


class ProductNotFoundError(StorageError):
    """A line item or request referenced a product that does not exist."""

    def __init__(self, product_id: str):
        super().__init__(
            f"Product not found: {product_id}",
            code="PRODUCT_NOT_FOUND",
            details={"product_id": product_id},
        )


class PartyNotFoundError(StorageError):
    """Customer or supplier not found in the directory."""

    def __init__(self, kind: str, key: str):
        super().__init__(
            f"{kind.capitalize()} not found: {key}",
            code=f"{kind.upper()}_NOT_FOUND",
            details={"kind": kind, "key": key},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class TransactionConflictError(StorageError):
    """A concurrent writer held the store past the busy timeout.

    Nothing was written; the caller may retry the whole operation.
    """

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Transaction conflict during {operation}: {error}",
            code="TRANSACTION_CONFLICT",
            details={"operation": operation, "error": error},
        )


# Replication Exceptions
class ReplicationError(InvoiceFlowError):
    """Backup collaborator was unreachable or rejected a record."""

    def __init__(self, reason: str, status_code: int | None = None):
        super().__init__(
            f"Backup replication failed: {reason}",
            code="REPLICATION_FAILED",
            details={"reason": reason, "status_code": status_code},
        )


class ConfigurationError(InvoiceFlowError):
    """Configuration error."""

    pass
