"""Unit tests for domain exceptions."""

import pytest

from invoiceflow.core.exceptions import (
    DocumentNotFoundError,
    InvoiceFlowError,
    InvoiceNotFoundError,
    PartyNotFoundError,
    ProductNotFoundError,
    PurchaseNotFoundError,
    ReplicationError,
    StorageError,
    TransactionConflictError,
    ValidationError,
)


class TestInvoiceFlowError:
    """Tests for the base exception."""

    def test_code_defaults_to_class_name(self):
        error = InvoiceFlowError("boom")
        assert error.code == "InvoiceFlowError"
        assert error.details == {}
        assert str(error) == "boom"

    def test_to_dict(self):
        error = InvoiceFlowError("boom", code="X", details={"a": 1})
        assert error.to_dict() == {"error": "X", "message": "boom", "details": {"a": 1}}


class TestValidationError:
    def test_records_field_and_truncated_value(self):
        error = ValidationError("discount", "too large", "9" * 300)

        assert error.code == "VALIDATION_ERROR"
        assert error.details["field"] == "discount"
        assert len(error.details["value"]) == 100
        assert "discount" in error.message

    def test_value_none_is_kept_as_none(self):
        assert ValidationError("items", "required").details["value"] is None


class TestNotFoundErrors:
    @pytest.mark.parametrize(
        "error, code",
        [
            (InvoiceNotFoundError(7), "INVOICE_NOT_FOUND"),
            (PurchaseNotFoundError(9), "PURCHASE_NOT_FOUND"),
            (ProductNotFoundError("p1"), "PRODUCT_NOT_FOUND"),
            (PartyNotFoundError("customer", "98765"), "CUSTOMER_NOT_FOUND"),
            (PartyNotFoundError("supplier", "kisan"), "SUPPLIER_NOT_FOUND"),
        ],
    )
    def test_codes(self, error, code):
        assert error.code == code
        assert isinstance(error, StorageError)

    def test_documents_share_a_base(self):
        assert isinstance(InvoiceNotFoundError(1), DocumentNotFoundError)
        assert isinstance(PurchaseNotFoundError(1), DocumentNotFoundError)
        assert InvoiceNotFoundError(1).message == "Invoice not found: 1"


class TestOperationalErrors:
    def test_transaction_conflict(self):
        error = TransactionConflictError("begin", "database is locked")
        assert error.code == "TRANSACTION_CONFLICT"
        assert error.details["operation"] == "begin"

    def test_replication_error_carries_status(self):
        error = ReplicationError("HTTP 500", 500)
        assert error.code == "REPLICATION_FAILED"
        assert error.details == {"reason": "HTTP 500", "status_code": 500}
