"""Tests for the exception hierarchy."""

import pytest

from core.exceptions import (
    InvoiceAppError,
    InvoiceNotFoundError,
    StorageError,
    SyncError,
    ValidationFailure,
)
from core.validation import ValidationErrorKind, ValidationResult


class TestHierarchy:

    @pytest.mark.parametrize("exc_type", [ValidationFailure, StorageError, SyncError, InvoiceNotFoundError])
    def test_all_derive_from_base(self, exc_type):
        assert issubclass(exc_type, InvoiceAppError)

    def test_not_found_is_a_lookup_error(self):
        with pytest.raises(LookupError):
            raise InvoiceNotFoundError("abc")


class TestValidationFailure:

    def test_carries_result_message_and_kind(self):
        result = ValidationResult.invalid("Invoice must have at least one item",
                                          ValidationErrorKind.BUSINESS_RULE_VIOLATION)
        error = ValidationFailure(result)
        assert error.result is result
        assert error.kind == ValidationErrorKind.BUSINESS_RULE_VIOLATION
        assert str(error) == "Invoice must have at least one item"

    def test_falls_back_to_generic_message(self):
        error = ValidationFailure(ValidationResult(is_valid=False))
        assert str(error) == "Invalid invoice data"


class TestMessages:

    def test_not_found_message(self):
        error = InvoiceNotFoundError("inv-1")
        assert error.invoice_id == "inv-1"
        assert str(error) == "Invoice inv-1 not found"

    def test_sync_error_message(self):
        error = SyncError("inv-1", "create", "store down")
        assert error.operation == "create"
        assert "inv-1" in str(error)
        assert "store down" in str(error)
