"""
Tests for the Expense Tracker models

Test strategy:
1. Unit tests for individual components (models, validators, queries)
2. Integration tests for flows (in-memory and temp-dir stores)
3. No external services in tests
"""

import pytest
from datetime import datetime, timezone

from pydantic import ValidationError

from expense_tracker.models.expense import (
    Expense,
    ExpenseCategory,
    ExpenseFilters,
    ExpenseFormData,
    ExpenseSummary,
    ValidationIssue,
    ValidationResult,
    empty_breakdown,
    isoformat_utc,
    parse_datetime,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestExpenseModel:
    """Tests for the persisted expense record."""

    def test_expense_accepts_camel_case_keys(self):
        """Stored blobs use createdAt/updatedAt."""
        expense = Expense.model_validate({
            "id": "abc",
            "amount": 12.5,
            "category": "Food",
            "description": "Coffee",
            "date": "2024-03-01",
            "createdAt": "2024-03-01T08:00:00.000Z",
        })
        assert expense.created_at == "2024-03-01T08:00:00.000Z"
        assert expense.updated_at is None
        assert expense.category == ExpenseCategory.FOOD

    def test_expense_rejects_unknown_category(self):
        """Only the six categories are valid."""
        with pytest.raises(ValidationError):
            Expense(
                id="abc",
                amount=1,
                category="Travel",
                description="Plane",
                date="2024-03-01",
                created_at="2024-03-01T08:00:00.000Z",
            )

    def test_to_storage_dict_omits_unset_fields(self, make_expense):
        """Optional fields that are unset are not written as null."""
        data = make_expense(vendor=None).to_storage_dict()
        assert "vendor" not in data
        assert "updatedAt" not in data
        assert "createdAt" in data
        assert data["category"] == "Other"

    def test_has_vendor_ignores_blank(self, make_expense):
        """Whitespace-only vendors do not count."""
        assert make_expense(vendor="  ").has_vendor is False
        assert make_expense(vendor="Shop").has_vendor is True


class TestFormData:
    """Tests for the entry form model."""

    def test_defaults(self):
        """A blank form defaults to Food with empty text."""
        form = ExpenseFormData()
        assert form.category == ExpenseCategory.FOOD
        assert form.amount == ""

    def test_from_expense_renders_amount_as_text(self, make_expense):
        """Edit mode pre-fills the amount as typed text."""
        assert ExpenseFormData.from_expense(make_expense(amount=50)).amount == "50"
        assert ExpenseFormData.from_expense(make_expense(amount=12.5)).amount == "12.5"


class TestFilters:
    """Tests for filter criteria."""

    def test_all_sentinel_is_kept(self):
        assert ExpenseFilters(category="All").category == "All"

    def test_enum_category_is_normalized(self):
        assert ExpenseFilters(category=ExpenseCategory.BILLS).category == "Bills"

    def test_empty_category_means_no_filter(self):
        assert ExpenseFilters(category="").category is None

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            ExpenseFilters(category="Travel")

    def test_aliases_accepted(self):
        """Criteria may be given with camelCase keys."""
        filters = ExpenseFilters.model_validate({"dateFrom": "2024-01-01", "searchTerm": "x"})
        assert filters.date_from == "2024-01-01"
        assert filters.search_term == "x"


class TestSummaryModels:
    """Tests for derived summary views."""

    def test_breakdown_defaults_to_all_categories(self):
        summary = ExpenseSummary()
        assert list(summary.category_breakdown) == list(ExpenseCategory)
        assert all(value == 0 for value in summary.category_breakdown.values())

    def test_breakdown_missing_category_rejected(self):
        breakdown = empty_breakdown()
        del breakdown[ExpenseCategory.OTHER]
        with pytest.raises(ValidationError, match="missing categories"):
            ExpenseSummary(category_breakdown=breakdown)


class TestTimestamps:
    """Tests for timestamp helpers."""

    def test_isoformat_utc_uses_milliseconds_and_z(self):
        dt = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        assert isoformat_utc(dt) == "2024-01-15T12:00:00.000Z"

    def test_parse_datetime_handles_plain_dates(self):
        assert parse_datetime("2024-01-15") == datetime(2024, 1, 15, tzinfo=timezone.utc)

    def test_parse_datetime_handles_z_suffix(self):
        parsed = parse_datetime("2024-01-15T12:00:00.000Z")
        assert parsed.hour == 12
        assert parsed.tzinfo is not None

    def test_parse_datetime_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_datetime("yesterday")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            description="Expense added",
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            description="CSV export generated",
            details={"format": "csv", "record_count": 3},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "export_generated"
        assert log_dict["details"]["record_count"] == 3

    def test_builder_storage_write_failed_is_error(self):
        """Write failures are logged at error severity."""
        event = AuditEventBuilder.storage_write_failed("k", "quota exceeded", 4)
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "quota exceeded"
        assert event.details["record_count"] == 4

    def test_builder_delete_unknown_is_warning(self):
        event = AuditEventBuilder.expense_deleted("missing", found=False)
        assert event.severity == AuditSeverity.WARNING
        assert event.entity_id == "missing"


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Amount is required",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1
        assert result.field_errors == {"amount": "Amount is required"}

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message="Date in future",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0
        assert result.field_errors == {}


class TestCategories:
    """Tests for the category enum."""

    def test_canonical_order(self):
        assert [c.value for c in ExpenseCategory] == [
            "Food", "Transportation", "Entertainment", "Shopping", "Bills", "Other",
        ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
