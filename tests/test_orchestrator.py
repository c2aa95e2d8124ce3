"""Integration tests for the ExpenseTracker facade."""

import json
import pytest
from datetime import date

from expense_tracker.config import Settings
from expense_tracker.exceptions import ExpenseValidationError
from expense_tracker.export import ExportService
from expense_tracker.models.audit import AuditEventType
from expense_tracker.models.expense import ExpenseCategory, ExpenseFormData
from expense_tracker.orchestrator import ExpenseTracker, create_app_components
from expense_tracker.services.storage import InMemoryKeyValueStore
from expense_tracker.validation import ExpenseValidator


@pytest.fixture
def tracker(storage, audit_logger, clock):
    return ExpenseTracker(
        storage=storage,
        validator=ExpenseValidator(min_description_length=3),
        export_service=ExportService(audit_logger=audit_logger),
        audit_logger=audit_logger,
        clock=clock,
    )


def form(amount="50", category=ExpenseCategory.FOOD, description="Lunch", date="2024-01-15", vendor=None):
    return ExpenseFormData(
        amount=amount,
        category=category,
        description=description,
        date=date,
        vendor=vendor,
    )


class TestEntryFlow:
    """Tests for adding, editing and deleting expenses."""

    def test_add_persists(self, tracker):
        expense = tracker.add_expense(form())
        assert tracker.storage.get_all() == [expense]
        assert expense.created_at == "2024-01-31T09:30:00.000Z"

    def test_invalid_form_is_not_saved(self, tracker, audit_logger):
        with pytest.raises(ExpenseValidationError) as exc_info:
            tracker.add_expense(form(amount="-1", description="x"))

        assert exc_info.value.result.field_errors == {
            "amount": "Amount must be a positive number",
            "description": "Description must be at least 3 characters",
        }
        assert tracker.storage.get_all() == []
        assert audit_logger.recent_events[-1].event_type == AuditEventType.VALIDATION_FAILED

    def test_update(self, tracker):
        expense = tracker.add_expense(form(vendor="Cafe"))
        updated = tracker.update_expense(expense.id, form(amount="75", vendor=""))

        assert updated.id == expense.id
        assert updated.amount == 75
        assert updated.vendor is None
        assert updated.updated_at == "2024-01-31T09:30:00.000Z"

    def test_update_unknown_id(self, tracker):
        assert tracker.update_expense("missing", form()) is None

    def test_delete_and_clear(self, tracker):
        first = tracker.add_expense(form())
        tracker.add_expense(form(description="Dinner"))

        assert tracker.delete_expense(first.id) is True
        assert [e.description for e in tracker.list_expenses()] == ["Dinner"]
        assert tracker.clear() is True
        assert tracker.list_expenses() == []


class TestReadFlows:
    """Tests for browsing, insights and export."""

    @pytest.fixture
    def loaded(self, tracker, storage, sample_expenses):
        storage.save_all(sample_expenses)
        return tracker

    def test_list_filters_and_sorts(self, loaded):
        result = loaded.list_expenses({"category": "Food"}, sort_by="amount", order="asc")
        assert [e.id for e in result] == ["1", "2"]

    def test_recent(self, loaded):
        assert [e.id for e in loaded.recent(limit=1)] == ["2"]

    def test_summary_uses_clock(self, loaded):
        summary = loaded.summary()
        assert summary.total_spending == 180
        assert summary.monthly_spending == 180
        assert summary.top_category == ExpenseCategory.FOOD

    def test_insight_views(self, loaded):
        assert loaded.category_stats()[0].category == ExpenseCategory.FOOD
        assert [v.vendor for v in loaded.vendor_stats()] == ["Market", "Cafe Roma"]
        assert [m.month for m in loaded.monthly_breakdown()] == ["January"]
        assert loaded.yearly_comparison().current_year_total == 180
        assert loaded.available_years() == [2024]
        assert loaded.monthly_insights().days_with_expenses == 3

    def test_export_filtered_csv(self, loaded):
        artifact = loaded.export("csv", {"category": "Transportation"})
        assert artifact.filename == "expenses-2024-01-31.csv"
        assert artifact.content == 'Date,Amount,Category,Description\n2024-01-10,30,Transportation,"Bus pass"'

    def test_export_json_uses_clock(self, loaded):
        payload = json.loads(loaded.export("json").content)
        assert payload["exportDate"] == "2024-01-31T09:30:00.000Z"
        assert payload["totalRecords"] == 3

    def test_export_given_date(self, loaded):
        artifact = loaded.export("json", today=date(2024, 3, 1))
        assert artifact.filename == "expenses-2024-03-01.json"


class TestFactory:
    """Tests for create_app_components."""

    def test_builds_tracker_over_given_store(self):
        store = InMemoryKeyValueStore()
        tracker = create_app_components(Settings(), store=store)

        tracker.add_expense(form())
        assert store.keys() == ["expense-tracker-data"]

    def test_memory_backend_from_environment(self, monkeypatch):
        monkeypatch.setenv("EXPENSE_TRACKER_STORAGE_BACKEND", "memory")
        tracker = create_app_components(Settings())
        assert tracker.list_expenses() == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
