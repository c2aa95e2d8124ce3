"""
Main Orchestrator for the Expense Tracker

This module ties together storage, validation, queries and export, and
defines the end-to-end flows a UI or CLI drives:
1. Entry (form -> validate -> build record -> persist)
2. Browse (load -> filter -> sort)
3. Insights (load -> aggregate)
4. Export (load -> filter -> serialize)

DESIGN DECISION: The orchestrator enforces the boundaries:
- No record is persisted unless its form data passed validation
- Storage failures are absorbed by the gateway and audited, never raised
- "Now" comes from one injected clock, so every flow is reproducible

This is the "glue"; the components it calls stay usable on their own.
"""

from datetime import date, datetime, timezone
from typing import Callable, Optional, Union

from expense_tracker.audit import AuditLogger, configure_logging, get_audit_logger
from expense_tracker.config import Settings, get_settings
from expense_tracker.exceptions import ExpenseValidationError
from expense_tracker.export import ExportArtifact, ExportFormat, ExportService
from expense_tracker.models.expense import (
    CategoryStat,
    Expense,
    ExpenseFormData,
    ExpenseSummary,
    MonthlyData,
    MonthlyInsights,
    SortField,
    SortOrder,
    VendorStat,
    YearlyComparison,
)
from expense_tracker.queries import (
    apply_filters_and_sort,
    available_years,
    calculate_expense_summary,
    category_stats,
    filter_expenses,
    monthly_breakdown,
    monthly_insights,
    recent_expenses,
    vendor_stats,
    yearly_comparison,
)
from expense_tracker.queries.filters import FilterCriteria
from expense_tracker.services.storage import (
    ExpenseStorage,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)
from expense_tracker.validation import ExpenseValidator, build_expense


Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExpenseTracker:
    """
    Facade over the expense tracker core.

    Every read loads the full collection from storage; the collection is
    small and the store is the single source of truth.
    """

    def __init__(
        self,
        storage: ExpenseStorage,
        validator: Optional[ExpenseValidator] = None,
        export_service: Optional[ExportService] = None,
        audit_logger: Optional[AuditLogger] = None,
        recent_limit: int = 5,
        clock: Clock = _utcnow,
    ):
        self._storage = storage
        self._audit = audit_logger or get_audit_logger()
        self._validator = validator or ExpenseValidator()
        self._export_service = export_service or ExportService(audit_logger=self._audit)
        self._recent_limit = recent_limit
        self._clock = clock

    @property
    def storage(self) -> ExpenseStorage:
        return self._storage

    def _today(self) -> date:
        return self._clock().date()

    def _validated(self, form: ExpenseFormData) -> None:
        result = self._validator.validate(form)
        if not result.is_valid:
            self._audit.log_validation_failed(result.field_errors)
            raise ExpenseValidationError(result)

    # =========================================================================
    # ENTRY
    # =========================================================================

    def add_expense(self, form: ExpenseFormData) -> Expense:
        """
        Validate form data and persist a new expense.

        Raises:
            ExpenseValidationError: The form has errors; nothing is saved
        """
        self._validated(form)
        expense = build_expense(form, now=self._clock())
        self._storage.add(expense)
        return expense

    def update_expense(self, expense_id: str, form: ExpenseFormData) -> Optional[Expense]:
        """
        Validate form data and apply it to an existing expense.

        Returns:
            The updated expense, or None if the id is unknown or the write failed

        Raises:
            ExpenseValidationError: The form has errors; nothing is saved
        """
        self._validated(form)
        changes = build_expense(form, now=self._clock()).model_dump(
            include={"amount", "category", "description", "vendor", "date"}
        )
        return self._storage.update(expense_id, changes)

    def delete_expense(self, expense_id: str) -> bool:
        return self._storage.delete(expense_id)

    def clear(self) -> bool:
        return self._storage.clear()

    # =========================================================================
    # BROWSE
    # =========================================================================

    def list_expenses(
        self,
        filters: FilterCriteria = None,
        sort_by: Union[SortField, str] = SortField.DATE,
        order: Union[SortOrder, str] = SortOrder.DESC,
    ) -> list[Expense]:
        """Filtered and sorted expense list (newest first by default)."""
        return apply_filters_and_sort(self._storage.get_all(), filters, sort_by, order)

    def recent(self, limit: Optional[int] = None) -> list[Expense]:
        """Most recently created expenses."""
        return recent_expenses(self._storage.get_all(), limit or self._recent_limit)

    # =========================================================================
    # INSIGHTS
    # =========================================================================

    def summary(self, as_of: Optional[date] = None) -> ExpenseSummary:
        return calculate_expense_summary(self._storage.get_all(), as_of=as_of or self._today())

    def category_stats(self) -> list[CategoryStat]:
        return category_stats(self._storage.get_all())

    def vendor_stats(self) -> list[VendorStat]:
        return vendor_stats(self._storage.get_all())

    def monthly_breakdown(self, year: Optional[int] = None) -> list[MonthlyData]:
        return monthly_breakdown(self._storage.get_all(), year or self._today().year)

    def yearly_comparison(self, current_year: Optional[int] = None) -> YearlyComparison:
        return yearly_comparison(
            self._storage.get_all(), current_year or self._today().year
        )

    def available_years(self) -> list[int]:
        return available_years(self._storage.get_all())

    def monthly_insights(self, as_of: Optional[date] = None) -> MonthlyInsights:
        return monthly_insights(self._storage.get_all(), as_of=as_of or self._today())

    # =========================================================================
    # EXPORT
    # =========================================================================

    def export(
        self,
        fmt: Union[ExportFormat, str],
        filters: FilterCriteria = None,
        *,
        today: Optional[date] = None,
    ) -> ExportArtifact:
        """Export the expenses matching `filters`, in stored order."""
        records = filter_expenses(self._storage.get_all(), filters)
        return self._export_service.export(
            records,
            fmt,
            today=today or self._today(),
            exported_at=self._clock(),
        )


# =============================================================================
# FACTORY FUNCTION
# =============================================================================

def create_store(settings: Settings) -> KeyValueStore:
    """Build the configured key-value store backend."""
    storage_settings = settings.storage
    if storage_settings.backend == "memory":
        return InMemoryKeyValueStore(quota_bytes=storage_settings.quota_bytes)
    return JsonFileKeyValueStore(storage_settings.data_dir)


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
) -> ExpenseTracker:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to get_settings()
        store: Explicit key-value store, overriding the configured backend.
               Pass an InMemoryKeyValueStore for testing.

    Returns:
        A wired ExpenseTracker
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level)

    audit_logger = AuditLogger(history_size=app_settings.audit_history_size)
    storage = ExpenseStorage(
        store or create_store(settings),
        key=settings.storage.key,
        audit_logger=audit_logger,
    )

    return ExpenseTracker(
        storage=storage,
        validator=ExpenseValidator(app_settings.min_description_length),
        export_service=ExportService(settings.export, audit_logger=audit_logger),
        audit_logger=audit_logger,
        recent_limit=app_settings.recent_expenses_limit,
    )
