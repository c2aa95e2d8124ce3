"""
Data Models Package

This package contains all Pydantic models used in the expense tracker core.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.expense import (
    ALL_CATEGORIES,
    CategoryShare,
    CategoryStat,
    Expense,
    ExpenseCategory,
    ExpenseFilters,
    ExpenseFormData,
    ExpenseSummary,
    MonthlyData,
    MonthlyInsights,
    SortField,
    SortOrder,
    ValidationIssue,
    ValidationResult,
    VendorStat,
    YearlyComparison,
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

__all__ = [
    # Expense models
    "ALL_CATEGORIES",
    "CategoryShare",
    "CategoryStat",
    "Expense",
    "ExpenseCategory",
    "ExpenseFilters",
    "ExpenseFormData",
    "ExpenseSummary",
    "MonthlyData",
    "MonthlyInsights",
    "SortField",
    "SortOrder",
    "ValidationIssue",
    "ValidationResult",
    "VendorStat",
    "YearlyComparison",
    "empty_breakdown",
    "isoformat_utc",
    "parse_datetime",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
