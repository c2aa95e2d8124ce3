"""Filtering, sorting and aggregation over expense collections."""

from expense_tracker.queries.filters import (
    apply_filters_and_sort,
    coerce_filters,
    expense_datetime,
    filter_expenses,
    matches_filters,
    recent_expenses,
    sort_expenses,
)
from expense_tracker.queries.summary import (
    available_years,
    calculate_expense_summary,
    category_breakdown,
    category_stats,
    monthly_breakdown,
    monthly_insights,
    top_category,
    vendor_stats,
    yearly_comparison,
)

__all__ = [
    # Filter & sort
    "apply_filters_and_sort",
    "coerce_filters",
    "expense_datetime",
    "filter_expenses",
    "matches_filters",
    "recent_expenses",
    "sort_expenses",
    # Aggregation
    "available_years",
    "calculate_expense_summary",
    "category_breakdown",
    "category_stats",
    "monthly_breakdown",
    "monthly_insights",
    "top_category",
    "vendor_stats",
    "yearly_comparison",
]
