"""
Filter & Sort Engine

Pure functions mapping (records, criteria) to an ordered subset. Nothing
here reads storage or the clock; callers pass the collection in.

Filtering and sorting are separate steps. Filtering preserves the relative
order of its input; sorting is stable, so equal keys keep their filtered
order in both directions.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any, Optional, Union

from expense_tracker.models.expense import (
    ALL_CATEGORIES,
    Expense,
    ExpenseFilters,
    SortField,
    SortOrder,
    parse_datetime,
)


FilterCriteria = Union[ExpenseFilters, Mapping[str, Any], None]

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def coerce_filters(criteria: FilterCriteria) -> ExpenseFilters:
    """Accept an ExpenseFilters, a plain mapping (camelCase or snake_case), or None."""
    if criteria is None:
        return ExpenseFilters()
    if isinstance(criteria, ExpenseFilters):
        return criteria
    return ExpenseFilters.model_validate(dict(criteria))


def matches_filters(expense: Expense, filters: ExpenseFilters) -> bool:
    """True if the expense satisfies every criterion."""
    if (
        filters.category
        and filters.category != ALL_CATEGORIES
        and expense.category.value != filters.category
    ):
        return False

    if filters.categories and expense.category not in filters.categories:
        return False

    # Dates are fixed-width YYYY-MM-DD, so string order is date order.
    if filters.date_from and expense.date < filters.date_from:
        return False

    if filters.date_to and expense.date > filters.date_to:
        return False

    if filters.search_term:
        search_lower = filters.search_term.lower()
        matches_description = search_lower in expense.description.lower()
        matches_category = search_lower in expense.category.value.lower()
        if not matches_description and not matches_category:
            return False

    return True


def filter_expenses(
    expenses: Iterable[Expense],
    criteria: FilterCriteria = None,
) -> list[Expense]:
    """
    Return the expenses matching all criteria, in input order.

    Filtering is idempotent: applying the same criteria to the result
    returns the result unchanged.
    """
    filters = coerce_filters(criteria)
    return [expense for expense in expenses if matches_filters(expense, filters)]


def expense_datetime(expense: Expense) -> datetime:
    """Parsed expense date; unparseable dates sort as the earliest."""
    try:
        return parse_datetime(expense.date)
    except ValueError:
        return _EARLIEST


def _sort_key(sort_by: SortField):
    if sort_by == SortField.DATE:
        return expense_datetime
    if sort_by == SortField.AMOUNT:
        return lambda expense: expense.amount
    return lambda expense: expense.category.value


def sort_expenses(
    expenses: Iterable[Expense],
    sort_by: Union[SortField, str] = SortField.DATE,
    order: Union[SortOrder, str] = SortOrder.DESC,
) -> list[Expense]:
    """
    Return the expenses ordered by date, amount or category.

    Date ordering compares parsed dates, not strings. The sort is stable:
    ties keep their input order for both ascending and descending.
    """
    sort_by = SortField(sort_by)
    order = SortOrder(order)
    return sorted(
        expenses,
        key=_sort_key(sort_by),
        reverse=order == SortOrder.DESC,
    )


def apply_filters_and_sort(
    expenses: Iterable[Expense],
    criteria: FilterCriteria = None,
    sort_by: Union[SortField, str] = SortField.DATE,
    order: Union[SortOrder, str] = SortOrder.DESC,
) -> list[Expense]:
    """Filter, then sort. Defaults give the expense list's newest-first view."""
    return sort_expenses(filter_expenses(expenses, criteria), sort_by, order)


def recent_expenses(
    expenses: Iterable[Expense],
    limit: Optional[int] = 5,
) -> list[Expense]:
    """Most recently created expenses first."""

    def created(expense: Expense) -> datetime:
        try:
            return parse_datetime(expense.created_at)
        except ValueError:
            return _EARLIEST

    ordered = sorted(expenses, key=created, reverse=True)
    return ordered if limit is None else ordered[:limit]
