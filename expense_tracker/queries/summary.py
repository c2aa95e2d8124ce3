"""
Aggregation Engine

DESIGN DECISION: Aggregation is DETERMINISTIC and PURE.
Every function takes the record collection and, where a notion of "now" is
involved, an explicit reference date. Nothing reads the wall clock, so the
same inputs always give the same outputs.

All views follow one pattern: group by a key, sum `amount`, count, and
compute percentage as group total / grand total * 100. Wherever a
denominator is zero the result is 0, never NaN or an exception.

Ranked views are sorted by total, descending. Sorting is stable, so ties
keep first-encountered order (canonical category order for categories).
"""

import calendar
from collections.abc import Iterable
from datetime import date, datetime
from typing import Optional

from expense_tracker.models.expense import (
    CategoryShare,
    CategoryStat,
    Expense,
    ExpenseCategory,
    ExpenseSummary,
    MonthlyData,
    MonthlyInsights,
    VendorStat,
    YearlyComparison,
    empty_breakdown,
    parse_datetime,
)
from expense_tracker.queries.filters import expense_datetime


# =============================================================================
# PRIMITIVES
# =============================================================================

def _percentage(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def _average(total: float, count: int) -> float:
    return total / count if count > 0 else 0.0


def _total(expenses: Iterable[Expense]) -> float:
    return sum((expense.amount for expense in expenses), 0.0)


def _expense_date(expense: Expense) -> Optional[datetime]:
    """Parsed date, or None when the stored date cannot be parsed."""
    try:
        return parse_datetime(expense.date)
    except ValueError:
        return None


def _in_month(expense: Expense, year: int, month: int) -> bool:
    parsed = _expense_date(expense)
    return parsed is not None and parsed.year == year and parsed.month == month


def _in_year(expense: Expense, year: int) -> bool:
    parsed = _expense_date(expense)
    return parsed is not None and parsed.year == year


# =============================================================================
# CATEGORY BREAKDOWN
# =============================================================================

def category_breakdown(expenses: Iterable[Expense]) -> dict[ExpenseCategory, float]:
    """Summed amount per category; every category present, zero if unused."""
    breakdown = empty_breakdown()
    for expense in expenses:
        breakdown[expense.category] += expense.amount
    return breakdown


def top_category(
    breakdown: dict[ExpenseCategory, float],
) -> Optional[ExpenseCategory]:
    """
    Category with the largest total.

    Returns None when no category has a positive total. Ties go to the
    category that comes first in canonical order.
    """
    best: Optional[ExpenseCategory] = None
    best_amount = 0.0
    for category in ExpenseCategory:
        amount = breakdown.get(category, 0.0)
        if amount > best_amount:
            best, best_amount = category, amount
    return best


def calculate_expense_summary(
    expenses: Iterable[Expense],
    *,
    as_of: date,
) -> ExpenseSummary:
    """
    Dashboard summary of a collection.

    Args:
        expenses: Records to summarize
        as_of: Reference date; monthly spending covers its calendar month

    Returns:
        ExpenseSummary with totals, breakdown, top category and average
    """
    records = list(expenses)
    total_spending = _total(records)
    monthly_spending = _total(
        expense for expense in records if _in_month(expense, as_of.year, as_of.month)
    )
    breakdown = category_breakdown(records)

    return ExpenseSummary(
        total_spending=total_spending,
        monthly_spending=monthly_spending,
        category_breakdown=breakdown,
        top_category=top_category(breakdown),
        expense_count=len(records),
        average_expense=_average(total_spending, len(records)),
    )


# =============================================================================
# RANKED VIEWS
# =============================================================================

def category_stats(expenses: Iterable[Expense]) -> list[CategoryStat]:
    """Per-category totals, counts and shares for all six categories, largest first."""
    totals = empty_breakdown()
    counts = {category: 0 for category in ExpenseCategory}
    for expense in expenses:
        totals[expense.category] += expense.amount
        counts[expense.category] += 1

    grand_total = sum(totals.values(), 0.0)
    stats = [
        CategoryStat(
            category=category,
            total=totals[category],
            count=counts[category],
            percentage=_percentage(totals[category], grand_total),
            average_amount=_average(totals[category], counts[category]),
        )
        for category in ExpenseCategory
    ]
    return sorted(stats, key=lambda stat: stat.total, reverse=True)


def vendor_stats(expenses: Iterable[Expense]) -> list[VendorStat]:
    """
    Per-vendor totals, largest first.

    Only expenses with a non-blank vendor count. Vendors are keyed by their
    trimmed name; percentages are shares of vendor-attributed spending.
    """
    groups: dict[str, list[Expense]] = {}
    for expense in expenses:
        if not expense.has_vendor:
            continue
        groups.setdefault(expense.vendor.strip(), []).append(expense)

    grand_total = sum((_total(group) for group in groups.values()), 0.0)

    stats = []
    for vendor, group in groups.items():
        total = _total(group)
        latest = max(group, key=expense_datetime)
        stats.append(VendorStat(
            vendor=vendor,
            total=total,
            count=len(group),
            average_amount=_average(total, len(group)),
            percentage=_percentage(total, grand_total),
            last_purchase=latest.date,
        ))
    return sorted(stats, key=lambda stat: stat.total, reverse=True)


# =============================================================================
# TIME-BASED VIEWS
# =============================================================================

def monthly_breakdown(expenses: Iterable[Expense], year: int) -> list[MonthlyData]:
    """One entry per month of `year` that has expenses, in calendar order."""
    months: dict[int, list[Expense]] = {}
    for expense in expenses:
        parsed = _expense_date(expense)
        if parsed is None or parsed.year != year:
            continue
        months.setdefault(parsed.month, []).append(expense)

    result = []
    for month_number in sorted(months):
        group = months[month_number]
        total = _total(group)
        breakdown = category_breakdown(group)
        result.append(MonthlyData(
            month=calendar.month_name[month_number],
            month_number=month_number,
            year=year,
            total_spending=total,
            expense_count=len(group),
            average_expense=_average(total, len(group)),
            category_breakdown=breakdown,
            top_category=top_category(breakdown),
        ))
    return result


def yearly_comparison(expenses: Iterable[Expense], current_year: int) -> YearlyComparison:
    """Spending in `current_year` against the year before it."""
    records = list(expenses)
    previous_year = current_year - 1
    current_total = _total(e for e in records if _in_year(e, current_year))
    previous_total = _total(e for e in records if _in_year(e, previous_year))

    return YearlyComparison(
        current_year=current_year,
        previous_year=previous_year,
        current_year_total=current_total,
        previous_year_total=previous_total,
        percentage_change=(
            ((current_total - previous_total) / previous_total) * 100
            if previous_total > 0
            else 0.0
        ),
    )


def available_years(expenses: Iterable[Expense]) -> list[int]:
    """Distinct years that have expenses, newest first."""
    years = {parsed.year for parsed in map(_expense_date, expenses) if parsed is not None}
    return sorted(years, reverse=True)


def monthly_insights(
    expenses: Iterable[Expense],
    *,
    as_of: date,
    limit: int = 3,
) -> MonthlyInsights:
    """Leading categories and active days for the month containing `as_of`."""
    current = [e for e in expenses if _in_month(e, as_of.year, as_of.month)]
    breakdown = category_breakdown(current)
    total = sum(breakdown.values(), 0.0)

    ranked = sorted(
        (item for item in breakdown.items() if item[1] > 0),
        key=lambda item: item[1],
        reverse=True,
    )
    shares = [
        CategoryShare(category=category, amount=amount, percentage=_percentage(amount, total))
        for category, amount in ranked[:limit]
    ]
    active_days = {_expense_date(e).day for e in current}

    return MonthlyInsights(
        year=as_of.year,
        month=as_of.month,
        total_spending=total,
        expense_count=len(current),
        top_categories=shares,
        days_with_expenses=len(active_days),
    )
