"""Tests for the filter & sort engine."""

import pytest

from expense_tracker.models.expense import ExpenseCategory, ExpenseFilters, SortField, SortOrder
from expense_tracker.queries import (
    apply_filters_and_sort,
    filter_expenses,
    recent_expenses,
    sort_expenses,
)


def ids(expenses):
    return [expense.id for expense in expenses]


class TestFilterExpenses:
    """Tests for filter_expenses."""

    def test_no_criteria_returns_everything(self, sample_expenses):
        assert ids(filter_expenses(sample_expenses)) == ["1", "2", "3"]

    def test_category_filter(self, sample_expenses):
        """Only records of the requested category, in input order."""
        result = filter_expenses(sample_expenses, {"category": "Food"})
        assert ids(result) == ["1", "2"]

    def test_all_category_does_not_restrict(self, sample_expenses):
        result = filter_expenses(sample_expenses, ExpenseFilters(category="All"))
        assert len(result) == 3

    def test_multi_category_filter(self, sample_expenses):
        filters = ExpenseFilters(categories=[ExpenseCategory.TRANSPORTATION, ExpenseCategory.BILLS])
        assert ids(filter_expenses(sample_expenses, filters)) == ["3"]

    def test_date_range_is_inclusive(self, sample_expenses):
        filters = {"dateFrom": "2024-01-10", "dateTo": "2024-01-15"}
        assert ids(filter_expenses(sample_expenses, filters)) == ["1", "3"]

    def test_search_is_case_insensitive_on_description(self, sample_expenses):
        result = filter_expenses(sample_expenses, {"searchTerm": "LUNCH"})
        assert ids(result) == ["1"]

    def test_search_matches_category_name(self, sample_expenses):
        result = filter_expenses(sample_expenses, {"search_term": "transport"})
        assert ids(result) == ["3"]

    def test_search_does_not_match_vendor(self, sample_expenses):
        assert filter_expenses(sample_expenses, {"searchTerm": "roma"}) == []

    def test_criteria_are_combined_with_and(self, sample_expenses):
        filters = {"category": "Food", "dateFrom": "2024-01-16"}
        assert ids(filter_expenses(sample_expenses, filters)) == ["2"]

    def test_filtering_is_idempotent(self, sample_expenses):
        filters = {"category": "Food", "searchTerm": "o"}
        once = filter_expenses(sample_expenses, filters)
        assert filter_expenses(once, filters) == once

    def test_result_is_subset(self, sample_expenses):
        result = filter_expenses(sample_expenses, {"searchTerm": "s"})
        assert all(expense in sample_expenses for expense in result)

    def test_unknown_category_rejected(self, sample_expenses):
        with pytest.raises(ValueError):
            filter_expenses(sample_expenses, {"category": "Travel"})


class TestSortExpenses:
    """Tests for sort_expenses."""

    def test_default_is_newest_first(self, sample_expenses):
        assert ids(sort_expenses(sample_expenses)) == ["2", "1", "3"]

    def test_date_ascending(self, sample_expenses):
        result = sort_expenses(sample_expenses, SortField.DATE, SortOrder.ASC)
        assert ids(result) == ["3", "1", "2"]

    def test_dates_compare_as_instants_not_text(self, make_expense):
        """A timestamped date late on the 15th in UTC-5 falls on the 16th in UTC."""
        expenses = [
            make_expense(id="late", date="2024-01-15T23:00:00-05:00"),
            make_expense(id="next-day", date="2024-01-16"),
            make_expense(id="early", date="2024-01-15"),
        ]
        assert ids(sort_expenses(expenses, "date", "desc")) == ["late", "next-day", "early"]
        assert ids(sort_expenses(expenses, "date", "asc")) == ["early", "next-day", "late"]

    def test_amount_accepts_plain_strings(self, sample_expenses):
        assert ids(sort_expenses(sample_expenses, "amount", "asc")) == ["3", "1", "2"]

    def test_category_sort_is_lexicographic(self, sample_expenses):
        result = sort_expenses(sample_expenses, SortField.CATEGORY, SortOrder.DESC)
        assert ids(result) == ["3", "1", "2"]

    def test_ties_keep_input_order_both_directions(self, make_expense):
        expenses = [
            make_expense(id="a", amount=5),
            make_expense(id="b", amount=5),
            make_expense(id="c", amount=1),
        ]
        assert ids(sort_expenses(expenses, "amount", "desc")) == ["a", "b", "c"]
        assert ids(sort_expenses(expenses, "amount", "asc")) == ["c", "a", "b"]

    def test_sort_is_a_permutation(self, sample_expenses):
        result = sort_expenses(sample_expenses, "amount", "desc")
        assert sorted(ids(result)) == sorted(ids(sample_expenses))

    def test_input_is_not_mutated(self, sample_expenses):
        sort_expenses(sample_expenses, "amount", "desc")
        assert ids(sample_expenses) == ["1", "2", "3"]

    def test_unknown_sort_field_rejected(self, sample_expenses):
        with pytest.raises(ValueError):
            sort_expenses(sample_expenses, "vendor")


class TestCombinedViews:
    """Tests for apply_filters_and_sort and recent_expenses."""

    def test_filter_then_sort(self, sample_expenses):
        result = apply_filters_and_sort(sample_expenses, {"category": "Food"})
        assert ids(result) == ["2", "1"]

    def test_recent_expenses_orders_by_creation(self, sample_expenses):
        assert ids(recent_expenses(sample_expenses, limit=2)) == ["2", "1"]

    def test_recent_expenses_without_limit(self, sample_expenses):
        assert len(recent_expenses(sample_expenses, limit=None)) == 3


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
