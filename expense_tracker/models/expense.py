"""
Core Data Models for the Expense Tracker

These models define the schemas for all data flowing through the core:
1. The persisted expense record
2. Entry-form data and its validation result
3. Filter and sort criteria
4. Derived summary views

DESIGN DECISION: Only `Expense` is persisted. It serializes with camelCase
keys (createdAt, updatedAt) so the stored blob keeps the same shape the
browser client wrote. Every other model is a derived, in-memory view.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    Declaration order is the canonical category order. Breakdown maps are
    built by iterating this enum, and top-category ties resolve to the
    first category in this order.
    """
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    OTHER = "Other"


ALL_CATEGORIES = "All"


class SortField(str, Enum):
    """Keys the expense list can be sorted by."""
    DATE = "date"
    AMOUNT = "amount"
    CATEGORY = "category"


class SortOrder(str, Enum):
    """Sort direction."""
    ASC = "asc"
    DESC = "desc"


# =============================================================================
# TIMESTAMP HELPERS
# =============================================================================

def isoformat_utc(dt: datetime) -> str:
    """
    Render a datetime as a UTC ISO-8601 string with millisecond precision.

    Matches the browser's Date.toISOString(), e.g. 2024-01-15T12:00:00.000Z.
    Naive datetimes are treated as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_datetime(value: str) -> datetime:
    """
    Parse an ISO date or timestamp into a UTC-aware datetime.

    Accepts `YYYY-MM-DD` (midnight UTC) as well as full timestamps with an
    optional trailing Z. Raises ValueError for anything else.
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class Expense(BaseModel):
    """
    A single recorded expense.

    The storage and aggregation layers do not re-validate entry rules
    (positive amount, description length); those are enforced by
    ExpenseValidator before a record is created.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier, immutable"
    )
    amount: float = Field(
        ...,
        description="Amount in currency units"
    )
    category: ExpenseCategory
    description: str = Field(
        ...,
        description="Free-text description"
    )
    vendor: Optional[str] = Field(
        default=None,
        description="Vendor/merchant name, if known"
    )
    date: str = Field(
        ...,
        description="Date the expense occurred (YYYY-MM-DD)"
    )
    created_at: str = Field(
        ...,
        alias="createdAt",
        description="ISO-8601 creation timestamp"
    )
    updated_at: Optional[str] = Field(
        default=None,
        alias="updatedAt",
        description="ISO-8601 timestamp of the last update"
    )

    @property
    def has_vendor(self) -> bool:
        """True when the vendor is present and not blank."""
        return bool(self.vendor and self.vendor.strip())

    def to_storage_dict(self) -> dict:
        """
        Convert to the JSON-native dict written to the key-value store.

        Unset optional fields are omitted rather than written as null.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ExpenseFormData(BaseModel):
    """
    Raw values entered in the expense form.

    CRITICAL: This is UNVALIDATED input. Amount arrives as text exactly as
    typed. Run it through ExpenseValidator before building an Expense.
    """

    amount: str = ""
    category: ExpenseCategory = ExpenseCategory.FOOD
    description: str = ""
    vendor: Optional[str] = None
    date: str = ""

    @classmethod
    def from_expense(cls, expense: Expense) -> "ExpenseFormData":
        """Pre-fill the form from an existing expense (edit mode)."""
        amount = expense.amount
        return cls(
            amount=str(int(amount)) if float(amount).is_integer() else repr(amount),
            category=expense.category,
            description=expense.description,
            vendor=expense.vendor or "",
            date=expense.date,
        )


# =============================================================================
# FILTER / SORT CRITERIA
# =============================================================================

class ExpenseFilters(BaseModel):
    """
    Filter criteria for the expense list and export dialog.

    All criteria are combined with AND. Omitted or empty values do not
    restrict the result.
    """
    model_config = ConfigDict(populate_by_name=True)

    category: Optional[str] = Field(
        default=None,
        description="Single category, or 'All' for no restriction"
    )
    categories: list[ExpenseCategory] = Field(
        default_factory=list,
        description="Multi-select category restriction (empty = all)"
    )
    date_from: Optional[str] = Field(
        default=None,
        alias="dateFrom",
        description="Inclusive lower date bound (YYYY-MM-DD)"
    )
    date_to: Optional[str] = Field(
        default=None,
        alias="dateTo",
        description="Inclusive upper date bound (YYYY-MM-DD)"
    )
    search_term: Optional[str] = Field(
        default=None,
        alias="searchTerm",
        description="Case-insensitive text matched against description and category"
    )

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v: object) -> Optional[str]:
        """Only the six category labels or the 'All' sentinel are accepted."""
        if isinstance(v, ExpenseCategory):
            return v.value
        if v is None or v == "":
            return None
        if v == ALL_CATEGORIES:
            return ALL_CATEGORIES
        return ExpenseCategory(v).value


# =============================================================================
# SUMMARY VIEWS
# =============================================================================

def empty_breakdown() -> dict[ExpenseCategory, float]:
    """A breakdown with every category initialized to zero."""
    return {category: 0.0 for category in ExpenseCategory}


class _BreakdownModel(BaseModel):
    """Base for views carrying a per-category breakdown."""

    category_breakdown: dict[ExpenseCategory, float] = Field(
        default_factory=empty_breakdown
    )

    @field_validator("category_breakdown")
    @classmethod
    def validate_total_breakdown(
        cls, v: dict[ExpenseCategory, float]
    ) -> dict[ExpenseCategory, float]:
        """Breakdowns must cover all six categories."""
        missing = [category.value for category in ExpenseCategory if category not in v]
        if missing:
            raise ValueError(f"Breakdown is missing categories: {', '.join(missing)}")
        return {category: v[category] for category in ExpenseCategory}


class ExpenseSummary(_BreakdownModel):
    """Dashboard summary of a record collection."""

    total_spending: float = 0.0
    monthly_spending: float = 0.0
    top_category: Optional[ExpenseCategory] = None
    expense_count: int = Field(default=0, ge=0)
    average_expense: float = 0.0


class CategoryStat(BaseModel):
    """Spending statistics for one category."""

    category: ExpenseCategory
    total: float
    count: int = Field(ge=0)
    percentage: float
    average_amount: float


class VendorStat(BaseModel):
    """Spending statistics for one vendor."""

    vendor: str
    total: float
    count: int = Field(ge=0)
    average_amount: float
    percentage: float
    last_purchase: str = Field(
        ...,
        description="Most recent expense date for this vendor"
    )


class MonthlyData(_BreakdownModel):
    """Spending figures for one calendar month."""

    month: str = Field(..., description="Month name, e.g. 'January'")
    month_number: int = Field(..., ge=1, le=12)
    year: int
    total_spending: float
    expense_count: int = Field(ge=0)
    average_expense: float
    top_category: Optional[ExpenseCategory] = None


class YearlyComparison(BaseModel):
    """Year-over-year spending comparison."""

    current_year: int
    previous_year: int
    current_year_total: float
    previous_year_total: float
    percentage_change: float


class CategoryShare(BaseModel):
    """A category's share of a spending total."""

    category: ExpenseCategory
    amount: float
    percentage: float


class MonthlyInsights(BaseModel):
    """Current-month insights: leading categories and activity."""

    year: int
    month: int = Field(ge=1, le=12)
    total_spending: float
    expense_count: int = Field(ge=0)
    top_categories: list[CategoryShare] = Field(default_factory=list)
    days_with_expenses: int = Field(default=0, ge=0)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single field-level validation issue."""

    field: str = Field(
        ...,
        description="Form field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'too_short')"
    )
    message: str = Field(
        ...,
        description="Human-readable message shown next to the field"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating expense form data."""

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def field_errors(self) -> dict[str, str]:
        """First error message per field, for display next to form inputs."""
        errors: dict[str, str] = {}
        for issue in self.issues:
            if issue.severity == "error":
                errors.setdefault(issue.field, issue.message)
        return errors
