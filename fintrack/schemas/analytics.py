"""Analytics schemas."""

from decimal import Decimal

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from fintrack.schemas.expense import Expense


class CategorySpendSummary(BaseModel):
    """Server-computed per-category average for a date range."""

    category_id: str
    category_name: str
    total_amount: Decimal
    expense_count: int
    average_amount: Decimal
    is_expense: bool | None = None  # sent by some servers; filled in client-side otherwise

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "ignore",
        "coerce_numbers_to_str": True,
    }


class CategorySpend(BaseModel):
    """One slice of the category spending chart."""

    category_id: str
    name: str
    total: Decimal


class DailySpend(BaseModel):
    date: str  # YYYY-MM-DD
    total_amount: Decimal


class TotalsSummary(BaseModel):
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")  # Need + Want
    investment: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.income - self.expense - self.investment


class RangeFetchResult(BaseModel):
    """Outcome of a full-range fetch."""

    expenses: list[Expense]
    complete: bool = True
    pages: int = 0
    warning: str | None = None


class DashboardSummary(BaseModel):
    recent_expenses: list[Expense]
    month_totals: TotalsSummary
    categories_count: int
    payment_methods_count: int
