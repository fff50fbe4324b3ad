"""Client-side aggregation over a fetched set of expenses.

Pure functions: no I/O, no state, never raise. Records that cannot be used
(unknown category, missing or non-positive amount, bad timestamp) are
skipped and the aggregate is computed from what remains.
"""

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from fintrack.core.dates import parse_calendar_date
from fintrack.schemas.analytics import (
    CategorySpend,
    CategorySpendSummary,
    DailySpend,
    TotalsSummary,
)
from fintrack.schemas.category import Category
from fintrack.schemas.expense import OUTFLOW_TYPES, SPEND_TYPES, Expense

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


def _coerce(items: Iterable[Any], model: type[ModelT]) -> list[ModelT]:
    """Accept models or raw dicts; drop entries that do not validate."""
    result = []
    for item in items or ():
        if isinstance(item, model):
            result.append(item)
            continue
        if not isinstance(item, Mapping):
            continue
        try:
            result.append(model.model_validate(item))
        except ValidationError:
            logger.debug("aggregation_item_skipped", model=model.__name__)
    return result


def _spend_amount(expense: Expense) -> Decimal | None:
    """Amount of a spend-eligible expense, or None when it does not count."""
    if expense.amount is None or not expense.amount.is_finite() or expense.amount <= 0:
        return None
    if expense.type not in SPEND_TYPES:
        return None
    return expense.amount


def category_spending(
    expenses: Iterable[Expense | Mapping],
    categories: Iterable[Category | Mapping],
) -> list[CategorySpend]:
    """Need + Want totals per category, largest first.

    Categories with no spending are left out. Expenses whose category is not
    in ``categories`` are dropped, not bucketed elsewhere.
    """
    totals: dict[str, CategorySpend] = {}
    for category in _coerce(categories, Category):
        if not category.id or not category.name:
            logger.warning("category_missing_id_or_name")
            continue
        totals[category.id] = CategorySpend(
            category_id=category.id, name=category.name, total=Decimal("0")
        )

    for expense in _coerce(expenses, Expense):
        if not expense.category_id:
            continue
        amount = _spend_amount(expense)
        if amount is None:
            continue
        entry = totals.get(expense.category_id)
        if entry is None:
            logger.warning("expense_category_not_found", category_id=expense.category_id)
            continue
        entry.total += amount

    # sorted() is stable: ties keep category order
    return sorted(
        (entry for entry in totals.values() if entry.total > 0),
        key=lambda entry: entry.total,
        reverse=True,
    )


def total_spending(entries: Iterable[CategorySpend]) -> Decimal:
    """Sum of the charted slices (not of the raw expenses)."""
    return sum((entry.total for entry in entries), Decimal("0"))


def daily_spending(expenses: Iterable[Expense | Mapping]) -> list[DailySpend]:
    """Need + Want totals per calendar day, oldest first.

    The day is the ``YYYY-MM-DD`` prefix of the timestamp as sent by the
    server.
    """
    buckets: dict[str, Decimal] = {}
    days: dict[str, date] = {}
    for expense in _coerce(expenses, Expense):
        if not expense.timestamp:
            continue
        amount = _spend_amount(expense)
        if amount is None:
            continue
        key = expense.timestamp[:10]
        day = days.get(key) or parse_calendar_date(key)
        if day is None:
            continue
        days[key] = day
        buckets[key] = buckets.get(key, Decimal("0")) + amount

    return [
        DailySpend(date=key, total_amount=buckets[key])
        for key in sorted(buckets, key=days.__getitem__)
    ]


def has_trend(series: list[DailySpend]) -> bool:
    """A trend needs at least two days; fewer is valid but not chartable."""
    return len(series) >= 2


def summarize_totals(expenses: Iterable[Expense | Mapping]) -> TotalsSummary:
    """Income, spending (Need + Want) and investment totals."""
    summary = TotalsSummary()
    for expense in _coerce(expenses, Expense):
        if expense.amount is None or not expense.amount.is_finite():
            continue
        if expense.type == "Income":
            summary.income += expense.amount
        elif expense.type == "Investment":
            summary.investment += expense.amount
        elif expense.type in SPEND_TYPES:
            summary.expense += expense.amount
    return summary


def filter_for_type(items: Iterable[ModelT], expense_type: str) -> list[ModelT]:
    """Categories or payment methods usable with an expense of ``expense_type``."""
    want_expense_side = expense_type in OUTFLOW_TYPES
    return [item for item in items if getattr(item, "is_expense", True) == want_expense_side]


def partition_summaries(
    rows: Iterable[CategorySpendSummary],
    categories: Iterable[Category | Mapping] = (),
) -> tuple[list[CategorySpendSummary], list[CategorySpendSummary]]:
    """Split average-spend rows into (expense rows, income rows).

    A row keeps the ``is_expense`` flag the server sent; otherwise it takes
    the flag of its category, defaulting to the expense side. Amounts are
    not touched.
    """
    flags = {category.id: category.is_expense for category in _coerce(categories, Category)}
    expense_rows: list[CategorySpendSummary] = []
    income_rows: list[CategorySpendSummary] = []
    for row in rows:
        if row.is_expense is None:
            row = row.model_copy(update={"is_expense": flags.get(row.category_id, True)})
        (expense_rows if row.is_expense else income_rows).append(row)
    return expense_rows, income_rows
