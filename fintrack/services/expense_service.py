"""Expense API client."""

from typing import Any

from fintrack.core.dates import normalize_boundary
from fintrack.schemas.common import ListResponse
from fintrack.schemas.expense import Expense, ExpenseFilters
from fintrack.services.resource_service import ResourceService

DATE_PARAMS = ("startDate", "endDate")


def build_expense_params(filters: ExpenseFilters | None) -> dict[str, Any]:
    """Query parameters for the set filter fields only.

    Calendar dates become UTC midnight instants, for both bounds.
    """
    if filters is None:
        return {}
    params = filters.model_dump(by_alias=True, exclude_none=True)
    for key in DATE_PARAMS:
        if key in params:
            params[key] = normalize_boundary(params[key])
    return params


class ExpenseService(ResourceService[Expense]):
    path = "/api/expenses"
    model = Expense
    singular = "expense"
    plural = "expenses"

    async def list(
        self, filters: ExpenseFilters | None = None, **kwargs: Any
    ) -> ListResponse[Expense]:
        """List expenses matching ``filters`` (or filter keyword arguments)."""
        if kwargs:
            base = filters.model_dump(exclude_none=True) if filters else {}
            filters = ExpenseFilters(**{**base, **kwargs})
        return await self._list(build_expense_params(filters))
