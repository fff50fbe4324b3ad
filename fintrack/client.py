"""FinanceClient: one session with every API client wired on it."""

import asyncio
from datetime import date, datetime, timezone
from typing import Any

import httpx
import structlog

from fintrack.config import settings
from fintrack.core.credentials import CredentialContext
from fintrack.core.dates import normalize_boundary
from fintrack.core.exceptions import ApiError, UnauthorizedError
from fintrack.core.http import ApiClient
from fintrack.schemas.analytics import DashboardSummary, RangeFetchResult
from fintrack.schemas.common import ListResponse
from fintrack.schemas.expense import ExpenseFilters
from fintrack.services.aggregation import summarize_totals
from fintrack.services.analytics_service import AnalyticsService
from fintrack.services.auth_service import AuthService
from fintrack.services.category_service import CategoryService
from fintrack.services.expense_fetcher import count_expenses, fetch_all_expenses
from fintrack.services.expense_service import ExpenseService
from fintrack.services.payment_method_service import PaymentMethodService
from fintrack.services.periods import resolve_period

logger = structlog.get_logger()

DASHBOARD_READS = ("recent_expenses", "month_expenses", "categories", "payment_methods")


class FinanceClient:
    """Entry point used by the UI layer.

    Usage::

        async with FinanceClient("https://finance.example.com") as client:
            await client.auth.login(email, password)
            result = await client.fetch_range("2024-01-01", "2024-01-31")
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        credentials: CredentialContext | None = None,
        page_size: int | None = None,
    ) -> None:
        self.api = ApiClient(base_url, client=http_client)
        self.credentials = credentials or CredentialContext()
        self.page_size = settings.fetch_page_size if page_size is None else page_size

        self.auth = AuthService(self.api, self.credentials)
        self.categories = CategoryService(self.api, self.credentials)
        self.payment_methods = PaymentMethodService(self.api, self.credentials)
        self.expenses = ExpenseService(self.api, self.credentials)
        self.analytics = AnalyticsService(self.api, self.credentials)

    async def fetch_range(
        self,
        start_date: str | date,
        end_date: str | date,
        filters: ExpenseFilters | None = None,
    ) -> RangeFetchResult:
        """Every expense in the range, for charting."""
        return await fetch_all_expenses(
            self.expenses, start_date, end_date, self.page_size, filters
        )

    async def fetch_period(self, period: str, today: date | None = None) -> RangeFetchResult:
        start, end = resolve_period(period, today)
        return await self.fetch_range(start, end)

    async def count_expenses(self, filters: ExpenseFilters | None = None) -> int:
        return await count_expenses(self.expenses, filters, self.page_size)

    async def dashboard(self, today: date | None = None) -> DashboardSummary:
        """Recent expenses, this month's totals and collection sizes.

        The four reads are independent and run concurrently. The month query
        ends at 23:59:59.999 UTC of its last day. A read that fails counts as
        empty; ``UnauthorizedError`` still propagates.
        """
        today = today or datetime.now(timezone.utc).date()
        month_start, month_end = resolve_period("this_month", today)
        results = await asyncio.gather(
            self.expenses.list(limit=settings.recent_expenses_limit),
            self.expenses.list(
                start_date=month_start,
                end_date=normalize_boundary(month_end, end=True),
                limit=self.page_size,
            ),
            self.categories.list(),
            self.payment_methods.list(),
            return_exceptions=True,
        )
        recent, month, categories, payment_methods = (
            self._read_or_empty(name, result)
            for name, result in zip(DASHBOARD_READS, results)
        )
        return DashboardSummary(
            recent_expenses=recent.items,
            month_totals=summarize_totals(month.items),
            categories_count=len(categories.items),
            payment_methods_count=len(payment_methods.items),
        )

    @staticmethod
    def _read_or_empty(name: str, result: Any) -> ListResponse:
        if not isinstance(result, BaseException):
            return result
        if isinstance(result, UnauthorizedError) or not isinstance(result, ApiError):
            raise result
        logger.warning("dashboard_read_failed", read=name, error=result.detail)
        return ListResponse(items=[], total=0)

    async def aclose(self) -> None:
        await self.api.aclose()

    async def __aenter__(self) -> "FinanceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
