"""Full-range expense extraction.

Charts need every expense in a window, not one display page, so the list
endpoint is walked with a growing ``skip`` until a short page comes back.
Pages are requested one after another: whether to ask for the next page
depends on the length of the previous one.
"""

from collections.abc import AsyncIterator
from datetime import date, datetime

import structlog

from fintrack.config import settings
from fintrack.core.dates import normalize_boundary, parse_calendar_date
from fintrack.core.exceptions import ApiError, UnauthorizedError
from fintrack.schemas.analytics import RangeFetchResult
from fintrack.schemas.common import ListResponse
from fintrack.schemas.expense import Expense, ExpenseFilters
from fintrack.services.expense_service import ExpenseService

logger = structlog.get_logger()

INCOMPLETE_WARNING = "Received an error on a later page. Data might be incomplete."


def _as_day(value: str | date) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    day = parse_calendar_date(value)
    if day is not None:
        return day
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def validate_range(start_date: str | date | None, end_date: str | date | None) -> None:
    """Reject a missing bound or a start after the end."""
    if not start_date or not end_date:
        raise ValueError("Invalid date range selected.")
    start, end = _as_day(start_date), _as_day(end_date)
    if start is None or end is None or start > end:
        raise ValueError("Invalid date range selected.")


async def iter_pages(
    service: ExpenseService,
    filters: ExpenseFilters | None = None,
    page_size: int | None = None,
) -> AsyncIterator[ListResponse[Expense]]:
    """Yield successive pages until one is shorter than ``page_size``.

    Page length is what the server sent, including records dropped as
    malformed, so a page with a bad record does not end the walk early.
    """
    if page_size is None:
        page_size = settings.fetch_page_size
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    base = filters.model_dump(exclude_none=True) if filters else {}
    base.pop("skip", None)
    base.pop("limit", None)

    skip = 0
    while True:
        page = await service.list(ExpenseFilters(**base, skip=skip, limit=page_size))
        yield page
        if page.received < page_size:
            return
        skip += page_size


async def fetch_all_expenses(
    service: ExpenseService,
    start_date: str | date,
    end_date: str | date,
    page_size: int | None = None,
    filters: ExpenseFilters | None = None,
) -> RangeFetchResult:
    """Every expense between ``start_date`` and ``end_date``, in server order.

    The end date is inclusive: a calendar date is sent as 23:59:59.999 UTC.

    A failure on the first page propagates and nothing is returned. A failure
    on a later page stops the loop; what was gathered so far is returned with
    ``complete=False``. ``UnauthorizedError`` always propagates.
    """
    validate_range(start_date, end_date)
    base = filters.model_dump(exclude_none=True) if filters else {}
    base.update(start_date=start_date, end_date=normalize_boundary(end_date, end=True))
    range_filters = ExpenseFilters(**base)

    expenses: list[Expense] = []
    pages = 0
    try:
        async for page in iter_pages(service, range_filters, page_size):
            expenses.extend(page.items)
            pages += 1
    except UnauthorizedError:
        raise
    except ApiError as exc:
        if pages == 0:
            logger.error(
                "range_fetch_failed",
                start=str(start_date),
                end=str(end_date),
                error=exc.detail,
            )
            raise
        logger.warning(
            "range_fetch_incomplete",
            pages=pages,
            fetched=len(expenses),
            error=exc.detail,
        )
        return RangeFetchResult(
            expenses=expenses, complete=False, pages=pages, warning=INCOMPLETE_WARNING
        )

    logger.info("range_fetch_complete", pages=pages, fetched=len(expenses))
    return RangeFetchResult(expenses=expenses, pages=pages)


async def count_expenses(
    service: ExpenseService,
    filters: ExpenseFilters | None = None,
    page_size: int | None = None,
) -> int:
    """Exact number of expenses matching ``filters``; any failure raises."""
    count = 0
    async for page in iter_pages(service, filters, page_size):
        count += page.received
    return count
