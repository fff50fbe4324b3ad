"""Analytics API client for server-computed category averages."""

from datetime import date

import structlog
from pydantic import ValidationError

from fintrack.core.dates import normalize_boundary
from fintrack.core.exceptions import MalformedResponseError
from fintrack.schemas.analytics import CategorySpendSummary
from fintrack.schemas.common import extract_items
from fintrack.services.resource_service import ApiService

logger = structlog.get_logger()


class AnalyticsService(ApiService):
    path = "/api/analytics"
    singular = "analytics data"

    async def average_spend(
        self, start_date: str | date, end_date: str | date
    ) -> list[CategorySpendSummary]:
        """Per-category totals and averages for an inclusive date range.

        The end date is sent as 23:59:59.999 UTC so the whole last day counts.
        Rows are returned as the server computed them.
        """
        params = {
            "startDate": normalize_boundary(start_date),
            "endDate": normalize_boundary(end_date, end=True),
        }
        response = await self._send(
            "fetch analytics data", "GET", f"{self.path}/average-spend", params=params
        )
        rows = extract_items(self._json(response))
        if rows is None:
            logger.warning("average_spend_unexpected_payload")
            return []
        try:
            return [CategorySpendSummary.model_validate(row) for row in rows]
        except ValidationError as exc:
            raise MalformedResponseError(status_code=response.status_code) from exc
