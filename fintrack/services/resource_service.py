"""Shared CRUD plumbing for the REST resources."""

from typing import Any, Generic, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from fintrack.core.credentials import CredentialContext
from fintrack.core.exceptions import (
    ConflictError,
    MalformedResponseError,
    NotFoundError,
    RequestFailedError,
)
from fintrack.core.http import ApiClient
from fintrack.schemas.common import ListResponse, normalize_list_response

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


class ApiService:
    """Base for clients of one API namespace.

    Mutations read the CSRF token from the shared credential context.
    """

    path: str
    singular: str = "resource"

    def __init__(self, api: ApiClient, credentials: CredentialContext) -> None:
        self.api = api
        self.credentials = credentials

    # ── Transport ─────────────────────────────────────

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Issue a request and map non-2xx statuses to typed errors."""
        csrf_token = None
        if method.upper() != "GET":
            csrf_token = self.credentials.get()
        try:
            response = await self.api.request(
                method, path, params=params, json=json, csrf_token=csrf_token
            )
        except httpx.HTTPError as exc:
            logger.warning("api_transport_error", operation=operation, error=str(exc))
            raise RequestFailedError(operation) from exc

        if response.is_success:
            return response

        logger.warning("api_operation_failed", operation=operation, status=response.status_code)
        if response.status_code == 409:
            raise ConflictError(self.singular.capitalize())
        if response.status_code == 404:
            raise NotFoundError(operation, self.singular.capitalize())
        raise RequestFailedError(operation, response.status_code)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(status_code=response.status_code) from exc


class ResourceService(ApiService, Generic[ModelT]):
    """CRUD over ``/api/<collection>``.

    Subclasses set ``path``, ``model`` and the singular/plural nouns used in
    error messages ("Failed to delete category").
    """

    model: type[ModelT]
    plural: str

    def _parse(self, data: Any, status_code: int | None = None) -> ModelT:
        try:
            return self.model.model_validate(data)
        except ValidationError as exc:
            logger.error("malformed_item", resource=self.singular, errors=exc.error_count())
            raise MalformedResponseError(status_code=status_code) from exc

    def _parse_list(self, payload: Any) -> ListResponse[ModelT]:
        """Parse a list page. Records that fail validation are dropped."""
        try:
            raw_items, total = normalize_list_response(payload)
        except MalformedResponseError:
            logger.error(
                "malformed_list_response",
                resource=self.plural,
                payload_type=type(payload).__name__,
            )
            raise
        items = []
        for raw in raw_items:
            try:
                items.append(self.model.model_validate(raw))
            except ValidationError as exc:
                logger.warning(
                    "malformed_item_skipped",
                    resource=self.plural,
                    errors=exc.error_count(),
                )
        return ListResponse[self.model](
            items=items, total=total, skipped=len(raw_items) - len(items)
        )

    # ── Operations ────────────────────────────────────

    async def _list(self, params: dict[str, Any]) -> ListResponse[ModelT]:
        response = await self._send(f"fetch {self.plural}", "GET", self.path, params=params or None)
        return self._parse_list(self._json(response))

    async def list(self, skip: int | None = None, limit: int | None = None) -> ListResponse[ModelT]:
        params: dict[str, Any] = {}
        if skip is not None:
            params["skip"] = skip
        if limit is not None:
            params["limit"] = limit
        return await self._list(params)

    async def get(self, item_id: str) -> ModelT:
        response = await self._send(f"fetch {self.singular}", "GET", f"{self.path}/{item_id}")
        return self._parse(self._json(response), response.status_code)

    async def create(self, data: BaseModel | dict) -> ModelT:
        payload = data.model_dump(mode="json") if isinstance(data, BaseModel) else data
        response = await self._send(f"create {self.singular}", "POST", self.path, json=payload)
        return self._parse(self._json(response), response.status_code)

    async def update(self, item_id: str, data: BaseModel | dict) -> ModelT:
        """Partial update: only fields explicitly set are sent."""
        if isinstance(data, BaseModel):
            payload = data.model_dump(mode="json", exclude_unset=True)
        else:
            payload = data
        response = await self._send(
            f"update {self.singular}", "PATCH", f"{self.path}/{item_id}", json=payload
        )
        return self._parse(self._json(response), response.status_code)

    async def delete(self, item_id: str) -> bool:
        await self._send(f"delete {self.singular}", "DELETE", f"{self.path}/{item_id}")
        return True
