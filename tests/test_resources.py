"""Category, payment method and expense clients against the fake API."""

from datetime import date, datetime, timezone
from decimal import Decimal

import httpx
import pytest
from pydantic import ValidationError

from fintrack.core.credentials import CredentialContext
from fintrack.core.exceptions import (
    ConflictError,
    MalformedResponseError,
    NotFoundError,
    RequestFailedError,
)
from fintrack.core.http import ApiClient
from fintrack.schemas.category import Category, CategoryCreate, CategoryUpdate
from fintrack.schemas.common import normalize_list_response
from fintrack.schemas.expense import Expense, ExpenseCreate, ExpenseFilters, ExpenseUpdate
from fintrack.services.category_service import CategoryService
from fintrack.services.expense_service import ExpenseService, build_expense_params


async def _seed_expense(session, **overrides):
    category = await session.categories.create(CategoryCreate(name="Food"))
    method = await session.payment_methods.create({"name": "Card", "is_expense": True})
    data = {
        "category_id": category.id,
        "payment_method_id": method.id,
        "amount": Decimal("12.50"),
        "type": "Need",
        "description": "lunch",
        "timestamp": "2024-01-15T12:00:00.000Z",
    }
    data.update(overrides)
    expense = await session.expenses.create(ExpenseCreate(**data))
    return category, method, expense


# ── List shape normalization ─────────────────────────


def test_bare_array_infers_total_from_length():
    items, total = normalize_list_response([{"id": "a"}, {"id": "b"}])
    assert len(items) == 2
    assert total == 2


def test_wrapped_list_keeps_server_total():
    items, total = normalize_list_response({"items": [{"id": "a"}], "total": 40})
    assert items == [{"id": "a"}]
    assert total == 40


@pytest.mark.parametrize("payload", [None, {"data": []}, {"items": "nope"}, "text", 3])
def test_other_shapes_are_malformed(payload):
    with pytest.raises(MalformedResponseError):
        normalize_list_response(payload)


# ── Categories / payment methods ────────────────────


@pytest.mark.asyncio
async def test_category_crud(session):
    created = await session.categories.create(CategoryCreate(name="Rent", is_expense=True))
    assert created.name == "Rent"

    updated = await session.categories.update(created.id, CategoryUpdate(name="Housing"))
    assert updated.name == "Housing"
    assert updated.is_expense is True

    page = await session.categories.list()
    assert [c.name for c in page.items] == ["Housing"]
    assert page.total == 1

    assert await session.categories.delete(created.id) is True
    assert (await session.categories.list()).items == []


@pytest.mark.asyncio
async def test_category_list_sends_only_given_params(session, sent_requests):
    await session.categories.list()
    assert sent_requests[-1].url.query == b""

    await session.categories.list(skip=10, limit=5)
    assert sent_requests[-1].url.params["skip"] == "10"
    assert sent_requests[-1].url.params["limit"] == "5"


@pytest.mark.asyncio
async def test_payment_methods_accept_wrapped_list(session):
    await session.payment_methods.create({"name": "Cash", "is_expense": True})
    await session.payment_methods.create({"name": "Salary account", "is_expense": False})

    page = await session.payment_methods.list(limit=1)
    assert len(page.items) == 1
    assert page.total == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("attr", ["categories", "payment_methods"])
async def test_delete_in_use_raises_conflict(session, attr):
    category, method, _ = await _seed_expense(session)
    target = category if attr == "categories" else method

    with pytest.raises(ConflictError) as exc_info:
        await getattr(session, attr).delete(target.id)

    assert exc_info.value.status_code == 409
    assert "used by existing expenses" in exc_info.value.detail
    assert not isinstance(exc_info.value, RequestFailedError)


@pytest.mark.asyncio
async def test_expense_delete_conflict():
    def handler(request):
        return httpx.Response(409, json={"detail": "locked"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://x") as hc:
        service = ExpenseService(ApiClient(client=hc), CredentialContext("t"))
        with pytest.raises(ConflictError):
            await service.delete("e1")


@pytest.mark.asyncio
async def test_generic_failure_names_operation():
    def handler(request):
        return httpx.Response(500, json={"detail": "boom"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://x") as hc:
        service = CategoryService(ApiClient(client=hc), CredentialContext("t"))
        with pytest.raises(RequestFailedError) as exc_info:
            await service.create({"name": "Food", "is_expense": True})
    assert str(exc_info.value) == "Failed to create category"
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_mutation_without_token_fails(session):
    session.credentials.clear()
    with pytest.raises(RequestFailedError) as exc_info:
        await session.categories.create({"name": "Food", "is_expense": True})
    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_missing_record_raises_not_found(session):
    with pytest.raises(NotFoundError) as exc_info:
        await session.expenses.get("missing")
    assert exc_info.value.detail == "Expense not found"
    assert isinstance(exc_info.value, RequestFailedError)


@pytest.mark.asyncio
async def test_transport_error_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://x") as hc:
        service = CategoryService(ApiClient(client=hc), CredentialContext())
        with pytest.raises(RequestFailedError) as exc_info:
            await service.list()
    assert str(exc_info.value) == "Failed to fetch categories"
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_malformed_list_payload():
    def handler(request):
        return httpx.Response(200, json={"data": []})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://x") as hc:
        service = CategoryService(ApiClient(client=hc), CredentialContext())
        with pytest.raises(MalformedResponseError):
            await service.list()


@pytest.mark.asyncio
async def test_bad_item_is_dropped_from_list_but_fails_get():
    def handler(request):
        if request.url.path == "/api/categories":
            return httpx.Response(200, json=[{"id": 7, "name": "Food"}, {"id": "c2"}])
        return httpx.Response(200, json={"id": "c2"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://x") as hc:
        service = CategoryService(ApiClient(client=hc), CredentialContext())
        page = await service.list()
        with pytest.raises(MalformedResponseError):
            await service.get("c2")

    assert [c.id for c in page.items] == ["7"]
    assert page.total == 2
    assert page.skipped == 1
    assert page.received == 2


def test_numeric_ids_load_as_strings():
    assert Category.model_validate({"id": 7, "name": "Food"}).id == "7"
    expense = Expense.model_validate({"id": 12, "category_id": 3, "amount": 4, "type": "Need"})
    assert (expense.id, expense.category_id) == ("12", "3")


@pytest.mark.parametrize("amount", ["100", True, [1]])
def test_expense_amount_must_be_a_number(amount):
    with pytest.raises(ValidationError):
        Expense.model_validate({"id": "e1", "amount": amount})


# ── Expenses ─────────────────────────────────────────


@pytest.mark.asyncio
async def test_expense_crud(session, sent_requests):
    category, method, expense = await _seed_expense(session)
    assert expense.amount == Decimal("12.5")
    assert expense.category_id == category.id

    post = sent_requests[-1]
    assert b'"amount":12.5' in post.content.replace(b" ", b"")

    fetched = await session.expenses.get(expense.id)
    assert fetched.description == "lunch"

    updated = await session.expenses.update(expense.id, ExpenseUpdate(description="dinner"))
    assert updated.description == "dinner"
    assert updated.type == "Need"

    assert await session.expenses.delete(expense.id) is True
    with pytest.raises(NotFoundError):
        await session.expenses.get(expense.id)


@pytest.mark.asyncio
async def test_partial_update_sends_only_set_fields(session, sent_requests):
    _, _, expense = await _seed_expense(session)
    await session.expenses.update(expense.id, ExpenseUpdate(amount=Decimal("3")))
    assert sent_requests[-1].content.replace(b" ", b"") == b'{"amount":3.0}'


def test_expense_params_skip_unset_and_normalize_dates():
    params = build_expense_params(
        ExpenseFilters(start_date="2024-01-01", end_date="2024-01-31", type="Want", limit=50)
    )
    assert params == {
        "startDate": "2024-01-01T00:00:00.000Z",
        "endDate": "2024-01-31T00:00:00.000Z",
        "type": "Want",
        "limit": 50,
    }
    assert build_expense_params(
        ExpenseFilters(
            start_date=datetime(2024, 3, 5, 12, 30, tzinfo=timezone.utc),
            end_date=date(2024, 3, 31),
        )
    ) == {"startDate": "2024-03-05T12:30:00.000Z", "endDate": "2024-03-31T00:00:00.000Z"}
    assert build_expense_params(None) == {}
    assert build_expense_params(ExpenseFilters(category_id="c1")) == {"categoryId": "c1"}


@pytest.mark.asyncio
async def test_expense_list_with_keyword_filters(session, fake_api):
    await _seed_expense(session)
    page = await session.expenses.list(start_date="2024-01-01", type="Need", skip=0)
    assert len(page.items) == 1
    assert fake_api.state.expense_queries[-1] == {
        "startDate": "2024-01-01T00:00:00.000Z",
        "type": "Need",
        "skip": "0",
    }
