"""Expense (transaction) schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, field_serializer, field_validator
from pydantic.alias_generators import to_camel

ExpenseType = Literal["Need", "Want", "Investment", "Income"]

SPEND_TYPES: frozenset[str] = frozenset({"Need", "Want"})  # counted as spending
OUTFLOW_TYPES: frozenset[str] = frozenset({"Need", "Want", "Investment"})


class ExpenseCreate(BaseModel):
    category_id: str
    payment_method_id: str
    amount: Decimal
    type: ExpenseType
    description: str = ""
    timestamp: str  # ISO-8601 instant

    @field_serializer("amount")
    def _amount_as_number(self, value: Decimal) -> float:
        return float(value)


class ExpenseUpdate(BaseModel):
    category_id: str | None = None
    payment_method_id: str | None = None
    amount: Decimal | None = None
    type: ExpenseType | None = None
    description: str | None = None
    timestamp: str | None = None

    @field_serializer("amount")
    def _amount_as_number(self, value: Decimal | None) -> float | None:
        return float(value) if value is not None else None


class Expense(BaseModel):
    """A transaction as returned by the API.

    Every field is optional so a partially filled record still loads;
    the aggregation functions skip records missing what they need.
    ``amount`` must arrive as a JSON number; strings are rejected.
    """

    id: str | None = None
    category_id: str | None = None
    payment_method_id: str | None = None
    amount: Decimal | None = None
    type: ExpenseType | None = None
    description: str | None = None
    timestamp: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    model_config = {"extra": "ignore", "coerce_numbers_to_str": True}

    @field_validator("amount", mode="before")
    @classmethod
    def amount_is_number(cls, v):
        if v is None or isinstance(v, Decimal):
            return v
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("amount must be a number")
        return v


class ExpenseFilters(BaseModel):
    """Query filters for the expense list.

    ``start_date``/``end_date`` accept ``YYYY-MM-DD`` strings, dates or
    ready-made instants; calendar dates are sent as UTC midnight.
    """

    start_date: str | datetime | date | None = None
    end_date: str | datetime | date | None = None
    category_id: str | None = None
    payment_method_id: str | None = None
    type: ExpenseType | None = None
    skip: int | None = None
    limit: int | None = None

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "coerce_numbers_to_str": True,
    }
