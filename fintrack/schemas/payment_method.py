"""Payment method schemas (same shape as categories, separate namespace)."""

from datetime import datetime

from pydantic import BaseModel


class PaymentMethodCreate(BaseModel):
    name: str
    is_expense: bool = True


class PaymentMethodUpdate(BaseModel):
    name: str | None = None
    is_expense: bool | None = None


class PaymentMethod(BaseModel):
    id: str
    name: str
    is_expense: bool = True
    user_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"extra": "ignore", "coerce_numbers_to_str": True}
