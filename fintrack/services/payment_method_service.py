"""Payment method API client."""

from fintrack.schemas.payment_method import PaymentMethod
from fintrack.services.resource_service import ResourceService


class PaymentMethodService(ResourceService[PaymentMethod]):
    path = "/api/payment_methods"
    model = PaymentMethod
    singular = "payment method"
    plural = "payment methods"
