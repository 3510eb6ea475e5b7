"""Application settings for the request layer.

Built once at process start and handed to the routes explicitly through
``app.state.settings``; nothing reads it from a module global.
"""

import os
from dataclasses import dataclass, field

from protean.exceptions import ValidationError

DEFAULT_PAYMENT_METHODS = ("credit_card", "bank_transfer", "promptpay", "cash_on_delivery")
DEFAULT_SHIPPING_METHODS = ("standard", "express", "pickup")


def _csv(value: str | None, default: tuple[str, ...]) -> frozenset[str]:
    if not value:
        return frozenset(default)
    return frozenset(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class StoreSettings:
    """Request validation rules and app-level knobs."""

    environment: str = "development"
    payment_methods: frozenset[str] = field(default_factory=lambda: frozenset(DEFAULT_PAYMENT_METHODS))
    shipping_methods: frozenset[str] = field(default_factory=lambda: frozenset(DEFAULT_SHIPPING_METHODS))
    max_line_quantity: int = 99
    database_url: str | None = None

    @classmethod
    def from_env(cls) -> "StoreSettings":
        return cls(
            environment=(os.getenv("PROTEAN_ENV") or "development").lower(),
            payment_methods=_csv(os.getenv("STORE_PAYMENT_METHODS"), DEFAULT_PAYMENT_METHODS),
            shipping_methods=_csv(os.getenv("STORE_SHIPPING_METHODS"), DEFAULT_SHIPPING_METHODS),
            max_line_quantity=int(os.getenv("STORE_MAX_LINE_QUANTITY", "99")),
            database_url=os.getenv("DATABASE_URL") or None,
        )

    # -------------------------------------------------------------------
    # Request validation
    # -------------------------------------------------------------------
    def check_payment_method(self, method: str) -> None:
        if method not in self.payment_methods:
            raise ValidationError(
                {"payment_method": [f"Unsupported payment method '{method}'. Use one of: {sorted(self.payment_methods)}"]}
            )

    def check_shipping_method(self, method: str) -> None:
        if method not in self.shipping_methods:
            raise ValidationError(
                {"shipping_method": [f"Unsupported shipping method '{method}'. Use one of: {sorted(self.shipping_methods)}"]}
            )

    def check_quantity(self, quantity: int) -> None:
        if quantity > self.max_line_quantity:
            raise ValidationError({"quantity": [f"Quantity cannot exceed {self.max_line_quantity} per line"]})
