"""Read-only records consumed from the order store.

These mirror what the store returns for an order, its items and its
payment.  The print pipeline never writes them back.  A record that
breaks a business rule cannot be built, so nothing downstream has to
re-check it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from posprint.domain.exceptions import ValidationError
from posprint.domain.model.value_objects import Money, TipPercentage


class PaymentMethod(Enum):
    CASH = "cash"
    CARD = "card"
    MIXED = "mixed"


PAYMENT_METHOD_NAMES = {
    PaymentMethod.CASH: "Efectivo",
    PaymentMethod.CARD: "Tarjeta",
    PaymentMethod.MIXED: "Efectivo + Tarjeta",
}


@dataclass(frozen=True)
class OrderItemRecord:
    """One line of an order as stored.

    ``station`` is the category's print station; it may be missing.
    ``modifiers`` holds cooking point, sides and similar, in display order.
    """

    name: str
    quantity: int
    unit_price: int
    station: str | None = None
    modifiers: tuple[str, ...] = ()
    notes: str | None = None

    def __post_init__(self) -> None:
        # sign is left to the print contract; only the type is fixed here
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValidationError(
                f"Quantity of '{self.name}' must be an int, got {self.quantity!r}"
            )
        Money.check(f"unit_price of '{self.name}'", self.unit_price, optional=False)


@dataclass(frozen=True)
class OrderRecord:
    id: int | str
    table_id: int | str
    status: str = "pending"
    total: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    notes: str | None = None
    diners_count: int = 1
    waiter_name: str | None = None
    tax_amount: int | None = None
    discount_amount: int | None = None

    def __post_init__(self) -> None:
        Money.check("total", self.total, optional=False)
        Money.check("tax_amount", self.tax_amount)
        Money.check("discount_amount", self.discount_amount)


@dataclass(frozen=True)
class PaymentRecord:
    """A completed payment.

    The tip is either a literal amount or a percentage of the subtotal,
    never both.
    """

    method: PaymentMethod
    tip_amount: int | None = None
    tip_percentage: TipPercentage | None = None
    received_amount: int | None = None

    def __post_init__(self) -> None:
        if self.tip_amount is not None and self.tip_percentage is not None:
            raise ValidationError(
                "Cannot specify both a tip amount and a tip percentage"
            )
        Money.check("tip_amount", self.tip_amount)
        Money.check("received_amount", self.received_amount)
        if self.method == PaymentMethod.CASH and not self.received_amount:
            raise ValidationError("Received amount is required for cash payments")

    @property
    def method_name(self) -> str:
        return PAYMENT_METHOD_NAMES[self.method]
