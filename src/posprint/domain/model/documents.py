"""Print documents: the canonical shapes sent to the print backend.

Documents are built on demand, validated, sent and discarded.  Currency
fields are integer minor units.  ``to_payload()`` yields the JSON body the
backend expects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

FALLBACK_STATION = "General"


class DocumentKind(Enum):
    ORDER = "order"
    INVOICE = "invoice"


@dataclass(frozen=True)
class RestaurantInfo:
    name: str
    address: str
    tax_id: str
    phone: str = ""

    def to_payload(self) -> dict:
        return {
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "tax_id": self.tax_id,
        }


# ---------------------------------------------------------------------------
# Kitchen ticket
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PrintMenuItem:
    name: str
    quantity: int
    station: str
    notes: tuple[str, ...] = ()

    def to_payload(self) -> dict:
        return {
            "menu_item_name": self.name,
            "quantity": self.quantity,
            "notes": list(self.notes),
        }


@dataclass(frozen=True)
class PrintGroup:
    """Items routed to one station's printer."""

    station: str
    items: tuple[PrintMenuItem, ...]

    def to_payload(self) -> dict:
        return {
            "print_station": self.station,
            "items": [item.to_payload() for item in self.items],
        }


@dataclass(frozen=True)
class PrintOrderRequest:
    order_id: str
    table_id: str
    groups: tuple[PrintGroup, ...]
    created_at: str
    notes: str | None = None
    diners_count: int = 1
    waiter_name: str = "Mesero"

    kind = DocumentKind.ORDER

    @property
    def items(self) -> list[PrintMenuItem]:
        return [item for group in self.groups for item in group.items]

    def to_payload(self) -> dict:
        payload = {
            "order_id": self.order_id,
            "table_number": self.table_id,
            "diners_count": self.diners_count,
            "waiter_name": self.waiter_name,
            "created_at": self.created_at,
            "print_groups": [group.to_payload() for group in self.groups],
        }
        if self.notes:
            payload["order_notes"] = self.notes
        return payload


# ---------------------------------------------------------------------------
# Invoice
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InvoiceMenuItem:
    name: str
    quantity: int
    unit_price: int
    subtotal: int

    def to_payload(self) -> dict:
        return {
            "menu_item_name": self.name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "subtotal": self.subtotal,
        }


@dataclass(frozen=True)
class PaymentInfo:
    method: str
    method_name: str
    received_amount: int = 0
    change_amount: int = 0

    def to_payload(self) -> dict:
        return {
            "method": self.method,
            "payment_method_name": self.method_name,
            "received_amount": self.received_amount,
            "change_amount": self.change_amount,
        }


@dataclass(frozen=True)
class PrintInvoiceRequest:
    order_id: str
    table_id: str
    restaurant: RestaurantInfo
    items: tuple[InvoiceMenuItem, ...]
    subtotal: int
    grand_total: int
    created_at: str
    tax_amount: int | None = None
    tip_amount: int | None = None
    discount_amount: int | None = None
    payment: PaymentInfo | None = None
    diners_count: int = 1
    waiter_name: str = "Mesero"

    kind = DocumentKind.INVOICE

    def computed_total(self) -> int:
        """Grand total recomputed from the line items and adjustments."""
        return (
            sum(item.subtotal for item in self.items)
            + (self.tax_amount or 0)
            + (self.tip_amount or 0)
            - (self.discount_amount or 0)
        )

    def to_payload(self) -> dict:
        payload = {
            "order_id": self.order_id,
            "table_number": self.table_id,
            "diners_count": self.diners_count,
            "waiter_name": self.waiter_name,
            "created_at": self.created_at,
            "items": [item.to_payload() for item in self.items],
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "tip_amount": self.tip_amount,
            "discount_amount": self.discount_amount,
            "grand_total": self.grand_total,
            "restaurant_info": self.restaurant.to_payload(),
        }
        if self.payment is not None:
            payload["payment"] = self.payment.to_payload()
        return payload


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PrintOrderResponse:
    """Outcome of one ticket dispatch.  Never retried."""

    success: bool
    job_id: str | None = None
    message: str | None = None
    printed_stations: tuple[str, ...] = field(default=())


@dataclass(frozen=True)
class PrintInvoiceResponse:
    """Outcome of one invoice dispatch.  Never retried."""

    success: bool
    job_id: str | None = None
    message: str | None = None
