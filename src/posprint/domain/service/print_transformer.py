"""Domain service: turn store records into print documents.

Both functions are pure.  Currency is integer minor units throughout;
the only rounding happens when a percentage tip is stored.  Values are
carried over as-is, so a bad quantity or price surfaces as a contract
violation in the validator rather than being silently fixed here.
"""

from __future__ import annotations

from datetime import datetime

from posprint.domain.exceptions import MissingPaymentError
from posprint.domain.model.documents import (
    FALLBACK_STATION,
    InvoiceMenuItem,
    PaymentInfo,
    PrintGroup,
    PrintInvoiceRequest,
    PrintMenuItem,
    PrintOrderRequest,
    RestaurantInfo,
)
from posprint.domain.model.records import (
    OrderItemRecord,
    OrderRecord,
    PaymentMethod,
    PaymentRecord,
)
from posprint.domain.model.value_objects import percent_of

DEFAULT_WAITER_NAME = "Mesero"


def to_print_order_request(
    order: OrderRecord,
    order_items: list[OrderItemRecord],
) -> PrintOrderRequest:
    """Build a kitchen ticket, one group per station.

    Groups come out in order of first appearance and items keep their
    relative order inside a group.  Items with no station go to
    ``FALLBACK_STATION``.
    """
    groups: dict[str, list[PrintMenuItem]] = {}
    for record in order_items:
        station = _station_of(record)
        groups.setdefault(station, []).append(
            PrintMenuItem(
                name=record.name,
                quantity=record.quantity,
                station=station,
                notes=_notes_of(record),
            )
        )

    return PrintOrderRequest(
        order_id=str(order.id),
        table_id=str(order.table_id),
        groups=tuple(PrintGroup(station, tuple(items)) for station, items in groups.items()),
        created_at=_timestamp(order.created_at),
        notes=order.notes or None,
        diners_count=order.diners_count,
        waiter_name=order.waiter_name or DEFAULT_WAITER_NAME,
    )


def to_print_invoice_request(
    order: OrderRecord,
    order_items: list[OrderItemRecord],
    payment: PaymentRecord | None,
    restaurant: RestaurantInfo,
) -> PrintInvoiceRequest:
    """Build a customer invoice.

    grand total = sum(line subtotals) + tax + tip - discount
    """
    if payment is None:
        raise MissingPaymentError(
            f"Order #{order.id} has no payment; cannot build an invoice"
        )

    lines = tuple(
        InvoiceMenuItem(
            name=record.name,
            quantity=record.quantity,
            unit_price=record.unit_price,
            subtotal=record.quantity * record.unit_price,
        )
        for record in order_items
    )
    subtotal = sum(line.subtotal for line in lines)

    tip = _tip_for(payment, subtotal)
    grand_total = (
        subtotal
        + (order.tax_amount or 0)
        + (tip or 0)
        - (order.discount_amount or 0)
    )

    return PrintInvoiceRequest(
        order_id=str(order.id),
        table_id=str(order.table_id),
        restaurant=restaurant,
        items=lines,
        subtotal=subtotal,
        grand_total=grand_total,
        created_at=_timestamp(order.created_at),
        tax_amount=order.tax_amount,
        tip_amount=tip,
        discount_amount=order.discount_amount,
        payment=_payment_info(payment, grand_total),
        diners_count=order.diners_count,
        waiter_name=order.waiter_name or DEFAULT_WAITER_NAME,
    )


# --- Helpers ----------------------------------------------------------------


def _station_of(record: OrderItemRecord) -> str:
    if record.station is None or not record.station.strip():
        return FALLBACK_STATION
    return record.station.strip()


def _notes_of(record: OrderItemRecord) -> tuple[str, ...]:
    notes = [m.strip() for m in record.modifiers if m and m.strip()]
    if record.notes and record.notes.strip():
        notes.append(record.notes.strip())
    return tuple(notes)


def _tip_for(payment: PaymentRecord, subtotal: int) -> int | None:
    if payment.tip_amount is not None:
        return payment.tip_amount
    if payment.tip_percentage is not None:
        return percent_of(subtotal, payment.tip_percentage.value)
    return None


def _payment_info(payment: PaymentRecord, grand_total: int) -> PaymentInfo:
    received = payment.received_amount
    if received is None or payment.method != PaymentMethod.CASH:
        received = grand_total
    return PaymentInfo(
        method=payment.method.value,
        method_name=payment.method_name,
        received_amount=received,
        change_amount=max(0, received - grand_total),
    )


def _timestamp(value: datetime | str) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)
