"""Domain service: print contract validation.

Checks a print document against the rules the backend relies on before
anything leaves the process.  A document that passes comes back wrapped
in ``ValidatedDocument``; the print service client refuses anything else,
so an unchecked document can never be sent.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

from posprint.domain.model.documents import PrintInvoiceRequest, PrintOrderRequest

PrintDocument = Union[PrintOrderRequest, PrintInvoiceRequest]
D = TypeVar("D", PrintOrderRequest, PrintInvoiceRequest)

_ISSUED_BY_VALIDATOR = object()


class ViolationCode(Enum):
    MISSING = "missing"
    EMPTY = "empty"
    NOT_POSITIVE = "not_positive"
    NEGATIVE = "negative"
    MISMATCH = "mismatch"
    DUPLICATE = "duplicate"
    WRONG_GROUP = "wrong_group"
    NOT_INTEGER = "not_integer"


@dataclass(frozen=True)
class ContractViolation:
    field: str
    code: ViolationCode
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class ValidatedDocument(Generic[D]):
    """A document that passed ``validate_before_sending``.

    Only the validator can build one.
    """

    document: D
    _token: object = None

    def __post_init__(self) -> None:
        if self._token is not _ISSUED_BY_VALIDATOR:
            raise TypeError(
                "ValidatedDocument can only be created by validate_before_sending()"
            )


@dataclass(frozen=True)
class ValidationResult(Generic[D]):
    validated: ValidatedDocument[D] | None
    violations: tuple[ContractViolation, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.validated is not None

    def summary(self) -> str:
        return "; ".join(str(v) for v in self.violations)


def validate_before_sending(document: D) -> ValidationResult[D]:
    """Validate a ticket or invoice without mutating it."""
    if isinstance(document, PrintOrderRequest):
        violations = _check_order(document)
    elif isinstance(document, PrintInvoiceRequest):
        violations = _check_invoice(document)
    else:
        raise TypeError(f"Not a print document: {type(document).__name__}")

    if violations:
        return ValidationResult(validated=None, violations=tuple(violations))
    return ValidationResult(validated=ValidatedDocument(document, _ISSUED_BY_VALIDATOR))


# --- Rules ------------------------------------------------------------------


def _check_identity(document: PrintDocument) -> list[ContractViolation]:
    violations = []
    for name in ("order_id", "table_id"):
        value = getattr(document, name)
        if value is None or not str(value).strip():
            violations.append(
                ContractViolation(name, ViolationCode.MISSING, f"{name} is required")
            )
    return violations


def _check_quantity(field_name: str, quantity: int) -> list[ContractViolation]:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        return [
            ContractViolation(
                field_name, ViolationCode.NOT_POSITIVE,
                f"quantity must be an integer >= 1, got {quantity!r}",
            )
        ]
    return []


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _not_integer(field_name: str, value: object) -> ContractViolation:
    return ContractViolation(
        field_name, ViolationCode.NOT_INTEGER,
        f"{field_name} must be a whole number of minor units, got {value!r}",
    )


def _check_amount(field_name: str, value: object) -> list[ContractViolation]:
    if not _is_int(value):
        return [_not_integer(field_name, value)]
    if value < 0:
        return [
            ContractViolation(field_name, ViolationCode.NEGATIVE, f"{field_name} cannot be negative")
        ]
    return []


def _check_order(order: PrintOrderRequest) -> list[ContractViolation]:
    violations = _check_identity(order)

    if not order.items:
        violations.append(
            ContractViolation("groups", ViolationCode.EMPTY, "ticket has no items")
        )

    seen_stations: set[str] = set()
    for g, group in enumerate(order.groups):
        prefix = f"groups[{g}]"
        if not group.station or not group.station.strip():
            violations.append(
                ContractViolation(f"{prefix}.station", ViolationCode.MISSING, "station is required")
            )
        elif group.station in seen_stations:
            violations.append(
                ContractViolation(
                    f"{prefix}.station", ViolationCode.DUPLICATE,
                    f"station '{group.station}' appears in more than one group",
                )
            )
        seen_stations.add(group.station)

        if not group.items:
            violations.append(
                ContractViolation(f"{prefix}.items", ViolationCode.EMPTY, "group has no items")
            )
        for i, item in enumerate(group.items):
            item_field = f"{prefix}.items[{i}]"
            violations += _check_quantity(f"{item_field}.quantity", item.quantity)
            if item.station != group.station:
                violations.append(
                    ContractViolation(
                        f"{item_field}.station", ViolationCode.WRONG_GROUP,
                        f"item routed to '{item.station}' is in group '{group.station}'",
                    )
                )
    return violations


def _check_invoice(invoice: PrintInvoiceRequest) -> list[ContractViolation]:
    violations = _check_identity(invoice)

    if not invoice.restaurant.name.strip():
        violations.append(
            ContractViolation("restaurant.name", ViolationCode.MISSING, "restaurant name is required")
        )

    if not invoice.items:
        violations.append(
            ContractViolation("items", ViolationCode.EMPTY, "invoice has no items")
        )

    # totals are only recomputed when every amount is a plain int
    whole = True
    for i, item in enumerate(invoice.items):
        prefix = f"items[{i}]"
        violations += _check_quantity(f"{prefix}.quantity", item.quantity)
        violations += _check_amount(f"{prefix}.unit_price", item.unit_price)
        if not _is_int(item.subtotal):
            violations.append(_not_integer(f"{prefix}.subtotal", item.subtotal))
        if not (_is_int(item.quantity) and _is_int(item.unit_price) and _is_int(item.subtotal)):
            whole = False
        elif item.subtotal != item.quantity * item.unit_price:
            violations.append(
                ContractViolation(
                    f"{prefix}.subtotal", ViolationCode.MISMATCH,
                    f"expected {item.quantity * item.unit_price}, got {item.subtotal}",
                )
            )

    if not _is_int(invoice.subtotal):
        violations.append(_not_integer("subtotal", invoice.subtotal))
        whole = False
    elif whole:
        lines_total = sum(item.subtotal for item in invoice.items)
        if invoice.subtotal != lines_total:
            violations.append(
                ContractViolation(
                    "subtotal", ViolationCode.MISMATCH,
                    f"expected {lines_total}, got {invoice.subtotal}",
                )
            )

    for name in ("tax_amount", "tip_amount", "discount_amount"):
        value = getattr(invoice, name)
        if value is None:
            continue
        if not _is_int(value):
            whole = False
        violations += _check_amount(name, value)

    if invoice.payment is not None:
        for name in ("received_amount", "change_amount"):
            violations += _check_amount(f"payment.{name}", getattr(invoice.payment, name))

    if not _is_int(invoice.grand_total):
        violations.append(_not_integer("grand_total", invoice.grand_total))
    elif whole and invoice.grand_total != invoice.computed_total():
        violations.append(
            ContractViolation(
                "grand_total", ViolationCode.MISMATCH,
                f"expected {invoice.computed_total()}, got {invoice.grand_total}",
            )
        )
    elif invoice.grand_total < 0:
        violations.append(
            ContractViolation("grand_total", ViolationCode.NEGATIVE, "grand total cannot be negative")
        )
    return violations
