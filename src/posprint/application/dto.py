"""Data Transfer Objects handed from the print controller to the UI.

The UI only ever sees these: a snapshot of the controller's state and
the outcome of one print call.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from posprint.domain.gateway.print_service import ServiceError
from posprint.domain.model.documents import (
    DocumentKind,
    PrintInvoiceResponse,
    PrintOrderResponse,
)
from posprint.domain.service.contract_validator import ContractViolation


class HealthState(Enum):
    UNKNOWN = "UNKNOWN"
    CHECKING = "CHECKING"
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"


class PrintState(Enum):
    IDLE = "IDLE"
    PRINTING = "PRINTING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class PrintErrorKind(Enum):
    CONTRACT_VIOLATION = "CONTRACT_VIOLATION"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    TRANSPORT = "TRANSPORT"
    BACKEND_REJECTED = "BACKEND_REJECTED"
    INVALID_RECORD = "INVALID_RECORD"
    UNEXPECTED = "UNEXPECTED"


@dataclass(frozen=True)
class PrintError:
    kind: PrintErrorKind
    message: str
    code: str | None = None
    violations: tuple[ContractViolation, ...] = ()

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class PrintOutcome:
    """Result of one ``print_order`` / ``print_invoice`` call."""

    kind: DocumentKind
    response: PrintOrderResponse | PrintInvoiceResponse | None = None
    error: PrintError | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class PrintStatusSnapshot:
    health: HealthState
    service_error: ServiceError | None
    order_state: PrintState
    invoice_state: PrintState
    order_error: PrintError | None
    invoice_error: PrintError | None

    @property
    def is_service_available(self) -> bool:
        return self.health == HealthState.AVAILABLE

    @property
    def is_checking_service(self) -> bool:
        return self.health == HealthState.CHECKING

    @property
    def is_printing(self) -> bool:
        return PrintState.PRINTING in (self.order_state, self.invoice_state)
