"""Status indicator: which of five badges the UI shows.

Precedence: checking > service unavailable > print error > printing >
available.
"""

from __future__ import annotations

from enum import Enum

from posprint.application.dto import PrintStatusSnapshot


class IndicatorState(Enum):
    CHECKING = "CHECKING"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    PRINT_ERROR = "PRINT_ERROR"
    PRINTING = "PRINTING"
    AVAILABLE = "AVAILABLE"


INDICATOR_LABELS = {
    IndicatorState.CHECKING: "Checking...",
    IndicatorState.SERVICE_UNAVAILABLE: "Print service unavailable",
    IndicatorState.PRINT_ERROR: "Print error",
    IndicatorState.PRINTING: "Printing...",
    IndicatorState.AVAILABLE: "Print service available",
}


def resolve_indicator(snapshot: PrintStatusSnapshot) -> IndicatorState:
    if snapshot.is_checking_service:
        return IndicatorState.CHECKING
    if snapshot.service_error is not None or not snapshot.is_service_available:
        return IndicatorState.SERVICE_UNAVAILABLE
    if snapshot.order_error is not None or snapshot.invoice_error is not None:
        return IndicatorState.PRINT_ERROR
    if snapshot.is_printing:
        return IndicatorState.PRINTING
    return IndicatorState.AVAILABLE
