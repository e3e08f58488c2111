"""Application service: print orchestration.

Coordinates transform -> validate -> dispatch for kitchen tickets and
invoices, and keeps the state the UI renders: backend health plus one
independent IDLE/PRINTING/SUCCESS/FAILED machine per document kind.

Everything runs on one asyncio event loop, so state changes need no
locks.  Each print call and each health probe takes a generation number;
a result that arrives after a newer call of the same kind has started is
dropped (last initiated wins, not last completed).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from posprint.application.dto import (
    HealthState,
    PrintError,
    PrintErrorKind,
    PrintOutcome,
    PrintState,
    PrintStatusSnapshot,
)
from posprint.domain.exceptions import DomainException
from posprint.domain.gateway.print_service import (
    PrintServiceGateway,
    ServiceError,
    ServiceErrorKind,
)
from posprint.domain.model.documents import DocumentKind, RestaurantInfo
from posprint.domain.model.records import OrderItemRecord, OrderRecord, PaymentRecord
from posprint.domain.service.contract_validator import validate_before_sending
from posprint.domain.service.print_transformer import (
    to_print_invoice_request,
    to_print_order_request,
)

logger = logging.getLogger(__name__)

DEFAULT_HEALTH_INTERVAL = 60.0

_RETRYABLE_PROBE_ERRORS = (ServiceErrorKind.UNREACHABLE, ServiceErrorKind.TIMEOUT)

Observer = Callable[[PrintStatusSnapshot], None]


@dataclass
class _KindTracker:
    state: PrintState = PrintState.IDLE
    error: PrintError | None = None
    generation: int = 0


class PrintController:

    def __init__(
        self,
        gateway: PrintServiceGateway,
        restaurant: RestaurantInfo,
        health_interval: float = DEFAULT_HEALTH_INTERVAL,
        probe_retries: int = 0,
    ) -> None:
        self._gateway = gateway
        self._restaurant = restaurant
        self._health_interval = health_interval
        self._probe_retries = probe_retries

        self._health = HealthState.UNKNOWN
        self._service_error: ServiceError | None = None
        self._probe_generation = 0
        self._trackers = {kind: _KindTracker() for kind in DocumentKind}

        self._observers: list[Observer] = []
        self._health_task: asyncio.Task | None = None

    # --- Read model -----------------------------------------------------------

    def snapshot(self) -> PrintStatusSnapshot:
        order = self._trackers[DocumentKind.ORDER]
        invoice = self._trackers[DocumentKind.INVOICE]
        return PrintStatusSnapshot(
            health=self._health,
            service_error=self._service_error,
            order_state=order.state,
            invoice_state=invoice.state,
            order_error=order.error,
            invoice_error=invoice.error,
        )

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Call *observer* with a fresh snapshot after every state change."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    # --- Printing -------------------------------------------------------------

    async def print_order(
        self,
        order: OrderRecord,
        order_items: list[OrderItemRecord],
    ) -> PrintOutcome:
        """Print a kitchen ticket.  Never raises for print failures."""
        return await self._print(
            DocumentKind.ORDER,
            lambda: to_print_order_request(order, order_items),
            self._gateway.send_order,
        )

    async def print_invoice(
        self,
        order: OrderRecord,
        order_items: list[OrderItemRecord],
        payment: PaymentRecord | None,
    ) -> PrintOutcome:
        """Print a customer invoice.  Never raises for print failures."""
        return await self._print(
            DocumentKind.INVOICE,
            lambda: to_print_invoice_request(order, order_items, payment, self._restaurant),
            self._gateway.send_invoice,
        )

    def reset_order_error(self) -> None:
        self._reset(DocumentKind.ORDER)

    def reset_invoice_error(self) -> None:
        self._reset(DocumentKind.INVOICE)

    async def _print(self, kind: DocumentKind, build, send) -> PrintOutcome:
        tracker = self._trackers[kind]
        tracker.generation += 1
        attempt = tracker.generation

        if self._health == HealthState.UNAVAILABLE:
            error = PrintError(
                PrintErrorKind.SERVICE_UNAVAILABLE,
                "Print service is unavailable",
            )
            logger.warning("%s print refused: service unavailable", kind.value)
            return self._finish(kind, attempt, PrintOutcome(kind, error=error))

        self._transition(kind, PrintState.PRINTING, None)

        try:
            outcome = await self._dispatch(kind, build, send)
        except asyncio.CancelledError:
            error = PrintError(PrintErrorKind.UNEXPECTED, f"{kind.value} print was cancelled")
            self._finish(kind, attempt, PrintOutcome(kind, error=error))
            raise
        except Exception as exc:
            logger.exception("Unexpected error while printing %s", kind.value)
            error = PrintError(PrintErrorKind.UNEXPECTED, f"{exc.__class__.__name__}: {exc}")
            outcome = PrintOutcome(kind, error=error)
        return self._finish(kind, attempt, outcome)

    async def _dispatch(self, kind: DocumentKind, build, send) -> PrintOutcome:
        try:
            document = build()
        except DomainException as exc:
            return PrintOutcome(kind, error=PrintError(PrintErrorKind.INVALID_RECORD, str(exc)))

        result = validate_before_sending(document)
        if not result.is_valid:
            error = PrintError(
                PrintErrorKind.CONTRACT_VIOLATION,
                f"Invalid {kind.value} document: {result.summary()}",
                violations=result.violations,
            )
            logger.warning("%s #%s failed validation: %s", kind.value, document.order_id, result.summary())
            return PrintOutcome(kind, error=error)

        logger.info("Sending %s #%s for printing", kind.value, document.order_id)
        response = await send(result.validated)

        if isinstance(response, ServiceError):
            return PrintOutcome(kind, error=_from_service_error(response))
        if not response.success:
            error = PrintError(
                PrintErrorKind.BACKEND_REJECTED,
                response.message or "Print service rejected the document",
            )
            return PrintOutcome(kind, response=response, error=error)
        return PrintOutcome(kind, response=response)

    def _finish(self, kind: DocumentKind, attempt: int, outcome: PrintOutcome) -> PrintOutcome:
        if attempt != self._trackers[kind].generation:
            logger.debug("Discarding stale %s result (attempt %d)", kind.value, attempt)
            return outcome
        if outcome.success:
            logger.info("%s printed", kind.value)
            self._transition(kind, PrintState.SUCCESS, None)
        else:
            logger.error("%s print failed: %s", kind.value, outcome.error)
            self._transition(kind, PrintState.FAILED, outcome.error)
        return outcome

    def _transition(self, kind: DocumentKind, state: PrintState, error: PrintError | None) -> None:
        tracker = self._trackers[kind]
        tracker.state = state
        tracker.error = error
        self._notify()

    def _reset(self, kind: DocumentKind) -> None:
        tracker = self._trackers[kind]
        if tracker.state == PrintState.PRINTING:
            tracker.error = None
            self._notify()
        else:
            self._transition(kind, PrintState.IDLE, None)

    # --- Health ---------------------------------------------------------------

    async def refresh_health(self) -> HealthState:
        """Probe the backend now.  Supersedes any probe already in flight."""
        self._probe_generation += 1
        probe = self._probe_generation
        self._health = HealthState.CHECKING
        self._notify()

        result = await self._gateway.check_availability()
        retries = self._probe_retries
        while (
            retries > 0
            and probe == self._probe_generation
            and isinstance(result, ServiceError)
            and result.kind in _RETRYABLE_PROBE_ERRORS
        ):
            retries -= 1
            logger.debug("Health probe failed (%s), retrying", result)
            result = await self._gateway.check_availability()

        if probe != self._probe_generation:
            logger.debug("Discarding superseded health probe %d", probe)
            return self._health

        if isinstance(result, ServiceError):
            self._health = HealthState.UNAVAILABLE
            self._service_error = result
            logger.warning("Print service unreachable: %s", result)
        else:
            self._health = HealthState.AVAILABLE if result else HealthState.UNAVAILABLE
            self._service_error = None
            logger.info("Print service health: %s", self._health.value)
        self._notify()
        return self._health

    def start(self) -> None:
        """Start the recurring health probe on the running event loop."""
        if self._health_task is None or self._health_task.done():
            self._health_task = asyncio.get_running_loop().create_task(self._health_loop())

    async def stop(self) -> None:
        task, self._health_task = self._health_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _health_loop(self) -> None:
        while True:
            await self.refresh_health()
            await asyncio.sleep(self._health_interval)

    # --- Internal helpers -----------------------------------------------------

    def _notify(self) -> None:
        if not self._observers:
            return
        snapshot = self.snapshot()
        for observer in list(self._observers):
            observer(snapshot)


def _from_service_error(error: ServiceError) -> PrintError:
    if error.kind == ServiceErrorKind.REJECTED_BY_BACKEND:
        return PrintError(PrintErrorKind.BACKEND_REJECTED, error.message, code=error.code)
    return PrintError(PrintErrorKind.TRANSPORT, str(error), code=error.kind.value)
