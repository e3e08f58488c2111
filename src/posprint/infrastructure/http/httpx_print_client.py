"""httpx-backed implementation of PrintServiceGateway.

One request per call, no retries.  Transport and protocol failures come
back as ``ServiceError`` values.
"""

from __future__ import annotations

import logging

import httpx

from posprint.domain.gateway.print_service import (
    PrintServiceGateway,
    ServiceConfig,
    ServiceError,
)
from posprint.domain.model.documents import (
    PrintInvoiceRequest,
    PrintInvoiceResponse,
    PrintOrderRequest,
    PrintOrderResponse,
)
from posprint.domain.service.contract_validator import ValidatedDocument

logger = logging.getLogger(__name__)

HEALTH_PATH = "/api/health"
ORDER_PATH = "/api/orders/print"
INVOICE_PATH = "/api/orders/invoice"


class HttpxPrintClient(PrintServiceGateway):

    def __init__(
        self,
        base_url: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> HttpxPrintClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def config(self) -> ServiceConfig:
        return ServiceConfig(base_url=self._base_url, timeout=self._timeout)

    # --- PrintServiceGateway interface ----------------------------------------

    async def check_availability(self) -> bool | ServiceError:
        response = await self._request("GET", HEALTH_PATH)
        if isinstance(response, ServiceError):
            return response
        return response.is_success

    async def send_order(
        self, validated: ValidatedDocument[PrintOrderRequest]
    ) -> PrintOrderResponse | ServiceError:
        order = _unwrap(validated, PrintOrderRequest)
        logger.info(
            "Sending ticket for order #%s (table %s, stations: %s)",
            order.order_id, order.table_id, ", ".join(g.station for g in order.groups),
        )
        body = await self._submit(ORDER_PATH, order.to_payload())
        if isinstance(body, ServiceError):
            return body
        return PrintOrderResponse(
            success=bool(body.get("success", True)),
            job_id=_job_id(body, "job_id"),
            message=body.get("message"),
            printed_stations=tuple(body.get("printed_stations") or ()),
        )

    async def send_invoice(
        self, validated: ValidatedDocument[PrintInvoiceRequest]
    ) -> PrintInvoiceResponse | ServiceError:
        invoice = _unwrap(validated, PrintInvoiceRequest)
        logger.info(
            "Sending invoice for order #%s (table %s, total %s)",
            invoice.order_id, invoice.table_id, invoice.grand_total,
        )
        body = await self._submit(INVOICE_PATH, invoice.to_payload())
        if isinstance(body, ServiceError):
            return body
        return PrintInvoiceResponse(
            success=bool(body.get("success", True)),
            job_id=_job_id(body, "job_id", "invoice_number"),
            message=body.get("message"),
        )

    # --- HTTP helpers ---------------------------------------------------------

    async def _request(self, method: str, path: str, payload: dict | None = None) -> httpx.Response | ServiceError:
        try:
            return await self._client.request(method, path, json=payload)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out after %ss", method, path, self._timeout)
            return ServiceError.timeout(f"No response within {self._timeout}s ({exc.__class__.__name__})")
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            return ServiceError.unreachable(f"Cannot reach print service: {exc}")
        except httpx.DecodingError as exc:
            logger.warning("%s %s returned an undecodable body: %s", method, path, exc)
            return ServiceError.malformed(f"Undecodable response from print service: {exc}")
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            return ServiceError.unreachable(f"Print service request failed: {exc}")

    async def _submit(self, path: str, payload: dict) -> dict | ServiceError:
        response = await self._request("POST", path, payload)
        if isinstance(response, ServiceError):
            return response

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            data = body if isinstance(body, dict) else {}
            return ServiceError.rejected(
                str(data.get("code") or "HTTP_ERROR"),
                data.get("message") or f"HTTP {response.status_code}: {response.reason_phrase}",
            )
        if not isinstance(body, dict):
            return ServiceError.malformed(
                f"Expected a JSON object from {path}, got {response.text[:100]!r}"
            )
        return body


def _unwrap(validated: ValidatedDocument, expected: type):
    if not isinstance(validated, ValidatedDocument) or not isinstance(validated.document, expected):
        raise TypeError(
            f"Expected a validated {expected.__name__}, got {type(validated).__name__}"
        )
    return validated.document


def _job_id(body: dict, *keys: str) -> str | None:
    for key in keys:
        if body.get(key) is not None:
            return str(body[key])
    return None
