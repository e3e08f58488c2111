"""Tests for the httpx print client against a mocked transport."""

import asyncio
import json

import httpx
import pytest

from posprint.domain.gateway.print_service import ServiceErrorKind
from posprint.domain.model.documents import PrintInvoiceResponse, PrintOrderResponse
from posprint.domain.service.contract_validator import validate_before_sending
from posprint.domain.service.print_transformer import (
    to_print_invoice_request,
    to_print_order_request,
)
from posprint.infrastructure.http.httpx_print_client import HttpxPrintClient
from tests.fakes import RESTAURANT, items_42, order_42, tip_10_percent

BASE_URL = "http://printer.local:8000"


def _run(handler, call):
    """Build a client on a mock transport, run *call* against it, close it."""
    requests: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    async def scenario():
        async with HttpxPrintClient(BASE_URL, 2.0, transport=httpx.MockTransport(recording)) as client:
            return await call(client)

    return asyncio.run(scenario()), requests


def _valid_ticket():
    return validate_before_sending(to_print_order_request(order_42(), items_42())).validated


def _valid_invoice():
    invoice = to_print_invoice_request(order_42(), items_42(), tip_10_percent(), RESTAURANT)
    return validate_before_sending(invoice).validated


class TestHealthCheck:

    def test_healthy(self):
        result, requests = _run(lambda r: httpx.Response(200, json={"status": "ok"}),
                                lambda c: c.check_availability())
        assert result is True
        assert requests[0].method == "GET"
        assert requests[0].url == httpx.URL(f"{BASE_URL}/api/health")

    def test_unhealthy_status(self):
        result, _ = _run(lambda r: httpx.Response(503), lambda c: c.check_availability())
        assert result is False

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        result, _ = _run(handler, lambda c: c.check_availability())
        assert result.kind == ServiceErrorKind.TIMEOUT

    def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result, _ = _run(handler, lambda c: c.check_availability())
        assert result.kind == ServiceErrorKind.UNREACHABLE
        assert "connection refused" in result.message


class TestSendOrder:

    def test_posts_ticket_payload(self):
        body = {"success": True, "message": "ok", "job_id": 77, "printed_stations": ["Cocina", "Bar"]}
        result, requests = _run(lambda r: httpx.Response(200, json=body),
                                lambda c: c.send_order(_valid_ticket()))

        assert result == PrintOrderResponse(
            success=True, job_id="77", message="ok", printed_stations=("Cocina", "Bar")
        )
        request = requests[0]
        assert request.method == "POST"
        assert request.url.path == "/api/orders/print"
        payload = json.loads(request.content)
        assert payload["order_id"] == "42"
        assert payload["table_number"] == "5"
        assert [g["print_station"] for g in payload["print_groups"]] == ["Cocina", "Bar"]
        assert payload["print_groups"][0]["items"][0] == {
            "menu_item_name": "Tamal", "quantity": 2, "notes": [],
        }

    def test_structured_rejection(self):
        body = {"code": "PAPER_OUT", "message": "Impresora sin papel"}
        result, _ = _run(lambda r: httpx.Response(409, json=body),
                         lambda c: c.send_order(_valid_ticket()))
        assert result.kind == ServiceErrorKind.REJECTED_BY_BACKEND
        assert result.code == "PAPER_OUT"
        assert result.message == "Impresora sin papel"

    def test_unstructured_rejection(self):
        result, _ = _run(lambda r: httpx.Response(500, text="boom"),
                         lambda c: c.send_order(_valid_ticket()))
        assert result.kind == ServiceErrorKind.REJECTED_BY_BACKEND
        assert result.code == "HTTP_ERROR"
        assert result.message.startswith("HTTP 500")

    def test_malformed_response(self):
        result, _ = _run(lambda r: httpx.Response(200, text="<html>"),
                         lambda c: c.send_order(_valid_ticket()))
        assert result.kind == ServiceErrorKind.MALFORMED_RESPONSE

    def test_timeout_during_dispatch(self):
        def handler(request):
            raise httpx.WriteTimeout("timed out", request=request)

        result, _ = _run(handler, lambda c: c.send_order(_valid_ticket()))
        assert result.kind == ServiceErrorKind.TIMEOUT

    def test_undecodable_body(self):
        def handler(request):
            raise httpx.DecodingError("Error -3 while decompressing data", request=request)

        result, _ = _run(handler, lambda c: c.send_order(_valid_ticket()))
        assert result.kind == ServiceErrorKind.MALFORMED_RESPONSE

    def test_redirect_loop(self):
        def handler(request):
            raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=request)

        result, _ = _run(handler, lambda c: c.send_invoice(_valid_invoice()))
        assert result.kind == ServiceErrorKind.UNREACHABLE
        assert "redirects" in result.message

    def test_unvalidated_document_is_a_programmer_error(self):
        ticket = to_print_order_request(order_42(), items_42())
        with pytest.raises(TypeError, match="validated PrintOrderRequest"):
            _run(lambda r: httpx.Response(200, json={}), lambda c: c.send_order(ticket))

    def test_invoice_sent_to_order_endpoint_rejected(self):
        with pytest.raises(TypeError):
            _run(lambda r: httpx.Response(200, json={}), lambda c: c.send_order(_valid_invoice()))


class TestSendInvoice:

    def test_posts_invoice_payload(self):
        body = {"success": True, "message": "ok", "invoice_number": "FV-0012"}
        result, requests = _run(lambda r: httpx.Response(200, json=body),
                                lambda c: c.send_invoice(_valid_invoice()))

        assert result == PrintInvoiceResponse(success=True, job_id="FV-0012", message="ok")
        payload = json.loads(requests[0].content)
        assert requests[0].url.path == "/api/orders/invoice"
        assert payload["subtotal"] == 21000
        assert payload["tip_amount"] == 2100
        assert payload["grand_total"] == 23100
        assert payload["restaurant_info"]["tax_id"] == RESTAURANT.tax_id
        assert payload["payment"]["method"] == "card"


class TestConfig:

    def test_reports_endpoint(self):
        client = HttpxPrintClient(BASE_URL + "/", 3.5)
        config = client.config()
        asyncio.run(client.aclose())
        assert config.base_url == BASE_URL
        assert config.timeout == 3.5
        assert config.is_configured
