"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  Settings are passed in,
never read from module globals.
"""

from __future__ import annotations

from posprint.application.print_controller import PrintController
from posprint.infrastructure.config import Settings
from posprint.infrastructure.http.httpx_print_client import HttpxPrintClient
from posprint.infrastructure.persistence.json_order_source import JsonOrderSource


def print_client(settings: Settings) -> HttpxPrintClient:
    return HttpxPrintClient(settings.PRINT_API_URL, settings.PRINT_API_TIMEOUT)


def order_source(settings: Settings) -> JsonOrderSource:
    return JsonOrderSource(settings.ORDER_STORE_PATH)


def print_controller(settings: Settings, client: HttpxPrintClient) -> PrintController:
    return PrintController(
        gateway=client,
        restaurant=settings.restaurant,
        health_interval=settings.PRINT_HEALTH_INTERVAL,
        probe_retries=settings.PRINT_HEALTH_RETRIES,
    )
