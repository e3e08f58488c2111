"""JSON-file-backed implementation of OrderSource.

Reads an export of the order store: a list of orders, each with its
``items`` and an optional ``payment``.  Read-only.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from posprint.domain.exceptions import EntityNotFoundError, ValidationError
from posprint.domain.model.records import (
    OrderItemRecord,
    OrderRecord,
    PaymentMethod,
    PaymentRecord,
)
from posprint.domain.model.value_objects import TipPercentage
from posprint.domain.repository.order_source import OrderSource


class JsonOrderSource(OrderSource):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- OrderSource interface ------------------------------------------------

    def get_order(self, order_id: int | str) -> OrderRecord | None:
        raw = self._find(order_id)
        return self._to_order(raw) if raw is not None else None

    def get_items(self, order_id: int | str) -> list[OrderItemRecord]:
        raw = self._find(order_id)
        if raw is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return [self._to_item(i) for i in raw.get("items", [])]

    def get_payment(self, order_id: int | str) -> PaymentRecord | None:
        raw = self._find(order_id)
        if raw is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        payment = raw.get("payment")
        return self._to_payment(payment) if payment else None

    # --- Deserialization ------------------------------------------------------

    @staticmethod
    def _to_order(raw: dict) -> OrderRecord:
        return OrderRecord(
            id=raw["id"],
            table_id=raw["table_id"],
            status=raw.get("status", "pending"),
            total=raw.get("total", 0),
            created_at=datetime.fromisoformat(raw["created_at"]),
            notes=raw.get("notes"),
            diners_count=raw.get("diners_count", 1),
            waiter_name=raw.get("waiter_name"),
            tax_amount=raw.get("tax_amount"),
            discount_amount=raw.get("discount_amount"),
        )

    @staticmethod
    def _to_item(raw: dict) -> OrderItemRecord:
        return OrderItemRecord(
            name=raw["name"],
            quantity=raw["quantity"],
            unit_price=raw.get("unit_price", 0),
            station=raw.get("station"),
            modifiers=tuple(raw.get("modifiers", ())),
            notes=raw.get("notes"),
        )

    @staticmethod
    def _to_payment(raw: dict) -> PaymentRecord:
        try:
            method = PaymentMethod(str(raw["method"]).lower())
        except ValueError as exc:
            raise ValidationError(f"Unknown payment method: {raw['method']!r}") from exc
        percentage = raw.get("tip_percentage")
        return PaymentRecord(
            method=method,
            tip_amount=raw.get("tip_amount"),
            tip_percentage=TipPercentage.of(percentage) if percentage is not None else None,
            received_amount=raw.get("received_amount"),
        )

    # --- File helpers ---------------------------------------------------------

    def _find(self, order_id: int | str) -> dict | None:
        for raw in self._load_raw():
            if str(raw["id"]) == str(order_id):
                return raw
        return None

    def _load_raw(self) -> list[dict]:
        if not self._file_path.exists():
            raise EntityNotFoundError(f"Order store not found: {self._file_path}")
        return json.loads(self._file_path.read_text(encoding="utf-8"))
