"""Abstract read-only access to the order store."""

from __future__ import annotations

from abc import ABC, abstractmethod

from posprint.domain.model.records import OrderItemRecord, OrderRecord, PaymentRecord


class OrderSource(ABC):

    @abstractmethod
    def get_order(self, order_id: int | str) -> OrderRecord | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_items(self, order_id: int | str) -> list[OrderItemRecord]:
        """Return the order's items in the order they were taken."""

    @abstractmethod
    def get_payment(self, order_id: int | str) -> PaymentRecord | None:
        """Return the order's payment, or None if it is not paid yet."""
