"""Unit tests for the business rules of the store records."""

from decimal import Decimal

import pytest

from posprint.domain.exceptions import ValidationError
from posprint.domain.model.records import (
    OrderItemRecord,
    OrderRecord,
    PaymentMethod,
    PaymentRecord,
)
from posprint.domain.model.value_objects import TipPercentage


class TestPaymentRecord:

    def test_tip_amount_only(self):
        payment = PaymentRecord(method=PaymentMethod.CARD, tip_amount=2000)
        assert payment.tip_amount == 2000
        assert payment.tip_percentage is None

    def test_tip_percentage_only(self):
        payment = PaymentRecord(
            method=PaymentMethod.CARD, tip_percentage=TipPercentage(Decimal("10"))
        )
        assert payment.tip_percentage.value == Decimal("10")

    def test_amount_and_percentage_rejected(self):
        with pytest.raises(ValidationError, match="both a tip amount and a tip percentage"):
            PaymentRecord(
                method=PaymentMethod.CARD,
                tip_amount=2000,
                tip_percentage=TipPercentage(Decimal("10")),
            )

    def test_negative_tip_rejected(self):
        with pytest.raises(ValidationError, match="tip_amount: Money amount cannot be negative"):
            PaymentRecord(method=PaymentMethod.CARD, tip_amount=-1)

    def test_cash_requires_received_amount(self):
        with pytest.raises(ValidationError, match="Received amount is required"):
            PaymentRecord(method=PaymentMethod.CASH)

    def test_cash_with_received_amount(self):
        payment = PaymentRecord(method=PaymentMethod.CASH, received_amount=50000)
        assert payment.method_name == "Efectivo"

    def test_fractional_tip_rejected(self):
        with pytest.raises(ValidationError, match="tip_amount"):
            PaymentRecord(method=PaymentMethod.CARD, tip_amount=100.25)

    def test_fractional_received_amount_rejected(self):
        with pytest.raises(ValidationError, match="received_amount"):
            PaymentRecord(method=PaymentMethod.CASH, received_amount=50000.5)


class TestOrderRecords:

    def test_item_amounts_are_whole_minor_units(self):
        item = OrderItemRecord(name="Tamal", quantity=2, unit_price=8000)
        assert item.unit_price == 8000

    def test_fractional_unit_price_rejected(self):
        with pytest.raises(ValidationError, match="unit_price of 'Tamal'"):
            OrderItemRecord(name="Tamal", quantity=1, unit_price=8000.5)

    def test_missing_unit_price_rejected(self):
        with pytest.raises(ValidationError, match="unit_price of 'Tamal'"):
            OrderItemRecord(name="Tamal", quantity=1, unit_price=None)

    def test_non_int_quantity_rejected(self):
        with pytest.raises(ValidationError, match="Quantity of 'Tamal'"):
            OrderItemRecord(name="Tamal", quantity=1.5, unit_price=8000)

    def test_zero_quantity_left_to_the_print_contract(self):
        assert OrderItemRecord(name="Tamal", quantity=0, unit_price=8000).quantity == 0

    def test_fractional_tax_rejected(self):
        with pytest.raises(ValidationError, match="tax_amount"):
            OrderRecord(id=42, table_id=5, tax_amount=10.1)

    def test_fractional_discount_rejected(self):
        with pytest.raises(ValidationError, match="discount_amount"):
            OrderRecord(id=42, table_id=5, discount_amount=Decimal("500.5"))
