"""Unit tests for the print contract checks."""

from dataclasses import replace

import pytest

from posprint.domain.model.documents import InvoiceMenuItem, PrintGroup, PrintMenuItem
from posprint.domain.service.contract_validator import (
    ValidatedDocument,
    ViolationCode,
    validate_before_sending,
)
from posprint.domain.service.print_transformer import (
    to_print_invoice_request,
    to_print_order_request,
)
from tests.fakes import RESTAURANT, items_42, order_42, tip_10_percent


def _ticket():
    return to_print_order_request(order_42(), items_42())


def _invoice():
    return to_print_invoice_request(order_42(), items_42(), tip_10_percent(), RESTAURANT)


def _codes(result) -> dict[str, ViolationCode]:
    return {v.field: v.code for v in result.violations}


class TestOrderContract:

    def test_valid_ticket_passes_unchanged(self):
        ticket = _ticket()
        result = validate_before_sending(ticket)
        assert result.is_valid
        assert result.validated.document is ticket
        assert result.violations == ()

    def test_missing_identity(self):
        result = validate_before_sending(replace(_ticket(), order_id="", table_id="  "))
        assert not result.is_valid
        assert _codes(result) == {
            "order_id": ViolationCode.MISSING,
            "table_id": ViolationCode.MISSING,
        }

    def test_no_items(self):
        result = validate_before_sending(replace(_ticket(), groups=()))
        assert _codes(result) == {"groups": ViolationCode.EMPTY}

    def test_zero_quantity(self):
        group = PrintGroup("Cocina", (PrintMenuItem("Tamal", 0, "Cocina"),))
        result = validate_before_sending(replace(_ticket(), groups=(group,)))
        assert _codes(result) == {"groups[0].items[0].quantity": ViolationCode.NOT_POSITIVE}

    def test_empty_station(self):
        group = PrintGroup("", (PrintMenuItem("Tamal", 1, ""),))
        result = validate_before_sending(replace(_ticket(), groups=(group,)))
        assert _codes(result) == {"groups[0].station": ViolationCode.MISSING}

    def test_item_in_wrong_group(self):
        group = PrintGroup("Cocina", (PrintMenuItem("Limonada", 1, "Bar"),))
        result = validate_before_sending(replace(_ticket(), groups=(group,)))
        assert _codes(result) == {"groups[0].items[0].station": ViolationCode.WRONG_GROUP}

    def test_station_split_across_groups(self):
        first = PrintGroup("Cocina", (PrintMenuItem("Tamal", 1, "Cocina"),))
        second = PrintGroup("Cocina", (PrintMenuItem("Arepa", 1, "Cocina"),))
        result = validate_before_sending(replace(_ticket(), groups=(first, second)))
        assert _codes(result) == {"groups[1].station": ViolationCode.DUPLICATE}

    def test_empty_group(self):
        groups = _ticket().groups + (PrintGroup("Postres", ()),)
        result = validate_before_sending(replace(_ticket(), groups=groups))
        assert _codes(result) == {"groups[2].items": ViolationCode.EMPTY}


class TestInvoiceContract:

    def test_valid_invoice_passes(self):
        result = validate_before_sending(_invoice())
        assert result.is_valid

    def test_grand_total_off_by_one_rejected(self):
        invoice = _invoice()
        result = validate_before_sending(replace(invoice, grand_total=invoice.grand_total + 1))
        assert _codes(result) == {"grand_total": ViolationCode.MISMATCH}
        assert "expected 23100, got 23101" in result.summary()

    def test_negative_unit_price(self):
        items = (InvoiceMenuItem("Tamal", 1, -100, -100),)
        invoice = replace(_invoice(), items=items, subtotal=-100, tip_amount=None, grand_total=-100)
        result = validate_before_sending(invoice)
        assert _codes(result)["items[0].unit_price"] == ViolationCode.NEGATIVE

    def test_line_subtotal_mismatch(self):
        invoice = _invoice()
        items = (replace(invoice.items[0], subtotal=15999),) + invoice.items[1:]
        result = validate_before_sending(replace(invoice, items=items))
        codes = _codes(result)
        assert codes["items[0].subtotal"] == ViolationCode.MISMATCH

    def test_negative_adjustment(self):
        invoice = _invoice()
        result = validate_before_sending(
            replace(invoice, discount_amount=-500, grand_total=invoice.grand_total + 500)
        )
        assert _codes(result) == {"discount_amount": ViolationCode.NEGATIVE}

    def test_discount_larger_than_bill(self):
        invoice = _invoice()
        result = validate_before_sending(replace(invoice, discount_amount=30000, grand_total=23100 - 30000))
        assert _codes(result) == {"grand_total": ViolationCode.NEGATIVE}

    def test_fractional_amounts_rejected(self):
        invoice = _invoice()
        items = (replace(invoice.items[0], unit_price=8000.5, subtotal=16001.0),) + invoice.items[1:]
        result = validate_before_sending(
            replace(invoice, items=items, subtotal=21001.0, tax_amount=10.1, grand_total=23111.2)
        )
        codes = _codes(result)
        assert not result.is_valid
        assert codes["items[0].unit_price"] == ViolationCode.NOT_INTEGER
        assert codes["items[0].subtotal"] == ViolationCode.NOT_INTEGER
        assert codes["subtotal"] == ViolationCode.NOT_INTEGER
        assert codes["tax_amount"] == ViolationCode.NOT_INTEGER
        assert codes["grand_total"] == ViolationCode.NOT_INTEGER

    def test_bool_and_none_amounts_rejected(self):
        invoice = _invoice()
        items = (replace(invoice.items[0], unit_price=None),) + invoice.items[1:]
        result = validate_before_sending(replace(invoice, items=items, tip_amount=True))
        codes = _codes(result)
        assert codes["items[0].unit_price"] == ViolationCode.NOT_INTEGER
        assert codes["tip_amount"] == ViolationCode.NOT_INTEGER
        assert "grand_total" not in codes

    def test_fractional_change_rejected(self):
        invoice = _invoice()
        payment = replace(invoice.payment, change_amount=0.5)
        result = validate_before_sending(replace(invoice, payment=payment))
        assert _codes(result) == {"payment.change_amount": ViolationCode.NOT_INTEGER}

    def test_missing_restaurant_name(self):
        result = validate_before_sending(replace(_invoice(), restaurant=replace(RESTAURANT, name="")))
        assert _codes(result) == {"restaurant.name": ViolationCode.MISSING}


class TestValidatedDocument:

    def test_cannot_be_built_outside_the_validator(self):
        with pytest.raises(TypeError, match="validate_before_sending"):
            ValidatedDocument(_ticket())

    def test_non_document_rejected(self):
        with pytest.raises(TypeError, match="Not a print document"):
            validate_before_sending({"order_id": 42})
