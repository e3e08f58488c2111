"""CLI commands for customer invoices."""

from __future__ import annotations

import asyncio

import click

from posprint.domain.exceptions import DomainException, EntityNotFoundError
from posprint.domain.model.value_objects import Money
from posprint.domain.service.contract_validator import validate_before_sending
from posprint.domain.service.print_transformer import to_print_invoice_request
from posprint.infrastructure.bootstrap import order_source
from posprint.infrastructure.cli.common import echo_outcome, echo_validation, with_controller


def _load(settings, order_id: str):
    source = order_source(settings)
    order = source.get_order(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order #{order_id} not found")
    return order, source.get_items(order_id), source.get_payment(order_id)


def _fmt(amount: int) -> str:
    if amount < 0:
        return f"-{Money(-amount)}"
    return str(Money(amount))


def _display_invoice(invoice) -> None:
    click.echo(f"Invoice for order #{invoice.order_id}  (table {invoice.table_id})", err=True)
    click.echo(f"  {'Item':<20} {'Qty':>5} {'Price':>10} {'Total':>10}", err=True)
    click.echo(f"  {'-'*47}", err=True)
    for item in invoice.items:
        click.echo(
            f"  {item.name:<20} {item.quantity:>5} "
            f"{_fmt(item.unit_price):>10} {_fmt(item.subtotal):>10}",
            err=True,
        )
    click.echo(f"  {'-'*47}", err=True)
    for label, amount in (
        ("Subtotal", invoice.subtotal),
        ("Tax", invoice.tax_amount),
        ("Tip", invoice.tip_amount),
        ("Discount", invoice.discount_amount),
    ):
        if amount:
            click.echo(f"  {label:<27} {_fmt(amount):>20}", err=True)
    click.echo(f"  {'Grand Total':<27} {_fmt(invoice.grand_total):>20}", err=True)


@click.command("preview")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.pass_obj
def invoice_preview(settings, order_id: str) -> None:
    """Show the invoice that would be sent, without sending it."""
    try:
        order, items, payment = _load(settings, order_id)
        invoice = to_print_invoice_request(order, items, payment, settings.restaurant)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(invoice)
    echo_validation(validate_before_sending(invoice))


@click.command("print")
@click.option("--id", "order_id", required=True, help="Order ID to invoice.")
@click.pass_obj
def invoice_print(settings, order_id: str) -> None:
    """Send the customer invoice for a paid order to the printer."""
    try:
        order, items, payment = _load(settings, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    async def _print(controller):
        outcome = await controller.print_invoice(order, items, payment)
        echo_outcome(outcome, controller)

    asyncio.run(with_controller(settings, _print))
