"""CLI commands for kitchen tickets."""

from __future__ import annotations

import asyncio

import click

from posprint.domain.exceptions import DomainException, EntityNotFoundError
from posprint.domain.service.contract_validator import validate_before_sending
from posprint.domain.service.print_transformer import to_print_order_request
from posprint.infrastructure.bootstrap import order_source
from posprint.infrastructure.cli.common import echo_outcome, echo_validation, with_controller


def _load(settings, order_id: str):
    source = order_source(settings)
    order = source.get_order(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order #{order_id} not found")
    return order, source.get_items(order_id)


@click.command("preview")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.pass_obj
def order_preview(settings, order_id: str) -> None:
    """Show the ticket that would be sent, without sending it."""
    try:
        order, items = _load(settings, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_validation(validate_before_sending(to_print_order_request(order, items)))


@click.command("print")
@click.option("--id", "order_id", required=True, help="Order ID to print.")
@click.pass_obj
def order_print(settings, order_id: str) -> None:
    """Send the kitchen ticket for an order to the station printers."""
    try:
        order, items = _load(settings, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    async def _print(controller):
        outcome = await controller.print_order(order, items)
        echo_outcome(outcome, controller)

    asyncio.run(with_controller(settings, _print))
