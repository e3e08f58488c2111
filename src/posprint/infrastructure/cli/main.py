import logging

import click

from posprint.domain.exceptions import ConfigurationError
from posprint.infrastructure.cli.invoice_commands import invoice_preview, invoice_print
from posprint.infrastructure.cli.order_commands import order_preview, order_print
from posprint.infrastructure.cli.service_commands import service_health, service_status
from posprint.infrastructure.config import load_settings


@click.group()
@click.option("--env-file", default=".env", show_default=True, help="Dotenv file to load.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log pipeline activity.")
@click.pass_context
def cli(ctx: click.Context, env_file: str, verbose: bool) -> None:
    """posprint — kitchen ticket and invoice print dispatch"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        ctx.obj = load_settings(env_file)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))


@cli.group()
def order() -> None:
    """Kitchen tickets."""


@cli.group()
def invoice() -> None:
    """Customer invoices."""


# Register subcommands
cli.add_command(service_health)
cli.add_command(service_status)
order.add_command(order_preview)
order.add_command(order_print)
invoice.add_command(invoice_preview)
invoice.add_command(invoice_print)
