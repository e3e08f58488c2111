"""CLI commands for the print service itself."""

from __future__ import annotations

import asyncio

import click

from posprint.application.status_indicator import INDICATOR_LABELS, resolve_indicator
from posprint.infrastructure.bootstrap import print_client
from posprint.infrastructure.cli.common import with_controller


@click.command("health")
@click.pass_obj
def service_health(settings) -> None:
    """Probe the print service once."""

    async def _probe():
        async with print_client(settings) as client:
            return client.config(), await client.check_availability()

    config, result = asyncio.run(_probe())
    click.echo(f"Print service: {config.base_url}  (timeout {config.timeout}s)")
    if result is True:
        click.echo("Status: available")
    elif result is False:
        raise click.ClickException("Status: unhealthy (health endpoint returned an error)")
    else:
        raise click.ClickException(f"Status: unavailable ({result})")


@click.command("status")
@click.pass_obj
def service_status(settings) -> None:
    """Show what the print status badge would display right now."""
    async def _snapshot(controller):
        return controller.snapshot()

    snapshot = asyncio.run(with_controller(settings, _snapshot))
    click.echo(INDICATOR_LABELS[resolve_indicator(snapshot)])
    if snapshot.service_error is not None:
        click.echo(f"  {snapshot.service_error}")
