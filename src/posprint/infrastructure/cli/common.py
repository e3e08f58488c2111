"""Helpers shared by the CLI commands."""

from __future__ import annotations

import json
from typing import Awaitable, Callable

import click

from posprint.application.dto import PrintOutcome
from posprint.application.print_controller import PrintController
from posprint.application.status_indicator import INDICATOR_LABELS, resolve_indicator
from posprint.domain.service.contract_validator import ValidationResult
from posprint.infrastructure.bootstrap import print_client, print_controller
from posprint.infrastructure.config import Settings


async def with_controller(
    settings: Settings,
    action: Callable[[PrintController], Awaitable],
):
    """Run *action* against a freshly probed controller, then close the client."""
    async with print_client(settings) as client:
        controller = print_controller(settings, client)
        await controller.refresh_health()
        return await action(controller)


def echo_validation(result: ValidationResult) -> None:
    if result.is_valid:
        payload = result.validated.document.to_payload()
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return
    click.echo("Document fails the print contract:", err=True)
    for violation in result.violations:
        click.echo(f"  - {violation.field} ({violation.code.value}): {violation.message}", err=True)
    raise click.exceptions.Exit(1)


def echo_outcome(outcome: PrintOutcome, controller: PrintController) -> None:
    label = INDICATOR_LABELS[resolve_indicator(controller.snapshot())]
    if outcome.success:
        job = f" (job {outcome.response.job_id})" if outcome.response.job_id else ""
        click.echo(f"{outcome.kind.value.capitalize()} sent to printer{job}.  [{label}]")
        return
    error = outcome.error
    raise click.ClickException(f"{error.kind.value}: {error.message}  [{label}]")
