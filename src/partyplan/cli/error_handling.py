"""CLI error handling helpers."""

import json

import click

from partyplan.domain.errors import DomainError, ValidationError
from partyplan.domain.serialization import failure


def handle_domain_error(
    ctx: click.Context, error: DomainError | ValueError, as_json: bool = False
) -> None:
    """Render a domain error and exit with failure.

    Validation errors with several messages are listed one per line.
    """
    if as_json:
        click.echo(json.dumps(failure(str(error)), ensure_ascii=False))
        ctx.exit(1)

    click.echo(f"Error: {error}", err=True)
    if isinstance(error, ValidationError) and len(error.errors) > 1:
        for message in error.errors:
            click.echo(f"  {message}", err=True)
    ctx.exit(1)
