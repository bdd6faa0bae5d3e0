"""Rendering of domain errors raised while running a command."""

import click

from ledgerrules.domain.errors import DomainError, SourceError
from ledgerrules.logging import get_logger

logger = get_logger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError) -> None:
    """Print ``Error: <message>`` on stderr and exit with status 1.

    Input file problems are reported with a hint pointing at the expected
    document shape.
    """
    logger.debug("%s aborted: %s", ctx.info_name, error, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, SourceError):
        click.echo("Expected a .json file holding an 'Entries' array.", err=True)
    ctx.exit(1)
