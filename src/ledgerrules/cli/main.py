"""Main CLI entry point."""

import click

from ledgerrules.cli.error_handling import handle_domain_error
from ledgerrules.config import LOG_FORMATS, GeneratorConfig
from ledgerrules.domain.errors import DomainError
from ledgerrules.logging import setup_logging

# Import and register all commands at module level
from ledgerrules.cli.commands import generate, stats


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="LEDGERRULES_LOG_LEVEL",
    help="Log level (overrides LEDGERRULES_LOG_LEVEL environment variable)",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS),
    default="standard",
    show_default=True,
    envvar="LEDGERRULES_LOG_FORMAT",
    help="Log output format (overrides LEDGERRULES_LOG_FORMAT environment variable)",
)
@click.pass_context
def cli(ctx, log_level: str, log_format: str):
    """Ledgerrules - Accounting rule generator.

    Mine debit and credit bookkeeping entries to produce ranked keyword
    rules mapping transaction labels to accounting accounts.
    """
    ctx.ensure_object(dict)

    # Only configure when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            config = GeneratorConfig.from_env()
        except DomainError as e:
            handle_domain_error(ctx, e)
        config.log_level = log_level.upper()
        config.log_format = log_format
        setup_logging(level=config.log_level, format_type=config.log_format)
        ctx.obj["config"] = config


# Register all commands
generate.register_commands(cli)
stats.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
