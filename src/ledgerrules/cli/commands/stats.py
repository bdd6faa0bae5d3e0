"""Generation statistics command."""

import click

from ledgerrules.cli.error_handling import handle_domain_error
from ledgerrules.cli.request_loading import build_service, load_request
from ledgerrules.domain.errors import DomainError


@click.command("stats")
@click.argument("debit_file", type=click.Path(dir_okay=False))
@click.argument("credit_file", type=click.Path(dir_okay=False))
@click.option("--min-frequency", type=int, help="Fixed minimum candidate frequency (default: adaptive)")
@click.option("--min-coverage", type=int, help="Fixed minimum rule coverage (default: adaptive)")
@click.pass_context
def stats(ctx, debit_file: str, credit_file: str, min_frequency: int | None, min_coverage: int | None):
    """Show generation statistics without printing the rules."""
    config = ctx.obj["config"]

    try:
        request = load_request(debit_file, credit_file)
        result = build_service(config, min_frequency, min_coverage).generate(request)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    statistics = result.statistics
    click.echo(f"Entries: {statistics.debit_entries_count} debit, {statistics.credit_entries_count} credit")
    click.echo(f"Rules: {statistics.total_rules} ({statistics.debit_rules} debit, {statistics.credit_rules} credit)")
    click.echo(f"  Public institutions: {statistics.public_institution_rules}")
    click.echo(f"  Banks: {statistics.bank_rules}")
    click.echo(f"  Generic: {statistics.generic_rules}")
    click.echo(f"  Operations: {statistics.operation_rules}")
    click.echo(f"Coverage rate: {statistics.coverage_rate:.1f}%")
    click.echo(f"Average precision: {statistics.average_precision:.2f}")
    click.echo(f"Average confidence: {statistics.average_confidence:.2f}")


def register_commands(cli):
    """Register stats command with main CLI."""
    cli.add_command(stats)
