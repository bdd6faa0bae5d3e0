"""Rule generation command."""

from pathlib import Path

import click

from ledgerrules.cli.error_handling import handle_domain_error
from ledgerrules.cli.request_loading import build_service, load_request
from ledgerrules.config import OUTPUT_FORMATS
from ledgerrules.domain.errors import DomainError
from ledgerrules.export.csv_export import export_rules_csv
from ledgerrules.export.json_export import export_result_json


@click.command("generate")
@click.argument("debit_file", type=click.Path(dir_okay=False))
@click.argument("credit_file", type=click.Path(dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write rules to this file instead of stdout")
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), help="Output format (default: csv)")
@click.option("--min-frequency", type=int, help="Fixed minimum candidate frequency (default: adaptive)")
@click.option("--min-coverage", type=int, help="Fixed minimum rule coverage (default: adaptive)")
@click.option("--with-metrics", is_flag=True, help="Add Precision and Coverage columns to CSV output")
@click.pass_context
def generate(
    ctx,
    debit_file: str,
    credit_file: str,
    output: str | None,
    output_format: str | None,
    min_frequency: int | None,
    min_coverage: int | None,
    with_metrics: bool,
):
    """Generate automation rules from debit and credit entry files."""
    config = ctx.obj["config"]

    try:
        request = load_request(debit_file, credit_file)
        service = build_service(config, min_frequency, min_coverage)
        result = service.generate(request)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    output_format = output_format or config.output_format
    if output_format == "json":
        content = export_result_json(result)
        if not content.endswith("\n"):
            content += "\n"
    else:
        content = export_rules_csv(result.rules, with_metrics=with_metrics or config.with_metrics)

    if output:
        Path(output).write_text(content, encoding="utf-8")
        click.echo(f"Wrote {len(result.rules)} rules to {output}")
    else:
        click.echo(content, nl=False)


def register_commands(cli):
    """Register generate command with main CLI."""
    cli.add_command(generate)
