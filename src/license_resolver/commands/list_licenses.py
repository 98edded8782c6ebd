import json

import click
import rich
from rich.table import Table

from license_resolver.detector import LicenseDetector


@click.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format (default: table)",
)
@click.pass_obj
def list_licenses(detector: LicenseDetector, output_format: str) -> None:
    """List the canonical licenses and their aliases."""
    aliases = detector.alias_table.aliases_by_license()

    if output_format == "json":
        click.echo(json.dumps(aliases, indent=2, sort_keys=True))
        return

    table = Table(title="Canonical licenses")
    table.add_column("License", justify="left", no_wrap=True)
    table.add_column("Aliases", justify="left")
    for license_id in sorted(aliases):
        table.add_row(license_id, ", ".join(aliases[license_id]))
    rich.get_console().print(table)
