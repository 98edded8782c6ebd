import json
import logging

import click

from license_resolver import clickext
from license_resolver.detector import LicenseDetector
from license_resolver.exceptions import NoResolvableLicenseError
from license_resolver.packageinfo import PackageInfo, RegistryType

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--name",
    default="",
    help="package name, used in log messages",
)
@click.option(
    "--package-version",
    default="",
    help="package version, used in log messages",
)
@click.option(
    "--source-url",
    default="",
    help="SCM connection URL of the package, e.g. git://github.com/org/repo.git",
)
@click.option(
    "--revision",
    default=None,
    help="source revision for 'SEE LICENSE IN' files (default: default branch)",
)
@click.option(
    "--registry",
    type=clickext.RegistryTypeParam(),
    default=RegistryType.NPM.value,
    show_default=True,
    help="registry that produced the license declarations",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format (default: text)",
)
@click.argument("licenses", nargs=-1)
@click.pass_obj
def resolve(
    detector: LicenseDetector,
    name: str,
    package_version: str,
    source_url: str,
    revision: str | None,
    registry: RegistryType,
    output_format: str,
    licenses: tuple[str, ...],
) -> None:
    """Resolve raw license declarations to canonical licenses.

    Each LICENSES argument is one declaration as found in package metadata,
    for example "MIT", "(Apache-2.0 OR MIT)", a license URL, or
    "SEE LICENSE IN LICENSE" together with --source-url.
    """
    package_info = PackageInfo(
        name=name,
        version=package_version,
        source_connection_url=source_url,
        licenses=licenses,
        registry=registry,
    )
    try:
        resolved = detector.resolve_licenses(package_info, revision)
    except NoResolvableLicenseError as e:
        raise click.ClickException(str(e)) from e

    if output_format == "json":
        click.echo(json.dumps(sorted(resolved), indent=2))
    else:
        for license_id in sorted(resolved):
            click.echo(license_id)
