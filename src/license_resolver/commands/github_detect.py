import click
import requests

from license_resolver.detector import LicenseDetector
from license_resolver.exceptions import GitHubLicenseError
from license_resolver.result import Result


@click.command()
@click.argument("slug")
@click.pass_obj
def github_detect(detector: LicenseDetector, slug: str) -> None:
    """Show the license GitHub detected for the OWNER/REPO repository.

    GitHub reports the license of the default branch.
    """
    try:
        license_id = detector.github_license_detect(Result.ok(slug))
    except (GitHubLicenseError, requests.RequestException) as e:
        raise click.ClickException(str(e)) from e
    click.echo(license_id)
