#!/usr/bin/env python3

import logging
import pathlib

import click

from . import clickext, commands, log
from .detector import LicenseDetector
from .settings import ResolverSettings
from .tables import LicenseTables

logger = logging.getLogger(__name__)


def _setup_logging(
    verbose: bool,
    log_file: pathlib.Path | None,
    error_log_file: pathlib.Path | None,
) -> None:
    root = logging.getLogger()
    # handlers filter by level, the root logger passes everything
    root.setLevel(logging.DEBUG)
    logging.setLogRecordFactory(log.ResolverLogRecord)

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console.setFormatter(
        logging.Formatter(log.VERBOSE_LOG_FMT if verbose else log.TERSE_LOG_FMT)
    )
    root.addHandler(console)

    for filename, level in ((error_log_file, logging.ERROR), (log_file, logging.DEBUG)):
        if not filename:
            continue
        handler = logging.FileHandler(filename)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(log.VERBOSE_LOG_FMT))
        root.addHandler(handler)
        logger.info(
            "logging %s messages to %s", logging.getLevelName(level).lower(), filename
        )


@click.group()
@click.version_option(package_name="license-resolver")
@click.option(
    "-v",
    "--verbose",
    default=False,
    is_flag=True,
    help="report more detail to the console",
)
@click.option(
    "--log-file",
    type=clickext.ClickPath(),
    help="save detailed report of actions to file",
)
@click.option(
    "--error-log-file",
    type=clickext.ClickPath(),
    help="save error messages to a file",
)
@click.option(
    "--settings-file",
    default=pathlib.Path("license-resolver.yaml"),
    type=clickext.ClickPath(),
    help="location of the settings file",
)
@click.option(
    "--tables-file",
    type=clickext.ClickPath(exists=True, dir_okay=False),
    help="license tables to use instead of the bundled ones",
)
@click.option(
    "-j",
    "--jobs",
    type=click.IntRange(min=1),
    default=None,
    help="maximum number of concurrent network lookups",
)
@click.pass_context
def main(
    ctx: click.Context,
    verbose: bool,
    log_file: pathlib.Path | None,
    error_log_file: pathlib.Path | None,
    settings_file: pathlib.Path,
    tables_file: pathlib.Path | None,
    jobs: int | None,
) -> None:
    _setup_logging(verbose, log_file, error_log_file)

    settings = ResolverSettings.from_file(settings_file)
    if jobs is not None:
        settings = settings.model_copy(update={"max_jobs": jobs})

    base_tables = LicenseTables.from_file(tables_file) if tables_file else None

    logger.info("settings file: %s", settings_file)
    logger.info("license tables: %s", tables_file or "bundled")
    logger.info("GitHub API: %s", settings.github_api_url)
    logger.info("raw content: %s", settings.raw_content_url)
    logger.info("maximum concurrent lookups: %s", settings.max_jobs)

    ctx.obj = LicenseDetector(
        settings.license_tables(base_tables),
        settings=settings,
    )


for cmd in commands.commands:
    main.add_command(cmd)


def invoke_main() -> None:
    # log unexpected errors so that saved logs include the traceback
    try:
        main(auto_envvar_prefix="LICENSE_RESOLVER")
    except Exception as err:
        logger.exception(err)
        raise


if __name__ == "__main__":
    invoke_main()
