"""
Import command -- wipes the six commerce tables and reloads them from CSV.

Run with:
    shopseed-import --csv-dir db/csv
    python -m shopseed --atomic

Every option falls back to its environment variable (see core/config.py),
which in turn may come from .env.local or .env.
"""

import json
import logging
import sys
from pathlib import Path

import click

from shopseed.core.config import Config
from shopseed.db import Store
from shopseed.importer import ImportPipeline, ImportReport


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )


def _print_summary(report: ImportReport) -> None:
    click.echo("")
    for name, result in report.entities.items():
        line = (f"  [{'+' if name in report.committed_entities else ' '}] "
                f"{name:<15} read={result.read:<5} written={result.written:<5} "
                f"rejected={result.rejected}")
        if result.defaulted_timestamps:
            line += f" defaulted_timestamps={result.defaulted_timestamps}"
        click.echo(line)

    if report.succeeded:
        click.echo("\nImport completed successfully.")
        return

    click.echo(f"\nImport FAILED while {report.failed_state.value}: "
               f"{report.error['message']}", err=True)
    if report.committed_entities:
        click.echo("  Left in place (no rollback): "
                   + ", ".join(report.committed_entities), err=True)


@click.command()
@click.option("--csv-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory holding the six CSV sources [IMPORT_CSV_DIR]")
@click.option("--database-url", default=None, help="SQLAlchemy database URL [DATABASE_URL]")
@click.option("--atomic/--best-effort", default=None,
              help="Run everything in one transaction [IMPORT_ATOMIC]")
@click.option("--strict-product-refs/--lenient-product-refs", default=None,
              help="Drop carts/order products whose product_id was not imported "
                   "[IMPORT_STRICT_PRODUCT_REFS]")
@click.option("--timezone", "timezone_name", default=None,
              help="Timezone for naive source timestamps [IMPORT_TIMEZONE]")
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="[LOG_LEVEL]")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Print the run report as JSON instead of the summary")
def main(csv_dir, database_url, atomic, strict_product_refs, timezone_name, log_level, as_json):
    """Reset the commerce tables and import them from CSV."""
    config = Config()
    if csv_dir is not None:
        config.importer.csv_dir = csv_dir
    if database_url:
        config.database.url = database_url
    if atomic is not None:
        config.importer.atomic = atomic
    if strict_product_refs is not None:
        config.importer.strict_product_refs = strict_product_refs
    if timezone_name:
        config.importer.timezone = timezone_name
    if log_level:
        config.app.log_level = log_level

    configure_logging(config.app.log_level)

    try:
        config.validate()
    except ValueError as exc:
        raise click.UsageError(str(exc))

    with Store.from_url(config.database.url, config.database) as store:
        report = ImportPipeline(store, config.importer).run()

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2, default=str))
    else:
        _print_summary(report)
    sys.exit(0 if report.succeeded else 1)


if __name__ == "__main__":
    main()
