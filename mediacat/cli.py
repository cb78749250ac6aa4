"""CLI interface for mediacat."""

import logging
import sqlite3
import sys
from datetime import datetime
from pathlib import Path

import click

from mediacat.config import Config, ConfigError, canonical_volume_path, load_config
from mediacat.database import CatalogRepository, Database
from mediacat.enrichment import EnrichmentUnavailableError, WikidataService
from mediacat.export import export_tsv
from mediacat.extractor import ExiftoolNotFoundError, ExiftoolRunner, TypeDetector
from mediacat.hashing import parse_hash_strategy
from mediacat.pipeline import CatalogPipeline, PipelineResult
from mediacat.scanner.progress import format_bytes, format_duration
from mediacat.validators import build_registry, format_violation

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to configuration file (default: ~/.mediacat/config.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config_path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--database", type=click.Path(path_type=Path), help="Path to database file")
@click.option("--hashes", "hash_spec", help="Hash strategy: all, none or a percentage like 5%")
@click.option("--no-validate", is_flag=True, help="Skip structural validation")
@click.pass_context
def run(ctx: click.Context, database: Path | None, hash_spec: str | None, no_validate: bool) -> None:
    """Scan, reconcile, hash and validate all configured volumes."""
    config: Config = ctx.obj["config"]
    db_path = database or config.database_path

    if not config.volumes:
        click.echo("Error: No volumes configured.", err=True)
        sys.exit(1)

    if hash_spec is not None:
        try:
            strategy, percentage = parse_hash_strategy(hash_spec)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        config.hashes.strategy = strategy
        if percentage is not None:
            config.hashes.percentage = percentage

    try:
        enrichment = _create_enrichment(config, no_validate)
        type_detector = TypeDetector(ExiftoolRunner(config.exiftool_path)) if config.exiftool_path else None
        with Database(db_path) as db:
            pipeline = CatalogPipeline(
                config,
                CatalogRepository(db),
                build_registry(),
                type_detector=type_detector,
                enrichment=enrichment,
                validate=not no_validate,
                report_progress=True,
            )
            result = pipeline.run()
    except (ConfigError, EnrichmentUnavailableError, ExiftoolNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except (OSError, sqlite3.Error) as e:
        click.echo(f"Error: Cannot update catalog {db_path}: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)

    _print_result(result)


def _create_enrichment(config: Config, no_validate: bool) -> WikidataService | None:
    if no_validate or not config.wikidata.enabled:
        return None
    service = WikidataService(
        config.wikidata.endpoint,
        timeout=config.wikidata.timeout,
        user_agent=config.wikidata.user_agent,
    )
    service.ping()
    return service


def _print_result(result: PipelineResult) -> None:
    click.echo()
    click.echo("Catalog Run Complete:")
    for path, stats in result.scan_stats.items():
        click.echo(
            f"  Scanned {path}: {stats.files_scanned:,} files, "
            f"{format_bytes(stats.total_bytes)} in {format_duration(stats.elapsed_seconds)}"
        )
    for state, count in sorted(result.states.items(), key=lambda item: item[0].value):
        click.echo(f"  {state.name.capitalize()} files: {count:,}")
    if result.detection_stats is not None:
        click.echo(f"  Types detected: {result.detection_stats.files_detected:,}")
    if result.hash_stats is not None:
        hash_stats = result.hash_stats
        click.echo(
            f"  Hashed: {hash_stats.files_hashed:,} of {hash_stats.candidates:,} files "
            f"({format_bytes(hash_stats.bytes_hashed)}), {hash_stats.files_changed:,} changed, "
            f"{hash_stats.files_failed:,} unreadable"
        )
    click.echo(f"  Violations: {result.violation_count:,}")
    for violations in result.violations.values():
        for violation in violations:
            click.echo(f"    {format_violation(violation)}")


@cli.command()
@click.option("--database", type=click.Path(path_type=Path), help="Path to database file")
@click.pass_context
def status(ctx: click.Context, database: Path | None) -> None:
    """Show cataloged volumes."""
    config: Config = ctx.obj["config"]
    db_path = database or config.database_path

    if not db_path.exists():
        click.echo("No database found. Run 'mediacat run' first.")
        return

    try:
        with Database(db_path) as db:
            summaries = CatalogRepository(db).summarize()
    except sqlite3.Error as e:
        _catalog_error(db_path, e)

    if not summaries:
        click.echo("No volumes cataloged.")
        return

    click.echo("\nVolumes:")
    click.echo("-" * 90)
    header = "Path".ljust(35) + "Validator".ljust(18)
    header += "Files".rjust(10) + "Hashed".rjust(10) + "Size".rjust(12) + "  Updated"
    click.echo(header)
    click.echo("-" * 90)

    for summary in summaries:
        path = _truncate(summary.path, 34)
        validator = summary.validator or "-"
        size = format_bytes(summary.total_bytes)
        updated = _format_relative_time(summary.updated_at)
        click.echo(
            f"{path:<35}"
            f"{validator:<18}"
            f"{summary.files:>10,}"
            f"{summary.hashed_files:>10,}"
            f"{size:>12}"
            f"  {updated}"
        )
        if summary.missing_files:
            click.echo(f"{'':<35}{summary.missing_files:,} files missing")


@cli.command("export")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--database", type=click.Path(path_type=Path), help="Path to database file")
@click.pass_context
def export_cmd(ctx: click.Context, output: Path, database: Path | None) -> None:
    """Export all cataloged files as tab-separated values."""
    config: Config = ctx.obj["config"]
    db_path = database or config.database_path

    if not db_path.exists():
        click.echo("Error: No database found. Run 'mediacat run' first.", err=True)
        sys.exit(1)

    try:
        with Database(db_path) as db:
            volumes = CatalogRepository(db).load_all()
    except sqlite3.Error as e:
        _catalog_error(db_path, e)

    try:
        count = export_tsv(volumes, output)
    except OSError as e:
        click.echo(f"Error: Cannot write {output}: {e}", err=True)
        sys.exit(1)
    click.echo(f"Exported {count:,} files to {output}")


@cli.command()
@click.argument("path")
@click.option("--database", type=click.Path(path_type=Path), help="Path to database file")
@click.pass_context
def forget(ctx: click.Context, path: str, database: Path | None) -> None:
    """Remove a volume and its files from the catalog."""
    config: Config = ctx.obj["config"]
    db_path = database or config.database_path
    volume_path = canonical_volume_path(path)

    if not db_path.exists():
        click.echo("Error: No database found.", err=True)
        sys.exit(1)

    try:
        with Database(db_path) as db:
            deleted = CatalogRepository(db).delete_volume(volume_path)
    except sqlite3.Error as e:
        _catalog_error(db_path, e)

    if not deleted:
        click.echo(f"Error: Volume not cataloged: {volume_path}", err=True)
        sys.exit(1)
    click.echo(f"Removed {volume_path} from catalog")


def _catalog_error(db_path: Path, error: Exception) -> None:
    click.echo(f"Error: Cannot read catalog {db_path}: {error}", err=True)
    sys.exit(1)


def _format_relative_time(unix_timestamp: int | None) -> str:
    if not unix_timestamp:
        return "unknown"

    delta = datetime.now() - datetime.fromtimestamp(unix_timestamp)

    if delta.days > 1:
        return f"{delta.days} days ago"
    if delta.days == 1:
        return "yesterday"
    if delta.seconds > 3600:
        return f"{delta.seconds // 3600}h ago"
    if delta.seconds > 60:
        return f"{delta.seconds // 60}m ago"
    return "just now"


def _truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return "..." + text[-(max_len - 3) :]


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
