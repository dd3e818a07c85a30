#!/usr/bin/env python3
"""
Hearing Transcript Loader - CLI Tool

Loads hearing transcript XML documents into the transcript database.

Usage:
    python cli.py load datasource.properties transcripts/
    python cli.py load datasource.properties hearings-2012.xml --on-error continue
    python cli.py database init datasource.properties
    python cli.py database seed-committees datasource.properties committees.csv
    python cli.py database status datasource.properties

Commands:
    load        Import a transcript file or a directory of transcript files
    database    Database management operations
"""

import sys
import os
import click
import logging
from sqlalchemy.exc import SQLAlchemyError

# Add project root to path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from config.datasource import build_database_url, read_datasource
from config.settings import settings
from config.logging_config import setup_logging, get_logger
from database.manager import TranscriptDatabase
from utils.exceptions import TranscriptLoadError


def open_database(datasource_path: str) -> TranscriptDatabase:
    """Create a TranscriptDatabase from a datasource file"""
    logger = get_logger(__name__)

    datasource = read_datasource(datasource_path)
    url = build_database_url(datasource)
    logger.info(f"Using datasource {url.render_as_string(hide_password=True)}")
    return TranscriptDatabase(url, echo=datasource.echo or settings.sql_echo)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', default=None, help='Log file path (defaults to LOG_FILE setting)')
@click.pass_context
def cli(ctx, verbose, log_file):
    """Hearing Transcript Loader - CLI Tool"""
    setup_logging(log_file=log_file)

    # Override log level if verbose
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose


@cli.command()
@click.argument('datasource', type=click.Path(exists=True, dir_okay=False))
@click.argument('path', type=click.Path(exists=True))
@click.option('--on-error', type=click.Choice(['stop', 'continue']), default=settings.error_policy,
              help='Stop at the first failed document or carry on with the remaining files')
@click.option('--tag', default=settings.transcript_tag, help='Tag of transcript elements')
def load(datasource, path, on_error, tag):
    """Load transcript XML from PATH (a file or a directory of files)"""
    logger = get_logger(__name__)

    from importers.orchestrator import ErrorPolicy, ImportOrchestrator

    try:
        database = open_database(datasource)
    except TranscriptLoadError as e:
        logger.error(f"Datasource configuration failed: {e}")
        sys.exit(1)

    try:
        database.initialize_schema()
        orchestrator = ImportOrchestrator(
            database,
            transcript_tag=tag,
            error_policy=ErrorPolicy(on_error)
        )
        result = orchestrator.run(path)
    except SQLAlchemyError as e:
        logger.error(f"Database unavailable: {e}")
        sys.exit(1)
    finally:
        database.dispose()

    display_import_results(result)
    if not result.success:
        sys.exit(1)


@cli.group()
def database():
    """Database management operations"""
    pass


@database.command()
@click.argument('datasource', type=click.Path(exists=True, dir_okay=False))
def init(datasource):
    """Initialize database schema"""
    logger = get_logger(__name__)

    try:
        db = open_database(datasource)
        db.initialize_schema()
        db.dispose()
        logger.info("Database initialization completed")

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        sys.exit(1)


@database.command('seed-committees')
@click.argument('datasource', type=click.Path(exists=True, dir_okay=False))
@click.argument('csv_file', type=click.Path(exists=True, dir_okay=False))
def seed_committees(datasource, csv_file):
    """Load reference committee aliases from a CSV file"""
    logger = get_logger(__name__)

    try:
        from importers.committee_seeder import seed_committee_aliases

        db = open_database(datasource)
        db.initialize_schema()
        stats = seed_committee_aliases(db, csv_file)
        db.dispose()

        click.echo(f"Committee aliases: {stats}")
        if stats['errors']:
            sys.exit(1)

    except (TranscriptLoadError, OSError) as e:
        logger.error(f"Committee alias import failed: {e}")
        sys.exit(1)


@database.command()
@click.argument('datasource', type=click.Path(exists=True, dir_okay=False))
def status(datasource):
    """Show database status and record counts"""
    logger = get_logger(__name__)

    try:
        db = open_database(datasource)
        counts = db.get_table_counts()
        db.dispose()

        click.echo("\nDatabase Status:")
        click.echo("=" * 50)
        for table, count in counts.items():
            click.echo(f"{table:25}: {count:>10,}")

    except Exception as e:
        logger.error(f"Database status check failed: {e}")
        sys.exit(1)


def display_import_results(result):
    """Display import results"""
    logger = get_logger(__name__)

    logger.info("Import Results:")
    for document in result.documents:
        logger.info(f"  {document.to_dict()}")

    click.echo(
        f"Imported {result.imported} transcripts from {len(result.documents)} file(s); "
        f"{len(result.failed)} failed"
    )


if __name__ == "__main__":
    cli()
