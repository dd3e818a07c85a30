"""
Loads reference committee aliases from CSV

Rows that fail validation are counted and skipped. A row whose code and
alternate name are already present is left alone.
"""
import csv
from pathlib import Path
from typing import Dict, Union

from config.logging_config import get_logger
from database.manager import TranscriptDatabase
from database.models import CommitteeAlias
from parsers.committee_parser import CommitteeParser

logger = get_logger(__name__)


def seed_committee_aliases(database: TranscriptDatabase, csv_path: Union[str, Path]) -> Dict[str, int]:
    """
    Insert committee aliases from a CSV file

    Args:
        database: Target database
        csv_path: CSV with cty_code, chamber, name, alternate_name,
            start_year and end_year columns

    Returns:
        Import statistics
    """
    stats = {'processed': 0, 'imported': 0, 'existing': 0, 'errors': 0}
    parser = CommitteeParser(strict_mode=True)

    with open(csv_path, newline='', encoding='utf-8') as f:
        rows = list(csv.DictReader(f))

    with database.session_scope() as session:
        for line_number, row in enumerate(rows, start=2):
            stats['processed'] += 1
            alias = parser.parse(row)
            if alias is None:
                logger.warning(f"Skipping invalid committee alias on line {line_number}")
                stats['errors'] += 1
                continue

            existing = session.query(CommitteeAlias).filter_by(
                cty_code=alias.cty_code, alternate_name=alias.alternate_name
            ).first()
            if existing:
                stats['existing'] += 1
                continue

            session.add(CommitteeAlias(**alias.model_dump()))
            session.flush()
            stats['imported'] += 1

    logger.info(f"Committee alias import: {stats['imported']}/{stats['processed']} inserted")
    return stats
