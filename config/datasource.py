"""
Datasource file loading

A datasource file holds the connection parameters for one database as
``key=value`` lines::

    url=postgresql://db.example.org/transcripts
    username=loader
    password=secret
    echo=false

Credentials given separately override any embedded in the URL.
"""
from pathlib import Path
from typing import Union

from dotenv import dotenv_values
from pydantic import ValidationError
from sqlalchemy.engine import URL, make_url

from config.logging_config import get_logger
from parsers.models import DataSourceModel
from utils.exceptions import DataSourceError

logger = get_logger(__name__)


def read_datasource(path: Union[str, Path]) -> DataSourceModel:
    """
    Read and validate a datasource file

    Args:
        path: Path to the datasource file

    Returns:
        Validated DataSourceModel
    """
    path = Path(path)
    if not path.is_file():
        raise DataSourceError(f"Datasource file not found: {path}")

    values = {key: value for key, value in dotenv_values(path).items() if value is not None}
    try:
        return DataSourceModel(**values)
    except ValidationError as e:
        raise DataSourceError(f"Invalid datasource file {path}: {e}") from e


def build_database_url(datasource: DataSourceModel) -> URL:
    """Build the SQLAlchemy URL for a datasource, applying credentials"""
    url = make_url(datasource.url)
    if datasource.username:
        url = url.set(username=datasource.username)
    if datasource.password:
        url = url.set(password=datasource.password)
    return url

