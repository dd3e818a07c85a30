"""
Import orchestrator for transcript documents

Expands the input path into files, finds transcript elements in each parsed
document and hands them to the TranscriptImporter. What happens after a
failed document is decided here by the ErrorPolicy.
"""
import xml.etree.ElementTree as ET
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from config.logging_config import get_logger
from config.settings import settings
from database.manager import TranscriptDatabase
from importers.transcript_importer import TranscriptImporter
from utils.exceptions import DocumentParseError, TranscriptLoadError

logger = get_logger(__name__)


class ErrorPolicy(Enum):
    """What the batch does after a document fails"""
    STOP = 'stop'
    CONTINUE = 'continue'


def find_transcripts(element: ET.Element, tag: str) -> Iterator[ET.Element]:
    """
    Depth-first search for transcript elements

    A matching element is yielded whole and its children are not searched.

    Args:
        element: Element to start from (may itself be a transcript)
        tag: Transcript element tag

    Yields:
        Transcript elements in document order
    """
    if element.tag == tag:
        yield element
        return
    for child in element:
        yield from find_transcripts(child, tag)


def expand_input_path(path: Union[str, Path]) -> List[Path]:
    """
    Expand a file or directory argument into the files to process

    Directory entries are sorted by name; subdirectories are not descended.
    """
    path = Path(path)
    if path.is_dir():
        return sorted(child for child in path.iterdir() if child.is_file())
    return [path]


def load_document(path: Union[str, Path]) -> ET.Element:
    """
    Parse an XML file

    Args:
        path: File to parse

    Returns:
        Root element
    """
    path = Path(path)
    logger.info(f"Loading {path.name}")
    try:
        return ET.parse(path).getroot()
    except (ET.ParseError, OSError) as e:
        logger.critical(f"Error Parsing {path.resolve()}: {e}")
        raise DocumentParseError(str(path), str(e)) from e
    finally:
        logger.info(f"End loading {path.name}")


class DocumentResult:
    """
    Result of importing a single document.

    Tracks success/failure and provides details for logging.
    """

    def __init__(self, path: str, success: bool, imported: int = 0,
                 error: Optional[TranscriptLoadError] = None):
        self.path = path
        self.success = success
        self.imported = imported  # Transcripts committed from this document
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'success': self.success,
            'imported': self.imported,
            'error': str(self.error) if self.error else None
        }


class BatchResult:
    """Outcome of a whole run"""

    def __init__(self):
        self.documents: List[DocumentResult] = []
        self.stopped_early = False

    @property
    def success(self) -> bool:
        return not self.stopped_early and all(doc.success for doc in self.documents)

    @property
    def imported(self) -> int:
        return sum(doc.imported for doc in self.documents)

    @property
    def failed(self) -> List[DocumentResult]:
        return [doc for doc in self.documents if not doc.success]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'stopped_early': self.stopped_early,
            'documents': len(self.documents),
            'failed': len(self.failed),
            'imported': self.imported
        }


class ImportOrchestrator:
    """Runs transcript imports over files and directories"""

    def __init__(self, database: TranscriptDatabase,
                 importer: Optional[TranscriptImporter] = None,
                 transcript_tag: Optional[str] = None,
                 error_policy: Optional[ErrorPolicy] = None):
        """
        Initialize import orchestrator

        Args:
            database: Target database
            importer: Transcript importer (built for the database if omitted)
            transcript_tag: Tag of transcript elements
            error_policy: Whether to continue after a failed document
        """
        self.database = database
        self.importer = importer or TranscriptImporter(database)
        self.transcript_tag = transcript_tag or settings.transcript_tag
        self.error_policy = error_policy or ErrorPolicy(settings.error_policy)

    def import_document(self, path: Union[str, Path]) -> DocumentResult:
        """
        Import one document file

        Args:
            path: XML file

        Returns:
            DocumentResult describing the outcome
        """
        imported = 0
        try:
            root = load_document(path)
            for element in find_transcripts(root, self.transcript_tag):
                self.importer.import_transcript(element)
                imported += 1
        except TranscriptLoadError as e:
            logger.error(f"Import of {path} failed after {imported} transcripts: {e}")
            return DocumentResult(str(path), False, imported, e)

        logger.info(f"Imported {imported} transcripts from {path}")
        return DocumentResult(str(path), True, imported)

    def run(self, path: Union[str, Path]) -> BatchResult:
        """
        Import a file or every file in a directory

        Args:
            path: File or directory

        Returns:
            BatchResult for the run
        """
        result = BatchResult()
        files = expand_input_path(path)
        logger.info(f"Processing {len(files)} file(s) from {path}")

        for file_path in files:
            document = self.import_document(file_path)
            result.documents.append(document)

            if not document.success and self.error_policy is ErrorPolicy.STOP:
                remaining = len(files) - len(result.documents)
                logger.critical(f"Stopping run after failure in {file_path}; {remaining} file(s) not processed")
                result.stopped_early = True
                break

        logger.info(f"Done processing: {result.to_dict()}")
        return result
