"""
Exception hierarchy for the transcript loader
"""
from typing import Optional


class TranscriptLoadError(Exception):
    """Base class for every failure raised while loading transcripts"""
    pass


class DecodeError(TranscriptLoadError):
    """Raised when an XML element does not match the shape of its target type"""
    pass


class SchemaDefinitionError(DecodeError):
    """Raised when a target type cannot be decoded at all (programmer error)"""
    pass


class SchemaMismatchError(DecodeError):
    """Raised when a child element has no matching field on the target type"""

    def __init__(self, target_name: str, tag: str):
        self.target_name = target_name
        self.tag = tag
        super().__init__(f"{target_name} has no field for element <{tag}>")


class ReferenceResolutionError(TranscriptLoadError):
    """Raised when a get-or-create lookup or link fails in the database"""
    pass


class PersistenceError(TranscriptLoadError):
    """Raised when the unit of work for a transcript cannot be committed"""

    def __init__(self, transcript_id: Optional[str], message: str):
        self.transcript_id = transcript_id
        super().__init__(f"Transcript {transcript_id}: {message}")


class DocumentParseError(TranscriptLoadError):
    """Raised when an input file cannot be read or is not well-formed XML"""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Error parsing {path}: {message}")


class DataSourceError(TranscriptLoadError):
    """Raised when the datasource configuration file is missing or invalid"""
    pass
