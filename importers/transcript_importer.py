"""
Transcript importer

Turns one transcript element into a persisted Transcript with its bill,
committee and witness relations, inside a single unit of work.
"""
import xml.etree.ElementTree as ET
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from config.logging_config import get_logger
from database.manager import TranscriptDatabase, UnitOfWork
from database.models import Transcript, Witness
from importers.reference_resolver import ReferenceResolver
from parsers.schema import build_transcript_decoder
from parsers.xml_decoder import XmlDecoder, get_child_element, get_child_elements, text_content
from utils.exceptions import DecodeError, PersistenceError, ReferenceResolutionError

logger = get_logger(__name__)


def compose_date(year: Optional[int], month: Optional[int], day: Optional[int]) -> Optional[date]:
    """
    Build a date from its components

    Returns:
        The date, or None unless all three components are present
    """
    if year is None or month is None or day is None:
        return None
    try:
        return date(year, month, day)
    except ValueError as e:
        raise DecodeError(f"Invalid date {year}-{month}-{day}: {e}") from e


class TranscriptImporter:
    """Imports transcript elements, one unit of work each"""

    def __init__(self, database: TranscriptDatabase,
                 decoder: Optional[XmlDecoder] = None,
                 resolver: Optional[ReferenceResolver] = None):
        """
        Initialize transcript importer

        Args:
            database: Database providing units of work
            decoder: Decoder for transcript documents
            resolver: Resolver for bill and committee references
        """
        self.database = database
        self.decoder = decoder or build_transcript_decoder()
        self.resolver = resolver or ReferenceResolver()

    def import_transcript(self, element: ET.Element) -> Transcript:
        """
        Decode, link and commit one transcript element

        Args:
            element: Transcript element

        Returns:
            The committed Transcript
        """
        with self.database.unit_of_work() as uow:
            transcript = self.decode_transcript(element)
            logger.info(f"Inserting {transcript.transcript_id}")

            try:
                uow.save(transcript)
                self._link_bills(uow, transcript, element)
                self._link_committees(uow, transcript, element)
                self._add_witnesses(uow, transcript, element)
                uow.commit()
            except (ReferenceResolutionError, SQLAlchemyError) as e:
                logger.critical(f"Exception thrown {e}")
                logger.critical(f"Failed transcript: {transcript!r}")
                raise PersistenceError(transcript.transcript_id, str(e)) from e

        return transcript

    def decode_transcript(self, element: ET.Element) -> Transcript:
        """Decode scalar fields, compose dates and apply the element's id"""
        transcript = self.decoder.decode(Transcript, element)

        transcript.hearing_date = compose_date(
            transcript.hearing_year, transcript.hearing_month, transcript.hearing_day
        )
        transcript.received_date = compose_date(
            transcript.received_year, transcript.received_month, transcript.received_day
        )

        transcript_id = (element.get('id') or '').strip()
        if not transcript_id:
            raise DecodeError(f"<{element.tag}> element has no id attribute")
        transcript.transcript_id = transcript_id

        return transcript

    def _link_bills(self, uow: UnitOfWork, transcript: Transcript, element: ET.Element) -> None:
        bills = get_child_element(element, 'bills')
        if bills is None:
            return
        for bill_element in get_child_elements(bills):
            self.resolver.link_bill(uow, transcript, bill_element.get('id'))

    def _link_committees(self, uow: UnitOfWork, transcript: Transcript, element: ET.Element) -> None:
        committees = get_child_element(element, 'committees')
        if committees is None:
            return
        for committee_element in get_child_elements(committees):
            self.resolver.link_committee(uow, transcript, text_content(committee_element))

    def _add_witnesses(self, uow: UnitOfWork, transcript: Transcript, element: ET.Element) -> None:
        witnesses = get_child_element(element, 'witnesses')
        if witnesses is None:
            return
        for witness_element in get_child_elements(witnesses):
            witness = self.decoder.decode(Witness, witness_element)
            transcript.witnesses.append(witness)
            uow.save(witness)
