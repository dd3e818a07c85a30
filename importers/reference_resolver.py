"""
Get-or-create resolution for entities shared across transcripts
"""
from typing import Optional

from sqlalchemy import String, cast
from sqlalchemy.exc import SQLAlchemyError

from config.logging_config import get_logger
from database.manager import UnitOfWork
from database.models import (
    BillReference, CommitteeAlias, Transcript,
    transcript_bills, transcript_committees
)
from parsers.committee_parser import Chamber, classify_committee
from utils.exceptions import ReferenceResolutionError

logger = get_logger(__name__)


class ReferenceResolver:
    """Links transcripts to bill references and committee aliases"""

    def link_bill(self, uow: UnitOfWork, transcript: Transcript, bill_id: str) -> Optional[BillReference]:
        """
        Link a transcript to a bill, creating the bill reference on first sight

        Args:
            uow: Unit of work for the current transcript
            transcript: Transcript already saved in this unit of work
            bill_id: Bill identifier

        Returns:
            The linked BillReference, or None if the id was blank
        """
        bill_id = (bill_id or '').strip()
        if not bill_id:
            logger.warning(f"Skipping bill without id in transcript {transcript.transcript_id}")
            return None

        try:
            bill = uow.get(BillReference, bill_id)
            if bill is None:
                bill = uow.save(BillReference(bill_id=bill_id))
                logger.debug(f"Created bill reference {bill_id}")

            uow.link(transcript_bills, transcript_id=transcript.transcript_id, bill_id=bill.bill_id)
            return bill

        except SQLAlchemyError as e:
            raise ReferenceResolutionError(f"Could not resolve bill {bill_id}: {e}") from e

    def link_committee(self, uow: UnitOfWork, transcript: Transcript, committee_text: str) -> CommitteeAlias:
        """
        Link a transcript to the committee alias matching free committee text

        The first alias of the chamber whose alternate name matches the text
        as a LIKE pattern wins. Without a match a placeholder alias is created
        under the chamber's "Other" committee code.

        Args:
            uow: Unit of work for the current transcript
            transcript: Transcript already saved in this unit of work
            committee_text: Committee text from the transcript

        Returns:
            The linked CommitteeAlias
        """
        chamber, alternate_name = classify_committee(committee_text)

        try:
            alias = self.find_committee_alias(uow, chamber, alternate_name)
            if alias is None:
                alias = uow.save(CommitteeAlias(
                    cty_code=chamber.other_committee_code,
                    chamber=int(chamber),
                    alternate_name=alternate_name,
                    name=chamber.other_committee_name,
                    start_year=0,
                    end_year=9999
                ))
                logger.info(f"Created placeholder alias '{alternate_name}' under {alias.name}")

            uow.link(transcript_committees, transcript_id=transcript.transcript_id, alias_id=alias.alias_id)
            return alias

        except SQLAlchemyError as e:
            raise ReferenceResolutionError(f"Could not resolve committee '{committee_text}': {e}") from e

    def find_committee_alias(self, uow: UnitOfWork, chamber: Chamber, alternate_name: str) -> Optional[CommitteeAlias]:
        """First alias of the chamber whose alternate name matches the pattern"""
        # alternate_name is used as the LIKE pattern as-is
        return (
            uow.query(CommitteeAlias)
            .filter(cast(CommitteeAlias.cty_code, String).like(f"{chamber.code_prefix}%"))
            .filter(CommitteeAlias.alternate_name.like(alternate_name))
            .order_by(CommitteeAlias.alias_id)
            .first()
        )
