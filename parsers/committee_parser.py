"""
Committee name parsing

Transcript documents name committees in free text ("Senate Education",
"Labor & Industry"). These helpers turn that text into the chamber and the
alternate name used to match committee_aliases rows. CommitteeParser also
validates reference alias rows loaded from CSV.
"""
from enum import IntEnum
from typing import Dict, Any, Optional, Tuple

from parsers.base_parser import BaseParser
from parsers.models import CommitteeAliasModel
from config.logging_config import get_logger

logger = get_logger(__name__)

SENATE_PREFIX = 'Senate'
# "Senate" plus the separator that follows it
SENATE_PREFIX_WIDTH = 7


class Chamber(IntEnum):
    """Legislative chamber; the value is the leading digit of its committee codes"""
    HOUSE = 1
    SENATE = 2

    @property
    def code_prefix(self) -> str:
        return str(self.value)

    @property
    def other_committee_code(self) -> int:
        return self.value * 100 + 99

    @property
    def other_committee_name(self) -> str:
        return f"Other {self.name.title()} Committee"


def expand_ampersand(text: str) -> str:
    """Replace every '&' with 'and'"""
    return text.replace('&', 'and')


def classify_committee(text: str) -> Tuple[Chamber, str]:
    """
    Split committee text into chamber and alternate name

    Text starting with "Senate" is a Senate committee and loses its first
    seven characters whatever they are; anything else is a House committee
    and keeps its full text.

    Args:
        text: Raw committee text from a transcript

    Returns:
        (chamber, alternate name)
    """
    name = expand_ampersand(text.strip())
    if name.startswith(SENATE_PREFIX):
        return Chamber.SENATE, name[SENATE_PREFIX_WIDTH:]
    return Chamber.HOUSE, name


class CommitteeParser(BaseParser):
    """Parser for committee alias reference rows"""

    def parse(self, raw_data: Dict[str, Any]) -> Optional[CommitteeAliasModel]:
        """
        Parse a raw alias row into a validated model

        Args:
            raw_data: Row with cty_code, chamber, name, alternate_name,
                start_year and end_year columns

        Returns:
            Validated CommitteeAliasModel or None
        """
        required_fields = ['cty_code', 'chamber', 'name', 'alternate_name']
        if not self.validate_required_fields(raw_data, required_fields):
            return None

        alias_data = {
            'cty_code': self.normalize_integer(raw_data.get('cty_code')),
            'chamber': self._normalize_chamber(raw_data.get('chamber')),
            'name': self.normalize_text(raw_data.get('name')),
            'alternate_name': self.normalize_text(raw_data.get('alternate_name')),
        }

        # Open-ended validity ranges keep the model defaults
        for year_field in ('start_year', 'end_year'):
            year = self.normalize_integer(raw_data.get(year_field))
            if year is not None:
                alias_data[year_field] = year

        return self.validate_model(CommitteeAliasModel, alias_data)

    def _normalize_chamber(self, chamber: Any) -> Optional[int]:
        """Normalize chamber name or number to its code"""
        if chamber is None:
            return None

        chamber_mapping = {
            'house': Chamber.HOUSE,
            'senate': Chamber.SENATE,
            '1': Chamber.HOUSE,
            '2': Chamber.SENATE
        }

        normalized = chamber_mapping.get(str(chamber).strip().lower())
        if normalized is None:
            return self.normalize_integer(chamber)
        return int(normalized)
