"""
Decode registry for transcript documents

Element tags on the left, model attributes and target types on the right.
The bills, committees and witnesses containers are collections: they are
resolved by the transcript importer, not by the decoder.
"""
from datetime import date

from database.models import BillReference, CommitteeAlias, Transcript, Witness
from parsers.xml_decoder import CollectionOf, DecodeRegistry, XmlDecoder, default_registry

WITNESS_FIELDS = {
    'name': ('name', str),
    'title': ('title', str),
    'organization': ('organization', str),
    'city': ('city', str),
}

TRANSCRIPT_FIELDS = {
    'id': ('transcript_id', str),
    'session': ('session', str),
    'title': ('title', str),
    'location': ('location', str),
    'pages': ('pages', int),
    'url': ('url', str),
    'comments': ('comments', str),
    'hearingYear': ('hearing_year', int),
    'hearingMonth': ('hearing_month', int),
    'hearingDay': ('hearing_day', int),
    'hearingDate': ('hearing_date', date),
    'receivedYear': ('received_year', int),
    'receivedMonth': ('received_month', int),
    'receivedDay': ('received_day', int),
    'receivedDate': ('received_date', date),
    'bills': ('bills', CollectionOf(BillReference)),
    'committees': ('committees', CollectionOf(CommitteeAlias)),
    'witnesses': ('witnesses', CollectionOf(Witness)),
}


def build_transcript_registry() -> DecodeRegistry:
    """Registry covering every type reachable from a transcript element"""
    registry = default_registry()
    registry.register_collection(CollectionOf(BillReference))
    registry.register_collection(CollectionOf(CommitteeAlias))
    registry.register_collection(CollectionOf(Witness))
    registry.register_composite(Witness, WITNESS_FIELDS)
    registry.register_composite(Transcript, TRANSCRIPT_FIELDS)
    return registry


def build_transcript_decoder() -> XmlDecoder:
    return XmlDecoder(build_transcript_registry())
