"""
SQLAlchemy models for hearing transcripts and their shared references

Links between transcripts and bills or committee aliases are stored as id
pairs in association tables. The relationships that read them are view-only;
rows are written through UnitOfWork.link.
"""
from sqlalchemy import (
    Column, Integer, SmallInteger, String, Text, Date,
    ForeignKey, Table
)
from sqlalchemy.orm import declarative_base, relationship

# Create base class for declarative models
Base = declarative_base()


transcript_bills = Table(
    'transcript_bills',
    Base.metadata,
    Column('transcript_id', String(50), ForeignKey('transcripts.transcript_id'), primary_key=True),
    Column('bill_id', String(50), ForeignKey('bill_references.bill_id'), primary_key=True)
)

transcript_committees = Table(
    'transcript_committees',
    Base.metadata,
    Column('transcript_id', String(50), ForeignKey('transcripts.transcript_id'), primary_key=True),
    Column('alias_id', Integer, ForeignKey('committee_aliases.alias_id'), primary_key=True)
)


class Transcript(Base):
    """Hearing transcript record"""
    __tablename__ = 'transcripts'

    transcript_id = Column(String(50), primary_key=True)
    session = Column(String(20))
    title = Column(Text)
    location = Column(String(200))
    pages = Column(Integer)
    url = Column(String(500))
    comments = Column(Text)
    hearing_year = Column(SmallInteger)
    hearing_month = Column(SmallInteger)
    hearing_day = Column(SmallInteger)
    hearing_date = Column(Date)
    received_year = Column(SmallInteger)
    received_month = Column(SmallInteger)
    received_day = Column(SmallInteger)
    received_date = Column(Date)

    # Relationships
    bills = relationship('BillReference', secondary=transcript_bills, viewonly=True)
    committees = relationship('CommitteeAlias', secondary=transcript_committees, viewonly=True)
    witnesses = relationship('Witness', back_populates='transcript',
                             cascade='all, delete-orphan', order_by='Witness.witness_id')

    def __repr__(self):
        return (
            f"<Transcript(id='{self.transcript_id}', session='{self.session}', "
            f"title='{self.title}', location='{self.location}', pages={self.pages}, "
            f"hearing_date={self.hearing_date}, received_date={self.received_date})>"
        )


class BillReference(Base):
    """Bill identifier referenced by one or more transcripts"""
    __tablename__ = 'bill_references'

    bill_id = Column(String(50), primary_key=True)

    transcripts = relationship('Transcript', secondary=transcript_bills, viewonly=True)

    def __repr__(self):
        return f"<BillReference(bill_id='{self.bill_id}')>"


class CommitteeAlias(Base):
    """Alternate committee name mapped to a canonical committee code"""
    __tablename__ = 'committee_aliases'

    alias_id = Column(Integer, primary_key=True, autoincrement=True)
    cty_code = Column(SmallInteger, nullable=False)  # 1xx House, 2xx Senate
    chamber = Column(SmallInteger, nullable=False)  # 1 House, 2 Senate
    name = Column(String(200), nullable=False)
    alternate_name = Column(String(300), nullable=False)
    start_year = Column(SmallInteger, default=0)
    end_year = Column(SmallInteger, default=9999)

    transcripts = relationship('Transcript', secondary=transcript_committees, viewonly=True)

    def __repr__(self):
        return (
            f"<CommitteeAlias(cty_code={self.cty_code}, name='{self.name}', "
            f"alternate_name='{self.alternate_name}')>"
        )


class Witness(Base):
    """Witness testifying at a hearing, owned by its transcript"""
    __tablename__ = 'witnesses'

    witness_id = Column(Integer, primary_key=True, autoincrement=True)
    transcript_id = Column(String(50), ForeignKey('transcripts.transcript_id'), nullable=False)
    name = Column(String(200))
    title = Column(String(300))
    organization = Column(String(300))
    city = Column(String(100))

    transcript = relationship('Transcript', back_populates='witnesses')

    def __repr__(self):
        return f"<Witness(name='{self.name}', organization='{self.organization}')>"
