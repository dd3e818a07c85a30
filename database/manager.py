"""
Database manager for the hearing transcript loader
Supports SQLite and PostgreSQL through SQLAlchemy
"""
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Type, Union

from sqlalchemy import create_engine, event, func, select
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import Query, Session, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql.schema import Table

from config.logging_config import get_logger
from config.settings import settings
from database.models import Base

logger = get_logger(__name__)


class UnitOfWork:
    """
    One transaction against the database, scoped to a single transcript

    Wraps a SQLAlchemy session and exposes the key-based lookups, saves and
    link writes the importer needs. Nothing is committed unless commit() is
    called; leaving the unit_of_work() context without a commit rolls back.
    """

    def __init__(self, session: Session):
        self.session = session
        self.committed = False

    def get(self, model: Type[Any], key: Any) -> Optional[Any]:
        """Look up an entity by primary key"""
        return self.session.get(model, key)

    def save(self, entity: Any) -> Any:
        """Add an entity and flush so it is visible to later lookups"""
        self.session.add(entity)
        self.session.flush()
        return entity

    def query(self, model: Type[Any]) -> Query:
        """Start a query for a model"""
        return self.session.query(model)

    def link(self, table: Table, **ids: Any) -> bool:
        """
        Add a row to an association table unless it is already present

        Args:
            table: Association table
            **ids: Column values identifying the link

        Returns:
            True if a new link row was written
        """
        conditions = [table.c[column] == value for column, value in ids.items()]
        existing = self.session.execute(select(table).where(*conditions)).first()
        if existing is not None:
            return False

        self.session.execute(table.insert().values(**ids))
        return True

    def commit(self) -> None:
        self.session.commit()
        self.committed = True

    def rollback(self) -> None:
        self.session.rollback()

    def close(self) -> None:
        self.session.close()


class TranscriptDatabase:
    """Owns the engine and session factory for one database"""

    def __init__(self, db_url: Optional[Union[str, URL]] = None, echo: Optional[bool] = None):
        """
        Initialize database manager

        Args:
            db_url: SQLAlchemy database URL (defaults to settings.database_url)
            echo: Echo SQL statements (defaults to settings.sql_echo)
        """
        self.db_url = db_url or settings.database_url
        self.engine = self._create_engine(self.db_url, settings.sql_echo if echo is None else echo)

        # Create session factory
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine
        )

    @staticmethod
    def _create_engine(db_url: Union[str, URL], echo: bool) -> Engine:
        url_text = str(db_url)
        if url_text.startswith('sqlite'):
            connect_args = {"check_same_thread": False}
            if url_text in ('sqlite://', 'sqlite:///:memory:'):
                # Every session must see the same in-memory database
                engine = create_engine(db_url, connect_args=connect_args,
                                       poolclass=StaticPool, echo=echo)
            else:
                engine = create_engine(db_url, connect_args=connect_args, echo=echo)

            # Enable foreign keys for SQLite only
            @event.listens_for(engine, 'connect')
            def _enable_foreign_keys(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys = ON")
                cursor.close()

            logger.info("Using SQLite database")
            return engine

        logger.info("Using PostgreSQL database")
        return create_engine(db_url, pool_pre_ping=True, echo=echo)

    def initialize_schema(self) -> None:
        """Create all tables (idempotent - won't recreate existing tables)"""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema initialized")

    def get_session(self) -> Session:
        return self.SessionLocal()

    @contextmanager
    def unit_of_work(self) -> Iterator[UnitOfWork]:
        """
        Context manager for one transcript's transaction

        Usage:
            with database.unit_of_work() as uow:
                uow.save(transcript)
                uow.commit()
        """
        uow = UnitOfWork(self.get_session())
        try:
            yield uow
        finally:
            if not uow.committed:
                uow.rollback()
            uow.close()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager for sessions with automatic commit/rollback"""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_table_counts(self) -> Dict[str, int]:
        """Get row counts for every table"""
        counts = {}
        with self.session_scope() as session:
            for table in Base.metadata.sorted_tables:
                counts[table.name] = session.execute(
                    select(func.count()).select_from(table)
                ).scalar_one()
        return counts

    def dispose(self) -> None:
        """Release pooled connections"""
        self.engine.dispose()
