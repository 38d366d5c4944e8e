# cauldron_indexer/database/connection.py

from typing import Any, Dict, Generator, Optional
from contextlib import contextmanager

from sqlalchemy import create_engine, Engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..core.logging import IndexerLogger, log_with_context, INFO, DEBUG, WARNING, ERROR
from ..core.config import DatabaseConfig
from .base import ModelBase

IN_MEMORY_SQLITE = ('sqlite://', 'sqlite:///:memory:')


class DatabaseManager:
    """
    Owns the engine and session factory for the entity tables.

    Sessions come from get_session(); get_transaction() additionally commits
    when the block exits cleanly. Both roll back if the block raises.
    """

    def __init__(self, config: DatabaseConfig):
        if not config:
            raise ValueError("DatabaseConfig is required")

        self.config = config
        self.logger = IndexerLogger.get_logger('database.manager')
        self._engine: Optional[Engine] = None
        self._sessions: Optional[sessionmaker] = None

    @property
    def display_url(self) -> str:
        return make_url(self.config.url).render_as_string(hide_password=True)

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.config.url).get_backend_name() == 'sqlite'

    def _engine_kwargs(self) -> Dict[str, Any]:
        if self.is_sqlite:
            kwargs: Dict[str, Any] = {'connect_args': {'check_same_thread': False}}
            if self.config.url in IN_MEMORY_SQLITE:
                # one shared connection, otherwise each session opens an empty database
                kwargs['poolclass'] = StaticPool
            return kwargs

        return {
            'pool_size': self.config.pool_size,
            'max_overflow': self.config.max_overflow,
            'pool_pre_ping': True,
            'pool_recycle': 3600,
        }

    def initialize(self) -> None:
        if self._engine is not None:
            log_with_context(self.logger, WARNING, "Database already initialized", url=self.display_url)
            return

        try:
            engine = create_engine(self.config.url, **self._engine_kwargs())
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            log_with_context(self.logger, ERROR, "Could not open database",
                            url=self.display_url,
                            error=str(e),
                            exception_type=type(e).__name__)
            raise

        self._engine = engine
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)
        log_with_context(self.logger, INFO, "Database opened", url=self.display_url)

    def create_tables(self) -> None:
        ModelBase.metadata.create_all(self.engine)
        log_with_context(self.logger, INFO, "Entity tables ready",
                        tables=','.join(sorted(ModelBase.metadata.tables)))

    def shutdown(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            log_with_context(self.logger, INFO, "Database closed", url=self.display_url)
        self._engine = None
        self._sessions = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._sessions is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._sessions

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        session = self.session_factory()
        try:
            yield session
        except Exception as e:
            log_with_context(self.logger, DEBUG, "Rolling back session",
                            error=str(e),
                            exception_type=type(e).__name__)
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def get_transaction(self) -> Generator[Session, None, None]:
        with self.get_session() as session:
            yield session
            session.commit()

    def health_check(self) -> bool:
        try:
            with self.get_session() as session:
                session.execute(text("SELECT 1"))
        except Exception as e:
            log_with_context(self.logger, ERROR, "Database health check failed",
                            url=self.display_url,
                            error=str(e))
            return False
        return True
