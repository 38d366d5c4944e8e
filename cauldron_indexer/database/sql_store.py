# cauldron_indexer/database/sql_store.py

from contextlib import contextmanager
from typing import Iterator, List, Optional, Type

from sqlalchemy.orm import Session

from ..core.logging import LoggingMixin
from ..types import Entity, EvmAddress, UserLiquidation, WatchedContract
from .connection import DatabaseManager
from .interfaces import EntityStore, E
from .repositories import REPOSITORIES, UserLiquidationRepository, WatchedContractRepository
from .base_repository import BaseRepository


class SqlEntityStore(EntityStore, LoggingMixin):
    """
    Entity store over SQLAlchemy. A unit of work is one database transaction;
    outside of one, every save commits on its own.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager
        self._repositories = {
            kind: repo_class() for kind, repo_class in REPOSITORIES.items()
        }
        self._session: Optional[Session] = None

    def _repository(self, kind: Type[Entity]) -> BaseRepository:
        return self._repositories[self.check_kind(kind)]

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        if self._session is not None:
            yield self._session
        else:
            with self.db_manager.get_transaction() as session:
                yield session

    def load(self, kind: Type[E], entity_id: str) -> Optional[E]:
        repo = self._repository(kind)
        with self._session_scope() as session:
            record = repo.get_by_id(session, entity_id)
            return repo.to_entity(record) if record is not None else None

    def save(self, entity: Entity) -> None:
        repo = self._repository(type(entity))
        with self._session_scope() as session:
            repo.upsert(session, entity)

    def all(self, kind: Type[E]) -> List[E]:
        repo = self._repository(kind)
        with self._session_scope() as session:
            return [repo.to_entity(record) for record in repo.get_all(session)]

    @contextmanager
    def unit_of_work(self) -> Iterator[None]:
        if self._session is not None:
            yield
            return

        with self.db_manager.get_transaction() as session:
            self._session = session
            try:
                yield
            finally:
                self._session = None

    def liquidations_for_user(self, user: EvmAddress) -> List[UserLiquidation]:
        repo: UserLiquidationRepository = self._repository(UserLiquidation)
        with self._session_scope() as session:
            return [repo.to_entity(record) for record in repo.get_by_user(session, user)]

    def watched_contracts(self, network: str) -> List[WatchedContract]:
        repo: WatchedContractRepository = self._repository(WatchedContract)
        with self._session_scope() as session:
            return [repo.to_entity(record) for record in repo.get_by_network(session, network)]
