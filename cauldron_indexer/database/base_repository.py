# cauldron_indexer/database/base_repository.py

from typing import TypeVar, Generic, Type, List, Optional, Dict
from sqlalchemy.orm import Session

from ..core.logging import IndexerLogger
from ..types import Entity


T = TypeVar('T')
E = TypeVar('E', bound=Entity)


class BaseRepository(Generic[T, E]):
    """
    Maps one entity kind onto one table. Column names default to the entity
    field names; column_map lists the ones that differ.
    """
    entity_class: Type[E]
    model_class: Type[T]
    column_map: Dict[str, str] = {}

    def __init__(self):
        self.logger = IndexerLogger.get_logger(f'database.repository.{self.model_class.__name__.lower()}')

    def _column(self, field: str) -> str:
        return self.column_map.get(field, field)

    def to_entity(self, record: T) -> E:
        values = {
            field: getattr(record, self._column(field))
            for field in self.entity_class.__struct_fields__
        }
        return self.entity_class(**values)

    def get_by_id(self, session: Session, id: str) -> Optional[T]:
        try:
            return session.get(self.model_class, id)
        except Exception as e:
            self.logger.error(f"Error getting {self.model_class.__name__} by ID {id}: {e}")
            raise

    def get_all(self, session: Session) -> List[T]:
        try:
            return session.query(self.model_class).order_by(self.model_class.id).all()
        except Exception as e:
            self.logger.error(f"Error getting all {self.model_class.__name__}: {e}")
            raise

    def upsert(self, session: Session, entity: E) -> T:
        try:
            record = self.get_by_id(session, entity.id)
            if record is None:
                record = self.model_class(id=entity.id)
                session.add(record)

            for field in self.entity_class.__struct_fields__:
                if field != 'id':
                    setattr(record, self._column(field), getattr(entity, field))

            session.flush()
            self.logger.debug(f"Saved {self.model_class.__name__} with ID: {entity.id}")
            return record

        except Exception as e:
            self.logger.error(f"Error saving {self.model_class.__name__} {entity.id}: {e}")
            raise

    def count(self, session: Session) -> int:
        try:
            return session.query(self.model_class).count()
        except Exception as e:
            self.logger.error(f"Error counting {self.model_class.__name__}: {e}")
            raise
