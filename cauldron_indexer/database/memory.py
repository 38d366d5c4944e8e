# cauldron_indexer/database/memory.py

import copy
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple, Type

from ..core.logging import LoggingMixin
from ..types import Entity
from .interfaces import EntityStore, E


class InMemoryEntityStore(EntityStore, LoggingMixin):
    """Dict-backed store for tests and dry runs"""

    def __init__(self):
        self._entities: Dict[Tuple[str, str], Entity] = {}
        self._pending: Optional[Dict[Tuple[str, str], Entity]] = None

    def load(self, kind: Type[E], entity_id: str) -> Optional[E]:
        key = (self.check_kind(kind), entity_id)
        if self._pending is not None and key in self._pending:
            return copy.copy(self._pending[key])
        entity = self._entities.get(key)
        return copy.copy(entity) if entity is not None else None

    def save(self, entity: Entity) -> None:
        key = (self.check_kind(type(entity)), entity.id)
        target = self._pending if self._pending is not None else self._entities
        target[key] = copy.copy(entity)

    def all(self, kind: Type[E]) -> List[E]:
        name = self.check_kind(kind)
        merged = dict(self._entities)
        if self._pending:
            merged.update(self._pending)
        return [copy.copy(entity) for (k, _), entity in sorted(merged.items()) if k == name]

    @contextmanager
    def unit_of_work(self) -> Iterator[None]:
        if self._pending is not None:
            yield
            return

        self._pending = {}
        try:
            yield
            self._entities.update(self._pending)
            self.log_debug("Unit of work committed", entity_count=len(self._pending))
        finally:
            self._pending = None

    def __len__(self) -> int:
        return len(self._entities)
