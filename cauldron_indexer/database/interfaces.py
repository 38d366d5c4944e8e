# cauldron_indexer/database/interfaces.py

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import List, Optional, Type, TypeVar

from ..core.errors import UnknownEntityKindError
from ..types import Entity, ENTITY_KINDS, EvmAddress, UserLiquidation, WatchedContract

E = TypeVar('E', bound=Entity)


class EntityStore(ABC):
    """
    Keyed entity persistence. Entities returned by load() are detached copies:
    changes are only visible to later loads once they are passed to save().
    """

    @abstractmethod
    def load(self, kind: Type[E], entity_id: str) -> Optional[E]:
        pass

    @abstractmethod
    def save(self, entity: Entity) -> None:
        pass

    @abstractmethod
    def all(self, kind: Type[E]) -> List[E]:
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager:
        """
        Group writes so they are applied together or not at all. Loads inside
        the unit of work see its pending writes. Nested calls join the
        outermost unit of work.
        """

    @staticmethod
    def check_kind(kind: Type[Entity]) -> str:
        name = getattr(kind, '__name__', str(kind))
        if ENTITY_KINDS.get(name) is not kind:
            raise UnknownEntityKindError(f"Unknown entity kind: {name}")
        return name

    def liquidations_for_user(self, user: EvmAddress) -> List[UserLiquidation]:
        user = user.lower()
        matches = [l for l in self.all(UserLiquidation) if l.user.lower() == user]
        return sorted(matches, key=lambda l: (l.timestamp or 0, l.id))

    def watched_contracts(self, network: str) -> List[WatchedContract]:
        return [w for w in self.all(WatchedContract) if w.network == network]
