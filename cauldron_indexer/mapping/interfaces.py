# cauldron_indexer/mapping/interfaces.py

from abc import ABC, abstractmethod
from typing import Optional

from ..types import EvmAddress

CAULDRON_TEMPLATE = "cauldron"
FACTORY_TEMPLATE = "factory"


class WatchRegistrar(ABC):
    """Host-side hook that routes a contract's future logs through a handler template"""

    @abstractmethod
    def begin_watching(self, address: EvmAddress, template: str = CAULDRON_TEMPLATE,
                       block: Optional[int] = None) -> bool:
        """Returns False when the address was already being watched"""
