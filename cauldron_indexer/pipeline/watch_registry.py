# cauldron_indexer/pipeline/watch_registry.py

from typing import Dict, List, Optional

from ..core.logging import LoggingMixin
from ..core.networks import NetworkConfig
from ..database.interfaces import EntityStore
from ..mapping.interfaces import WatchRegistrar, CAULDRON_TEMPLATE, FACTORY_TEMPLATE
from ..types import EntityId, EvmAddress, WatchedContract
from ..utils.addresses import normalize_address


class WatchRegistry(WatchRegistrar, LoggingMixin):
    """
    Addresses whose logs are being indexed on one network, with the handler
    template for each. Cauldrons are persisted as WatchedContract so they are
    picked up again after a restart; factories come from the network config.
    """

    def __init__(self, store: EntityStore, network: NetworkConfig):
        self.store = store
        self.network = network
        self._templates: Dict[EvmAddress, str] = {}
        self._newly_watched: List[EvmAddress] = []
        self._loaded = False

    def load(self) -> None:
        if self._loaded:
            return

        for factory in self.network.factories:
            self._templates[normalize_address(factory.address)] = FACTORY_TEMPLATE

        restored = 0
        for watched in self.store.watched_contracts(self.network.name):
            self._templates[normalize_address(watched.id)] = watched.template
            restored += 1

        self._loaded = True
        self.log_info("Watch registry loaded",
                     network=self.network.name,
                     factory_count=len(self.network.factories),
                     restored_count=restored)

    def begin_watching(self, address: EvmAddress, template: str = CAULDRON_TEMPLATE,
                       block: Optional[int] = None) -> bool:
        address = normalize_address(address)
        if address in self._templates:
            self.log_debug("Address already watched",
                          contract_address=address,
                          template=self._templates[address])
            return False

        self.store.save(WatchedContract(
            id=EntityId(address),
            template=template,
            network=self.network.name,
            created_block=block,
        ))
        self._templates[address] = template
        self._newly_watched.append(address)

        self.log_info("Started watching contract",
                     network=self.network.name,
                     contract_address=address,
                     template=template,
                     block_number=block)
        return True

    def template_for(self, address: str) -> Optional[str]:
        return self._templates.get(normalize_address(address))

    def addresses(self, template: Optional[str] = None) -> List[EvmAddress]:
        return sorted(
            address for address, kind in self._templates.items()
            if template is None or kind == template
        )

    def drain_new(self) -> List[EvmAddress]:
        """Addresses activated since the last call"""
        new, self._newly_watched = self._newly_watched, []
        return new

    def __contains__(self, address: str) -> bool:
        return normalize_address(address) in self._templates
