# cauldron_indexer/mapping/deploy.py

from typing import Optional

from ..core.logging import LoggingMixin
from ..core.networks import FactorySource
from ..types import EvmAddress, LogEvent
from ..utils.addresses import normalize_address
from .interfaces import WatchRegistrar, CAULDRON_TEMPLATE


class DeployHandler(LoggingMixin):
    """
    Watches one vault factory for LogDeploy and starts watching clones that
    pass the factory's allow-list. Anything else the factory deploys is
    ignored.
    """

    def __init__(self, source: FactorySource, watcher: WatchRegistrar):
        self.source = source
        self.watcher = watcher

    def handle(self, event: LogEvent) -> Optional[EvmAddress]:
        if event.name != "LogDeploy":
            self.log_debug("No handler found for event",
                          event_name=event.name,
                          contract_address=event.address)
            return None

        master_contract = event.params["masterContract"]
        clone_address = normalize_address(event.params["cloneAddress"])
        deployer = event.transaction.sender

        if not self.source.filter.matches(master_contract, clone_address, deployer):
            self.log_debug("Ignoring unrecognised deploy",
                          contract_address=clone_address,
                          master_contract=master_contract,
                          deployer=deployer,
                          factory=self.source.name)
            return None

        self.watcher.begin_watching(clone_address, CAULDRON_TEMPLATE, event.block.number)
        self.log_info("Cauldron deployed",
                     contract_address=clone_address,
                     master_contract=master_contract,
                     factory=self.source.name,
                     block_number=event.block.number)
        return clone_address
