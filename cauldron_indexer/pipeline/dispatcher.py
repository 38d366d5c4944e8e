# cauldron_indexer/pipeline/dispatcher.py

from typing import Dict, Optional

from ..core.errors import EventOrderError
from ..core.logging import LoggingMixin
from ..core.networks import NetworkConfig
from ..database.interfaces import EntityStore
from ..mapping import CauldronHandlers, DeployHandler, CAULDRON_TEMPLATE, FACTORY_TEMPLATE
from ..types import EvmAddress, LogEvent, LogPosition, ProcessingCheckpoint
from ..utils.addresses import normalize_address
from .watch_registry import WatchRegistry


class EventDispatcher(LoggingMixin):
    """
    Routes decoded logs for one network to the handler for the emitting
    address. Events must arrive in strictly increasing log position and each
    one is applied inside its own unit of work, together with the network's
    ProcessingCheckpoint. Logs at or before a checkpoint left by an earlier
    run are skipped, so re-running a range never applies an event twice.
    """

    def __init__(self, store: EntityStore, registry: WatchRegistry,
                 cauldron_handlers: CauldronHandlers, network: NetworkConfig):
        self.store = store
        self.registry = registry
        self.cauldron_handlers = cauldron_handlers
        self.network = network
        self.deploy_handlers: Dict[EvmAddress, DeployHandler] = {
            normalize_address(source.address): DeployHandler(source, registry)
            for source in network.factories
        }
        checkpoint = store.load(ProcessingCheckpoint, network.name)
        self._resume_position: Optional[LogPosition] = checkpoint.position if checkpoint else None
        self._last_position: Optional[LogPosition] = None

        if checkpoint is not None:
            self.log_info("Resuming from checkpoint",
                         network=network.name,
                         block_number=checkpoint.block_number,
                         log_index=checkpoint.log_index)

    @property
    def resume_position(self) -> Optional[LogPosition]:
        return self._resume_position

    @property
    def last_position(self) -> Optional[LogPosition]:
        """Last position applied in this run, or the checkpoint it resumed from"""
        return self._last_position or self._resume_position

    def dispatch(self, event: LogEvent) -> bool:
        if event.removed:
            self.log_warning("Skipping removed log",
                            network=self.network.name,
                            tx_hash=event.transaction.hash,
                            log_index=event.log_index,
                            contract_address=event.address)
            return False

        position = event.position
        if self._last_position is not None and position <= self._last_position:
            raise EventOrderError(self.network.name, position, self._last_position)

        if self._resume_position is not None and position <= self._resume_position:
            self.log_debug("Skipping log applied by an earlier run",
                          network=self.network.name,
                          block_number=event.block.number,
                          log_index=event.log_index,
                          event_name=event.name)
            return False

        template = self.registry.template_for(event.address)
        if template is None:
            self.log_debug("Event from unwatched address",
                          contract_address=event.address,
                          event_name=event.name)
            self._last_position = position
            return False

        try:
            with self.store.unit_of_work():
                handled = self._route(template, event)
                self._save_checkpoint(position)
        except Exception as e:
            self.log_error("Event processing failed",
                          network=self.network.name,
                          event_name=event.name,
                          contract_address=event.address,
                          tx_hash=event.transaction.hash,
                          block_number=event.block.number,
                          log_index=event.log_index,
                          error=str(e),
                          exception_type=type(e).__name__)
            raise

        self._last_position = position
        return handled

    def _save_checkpoint(self, position: LogPosition) -> None:
        block_number, transaction_index, log_index = position
        self.store.save(ProcessingCheckpoint(
            id=self.network.name,
            block_number=block_number,
            transaction_index=transaction_index,
            log_index=log_index,
        ))

    def _route(self, template: str, event: LogEvent) -> bool:
        if template == CAULDRON_TEMPLATE:
            return self.cauldron_handlers.handle(event)

        if template == FACTORY_TEMPLATE:
            handler = self.deploy_handlers.get(normalize_address(event.address))
            if handler is None:
                self.log_warning("No factory source configured for address",
                                contract_address=event.address)
                return False
            return handler.handle(event) is not None

        self.log_warning("Unknown template",
                        template=template,
                        contract_address=event.address)
        return False
