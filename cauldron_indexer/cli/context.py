# cauldron_indexer/cli/context.py

import logging
from typing import Dict, Optional

from .. import create_indexer
from ..core.container import IndexerContainer
from ..core.logging import IndexerLogger, log_with_context
from ..database.connection import DatabaseManager
from ..database.interfaces import EntityStore


class CLIContext:
    """Builds one indexer container per network on demand and shuts them down on exit"""

    def __init__(self, env_vars: Optional[dict] = None):
        self.logger = IndexerLogger.get_logger('cli.context')
        self.env_vars = env_vars
        self._containers: Dict[str, IndexerContainer] = {}
        self._db_managers: Dict[str, DatabaseManager] = {}

    def get_container(self, network: str, **overrides) -> IndexerContainer:
        if network not in self._containers:
            self._containers[network] = create_indexer(network, self.env_vars, **overrides)
        return self._containers[network]

    def get_store(self, network: str) -> EntityStore:
        container = self.get_container(network)
        self._db_managers[network] = container.get(DatabaseManager)
        return container.get(EntityStore)

    def shutdown(self) -> None:
        for network, db_manager in self._db_managers.items():
            log_with_context(self.logger, logging.DEBUG, "Closing database", network=network)
            db_manager.shutdown()
        self._db_managers.clear()
        self._containers.clear()
