# tests/conftest.py
"""
pytest fixtures for the cauldron indexer
"""

import msgspec
import pytest

from cauldron_indexer.core.config import DatabaseConfig
from cauldron_indexer.core.logging import IndexerLogger
from cauldron_indexer.core.networks import NETWORKS, MarketCapabilities
from cauldron_indexer.database import DatabaseManager, InMemoryEntityStore, SqlEntityStore
from cauldron_indexer.mapping import CauldronHandlers, EntityAccessor, MarketMetadataResolver
from cauldron_indexer.pipeline import EventDispatcher, WatchRegistry

from tests.fakes import CAULDRON, FakeContractReader, RecordingWatcher


@pytest.fixture
def network():
    """Mainnet tables with the corrected handler behaviour"""
    return NETWORKS["mainnet"]


@pytest.fixture
def legacy_network(network):
    return msgspec.structs.replace(network, capabilities=MarketCapabilities.legacy())


@pytest.fixture
def reader():
    reader = FakeContractReader()
    reader.add_market(CAULDRON)
    return reader


@pytest.fixture
def store():
    return InMemoryEntityStore()


@pytest.fixture
def accessor(store, reader, network):
    return EntityAccessor(store, MarketMetadataResolver(reader, network.capabilities))


@pytest.fixture
def handlers(accessor, reader, network):
    return CauldronHandlers(accessor, reader, network)


@pytest.fixture
def legacy_handlers(store, reader, legacy_network):
    accessor = EntityAccessor(store, MarketMetadataResolver(reader, legacy_network.capabilities))
    return CauldronHandlers(accessor, reader, legacy_network)


@pytest.fixture
def watcher():
    return RecordingWatcher()


@pytest.fixture
def registry(store, network):
    registry = WatchRegistry(store, network)
    registry.load()
    return registry


@pytest.fixture
def dispatcher(store, registry, handlers, network):
    return EventDispatcher(store, registry, handlers, network)


@pytest.fixture
def db_manager():
    """Initialized manager over a private in-memory SQLite database"""
    manager = DatabaseManager(DatabaseConfig(url="sqlite://"))
    manager.initialize()
    manager.create_tables()
    yield manager
    manager.shutdown()


@pytest.fixture
def sql_store(db_manager):
    return SqlEntityStore(db_manager)


@pytest.fixture
def reset_logging():
    """Let a test call IndexerLogger.configure() without leaking handlers"""
    IndexerLogger.reset()
    yield
    IndexerLogger.reset()
