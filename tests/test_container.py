# tests/test_container.py

import pytest

from cauldron_indexer import create_indexer
from cauldron_indexer.core.errors import ServiceResolutionError
from cauldron_indexer.core.networks import MarketCapabilities
from cauldron_indexer.database import DatabaseManager, SqlEntityStore
from cauldron_indexer.database.interfaces import EntityStore
from cauldron_indexer.mapping import CauldronHandlers
from cauldron_indexer.pipeline import EventDispatcher, IndexingPipeline, WatchRegistry
from cauldron_indexer.types import ProcessingCheckpoint

ENV = {
    "CAULDRON_DB_URL": "sqlite://",
    "CAULDRON_RPC_URL": "http://localhost:8545",
    "CAULDRON_LOG_CONSOLE": "false",
}


@pytest.fixture
def container(reset_logging):
    container = create_indexer("fantom", env_vars=ENV)
    yield container
    container.get(DatabaseManager).shutdown()


def test_store_is_sql_backed(container):
    store = container.get(EntityStore)
    assert isinstance(store, SqlEntityStore)
    assert store is container.get(EntityStore)
    assert container.get(DatabaseManager).health_check()


def test_services_share_network_config(container):
    handlers = container.get(CauldronHandlers)
    assert handlers.network.name == "fantom"
    assert container.get(MarketCapabilities) is container.config.network.capabilities

    registry = container.get(WatchRegistry)
    assert container.get(EventDispatcher).registry is registry


def test_pipeline_builds(container):
    pipeline = container.get(IndexingPipeline)
    assert pipeline.registry is container.get(WatchRegistry)
    assert pipeline.batch_size == container.config.batch_size
    assert pipeline.network.name == "fantom"


def test_overrides_reach_config(reset_logging):
    container = create_indexer("mainnet", env_vars=ENV, batch_size=25)
    assert container.config.batch_size == 25
    assert container.config.network.name == "mainnet"


def test_unregistered_service_raises(container):
    class Unknown:
        pass

    with pytest.raises(ServiceResolutionError, match="Unknown not registered"):
        container.get(Unknown)


def test_pipeline_resumes_from_stored_checkpoint(container):
    store = container.get(EntityStore)
    store.save(ProcessingCheckpoint(id="fantom", block_number=31_000_000, transaction_index=3, log_index=9))

    pipeline = container.get(IndexingPipeline)
    assert pipeline.dispatcher.resume_position == (31_000_000, 3, 9)
    assert pipeline.resume_block() == 31_000_000
