# cauldron_indexer/__init__.py

import logging
import os

from web3 import Web3

from .core.container import IndexerContainer
from .core.config import IndexerConfig
from .core.logging import IndexerLogger, LogSettings, log_with_context
from .core.networks import MarketCapabilities
from .contracts.abi_loader import ABILoader
from .contracts.interfaces import ContractReader
from .contracts.reader import Web3ContractReader
from .database.connection import DatabaseManager
from .database.interfaces import EntityStore
from .database.sql_store import SqlEntityStore
from .mapping.metadata import MarketMetadataResolver
from .mapping.accessors import EntityAccessor
from .mapping.cauldron import CauldronHandlers
from .pipeline.watch_registry import WatchRegistry
from .pipeline.dispatcher import EventDispatcher
from .pipeline.decoder import LogDecoder
from .pipeline.stream import LogStream
from .pipeline.indexing_pipeline import IndexingPipeline


def create_indexer(network: str = None, env_vars: dict = None, **overrides) -> IndexerContainer:
    env = env_vars if env_vars is not None else os.environ
    _configure_logging_early(env)

    logger = IndexerLogger.get_logger('core.init')
    logger.info("Creating indexer instance")

    config = IndexerConfig.from_env(network, env, **overrides)

    log_with_context(logger, logging.INFO, "Configuration loaded successfully",
                    network=config.network.name,
                    chain_id=config.network.chain_id,
                    factory_count=len(config.network.factories))

    container = IndexerContainer(config)
    _register_services(container)

    log_with_context(logger, logging.INFO, "Indexer created successfully",
                    network=config.network.name)
    return container


def _configure_logging_early(env):
    IndexerLogger.configure(LogSettings.from_env(env))


def _register_services(container: IndexerContainer):
    logger = IndexerLogger.get_logger('core.services')
    logger.info("Registering services in container")

    logger.debug("Registering client services")
    container.register_factory(Web3, _create_web3)

    logger.debug("Registering contract services")
    container.register_singleton(ABILoader, ABILoader)
    container.register_singleton(ContractReader, Web3ContractReader)

    logger.debug("Registering database services")
    container.register_factory(DatabaseManager, _create_database_manager)
    container.register_factory(EntityStore, _create_entity_store)

    logger.debug("Registering mapping services")
    container.register_factory(MarketCapabilities, _network_capabilities)
    container.register_singleton(MarketMetadataResolver, MarketMetadataResolver)
    container.register_singleton(EntityAccessor, EntityAccessor)
    container.register_singleton(CauldronHandlers, CauldronHandlers)

    logger.debug("Registering pipeline services")
    container.register_singleton(WatchRegistry, WatchRegistry)
    container.register_singleton(EventDispatcher, EventDispatcher)
    container.register_singleton(LogDecoder, LogDecoder)
    container.register_singleton(LogStream, LogStream)
    container.register_singleton(IndexingPipeline, IndexingPipeline)

    logger.info("Service registration completed")


def _create_web3(container: IndexerContainer) -> Web3:
    rpc = container.config.require_rpc()
    return Web3(Web3.HTTPProvider(rpc.endpoint_url, request_kwargs={"timeout": rpc.timeout}))


def _create_database_manager(container: IndexerContainer) -> DatabaseManager:
    db_manager = DatabaseManager(container.config.database)
    db_manager.initialize()
    db_manager.create_tables()
    return db_manager


def _create_entity_store(container: IndexerContainer) -> EntityStore:
    return SqlEntityStore(container.get(DatabaseManager))


def _network_capabilities(container: IndexerContainer) -> MarketCapabilities:
    return container.config.network.capabilities
