# cauldron_indexer/mapping/__init__.py

from .interfaces import WatchRegistrar, CAULDRON_TEMPLATE, FACTORY_TEMPLATE
from .metadata import MarketMetadataResolver
from .accessors import EntityAccessor
from .heuristics import is_third_party, is_direct_liquidation
from .cauldron import CauldronHandlers
from .deploy import DeployHandler

__all__ = [
    'WatchRegistrar',
    'CAULDRON_TEMPLATE',
    'FACTORY_TEMPLATE',
    'MarketMetadataResolver',
    'EntityAccessor',
    'is_third_party',
    'is_direct_liquidation',
    'CauldronHandlers',
    'DeployHandler',
]
