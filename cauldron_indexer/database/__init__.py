# cauldron_indexer/database/__init__.py

from .interfaces import EntityStore
from .memory import InMemoryEntityStore
from .connection import DatabaseManager
from .sql_store import SqlEntityStore
from .base import ModelBase

__all__ = [
    'EntityStore',
    'InMemoryEntityStore',
    'DatabaseManager',
    'SqlEntityStore',
    'ModelBase',
]
