# cauldron_indexer/pipeline/__init__.py

from .watch_registry import WatchRegistry
from .dispatcher import EventDispatcher
from .decoder import LogDecoder
from .stream import LogStream, log_position
from .indexing_pipeline import IndexingPipeline, PipelineStats

__all__ = [
    'WatchRegistry',
    'EventDispatcher',
    'LogDecoder',
    'LogStream',
    'log_position',
    'IndexingPipeline',
    'PipelineStats',
]
