# cauldron_indexer/pipeline/indexing_pipeline.py

import heapq
import itertools
from typing import Any, Dict, List, Optional, Tuple

from msgspec import Struct

from ..core.config import IndexerConfig
from ..core.logging import LoggingMixin
from ..types import LogPosition
from .decoder import LogDecoder
from .dispatcher import EventDispatcher
from .stream import LogStream, log_position
from .watch_registry import WatchRegistry


class PipelineStats(Struct):
    batches: int = 0
    logs_seen: int = 0
    events_handled: int = 0
    markets_activated: int = 0


class IndexingPipeline(LoggingMixin):
    """
    Fetches, decodes and dispatches logs for one network in block batches.
    A cauldron deployed inside a batch has its later logs in that batch
    fetched and merged into the queue, so ordering holds across both.
    """

    def __init__(self, stream: LogStream, decoder: LogDecoder, registry: WatchRegistry,
                 dispatcher: EventDispatcher, config: IndexerConfig):
        self.stream = stream
        self.decoder = decoder
        self.registry = registry
        self.dispatcher = dispatcher
        self.batch_size = config.batch_size
        self.network = config.network

    def default_start_block(self) -> int:
        starts = [source.start_block for source in self.network.factories]
        return min(starts) if starts else 0

    def resume_block(self) -> int:
        """Block of the stored checkpoint, or the earliest factory start block on a fresh store"""
        resume = self.dispatcher.resume_position
        return resume[0] if resume is not None else self.default_start_block()

    def run(self, start_block: Optional[int] = None, end_block: Optional[int] = None) -> PipelineStats:
        self.registry.load()
        if start_block is None:
            start_block = self.resume_block()
        if end_block is None:
            end_block = self.stream.latest_block()

        stats = PipelineStats()
        self.log_info("Indexing started",
                     network=self.network.name,
                     start_block=start_block,
                     end_block=end_block,
                     batch_size=self.batch_size)

        for batch_start in range(start_block, end_block + 1, self.batch_size):
            batch_end = min(batch_start + self.batch_size - 1, end_block)
            self._process_batch(batch_start, batch_end, stats)
            stats.batches += 1

        self.log_info("Indexing finished",
                     network=self.network.name,
                     batches=stats.batches,
                     logs_seen=stats.logs_seen,
                     events_handled=stats.events_handled,
                     markets_activated=stats.markets_activated)
        return stats

    def _process_batch(self, from_block: int, to_block: int, stats: PipelineStats) -> None:
        self.registry.drain_new()
        counter = itertools.count()
        queue: List[Tuple[LogPosition, int, Dict[str, Any]]] = [
            (log_position(log), next(counter), log)
            for log in self.stream.fetch(self.registry.addresses(), from_block, to_block)
        ]
        heapq.heapify(queue)

        while queue:
            position, _, raw_log = heapq.heappop(queue)
            stats.logs_seen += 1

            template = self.registry.template_for(raw_log["address"])
            if template is None:
                continue

            event = self.decoder.decode(raw_log, template)
            if event is None:
                continue

            if self.dispatcher.dispatch(event):
                stats.events_handled += 1

            for address in self.registry.drain_new():
                stats.markets_activated += 1
                for log in self.stream.fetch([address], position[0], to_block):
                    if log_position(log) > position:
                        heapq.heappush(queue, (log_position(log), next(counter), log))

        self.decoder.clear_cache()
        self.log_debug("Batch processed",
                      network=self.network.name,
                      from_block=from_block,
                      to_block=to_block)
