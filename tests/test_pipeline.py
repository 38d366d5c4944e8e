# tests/test_pipeline.py

from decimal import Decimal

from cauldron_indexer.core.config import IndexerConfig, DatabaseConfig
from cauldron_indexer.pipeline import EventDispatcher, IndexingPipeline, WatchRegistry, log_position
from cauldron_indexer.types import ExchangeRate, MarketFeeAccount, ProcessingCheckpoint, WatchedContract

from tests.fakes import CAULDRON, E18, MASTER_CONTRACT, make_event

BENTOBOX = "0xf5bce5077908a1b7370b9ae04adc565ebd643966"


def raw(event):
    return {
        "address": event.address,
        "blockNumber": event.block.number,
        "transactionIndex": event.transaction.index,
        "logIndex": event.log_index,
        "event": event,
    }


class FakeStream:
    def __init__(self, events):
        self.logs = [raw(event) for event in events]
        self.requests = []

    def latest_block(self):
        return max(log["blockNumber"] for log in self.logs)

    def fetch(self, addresses, from_block, to_block):
        wanted = {a.lower() for a in addresses}
        self.requests.append((sorted(wanted), from_block, to_block))
        matches = [
            log for log in self.logs
            if log["address"] in wanted and from_block <= log["blockNumber"] <= to_block
        ]
        return sorted(matches, key=log_position)


class FakeDecoder:
    def __init__(self):
        self.cleared = 0

    def decode(self, log, template):
        return log["event"]

    def clear_cache(self):
        self.cleared += 1


def build_pipeline(events, registry, dispatcher, network, batch_size=1000):
    config = IndexerConfig(network=network, database=DatabaseConfig(url="sqlite://"), batch_size=batch_size)
    stream = FakeStream(events)
    decoder = FakeDecoder()
    return IndexingPipeline(stream, decoder, registry, dispatcher, config), stream, decoder


def scenario():
    return [
        make_event("LogAccrue", {"accruedAmount": E18}, block=90, log_index=0),
        make_event("LogDeploy", {"masterContract": MASTER_CONTRACT, "data": "0x", "cloneAddress": CAULDRON},
                   address=BENTOBOX, block=100, tx_index=0, log_index=0),
        make_event("LogExchangeRate", {"rate": 2 * E18}, block=100, tx_index=1, log_index=1),
        make_event("LogAccrue", {"accruedAmount": 2 * E18}, block=150, tx_index=0, log_index=0),
        make_event("LogAccrue", {"accruedAmount": 3 * E18}, block=260, tx_index=2, log_index=4),
    ]


def test_deployed_market_is_backfilled_within_batch(registry, dispatcher, network, store):
    pipeline, stream, decoder = build_pipeline(scenario(), registry, dispatcher, network)

    stats = pipeline.run(100, 300)

    assert stats.batches == 1
    assert stats.markets_activated == 1
    assert stats.events_handled == 4
    assert decoder.cleared == 1

    account = store.load(MarketFeeAccount, CAULDRON)
    assert account.fees_earned == Decimal(5)
    assert store.load(ExchangeRate, CAULDRON).rate == Decimal(2)
    assert store.load(WatchedContract, CAULDRON).created_block == 100
    assert stream.requests[1] == ([CAULDRON], 100, 300)


def test_later_batches_include_new_market(registry, dispatcher, network, store):
    pipeline, stream, _ = build_pipeline(scenario(), registry, dispatcher, network, batch_size=50)

    stats = pipeline.run(100, 300)

    assert stats.batches == 5
    assert stats.events_handled == 4
    assert store.load(MarketFeeAccount, CAULDRON).fees_earned == Decimal(5)
    assert CAULDRON in stream.requests[-1][0]


def test_defaults_to_factory_start_and_latest_block(registry, dispatcher, network):
    pipeline, stream, _ = build_pipeline(scenario(), registry, dispatcher, network, batch_size=10 ** 9)

    assert pipeline.default_start_block() == 12094175
    assert pipeline.run().batches == 0

    pipeline.run(start_block=100)
    assert stream.requests[0][1:] == (100, 260)


def restarted(store, handlers, network):
    registry = WatchRegistry(store, network)
    return registry, EventDispatcher(store, registry, handlers, network)


def test_rerun_after_restart_applies_nothing_twice(store, handlers, network):
    registry, dispatcher = restarted(store, handlers, network)
    pipeline, _, _ = build_pipeline(scenario(), registry, dispatcher, network)
    assert pipeline.run(100, 300).events_handled == 4

    registry, dispatcher = restarted(store, handlers, network)
    assert dispatcher.resume_position == (260, 2, 4)
    pipeline, _, _ = build_pipeline(scenario(), registry, dispatcher, network)
    stats = pipeline.run(100, 300)

    assert stats.events_handled == 0
    assert stats.markets_activated == 0
    assert store.load(MarketFeeAccount, CAULDRON).fees_earned == Decimal(5)


def test_resume_continues_after_checkpoint(store, handlers, network):
    events = scenario()
    first_part = [event for event in events if event.block.number <= 150]

    registry, dispatcher = restarted(store, handlers, network)
    pipeline, _, _ = build_pipeline(first_part, registry, dispatcher, network)
    pipeline.run(100, 150)
    assert store.load(ProcessingCheckpoint, network.name).position == (150, 0, 0)

    registry, dispatcher = restarted(store, handlers, network)
    pipeline, stream, _ = build_pipeline(events, registry, dispatcher, network)
    assert pipeline.resume_block() == 150

    stats = pipeline.run(end_block=300)
    assert stream.requests[0][1:] == (150, 300)
    assert stats.events_handled == 1
    assert store.load(MarketFeeAccount, CAULDRON).fees_earned == Decimal(5)
