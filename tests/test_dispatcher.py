# tests/test_dispatcher.py

from decimal import Decimal

import pytest

from cauldron_indexer.core.errors import EventOrderError, ResolutionError
from cauldron_indexer.mapping import CAULDRON_TEMPLATE, FACTORY_TEMPLATE
from cauldron_indexer.pipeline import EventDispatcher, WatchRegistry
from cauldron_indexer.types import MarketFeeAccount, ProcessingCheckpoint, WatchedContract

from tests.fakes import CAULDRON, E18, MASTER_CONTRACT, OTHER_CAULDRON, USER, make_event

BENTOBOX = "0xf5bce5077908a1b7370b9ae04adc565ebd643966"


def deploy(block=100, log_index=0, clone=CAULDRON, master_contract=MASTER_CONTRACT):
    return make_event(
        "LogDeploy",
        {"masterContract": master_contract, "data": "0x", "cloneAddress": clone},
        address=BENTOBOX, block=block, log_index=log_index,
    )


def accrue(amount=E18, block=100, log_index=1, address=CAULDRON):
    return make_event("LogAccrue", {"accruedAmount": amount}, address=address, block=block, log_index=log_index)


def test_registry_starts_with_factories(registry):
    assert registry.template_for(BENTOBOX) == FACTORY_TEMPLATE
    assert registry.template_for(CAULDRON) is None
    assert registry.addresses(FACTORY_TEMPLATE) == [
        "0xd96f48665a1410c0cd669a88898eca36b9fc2cce",
        BENTOBOX,
    ]


def test_deploy_then_cauldron_events(dispatcher, registry, store):
    assert dispatcher.dispatch(deploy())
    assert registry.template_for(CAULDRON) == CAULDRON_TEMPLATE
    assert registry.drain_new() == [CAULDRON]

    watched = store.load(WatchedContract, CAULDRON)
    assert watched.template == CAULDRON_TEMPLATE
    assert watched.network == "mainnet"
    assert watched.created_block == 100

    assert dispatcher.dispatch(accrue(2 * E18))
    assert store.load(MarketFeeAccount, CAULDRON).fees_earned == Decimal(2)
    assert dispatcher.last_position == (100, 0, 1)


def test_unlisted_deploy_does_not_watch(dispatcher, registry, store):
    assert not dispatcher.dispatch(deploy(master_contract="0x9999999999999999999999999999999999999999"))
    assert CAULDRON not in registry
    assert store.all(WatchedContract) == []


def test_repeat_watch_is_idempotent(registry, store):
    assert registry.begin_watching(CAULDRON, block=5)
    assert not registry.begin_watching(CAULDRON.upper().replace("0X", "0x"), block=9)
    assert registry.drain_new() == [CAULDRON]
    assert registry.drain_new() == []
    assert store.load(WatchedContract, CAULDRON).created_block == 5


def test_registry_restores_watched_cauldrons(registry, store, network):
    registry.begin_watching(CAULDRON, block=5)

    restored = WatchRegistry(store, network)
    restored.load()
    assert restored.template_for(CAULDRON) == CAULDRON_TEMPLATE
    assert restored.drain_new() == []


def test_out_of_order_event_rejected(dispatcher, registry):
    registry.begin_watching(CAULDRON)
    dispatcher.dispatch(accrue(block=200, log_index=3))

    with pytest.raises(EventOrderError):
        dispatcher.dispatch(accrue(block=200, log_index=3))
    with pytest.raises(EventOrderError):
        dispatcher.dispatch(accrue(block=199, log_index=9))


def test_removed_log_is_skipped(dispatcher, registry, store):
    registry.begin_watching(CAULDRON)
    event = make_event("LogAccrue", {"accruedAmount": E18}, removed=True)

    assert not dispatcher.dispatch(event)
    assert store.load(MarketFeeAccount, CAULDRON) is None
    assert dispatcher.last_position is None


def test_unwatched_address_is_ignored(dispatcher, store):
    assert not dispatcher.dispatch(accrue(address=OTHER_CAULDRON))
    assert store.all(MarketFeeAccount) == []


def test_failed_event_leaves_state_untouched(dispatcher, registry, store, reader):
    registry.begin_watching(CAULDRON)
    dispatcher.dispatch(accrue(2 * E18, log_index=0))
    reader.failing.add("fees_earned")

    borrow = make_event("LogBorrow", {"from": USER, "to": USER, "amount": 5 * E18, "part": 5 * E18}, log_index=1)
    with pytest.raises(ResolutionError):
        dispatcher.dispatch(borrow)

    account = store.load(MarketFeeAccount, CAULDRON)
    assert account.total_borrow_elastic == Decimal(2)
    assert dispatcher.last_position == (100, 0, 0)

    reader.failing.clear()
    assert dispatcher.dispatch(borrow)
    assert store.load(MarketFeeAccount, CAULDRON).total_borrow_elastic == Decimal(7)


def test_new_market_resolution_failure_persists_nothing(dispatcher, registry, store, reader):
    registry.begin_watching(CAULDRON)
    reader.failing.add("token_symbol")

    with pytest.raises(ResolutionError):
        dispatcher.dispatch(accrue())
    assert store.load(MarketFeeAccount, CAULDRON) is None


def test_checkpoint_saved_with_each_event(dispatcher, registry, store, network):
    registry.begin_watching(CAULDRON)
    dispatcher.dispatch(accrue(block=120, log_index=2))

    checkpoint = store.load(ProcessingCheckpoint, network.name)
    assert checkpoint.position == (120, 0, 2)


def test_failed_event_keeps_previous_checkpoint(dispatcher, registry, store, reader, network):
    registry.begin_watching(CAULDRON)
    dispatcher.dispatch(accrue(log_index=0))
    reader.failing.add("fees_earned")

    with pytest.raises(ResolutionError):
        dispatcher.dispatch(make_event("LogBorrow", {"from": USER, "to": USER, "amount": E18, "part": E18},
                                       log_index=1))
    assert store.load(ProcessingCheckpoint, network.name).position == (100, 0, 0)


def test_restarted_dispatcher_skips_applied_events(dispatcher, registry, store, handlers, network):
    registry.begin_watching(CAULDRON)
    dispatcher.dispatch(accrue(2 * E18, block=100, log_index=1))

    restored = WatchRegistry(store, network)
    restored.load()
    resumed = EventDispatcher(store, restored, handlers, network)
    assert resumed.resume_position == (100, 0, 1)
    assert resumed.last_position == (100, 0, 1)

    assert not resumed.dispatch(accrue(2 * E18, block=100, log_index=1))
    assert not resumed.dispatch(accrue(2 * E18, block=90, log_index=0))
    assert store.load(MarketFeeAccount, CAULDRON).fees_earned == Decimal(2)

    assert resumed.dispatch(accrue(E18, block=101, log_index=0))
    assert store.load(MarketFeeAccount, CAULDRON).fees_earned == Decimal(3)
    with pytest.raises(EventOrderError):
        resumed.dispatch(accrue(E18, block=100, log_index=5))
