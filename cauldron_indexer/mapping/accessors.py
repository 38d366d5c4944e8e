# cauldron_indexer/mapping/accessors.py

from decimal import Decimal
from typing import Callable, Optional, Type, TypeVar

from ..core.logging import LoggingMixin
from ..database.interfaces import EntityStore
from ..types import (
    Entity,
    EntityId,
    EvmAddress,
    EvmHash,
    MarketFeeAccount,
    ExchangeRate,
    UserLiquidation,
)
from ..utils.addresses import normalize_address
from .metadata import MarketMetadataResolver

E = TypeVar('E', bound=Entity)


class EntityAccessor(LoggingMixin):
    """
    Load-or-create access to the mapped entities. New entities are returned
    unsaved; the caller persists them once its mutation is complete.
    """

    def __init__(self, store: EntityStore, metadata: MarketMetadataResolver):
        self.store = store
        self.metadata = metadata

    def get_or_init(self, kind: Type[E], entity_id: str, builder: Callable[[EntityId], E]) -> E:
        entity = self.store.load(kind, entity_id)
        if entity is not None:
            return entity

        entity = builder(EntityId(entity_id))
        self.log_debug("Initialized new entity",
                      entity_kind=kind.kind(),
                      entity_id=entity_id)
        return entity

    def save(self, entity: Entity) -> None:
        self.store.save(entity)

    def get_market_fee_account(self, cauldron: str, block: Optional[int] = None) -> MarketFeeAccount:
        cauldron = normalize_address(cauldron)
        return self.get_or_init(
            MarketFeeAccount, cauldron,
            lambda _: self.metadata.resolve(cauldron, block),
        )

    def ensure_market_fee_account(self, cauldron: str, block: Optional[int] = None) -> MarketFeeAccount:
        """Like get_market_fee_account, but persists the account if it had to be resolved"""
        cauldron = normalize_address(cauldron)
        account = self.store.load(MarketFeeAccount, cauldron)
        if account is None:
            account = self.metadata.resolve(cauldron, block)
            self.save(account)
        return account

    def get_exchange_rate(self, cauldron: str) -> ExchangeRate:
        return self.get_or_init(
            ExchangeRate, normalize_address(cauldron),
            lambda entity_id: ExchangeRate(id=entity_id),
        )

    def current_exchange_rate(self, cauldron: str) -> Optional[Decimal]:
        """Last observed rate for a cauldron, or None if no rate update has been seen"""
        rate = self.store.load(ExchangeRate, normalize_address(cauldron))
        return rate.rate if rate is not None else None

    def get_user_liquidation(self, user: str, tx_hash: str) -> UserLiquidation:
        return self.get_or_init(
            UserLiquidation, UserLiquidation.make_id(user, tx_hash),
            lambda entity_id: UserLiquidation(
                id=entity_id,
                user=EvmAddress(user.lower()),
                transaction=EvmHash(tx_hash.lower()),
            ),
        )
