# cauldron_indexer/types/entities.py

from decimal import Decimal
from typing import Optional
from msgspec import Struct

from .new import EntityId, EvmAddress, EvmHash, LogPosition

ZERO = Decimal(0)


class Entity(Struct, kw_only=True):
    id: EntityId

    @classmethod
    def kind(cls) -> str:
        return cls.__name__


class MarketFeeAccount(Entity, kw_only=True):
    """Fee accounting for one cauldron, keyed by the cauldron address"""
    master_contract: EvmAddress
    bento_box: EvmAddress
    collateral: EvmAddress
    collateral_symbol: str
    collateral_decimals: int
    collateral_name: Optional[str] = None
    total_borrow_elastic: Decimal = ZERO
    fees_earned: Decimal = ZERO
    fees_withdrawn: Decimal = ZERO


class ExchangeRate(Entity, kw_only=True):
    rate: Optional[Decimal] = None


class UserLiquidation(Entity, kw_only=True):
    """One user's position being acted on by a third party inside one transaction"""
    user: EvmAddress
    transaction: EvmHash
    cauldron: Optional[EvmAddress] = None
    timestamp: Optional[int] = None
    collateral_removed: Decimal = ZERO
    loan_repaid: Decimal = ZERO
    exchange_rate: Optional[Decimal] = None
    direct: bool = False

    @staticmethod
    def make_id(user: str, tx_hash: str) -> EntityId:
        return EntityId(f"{user.lower()}-{tx_hash.lower()}")


class WatchedContract(Entity, kw_only=True):
    """A contract whose logs are routed through a handler template"""
    template: str # "cauldron" or "factory"
    network: str
    created_block: Optional[int] = None


class ProcessingCheckpoint(Entity, kw_only=True):
    """Position of the last log applied on a network, keyed by network name"""
    block_number: int
    transaction_index: int
    log_index: int

    @property
    def position(self) -> LogPosition:
        return (self.block_number, self.transaction_index, self.log_index)


ENTITY_KINDS = {
    cls.kind(): cls
    for cls in (MarketFeeAccount, ExchangeRate, UserLiquidation, WatchedContract, ProcessingCheckpoint)
}
