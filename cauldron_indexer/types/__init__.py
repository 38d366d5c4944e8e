# cauldron_indexer/types/__init__.py

from .new import (
    HexStr,
    EvmAddress,
    EvmHash,
    EntityId,
    MethodSelector,
    LogPosition,
)

from .evm import (
    BlockContext,
    TransactionContext,
    LogEvent,
)

from .entities import (
    ZERO,
    Entity,
    MarketFeeAccount,
    ExchangeRate,
    UserLiquidation,
    WatchedContract,
    ProcessingCheckpoint,
    ENTITY_KINDS,
)
