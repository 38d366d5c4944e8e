# cauldron_indexer/types/evm.py

from typing import Any, Dict
from msgspec import Struct

from .new import HexStr, EvmAddress, EvmHash, LogPosition


class BlockContext(Struct):
    number: int
    timestamp: int # unix timestamp


class TransactionContext(Struct):
    hash: EvmHash
    index: int
    sender: EvmAddress # tx.from, the account that initiated the transaction
    input: HexStr = HexStr("0x")


class LogEvent(Struct, kw_only=True):
    name: str
    address: EvmAddress
    params: Dict[str, Any]
    transaction: TransactionContext
    block: BlockContext
    log_index: int
    removed: bool = False # True when the log was withdrawn by a reorg

    @property
    def position(self) -> LogPosition:
        return (self.block.number, self.transaction.index, self.log_index)
