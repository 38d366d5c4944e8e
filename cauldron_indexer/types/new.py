# cauldron_indexer/types/new.py

from typing import NewType

HexStr = NewType('HexStr', str)
EvmAddress = NewType('EvmAddress', str)
EvmHash = NewType('EvmHash', str)
EntityId = NewType('EntityId', str)
MethodSelector = NewType('MethodSelector', str)

# (block number, transaction index, log index)
LogPosition = tuple[int, int, int]
